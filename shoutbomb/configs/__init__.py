#!/usr/bin/env python

"""
    Configurations for Shoutbomb

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import os


def _csv(value):
    return [v.strip() for v in value.split(',') if v.strip()]


# Determine environment
TESTING = os.getenv("TESTING", "false").lower() == "true"

DEBUG = bool(int(os.environ.get('SHOUTBOMB_DEBUG', 0)))

DB_CONFIG = {
    'user': os.environ.get('DB_USER', 'evergreen'),
    'password': os.environ.get('DB_PASSWORD'),
    'host': os.environ.get('DB_HOST', 'localhost'),
    'port': int(os.environ.get('DB_PORT', '5432')),
    'dbname': os.environ.get('DB_NAME', 'evergreen'),
}

# Database configuration
DB_URI = (
    "sqlite:///:memory:" if TESTING else
    'postgresql+psycopg2://{user}:{password}@{host}:{port}/{dbname}'.format(**DB_CONFIG)
)

# Extract scope
LIBRARY_NAMES = _csv(os.environ.get('SHOUTBOMB_LIBRARY_NAMES', ''))
INCLUDE_ORG_DESCENDANTS = os.environ.get('SHOUTBOMB_INCLUDE_ORG_DESCENDANTS', 'false').lower() == 'true'
DUE_WINDOW_DAYS = int(os.environ.get('SHOUTBOMB_DUE_WINDOW_DAYS', 3))

# Renewal policy
BLOCKING_PENALTIES = frozenset(_csv(os.environ.get(
    'SHOUTBOMB_BLOCKING_PENALTIES',
    'PATRON_EXCEEDS_OVERDUE_COUNT,PATRON_EXCEEDS_CHECKOUT_COUNT,'
    'PATRON_EXCEEDS_LOST_COUNT,PATRON_EXCEEDS_LONGOVERDUE_COUNT'
)))
FINES_PENALTY = os.environ.get('SHOUTBOMB_FINES_PENALTY', 'PATRON_EXCEEDS_FINES')
RENEW_TEST_FUNCTION = os.environ.get('SHOUTBOMB_RENEW_TEST_FUNCTION', 'action.item_user_renew_test')
HOLD_PERMIT_FUNCTION = os.environ.get('SHOUTBOMB_HOLD_PERMIT_FUNCTION', 'action.hold_retarget_permit_test')

# Patron settings that opt a patron into SMS notices
SMS_NUMBER_SETTING = 'opac.default_sms_notify'
NOTIFY_SETTING = 'opac.hold_notify'

__all__ = [
    'TESTING', 'DEBUG', 'DB_URI', 'DB_CONFIG',
    'LIBRARY_NAMES', 'INCLUDE_ORG_DESCENDANTS', 'DUE_WINDOW_DAYS',
    'BLOCKING_PENALTIES', 'FINES_PENALTY', 'RENEW_TEST_FUNCTION',
    'HOLD_PERMIT_FUNCTION', 'SMS_NUMBER_SETTING', 'NOTIFY_SETTING',
]
