#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
    tests.test_penalties
    ~~~~~~~~~~~~~~~~~~~~

    Blocking standing penalties and their stop dates.

    :copyright: (c) 2025 by Authors.
    :license: see LICENSE for more details.
"""

import datetime
from types import SimpleNamespace
from shoutbomb.configs import BLOCKING_PENALTIES
from shoutbomb.core import penalties
from conftest import NOW


def penalty(patron_id=1, code="PATRON_EXCEEDS_OVERDUE_COUNT", stop_date=None):
    return SimpleNamespace(patron_id=patron_id, penalty=code, stop_date=stop_date)


def test_default_blocking_codes():
    assert BLOCKING_PENALTIES == {
        "PATRON_EXCEEDS_OVERDUE_COUNT", "PATRON_EXCEEDS_CHECKOUT_COUNT",
        "PATRON_EXCEEDS_LOST_COUNT", "PATRON_EXCEEDS_LONGOVERDUE_COUNT",
    }


def test_open_ended_penalty_is_active():
    assert penalties.is_active(None, NOW)


def test_penalty_stopping_now_is_not_active():
    assert not penalties.is_active(NOW, NOW)
    assert penalties.has_blocking_penalty(1, [penalty(stop_date=NOW)], BLOCKING_PENALTIES, now=NOW) is False


def test_future_and_past_stop_dates():
    later = NOW + datetime.timedelta(seconds=1)
    earlier = NOW - datetime.timedelta(days=1)
    assert penalties.has_blocking_penalty(1, [penalty(stop_date=later)], BLOCKING_PENALTIES, now=NOW)
    assert not penalties.has_blocking_penalty(1, [penalty(stop_date=earlier)], BLOCKING_PENALTIES, now=NOW)


def test_aware_and_naive_timestamps_compare():
    aware_now = NOW.replace(tzinfo=datetime.timezone.utc)
    assert not penalties.is_active(NOW, aware_now)
    assert penalties.is_active(NOW + datetime.timedelta(minutes=1), aware_now)


def test_non_blocking_code_is_ignored():
    rows = [penalty(code="PATRON_EXCEEDS_FINES"), penalty(code="ALERT_NOTE")]
    assert not penalties.has_blocking_penalty(1, rows, BLOCKING_PENALTIES, now=NOW)


def test_penalty_of_another_patron_is_ignored():
    assert not penalties.has_blocking_penalty(2, [penalty(patron_id=1)], BLOCKING_PENALTIES, now=NOW)


def test_load_penalties_filters_codes(db_session, ils):
    patron = ils.patron("P1")
    ils.penalty(patron, "PATRON_EXCEEDS_LOST_COUNT")
    ils.penalty(patron, "SILENT_NOTE")

    rows = penalties.load_penalties([patron.id], BLOCKING_PENALTIES, db_session=db_session)

    assert [r.penalty for r in rows] == ["PATRON_EXCEEDS_LOST_COUNT"]
    assert penalties.blocked_patrons(rows, BLOCKING_PENALTIES, now=NOW) == {patron.id}
