#!/usr/bin/env python

"""
    Candidate loader: the open loans a courtesy notice is sent for.

    A loan is a candidate when it is still open (not checked in, not
    closed), was issued by one of the scope's org units, is due inside
    the scope's window and belongs to a live patron who opted into SMS
    notices.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import datetime
import logging
from typing import List
from sqlalchemy import func, exists
from sqlalchemy.orm import aliased
from shoutbomb.configs import SMS_NUMBER_SETTING, NOTIFY_SETTING
from shoutbomb.core.db import session as db
from shoutbomb.core.models import Loan, Patron, PatronSetting, Item
from shoutbomb.core.utils import fetch
from shoutbomb.schemas import LoanRecord, EvaluationScope

logger = logging.getLogger(__name__)


def sms_eligible(patron_id_column):
    """SQL condition: the patron has an SMS number and SMS in their notify methods."""
    sms_number = aliased(PatronSetting)
    notify = aliased(PatronSetting)
    return exists().where(
        sms_number.patron_id == patron_id_column,
        sms_number.name == SMS_NUMBER_SETTING,
    ) & exists().where(
        notify.patron_id == patron_id_column,
        notify.name == NOTIFY_SETTING,
        notify.value.ilike('%sms%'),
    )


def due_bounds(scope: EvaluationScope):
    """Half-open timestamp range covering whole days of the window, so the
    due_date index stays usable."""
    start = datetime.datetime.combine(scope.window_start, datetime.time.min)
    end = datetime.datetime.combine(scope.window_end + datetime.timedelta(days=1), datetime.time.min)
    return start, end


def load_candidates(scope: EvaluationScope, db_session=None) -> List[LoanRecord]:
    db_session = db_session or db
    start, end = due_bounds(scope)
    renewals = aliased(Loan)
    times_renewed = (
        db_session.query(func.count(renewals.id))
        .filter(renewals.parent_id == Loan.id)
        .correlate(Loan)
        .scalar_subquery()
    )
    query = (
        db_session.query(
            Loan.id, Loan.patron_id, Loan.circ_lib, Loan.item_id,
            Loan.due_date, Loan.renewal_remaining,
            times_renewed.label('times_renewed'),
            Patron.barcode.label('patron_barcode'),
            Item.barcode.label('item_barcode'),
            Item.title,
        )
        .join(Patron, Loan.patron_id == Patron.id)
        .join(Item, Loan.item_id == Item.id)
        .filter(
            Loan.is_open,
            Loan.circ_lib.in_(scope.org_units),
            Loan.due_date >= start,
            Loan.due_date < end,
            Patron.deleted.is_(False),
            sms_eligible(Patron.id),
        )
        .order_by(Loan.due_date, Loan.id)
    )
    rows = fetch(query, "candidate loans")
    loans = [LoanRecord.model_validate(row) for row in rows]
    logger.info(f"Loaded {len(loans)} candidate loans due {scope.window_start} to "
                f"{scope.window_end} for org units {scope.org_units}")
    return loans
