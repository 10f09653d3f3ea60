#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
    tests.conftest
    ~~~~~~~~~~~~~~

    Shared fixtures: an in-memory ILS database and fake predicates.

    :copyright: (c) 2025 by Authors.
    :license: see LICENSE for more details.
"""

import os
os.environ.setdefault("TESTING", "true")

import datetime
from decimal import Decimal
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from shoutbomb.core.db import Base
from shoutbomb.core.models import (
    OrgUnit, Patron, PatronSetting, Item, Loan, BillableTransaction,
    PenaltyThreshold, StandingPenalty, Hold, HoldCopyMap
)
from shoutbomb.core.policy import RenewalPolicy, HoldPermit

TODAY = datetime.date(2025, 6, 2)
NOW = datetime.datetime(2025, 6, 2, 9, 0, 0)


@pytest.fixture
def db_session():
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)


class FakePolicy(RenewalPolicy):

    def __init__(self):
        self.denied_items = set()
        self.calls = []

    def allows(self, org_unit, item, patron):
        self.calls.append((org_unit, item, patron))
        return item not in self.denied_items


class FakePermit(HoldPermit):

    def __init__(self):
        self.denied_patrons = set()
        self.calls = []

    def permits(self, pickup_lib, request_lib, item, patron, requestor):
        self.calls.append((pickup_lib, request_lib, item, patron, requestor))
        return patron not in self.denied_patrons


@pytest.fixture
def policy():
    return FakePolicy()


@pytest.fixture
def permit():
    return FakePermit()


class ILS:
    """Builds rows in the test database with sensible defaults."""

    def __init__(self, session):
        self.session = session

    def _add(self, obj):
        self.session.add(obj)
        self.session.flush()
        return obj

    def org(self, shortname, parent=None):
        return self._add(OrgUnit(shortname=shortname, name=shortname,
                                 parent_ou=parent.id if parent else None))

    def patron(self, barcode="P1", sms=True, notify="email:sms", deleted=False):
        patron = self._add(Patron(barcode=barcode, deleted=deleted))
        if sms:
            self._add(PatronSetting(patron_id=patron.id, name="opac.default_sms_notify", value='"5555550100"'))
        if notify is not None:
            self._add(PatronSetting(patron_id=patron.id, name="opac.hold_notify", value=notify))
        return patron

    def item(self, barcode="I1", title="A Title"):
        return self._add(Item(barcode=barcode, title=title))

    def loan(self, patron, item, org, due=None, renewal_remaining=2, closed=False, parent=None):
        due = due or datetime.datetime(2025, 6, 3, 23, 59, 59)
        return self._add(Loan(
            patron_id=patron.id, item_id=item.id, circ_lib=org.id,
            due_date=due, renewal_remaining=renewal_remaining,
            parent_id=parent.id if parent else None,
            checkin_time=NOW if closed else None,
            xact_finish=NOW if closed else None,
        ))

    def fine(self, patron, amount):
        return self._add(BillableTransaction(patron_id=patron.id, balance_owed=Decimal(amount)))

    def threshold(self, org, amount, group_id=1, penalty="PATRON_EXCEEDS_FINES"):
        return self._add(PenaltyThreshold(org_unit_id=org.id, group_id=group_id,
                                          penalty=penalty, threshold=Decimal(amount)))

    def penalty(self, patron, code="PATRON_EXCEEDS_OVERDUE_COUNT", stop_date=None):
        return self._add(StandingPenalty(patron_id=patron.id, penalty=code, stop_date=stop_date))

    def hold(self, patron, org, current_copy=None, mapped=(), **kwargs):
        hold = self._add(Hold(
            patron_id=patron.id, requestor_id=kwargs.pop('requestor_id', patron.id),
            pickup_lib=org.id, request_lib=org.id,
            current_copy=current_copy.id if current_copy else None, **kwargs))
        for item in mapped:
            self._add(HoldCopyMap(hold_id=hold.id, target_copy=item.id))
        return hold


@pytest.fixture
def ils(db_session):
    return ILS(db_session)
