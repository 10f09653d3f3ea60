#!/usr/bin/env python

"""
    ILS Models for Shoutbomb,
    the subset of circulation, patron, billing and hold tables read
    when deciding whether a loan may be renewed.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

from sqlalchemy import Column, String, Boolean, BigInteger, Integer, Numeric, DateTime, Text
from sqlalchemy import ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.ext.hybrid import hybrid_property
from shoutbomb.core.db import Base

# SQLite only autoincrements INTEGER primary keys
BigInt = BigInteger().with_variant(Integer, "sqlite")


class OrgUnit(Base):
    __tablename__ = 'org_units'

    id = Column(Integer, primary_key=True)
    shortname = Column(String(50), nullable=False, unique=True)
    name = Column(String(255))
    parent_ou = Column(Integer, ForeignKey('org_units.id'), nullable=True)


class Patron(Base):
    __tablename__ = 'patrons'

    id = Column(BigInt, primary_key=True)
    barcode = Column(String(50))
    deleted = Column(Boolean, default=False, nullable=False)
    home_ou = Column(Integer, ForeignKey('org_units.id'))

    settings = relationship('PatronSetting', back_populates='patron', cascade='all, delete-orphan')


class PatronSetting(Base):
    __tablename__ = 'patron_settings'

    id = Column(BigInt, primary_key=True)
    patron_id = Column(BigInt, ForeignKey('patrons.id'), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    value = Column(Text)

    patron = relationship('Patron', back_populates='settings')


class Item(Base):
    __tablename__ = 'items'

    id = Column(BigInt, primary_key=True)
    barcode = Column(String(50), nullable=False)
    title = Column(Text)


class Loan(Base):
    __tablename__ = 'loans'

    id = Column(BigInt, primary_key=True)
    patron_id = Column(BigInt, ForeignKey('patrons.id'), nullable=False, index=True)
    circ_lib = Column(Integer, ForeignKey('org_units.id'), nullable=False)
    item_id = Column(BigInt, ForeignKey('items.id'), nullable=False, index=True)
    parent_id = Column(BigInt, ForeignKey('loans.id'), nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=False, index=True)
    renewal_remaining = Column(Integer, default=0, nullable=False)
    checkin_time = Column(DateTime(timezone=True))
    xact_finish = Column(DateTime(timezone=True))

    patron = relationship('Patron')
    item = relationship('Item')

    @hybrid_property
    def is_open(self):
        """Open until the item is checked in and the transaction closed."""
        return self.checkin_time is None and self.xact_finish is None

    @is_open.expression
    def is_open(cls):
        return (cls.checkin_time.is_(None)) & (cls.xact_finish.is_(None))


class BillableTransaction(Base):
    __tablename__ = 'billable_transactions'

    id = Column(BigInt, primary_key=True)
    patron_id = Column(BigInt, ForeignKey('patrons.id'), nullable=False, index=True)
    balance_owed = Column(Numeric(8, 2), default=0, nullable=False)


class PenaltyThreshold(Base):
    __tablename__ = 'penalty_thresholds'

    id = Column(Integer, primary_key=True)
    org_unit_id = Column(Integer, ForeignKey('org_units.id'), nullable=False, index=True)
    group_id = Column(Integer, nullable=False)
    penalty = Column(String(64), nullable=False)
    threshold = Column(Numeric(8, 2), nullable=False)


class StandingPenalty(Base):
    __tablename__ = 'standing_penalties'

    id = Column(BigInt, primary_key=True)
    patron_id = Column(BigInt, ForeignKey('patrons.id'), nullable=False, index=True)
    penalty = Column(String(64), nullable=False)
    org_unit_id = Column(Integer, ForeignKey('org_units.id'))
    stop_date = Column(DateTime(timezone=True))


class Hold(Base):
    __tablename__ = 'holds'

    id = Column(BigInt, primary_key=True)
    patron_id = Column(BigInt, ForeignKey('patrons.id'), nullable=False)
    requestor_id = Column(BigInt, nullable=False)
    pickup_lib = Column(Integer, ForeignKey('org_units.id'), nullable=False)
    request_lib = Column(Integer, ForeignKey('org_units.id'), nullable=False)
    current_copy = Column(BigInt, ForeignKey('items.id'), index=True)
    capture_time = Column(DateTime(timezone=True))
    fulfillment_time = Column(DateTime(timezone=True))
    cancel_time = Column(DateTime(timezone=True))
    expire_time = Column(DateTime(timezone=True))
    frozen = Column(Boolean, default=False, nullable=False)
    thaw_date = Column(DateTime(timezone=True))

    copy_maps = relationship('HoldCopyMap', back_populates='hold', cascade='all, delete-orphan')


class HoldCopyMap(Base):
    __tablename__ = 'hold_copy_maps'

    id = Column(BigInt, primary_key=True)
    hold_id = Column(BigInt, ForeignKey('holds.id'), nullable=False)
    target_copy = Column(BigInt, ForeignKey('items.id'), nullable=False, index=True)

    hold = relationship('Hold', back_populates='copy_maps')
