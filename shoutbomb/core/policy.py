#!/usr/bin/env python

"""
    External predicates consulted by the engine.

    Both the renewal policy test and the hold retarget permit test live
    in the ILS, not here. The engine only sees them through the two
    small interfaces below, which keeps it testable with fakes.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import abc
import logging
import re
from typing import Iterable
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from shoutbomb.configs import RENEW_TEST_FUNCTION, HOLD_PERMIT_FUNCTION
from shoutbomb.core.db import session as db
from shoutbomb.core.exceptions import DataSourceError, ConfigurationError

logger = logging.getLogger(__name__)

FUNCTION_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


def reduce_results(results: Iterable) -> bool:
    """A test passes only if it produced at least one row and no row failed."""
    seen = False
    for success in results:
        if not success:
            return False
        seen = True
    return seen


class RenewalPolicy(abc.ABC):

    @abc.abstractmethod
    def allows(self, org_unit: int, item: int, patron: int) -> bool:
        """True when the basic renewal policy lets `patron` renew `item` at `org_unit`."""


class HoldPermit(abc.ABC):

    @abc.abstractmethod
    def permits(self, pickup_lib: int, request_lib: int, item: int, patron: int, requestor: int) -> bool:
        """True when the hold could be retargeted to `item`."""


class SqlFunctionTest:
    """Calls a set-returning database function and reduces its `success` column."""

    function = None

    def __init__(self, db_session=None, function=None):
        self.db_session = db_session or db
        self.function = function or self.function
        if not self.function or not FUNCTION_NAME.match(self.function):
            raise ConfigurationError(f"Invalid database function name: {self.function!r}")

    def _call(self, *args) -> bool:
        params = {f"arg{i}": a for i, a in enumerate(args)}
        sql = text(f"SELECT success FROM {self.function}({', '.join(':' + k for k in params)})")
        try:
            rows = self.db_session.execute(sql, params).fetchall()
        except SQLAlchemyError as e:
            self.db_session.rollback()
            logger.error(f"{self.function}{args} failed: {e}")
            raise DataSourceError(f"Failed to evaluate {self.function}: {str(e)}.") from e
        return reduce_results(row[0] for row in rows)


class SqlRenewalPolicy(SqlFunctionTest, RenewalPolicy):

    function = RENEW_TEST_FUNCTION

    def allows(self, org_unit, item, patron):
        return self._call(org_unit, item, patron)


class SqlHoldPermit(SqlFunctionTest, HoldPermit):

    function = HOLD_PERMIT_FUNCTION

    def permits(self, pickup_lib, request_lib, item, patron, requestor):
        return self._call(pickup_lib, request_lib, item, patron, requestor)


def evaluate_policy(policy: RenewalPolicy, loans) -> dict:
    """Policy verdict per loan id."""
    verdicts = {}
    for loan in loans:
        try:
            verdicts[loan.id] = bool(policy.allows(loan.circ_lib, loan.item_id, loan.patron_id))
        except DataSourceError:
            raise
        except Exception as e:
            logger.error(f"Renewal policy test failed for loan {loan.id}: {e}")
            raise DataSourceError(f"Renewal policy test failed for loan {loan.id}: {str(e)}.") from e
    logger.info(f"Renewal policy passed for {sum(verdicts.values())} of {len(verdicts)} loans")
    return verdicts
