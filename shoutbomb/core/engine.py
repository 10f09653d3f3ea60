#!/usr/bin/env python

"""
    Renewal eligibility engine.

    Loads the candidate loans for a scope, runs each independent stage
    over them (policy test, fines over threshold, standing penalties,
    blocking holds) and combines the results through five ordered gates
    into one DecisionResult per loan.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import datetime
import logging
from decimal import Decimal
from typing import Dict, Iterable, Optional
from shoutbomb.configs import FINES_PENALTY
from shoutbomb.core.db import session as db
from shoutbomb.core import loader, fines, penalties, holds, notices
from shoutbomb.core.policy import RenewalPolicy, HoldPermit, evaluate_policy
from shoutbomb.core.utils import utcnow
from shoutbomb.core.exceptions import ConfigurationError
from shoutbomb.schemas import DecisionResult, EvaluationScope, LoanRecord

logger = logging.getLogger(__name__)

# Gate names in evaluation order
POLICY = 'policy'
FINES = 'fines'
PENALTY = 'standing_penalty'
HOLDS = 'holds'
REMAINING = 'renewal_remaining'
GATES = (POLICY, FINES, PENALTY, HOLDS, REMAINING)


def decide(loan: LoanRecord, policy_ok: bool, fines_owed: Decimal,
           penalty_blocked: bool, hold_count: int) -> DecisionResult:
    """Applies the gates in order; the first failing one blocks the loan.
    Diagnostics are reported whichever gate blocked."""
    checks = (
        (POLICY, policy_ok),
        (FINES, fines_owed == 0),
        (PENALTY, not penalty_blocked),
        (HOLDS, hold_count == 0),
        (REMAINING, loan.renewal_remaining > 0),
    )
    blocked_by = next((gate for gate, passed in checks if not passed), None)
    return DecisionResult(
        loan_id=loan.id,
        fines_owed=fines_owed,
        hold_count=hold_count,
        renewal_remaining=loan.renewal_remaining if blocked_by is None else 0,
        blocked_by=blocked_by,
    )


class RenewalEngine:

    def __init__(self, policy: RenewalPolicy, hold_permit: HoldPermit,
                 fines_penalty: str = FINES_PENALTY, prefilter_holds: bool = True,
                 db_session=None):
        """
        Args:
            policy: basic renewal policy test.
            hold_permit: hold retarget permit test.
            fines_penalty: penalty class whose thresholds bound fines.
            prefilter_holds: only run the hold stage for loans that
                passed every other gate. Blocked loans then report a
                hold count of 0.
        """
        self.policy = policy
        self.hold_permit = hold_permit
        self.fines_penalty = fines_penalty
        self.prefilter_holds = prefilter_holds
        self.db_session = db_session or db

    def evaluate(self, scope: EvaluationScope, now: Optional[datetime.datetime] = None) -> Dict[int, DecisionResult]:
        """Decision per loan id for every candidate loan in `scope`.

        Fines owed is always computed. Hold counts on loans blocked by
        another gate are only accurate with `prefilter_holds=False`;
        otherwise those loans report 0.

        Raises:
            ConfigurationError: if `scope` is missing.
            DataSourceError: if any data or predicate is unavailable.
                Nothing is returned for the scope in that case.
        """
        if scope is None:
            raise ConfigurationError("An evaluation scope is required.")
        loans = loader.load_candidates(scope, db_session=self.db_session)
        return self.evaluate_loans(loans, scope.blocking_penalties, now=now)

    def evaluate_loans(self, loans: Iterable[LoanRecord], blocking_penalties,
                       now: Optional[datetime.datetime] = None) -> Dict[int, DecisionResult]:
        if not blocking_penalties:
            raise ConfigurationError("A blocking penalty set is required.")
        now = now or utcnow()
        loans = list(loans)
        if not loans:
            return {}

        policy_ok = evaluate_policy(self.policy, loans)

        thresholds = fines.load_thresholds(
            {loan.circ_lib for loan in loans}, penalty=self.fines_penalty, db_session=self.db_session)
        patron_fines = fines.load_patron_fines(
            {loan.patron_id for loan in loans}, db_session=self.db_session)
        fines_owed = fines.compute_fines_owed(loans, thresholds, patron_fines)

        patron_penalties = penalties.load_penalties(
            {loan.patron_id for loan in loans}, blocking_penalties, db_session=self.db_session)
        penalty_blocked = penalties.compute_penalty_blocks(
            loans, patron_penalties, blocking_penalties, now=now)

        hold_loans = loans
        if self.prefilter_holds:
            hold_loans = [
                loan for loan in loans
                if policy_ok[loan.id] and fines_owed[loan.id] == 0
                and not penalty_blocked[loan.id] and loan.renewal_remaining > 0
            ]
        hold_counts = holds.compute_hold_counts(
            hold_loans, self.hold_permit, now=now, db_session=self.db_session)

        decisions = {}
        for loan in loans:
            decisions[loan.id] = decide(
                loan, policy_ok[loan.id], fines_owed[loan.id],
                penalty_blocked[loan.id], hold_counts.get(loan.id, 0))
            logger.debug(f"Loan {loan.id}: {decisions[loan.id]}")

        eligible = sum(1 for d in decisions.values() if d.eligible)
        logger.info(f"Evaluated {len(decisions)} loans, {eligible} renewable")
        return decisions

    def courtesy_notices(self, scope: EvaluationScope, now: Optional[datetime.datetime] = None):
        """Courtesy notice rows for `scope`, ordered by due date."""
        if scope is None:
            raise ConfigurationError("An evaluation scope is required.")
        loans = loader.load_candidates(scope, db_session=self.db_session)
        decisions = self.evaluate_loans(loans, scope.blocking_penalties, now=now)
        return notices.build_courtesy_notices(loans, decisions)
