import logging
from decimal import Decimal
from typing import Dict, Iterable, Optional
from sqlalchemy import func
from shoutbomb.configs import FINES_PENALTY
from shoutbomb.core.db import session as db
from shoutbomb.core.models import BillableTransaction, PenaltyThreshold
from shoutbomb.core.utils import fetch

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')
CENTS = Decimal('0.01')


def money(value) -> Decimal:
    if value is None:
        return ZERO
    return Decimal(str(value)).quantize(CENTS)


def load_thresholds(org_units: Iterable[int], penalty: str = FINES_PENALTY, db_session=None) -> Dict[int, Decimal]:
    """Largest fines threshold configured for each org unit, across all
    permission groups. Org units without a threshold row are absent."""
    db_session = db_session or db
    org_units = list(set(org_units))
    if not org_units:
        return {}
    rows = fetch(
        db_session.query(PenaltyThreshold.org_unit_id, func.max(PenaltyThreshold.threshold))
        .filter(PenaltyThreshold.penalty == penalty,
                PenaltyThreshold.org_unit_id.in_(org_units))
        .group_by(PenaltyThreshold.org_unit_id),
        "fine thresholds")
    thresholds = {org_unit: money(threshold) for org_unit, threshold in rows}
    logger.debug(f"Fine thresholds: {thresholds}")
    return thresholds


def load_patron_fines(patron_ids: Iterable[int], db_session=None) -> Dict[int, Decimal]:
    """Sum of positive balances per patron. Credits are never netted off."""
    db_session = db_session or db
    patron_ids = list(set(patron_ids))
    if not patron_ids:
        return {}
    rows = fetch(
        db_session.query(BillableTransaction.patron_id, func.sum(BillableTransaction.balance_owed))
        .filter(BillableTransaction.patron_id.in_(patron_ids),
                BillableTransaction.balance_owed > 0)
        .group_by(BillableTransaction.patron_id),
        "patron fines")
    return {patron_id: money(total) for patron_id, total in rows}


def fines_over_threshold(total: Decimal, threshold: Optional[Decimal]) -> Decimal:
    """How far `total` exceeds `threshold`. No threshold never blocks."""
    if threshold is None:
        return ZERO
    return max(money(total) - money(threshold), ZERO)


def compute_fines_owed(loans, thresholds: Dict[int, Decimal], patron_fines: Dict[int, Decimal]) -> Dict[int, Decimal]:
    """Fines over threshold per loan id, using the threshold of the loan's circulating org unit."""
    return {
        loan.id: fines_over_threshold(patron_fines.get(loan.patron_id, ZERO), thresholds.get(loan.circ_lib))
        for loan in loans
    }
