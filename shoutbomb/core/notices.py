import logging
from typing import Dict, Iterable, List
from shoutbomb.schemas import CourtesyNotice, DecisionResult, LoanRecord

logger = logging.getLogger(__name__)


def build_courtesy_notices(loans: Iterable[LoanRecord], decisions: Dict[int, DecisionResult]) -> List[CourtesyNotice]:
    """One courtesy notice row per decided loan, in loan order."""
    notices = []
    for loan in loans:
        if (decision := decisions.get(loan.id)) is None:
            logger.warning(f"No decision for loan {loan.id}, skipping courtesy notice")
            continue
        notices.append(CourtesyNotice(
            patron_barcode=loan.patron_barcode,
            item_barcode=loan.item_barcode,
            title=loan.title,
            due_date=loan.due_date.date(),
            fines_owed=decision.fines_owed,
            hold_count=decision.hold_count,
            times_renewed=loan.times_renewed,
            renewal_remaining=decision.renewal_remaining,
        ))
    return notices
