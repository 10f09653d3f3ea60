import datetime
import logging
from typing import Dict, Iterable, Optional, Set
from shoutbomb.core.db import session as db
from shoutbomb.core.models import StandingPenalty
from shoutbomb.core.utils import as_utc, fetch, utcnow

logger = logging.getLogger(__name__)


def is_active(stop_date: Optional[datetime.datetime], now: datetime.datetime) -> bool:
    """A penalty stopping exactly at `now` has already stopped."""
    return stop_date is None or as_utc(stop_date) > as_utc(now)


def load_penalties(patron_ids: Iterable[int], codes: Iterable[str], db_session=None):
    """Standing penalties with a blocking code, for the given patrons."""
    db_session = db_session or db
    patron_ids, codes = list(set(patron_ids)), list(codes)
    if not patron_ids or not codes:
        return []
    return fetch(
        db_session.query(StandingPenalty.patron_id, StandingPenalty.penalty, StandingPenalty.stop_date)
        .filter(StandingPenalty.patron_id.in_(patron_ids),
                StandingPenalty.penalty.in_(codes)),
        "standing penalties")


def blocked_patrons(penalties, codes: Iterable[str], now: Optional[datetime.datetime] = None) -> Set[int]:
    """Patrons holding at least one active penalty whose code is in `codes`."""
    now = now or utcnow()
    codes = set(codes)
    return {
        p.patron_id for p in penalties
        if p.penalty in codes and is_active(p.stop_date, now)
    }


def has_blocking_penalty(patron_id: int, penalties, codes: Iterable[str],
                         now: Optional[datetime.datetime] = None) -> bool:
    return patron_id in blocked_patrons(
        [p for p in penalties if p.patron_id == patron_id], codes, now=now)


def compute_penalty_blocks(loans, penalties, codes, now=None) -> Dict[int, bool]:
    """Whether each loan's patron carries a blocking penalty, by loan id."""
    blocked = blocked_patrons(penalties, codes, now=now)
    if blocked:
        logger.info(f"{len(blocked)} patrons carry blocking standing penalties")
    return {loan.id: loan.patron_id in blocked for loan in loans}
