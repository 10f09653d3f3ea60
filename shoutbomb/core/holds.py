#!/usr/bin/env python

"""
    Hold conflict resolver.

    A loan cannot be renewed while another patron's hold could be filled
    by the loaned item. Holds reach an item two ways: through the hold's
    `current_copy` pointer, and through the hold/copy map built by the
    hold targeter. Either path may be the only one linking a hold to the
    item, so both are gathered, merged and de-duplicated before the
    (expensive) permit test runs exactly once per distinct hold and item.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import datetime
import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional
from shoutbomb.core.db import session as db
from shoutbomb.core.models import Hold, HoldCopyMap
from shoutbomb.core.policy import HoldPermit
from shoutbomb.core.utils import as_utc, fetch, utcnow
from shoutbomb.core.exceptions import DataSourceError
from shoutbomb.schemas import HoldCandidate

logger = logging.getLogger(__name__)

HOLD_COLUMNS = (
    Hold.id.label('hold_id'),
    Hold.pickup_lib, Hold.request_lib,
    Hold.patron_id, Hold.requestor_id,
    Hold.frozen, Hold.thaw_date, Hold.expire_time,
)


def _open_holds(query):
    return query.filter(Hold.cancel_time.is_(None), Hold.fulfillment_time.is_(None))


def is_live(hold, now: datetime.datetime) -> bool:
    """Neither frozen (unless the thaw date has passed) nor expired."""
    now = as_utc(now)
    if hold.frozen and (hold.thaw_date is None or as_utc(hold.thaw_date) > now):
        return False
    if hold.expire_time is not None and as_utc(hold.expire_time) <= now:
        return False
    return True


def load_hold_rows(item_ids: Iterable[int], db_session=None):
    """Open holds touching any of `item_ids`, from both paths. A hold found
    by both paths appears twice here."""
    db_session = db_session or db
    item_ids = list(set(item_ids))
    if not item_ids:
        return []
    by_current_copy = fetch(
        _open_holds(db_session.query(Hold.current_copy.label('item_id'), *HOLD_COLUMNS))
        .filter(Hold.current_copy.in_(item_ids)),
        "holds by current copy")
    by_copy_map = fetch(
        _open_holds(db_session.query(HoldCopyMap.target_copy.label('item_id'), *HOLD_COLUMNS)
                    .join(Hold, HoldCopyMap.hold_id == Hold.id))
        .filter(HoldCopyMap.target_copy.in_(item_ids)),
        "holds by copy map")
    logger.debug(f"Found {len(by_current_copy)} holds by current copy and "
                 f"{len(by_copy_map)} by copy map for {len(item_ids)} items")
    return list(by_current_copy) + list(by_copy_map)


def gather_candidates(rows, now: Optional[datetime.datetime] = None) -> List[HoldCandidate]:
    """Live candidates, one per distinct (item, hold), in first-seen order."""
    now = now or utcnow()
    candidates = {}
    for row in rows:
        if not is_live(row, now):
            continue
        candidate = HoldCandidate.model_validate(row)
        candidates.setdefault(candidate.key, candidate)
    return list(candidates.values())


def count_blocking_holds(candidates: Iterable[HoldCandidate], permit: HoldPermit) -> Dict[int, int]:
    """Permitted candidate holds per item id. Items with none are absent."""
    counts = Counter()
    tested = set()
    for hold in candidates:
        if hold.key in tested:
            continue
        tested.add(hold.key)
        try:
            permitted = permit.permits(hold.pickup_lib, hold.request_lib,
                                       hold.item_id, hold.patron_id, hold.requestor_id)
        except DataSourceError:
            raise
        except Exception as e:
            logger.error(f"Hold permit test failed for hold {hold.hold_id}: {e}")
            raise DataSourceError(f"Hold permit test failed for hold {hold.hold_id}: {str(e)}.") from e
        if permitted:
            counts[hold.item_id] += 1
    logger.info(f"Permit tested {len(tested)} candidate holds, "
                f"{sum(counts.values())} block renewal of {len(counts)} items")
    return dict(counts)


def compute_hold_counts(loans, permit: HoldPermit, now=None, db_session=None) -> Dict[int, int]:
    """Blocking hold count per loan id."""
    loans = list(loans)
    rows = load_hold_rows([loan.item_id for loan in loans], db_session=db_session)
    per_item = count_blocking_holds(gather_candidates(rows, now=now), permit)
    return {loan.id: per_item.get(loan.item_id, 0) for loan in loans}
