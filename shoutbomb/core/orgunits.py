import logging
from typing import Iterable, List, Optional
from sqlalchemy import func
from shoutbomb.configs import LIBRARY_NAMES, INCLUDE_ORG_DESCENDANTS
from shoutbomb.core.db import session as db
from shoutbomb.core.models import OrgUnit
from shoutbomb.core.utils import dedupe, fetch
from shoutbomb.core.exceptions import OrgUnitNotFoundError

logger = logging.getLogger(__name__)

def get_descendants(org_id: int, db_session=None) -> List[int]:
    """All org units below `org_id`, walking `parent_ou` one level at a time."""
    db_session = db_session or db
    found, frontier = [], [org_id]
    while frontier:
        rows = fetch(db_session.query(OrgUnit.id).filter(OrgUnit.parent_ou.in_(frontier)),
                     "org unit descendants")
        frontier = [r.id for r in rows if r.id not in found]
        found.extend(frontier)
    return found

def resolve_org_units(shortnames: Optional[Iterable[str]] = None, include_descendants: Optional[bool] = None,
                      db_session=None) -> List[int]:
    """Turns library shortnames into a sorted, de-duplicated list of org unit ids.
    Defaults to the configured `LIBRARY_NAMES` and `INCLUDE_ORG_DESCENDANTS`."""
    db_session = db_session or db
    if shortnames is None:
        shortnames = LIBRARY_NAMES
    if include_descendants is None:
        include_descendants = INCLUDE_ORG_DESCENDANTS
    names = ["".join(n.split()).lower() for n in shortnames if n and n.strip()]
    if not names:
        raise OrgUnitNotFoundError("No library shortnames given.")

    logger.debug(f"Resolving org units for {names}")
    rows = fetch(db_session.query(OrgUnit.id)
                 .filter(func.lower(OrgUnit.shortname).in_(names))
                 .order_by(OrgUnit.id), "org units")
    ids = []
    for row in rows:
        ids.append(row.id)
        if include_descendants:
            ids.extend(get_descendants(row.id, db_session=db_session))

    if not ids:
        raise OrgUnitNotFoundError(f"No organization units found for library shortnames: {','.join(names)}")
    return dedupe(ids)
