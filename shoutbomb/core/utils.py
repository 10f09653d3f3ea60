import datetime
import logging
from sqlalchemy.exc import SQLAlchemyError
from shoutbomb.core.exceptions import DataSourceError

logger = logging.getLogger(__name__)

def as_utc(value: datetime.datetime) -> datetime.datetime:
    """Naive timestamps (e.g. read back from SQLite) are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(datetime.timezone.utc)

def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)

def dedupe(values):
    return sorted(set(values))

def fetch(query, what: str):
    """Runs `query.all()`, turning database failures into DataSourceError."""
    try:
        return query.all()
    except SQLAlchemyError as e:
        query.session.rollback()
        logger.error(f"Failed to load {what}: {e}")
        raise DataSourceError(f"Failed to load {what}: {str(e)}.") from e
