import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import scoped_session, sessionmaker, declarative_base
from shoutbomb.configs import DB_URI, DEBUG

logger = logging.getLogger(__name__)
# Only use client_encoding for PostgreSQL, not SQLite
engine_kwargs = {'echo': DEBUG}
if not DB_URI.startswith('sqlite'):
    engine_kwargs['client_encoding'] = 'utf8'
engine = create_engine(DB_URI, **engine_kwargs)
session = scoped_session(sessionmaker(
    bind=engine, autocommit=False, autoflush=False))

Base = declarative_base()

def init(engine_to_init=engine):
    """Creates the tables the engine reads. Development and tests only,
    a production ILS database already has them."""
    try:
        Base.metadata.create_all(bind=engine_to_init)
        return session
    except Exception as e:
        logger.warning(f"[WARNING] Database initialization failed: {e}")
