import logging
import time
from functools import lru_cache

from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import declarative_base, sessionmaker

from prompty.config import DATABASE_URL

logger = logging.getLogger(__name__)

# Create Base class
Base = declarative_base()

# Bound lazily so importing the app never opens a connection
SessionLocal = sessionmaker(autocommit=False, autoflush=False)


@lru_cache(maxsize=1)
def get_engine():
    return create_engine(DATABASE_URL, pool_pre_ping=True)


def wait_for_database(max_retries=5, retry_interval=5):
    """Block until the database answers ``SELECT 1``, retrying on connection errors."""
    engine = get_engine()
    for attempt in range(max_retries):
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return engine
        except OperationalError:
            if attempt == max_retries - 1:
                raise
            logger.warning(
                f"Database connection attempt {attempt + 1} failed. Retrying in {retry_interval} seconds..."
            )
            time.sleep(retry_interval)


# Dependency
def get_db():
    db = SessionLocal(bind=get_engine())
    try:
        yield db
    finally:
        db.close()
