import logging
from collections.abc import Iterator
from contextlib import contextmanager
from functools import wraps

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session

from app.config import settings
from app.core.exceptions import IntegrityViolation, StorageError

logger = logging.getLogger(__name__)

# Pool sizing only applies to server databases
engine_options = (
    {"connect_args": {"check_same_thread": False}}
    if settings.is_sqlite
    else {"pool_size": settings.DB_POOL_SIZE, "max_overflow": settings.DB_MAX_OVERFLOW}
)

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using
    echo=settings.DEBUG,  # Log SQL queries in debug mode
    **engine_options,
)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Iterator[Session]:
    """
    FastAPI dependency for database sessions.

    Yields a database session and ensures it's closed after use.

    Usage:
        @app.get("/items")
        def get_items(db: Session = Depends(get_db)):
            return db.query(Item).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Run a block as a single storage transaction.

    Commits when the block exits normally and rolls back on any exception.
    SQLAlchemy failures surface as StorageError (IntegrityViolation for
    constraint failures); anything else is re-raised
    unchanged after the rollback.

    Usage:
        with transaction(db):
            db.add(team)
            db.add(membership)
    """
    try:
        yield db
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Constraint violated, rolled back: %s", e.orig)
        raise IntegrityViolation(str(e)) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Storage transaction failed, rolled back")
        raise StorageError(str(e)) from e
    except Exception:
        db.rollback()
        raise


def storage_call(func):
    """Translate SQLAlchemy failures raised by a repository method into StorageError."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except IntegrityError as e:
            logger.warning("Constraint violated in %s: %s", func.__qualname__, e.orig)
            raise IntegrityViolation(str(e)) from e
        except SQLAlchemyError as e:
            logger.exception("Storage read failed in %s", func.__qualname__)
            raise StorageError(str(e)) from e

    return wrapper
