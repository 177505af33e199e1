"""Transaction management utilities for repository operations."""
from contextlib import contextmanager
from functools import wraps
from typing import Callable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from webtarot.errors import AlreadyExists, internal_with_log


@contextmanager
def translate_db_errors(operation: str):
    """
    Map SQLAlchemy failures to application errors.

    Unique violations become AlreadyExists; anything else is logged with
    full detail and re-raised as the opaque InternalError.

    Usage:
        with translate_db_errors("find reading"):
            return session.get(ReadingRecord, reading_id)
    """
    try:
        yield
    except IntegrityError as e:
        raise AlreadyExists(operation) from e
    except SQLAlchemyError as e:
        raise internal_with_log(f"Database error during {operation}", e) from e


class TransactionContext:
    """
    Context manager for database transactions.

    Commits on success and rolls back on exception. Database errors are
    translated the same way as translate_db_errors.

    Usage:
        with TransactionContext(session, "reassign readings"):
            session.query(...).update(...)
            session.add(token)
            # Both commit together or rollback together
    """

    def __init__(self, session, operation: str = "transaction"):
        """
        Initialize transaction context.

        Args:
            session: SQLAlchemy session
            operation: Human-readable name used in logs
        """
        self._session = session
        self._operation = operation

    def __enter__(self):
        """Enter transaction context."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit transaction context with commit or rollback."""
        if exc_type is not None:
            self._session.rollback()
            if isinstance(exc_val, IntegrityError):
                raise AlreadyExists(self._operation) from exc_val
            if isinstance(exc_val, SQLAlchemyError):
                raise internal_with_log(
                    f"Database error during {self._operation}", exc_val
                ) from exc_val
            return False

        try:
            self._session.commit()
        except IntegrityError as e:
            self._session.rollback()
            raise AlreadyExists(self._operation) from e
        except SQLAlchemyError as e:
            self._session.rollback()
            raise internal_with_log(
                f"Database error during {self._operation}", e
            ) from e
        return False


def transactional(operation: str):
    """
    Decorator to run a repository method in a TransactionContext.

    The decorated method's instance must expose ``_session``.

    Usage:
        @transactional("insert reading")
        def insert(self, interpretation):
            self._session.add(ReadingRecord.from_interpretation(interpretation))
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            with TransactionContext(self._session, operation):
                return func(self, *args, **kwargs)

        return wrapper

    return decorator
