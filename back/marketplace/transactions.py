"""
Transaction helpers.

`run_in_transaction` executes a unit of work on a session and commits it, or
rolls everything back on failure. Serialization failures and deadlocks are
retried; every other exception propagates after the rollback.
"""

import logging
import time
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy.exc import DBAPIError
from sqlmodel import Session

from .settings import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

# PostgreSQL serialization_failure / deadlock_detected
RETRYABLE_SQLSTATES = {"40001", "40P01"}


def _sqlstate_from(exc: Exception) -> str | None:
    orig = getattr(exc, "orig", None)
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def is_retryable(exc: Exception) -> bool:
    if not isinstance(exc, DBAPIError):
        return False
    code = _sqlstate_from(exc)
    if code and code in RETRYABLE_SQLSTATES:
        return True
    msg = str(exc).lower()
    return any(k in msg for k in ("deadlock detected", "could not serialize access"))


def _begin(session: Session, isolation_level: str | None) -> None:
    if not isolation_level or session.in_transaction():
        return
    # SQLite only knows SERIALIZABLE / READ UNCOMMITTED and already serializes writers
    if session.get_bind().dialect.name == "sqlite":
        return
    session.connection(execution_options={"isolation_level": isolation_level})


def run_in_transaction(
    session: Session,
    work: Callable[[], T],
    *,
    isolation_level: str | None = None,
    max_attempts: int | None = None,
    backoff: float | None = None,
) -> T:
    """Run `work` and commit; retry the whole unit on serialization failure."""
    if max_attempts is None:
        max_attempts = settings.tx_max_attempts
    if backoff is None:
        backoff = settings.tx_retry_backoff

    attempt = 0
    while True:
        attempt += 1
        _begin(session, isolation_level)
        try:
            result = work()
            session.commit()
            return result
        except Exception as e:
            session.rollback()
            if attempt >= max_attempts or not is_retryable(e):
                raise
            logger.warning(f"Transaction attempt {attempt}/{max_attempts} failed, retrying: {e}")
            time.sleep(backoff * attempt)
