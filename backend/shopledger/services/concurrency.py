# Overview: Service-layer transaction runner; write locking and retry on conflicts.

from __future__ import annotations

import time

from flask import current_app
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.exc import StaleDataError

from ..errors import TransactionConflict
from ..extensions import db


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE, but other DBs will honor it.
    """
    return query.with_for_update()


def begin_write() -> None:
    """
    Take the database write lock up front on SQLite.

    Without it two SQLite transactions can both read the same stock level
    before either writes; BEGIN IMMEDIATE makes the second one wait.
    """
    if db.engine.dialect.name == "sqlite":
        db.session.execute(text("BEGIN IMMEDIATE"))


def run_with_retry(func, *, attempts: int | None = None, backoff_base: float | None = None):
    """
    Execute a DB operation with retry on concurrency-related failures.

    Retries on OperationalError (deadlocks, locks) and StaleDataError
    (optimistic locking conflicts). Any other exception rolls the session
    back and propagates unchanged, so a failed attempt never leaves staged
    writes behind.
    """
    if attempts is None:
        attempts = current_app.config.get("LEDGER_TX_ATTEMPTS", 3)
    if backoff_base is None:
        backoff_base = current_app.config.get("LEDGER_TX_BACKOFF", 0.1)

    for attempt in range(attempts):
        try:
            return func()
        except (OperationalError, StaleDataError) as exc:
            db.session.rollback()
            if attempt >= attempts - 1:
                current_app.logger.error("Transaction failed after %d attempts: %s", attempts, exc)
                raise TransactionConflict(
                    "The operation conflicted with concurrent changes; please retry",
                    details={"attempts": attempts},
                ) from exc
            current_app.logger.warning("Transaction conflict (attempt %d/%d): %s", attempt + 1, attempts, exc)
            time.sleep(backoff_base * (2 ** attempt))
        except Exception:
            db.session.rollback()
            raise


def run_in_transaction(func, *, attempts: int | None = None, backoff_base: float | None = None):
    """
    Run func inside one write transaction and commit it.

    func must do all of its reads and writes through db.session and must not
    commit; the whole attempt is replayed from scratch on conflict.
    """
    def _op():
        begin_write()
        result = func()
        db.session.commit()
        return result

    return run_with_retry(_op, attempts=attempts, backoff_base=backoff_base)
