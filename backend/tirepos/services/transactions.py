# Overview: Service-layer transaction scope; every write path commits or rolls back here.

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..extensions import db
from ..validation import ConflictError, DuplicateKeyError, StorageError, ValidationError


def _integrity_error_for(exc: IntegrityError, duplicate_message: str | None) -> Exception:
    detail = str(exc.orig) if exc.orig is not None else str(exc)
    if "UNIQUE" in detail.upper():
        return DuplicateKeyError(duplicate_message or f"Duplicate value: {detail}")
    if "CHECK" in detail.upper() or "NOT NULL" in detail.upper():
        return ValidationError(f"Invalid value: {detail}")
    return ConflictError(f"Constraint violated: {detail}")


@contextmanager
def atomic(*, duplicate_message: str | None = None) -> Iterator[Session]:
    """
    Run the enclosed block as one all-or-nothing transaction.

    - Commits when the block exits normally.
    - Rolls back on any exception, so no partial write is ever visible.
    - IntegrityError -> DuplicateKeyError / ValidationError / ConflictError.
    - Any other SQLAlchemyError -> StorageError.

    There is no retry: every failure goes back to the caller.
    """
    try:
        yield db.session
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise _integrity_error_for(exc, duplicate_message) from exc
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageError("Database operation failed") from exc
    except BaseException:
        db.session.rollback()
        raise
