"""
Constraint Enforcer - uniqueness and referential rules applied at write time.

Every write in the core runs inside `atomic()`. Within that unit the
operation first resolves its references (`ensure_exists`) and probes its
uniqueness key (`ensure_unique`), then inserts. On SQLite the surrounding
write session already holds the write lock (BEGIN IMMEDIATE), so no other
writer can slip in between the probe and the insert. On PostgreSQL the
named unique constraints are the backstop: a racing insert surfaces as an
IntegrityError that `atomic()` turns into a ConflictError carrying the
constraint name reported by the driver.
"""

from contextlib import contextmanager
from typing import Any, Iterator, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import ConflictError, DomainError, InternalError, ReferentialError, ValidationError

# Constraint names, shared with the model definitions
STUDENT_EMAIL = "uq_students_email"
REGISTRATION_PAIR = "uq_registrations_student_event"
ATTENDANCE_REGISTRATION = "uq_attendance_registration"


def is_absent(value: Any) -> bool:
    """None and blank strings count as absent."""
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def require(**fields):
    """
    Raise ValidationError for the first absent field, in argument order.

    Booleans and zero are present values; only None and blank strings
    are treated as missing.
    """
    for name, value in fields.items():
        if is_absent(value):
            raise ValidationError(name)


def ensure_exists(db: Session, model, key: str, value: Any):
    """Return the row of `model` whose `key` column equals `value`, or raise ReferentialError."""
    row = db.query(model).filter(getattr(model, key) == value).first()
    if row is None:
        raise ReferentialError(model.__tablename__, key, value)
    return row


def ensure_unique(db: Session, model, constraint: str, **key):
    """Raise ConflictError if a row of `model` already matches every column in `key`."""
    query = db.query(model)
    for column, value in key.items():
        query = query.filter(getattr(model, column) == value)
    if query.first() is not None:
        raise ConflictError(constraint, key)


def _constraint_name(exc: IntegrityError) -> Optional[str]:
    # psycopg exposes the violated constraint through diagnostics
    diag = getattr(exc.orig, "diag", None)
    return getattr(diag, "constraint_name", None)


@contextmanager
def atomic(db: Session, operation: str, constraint: Optional[str] = None) -> Iterator[None]:
    """
    Run one write as a single all-or-nothing unit.

    Commits on success. On any failure the session is rolled back and the
    error re-raised as a DomainError: residual integrity violations become
    ConflictError on the guarded constraint, any other storage failure
    becomes InternalError.
    """
    try:
        yield
        db.commit()
    except DomainError:
        db.rollback()
        raise
    except IntegrityError as exc:
        db.rollback()
        name = _constraint_name(exc) or constraint
        if name is None:
            raise InternalError(operation, exc) from exc
        raise ConflictError(name) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise InternalError(operation, exc) from exc
