"""
Storage-level errors and helpers for classifying driver failures.
"""
from sqlalchemy.exc import IntegrityError


# SQLite, PostgreSQL
_UNIQUE_VIOLATION_MARKERS = (
    "UNIQUE constraint failed",
    "duplicate key value violates unique constraint",
)

_UNIQUE_VIOLATION_SQLSTATE = "23505"


class StorageError(Exception):
    """
    Unclassified failure from the database session.
    
    The underlying SQLAlchemy exception is chained as __cause__.
    """

    def __init__(self, context: str):
        self.context = context
        super().__init__(f"storage failure during {context}")


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the integrity error comes from a unique or primary key constraint."""
    sqlstate = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    if sqlstate == _UNIQUE_VIOLATION_SQLSTATE:
        return True
    message = str(exc.orig)
    return any(marker in message for marker in _UNIQUE_VIOLATION_MARKERS)


def violates_constraint(exc: IntegrityError, constraint: str, *columns: str) -> bool:
    """
    True when a unique violation names the given constraint.
    
    PostgreSQL reports the constraint name. SQLite only lists the
    columns, e.g. "UNIQUE constraint failed: policies.org_id, policies.name",
    so every column in `columns` must appear instead.
    """
    if not is_unique_violation(exc):
        return False
    message = str(exc.orig)
    if constraint in message:
        return True
    return bool(columns) and all(column in message for column in columns)
