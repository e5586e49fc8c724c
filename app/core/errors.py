"""Domain errors and classification of storage failures."""
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError


class DomainError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFound(DomainError):
    status_code = 404


class InvalidInput(DomainError):
    status_code = 400


class ConcurrencyConflict(DomainError):
    """Lost a race on the best-attempt flag or the aggregate row."""

    status_code = 500


class StorageUnavailable(DomainError):
    status_code = 503


# Driver messages that mean "another transaction got there first"
_CONFLICT_MARKERS = (
    "database is locked",
    "could not serialize",
    "deadlock detected",
    "lock timeout",
)


def storage_error_from(exc: Exception) -> DomainError:
    """Map a SQLAlchemy / OS level failure to ConcurrencyConflict or StorageUnavailable."""
    if isinstance(exc, IntegrityError):
        return ConcurrencyConflict(f"Conflicting write: {exc.orig}")
    if isinstance(exc, OperationalError):
        message = str(exc.orig).lower()
        if any(marker in message for marker in _CONFLICT_MARKERS):
            return ConcurrencyConflict(f"Conflicting write: {exc.orig}")
    if isinstance(exc, DBAPIError):
        return StorageUnavailable(f"Storage error: {exc.orig}")
    return StorageUnavailable(f"Storage unreachable: {exc}")
