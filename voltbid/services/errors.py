class ServiceError(RuntimeError):
    """Recoverable service error (validation/uniqueness/etc.)."""


class NotFoundError(ServiceError):
    """Requested record does not exist (or is not owned by the given parent)."""
