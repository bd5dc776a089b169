class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a role lacks permission for an attendance status."""


class NotFoundError(DomainError):
    """Raised when a referenced cycle, bimester, week or status does not exist."""


class CalendarGapError(ValidationError):
    """Raised when a date falls outside any bimester or academic week.

    Resolvers return ``None`` for gaps; only registration flows raise this.
    """


class EmptyInputError(ValidationError):
    """Raised when a registration has nothing to act on (e.g. no active enrollments)."""


class AmbiguousMatchError(DomainError):
    """Raised in strict mode when a date matches more than one academic week."""
