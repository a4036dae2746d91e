from app.models.access import AccessDecision, AccessOutcome


class FinanceTrackerException(Exception):
    """Base exception for finance tracker"""

    pass


class UnauthorizedException(FinanceTrackerException):
    """Raised when JWT validation fails"""

    pass


class NotFoundException(FinanceTrackerException):
    """Raised when resource not found"""

    pass


class ForbiddenException(FinanceTrackerException):
    """Raised when user lacks the role required for an operation"""

    pass


class ValidationException(FinanceTrackerException):
    """Raised for business logic validation errors"""

    pass


class StorageError(FinanceTrackerException):
    """
    Raised when the backing store fails.

    This is the only failure the access-control core raises; every other
    outcome (denied, not found, invariant violated) is returned as a value.
    """

    pass


class IntegrityViolation(StorageError):
    """Raised when a write breaks a database constraint, such as a unique key"""

    pass


def raise_for_decision(decision: AccessDecision) -> None:
    """
    Translate a refused AccessDecision into the matching HTTP-mapped exception.

    AccessDenied and InsufficientRole become ForbiddenException, NotFound
    becomes NotFoundException and InvariantViolation becomes
    ValidationException. An allowed decision is a no-op.
    """
    if decision.allowed:
        return
    if decision.outcome == AccessOutcome.NOT_FOUND:
        raise NotFoundException(decision.reason)
    if decision.outcome == AccessOutcome.INVARIANT_VIOLATION:
        raise ValidationException(decision.reason)
    raise ForbiddenException(decision.reason)
