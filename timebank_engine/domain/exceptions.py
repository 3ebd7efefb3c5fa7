"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class UnknownCategoryError(DomainException):
    """Category id is not in the rate table (admin updates only)"""

    pass


class InvalidMultiplierError(DomainException):
    """Demand or supply multiplier is non-positive or not a finite number"""

    pass


class InvalidTransitionError(DomainException):
    """Match group is no longer pending and cannot take responses"""

    pass


class ParticipantNotFoundError(DomainException):
    """User is not a participant of the match group"""

    pass
