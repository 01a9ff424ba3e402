class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AttendanceClosedError(ValidationError):
    """Raised when a meal is marked outside its marking window."""


class NoEligibleAttendeesError(ValidationError):
    """Raised when a misc charge has no billable attendee to split across."""


class DuplicateUsernameError(ValidationError):
    """Raised when a username is already taken."""


class NotFoundError(DomainError):
    """Raised when a referenced user, tenant or request does not exist."""


class TerminalStateError(DomainError):
    """Raised when deciding a registration request that is already decided."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class PersistenceError(DomainError):
    """Raised when the document snapshot could not be written.

    The in-memory state stays committed; only durability failed.
    """
