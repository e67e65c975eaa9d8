"""
Domain Exceptions for expense tracking.

Custom exceptions enforcing business rules:
- Identity and project membership
- Money arithmetic and cost splitting
- Cost status lifecycle
"""


class DomainError(Exception):
    """Base exception for all domain errors."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


# =============================================================================
# Identity Exceptions
# =============================================================================

class UnauthorizedError(DomainError):
    """Raised when an operation has no authenticated actor or bad credentials."""

    def __init__(self, message: str = "Unauthorized", code: str = "UNAUTHORIZED"):
        super().__init__(message, code=code)


class NotProjectMemberError(UnauthorizedError):
    """Raised when the actor is not a member of the project."""

    def __init__(self, project_id: int, user_id: int):
        super().__init__(
            f"User '{user_id}' is not a member of project '{project_id}'",
            code="NOT_PROJECT_MEMBER"
        )
        self.project_id = project_id
        self.user_id = user_id


class OwnerRequiredError(UnauthorizedError):
    """Raised when a member-level actor attempts an owner-only operation."""

    def __init__(self, project_id: int, action: str):
        super().__init__(
            f"Only the project owner can {action} (project '{project_id}')",
            code="OWNER_REQUIRED"
        )
        self.project_id = project_id
        self.action = action


class EmailInUseError(DomainError):
    """Raised when registering an email that already has an account."""

    def __init__(self, email: str):
        super().__init__("Email already in use", code="EMAIL_IN_USE")
        self.email = email


# =============================================================================
# Lookup Exceptions
# =============================================================================

class NotFoundError(DomainError):
    """Raised when a referenced entity cannot be found."""

    def __init__(self, message: str, code: str = "NOT_FOUND"):
        super().__init__(message, code=code)


class ProjectNotFoundError(NotFoundError):
    def __init__(self, project_id: int):
        super().__init__(f"Project with id '{project_id}' not found", code="PROJECT_NOT_FOUND")
        self.project_id = project_id


class CostNotFoundError(NotFoundError):
    def __init__(self, cost_id: int):
        super().__init__(f"Cost with id '{cost_id}' not found", code="COST_NOT_FOUND")
        self.cost_id = cost_id


class UserNotFoundError(NotFoundError):
    """Raised when an invited email has no account yet."""

    def __init__(self, email: str):
        super().__init__("User not found. They must sign up first.", code="USER_NOT_FOUND")
        self.email = email


class DuplicateMemberError(DomainError):
    """Raised when inviting a user who already belongs to the project."""

    def __init__(self, project_id: int, user_id: int):
        super().__init__("User is already a member", code="DUPLICATE_MEMBER")
        self.project_id = project_id
        self.user_id = user_id


# =============================================================================
# Money and Split Exceptions
# =============================================================================

class InvalidAmountError(DomainError):
    """Raised for non-positive, negative or malformed money values."""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_AMOUNT")


class CurrencyMismatchError(DomainError):
    """Raised when combining money values in different currencies."""

    def __init__(self, left: str, right: str):
        super().__init__(
            f"Cannot combine amounts in {left} and {right}",
            code="CURRENCY_MISMATCH"
        )
        self.left = left
        self.right = right


class SplitMismatchError(DomainError):
    """Raised when split shares do not add up to the cost total."""

    def __init__(self, expected: str, actual: str):
        super().__init__(
            f"Splits do not add up: expected {expected}, got {actual}",
            code="SPLIT_MISMATCH"
        )
        self.expected = expected
        self.actual = actual


class NoParticipantsError(DomainError):
    """Raised when a split has nobody to split between."""

    def __init__(self):
        super().__init__("A split needs at least one participant", code="NO_PARTICIPANTS")


# =============================================================================
# Lifecycle and Validation Exceptions
# =============================================================================

class InvalidTransitionError(DomainError):
    """Raised on an illegal cost status change."""

    def __init__(self, cost_id: int, current_status: str, target_status: str):
        super().__init__(
            f"Cost '{cost_id}' cannot move from {current_status} to {target_status}",
            code="INVALID_TRANSITION"
        )
        self.cost_id = cost_id
        self.current_status = current_status
        self.target_status = target_status


class ValidationError(DomainError):
    """Raised when data validation fails."""

    def __init__(self, field: str, message: str):
        super().__init__(f"Validation failed for '{field}': {message}", code="VALIDATION_ERROR")
        self.field = field
