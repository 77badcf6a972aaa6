"""Domain errors raised by services and the authorization gate.

Route handlers translate these into HTTP responses; nothing below the API layer
imports FastAPI.
"""


class AuthenticationFailure(Exception):
    """Raised when a request carries no usable identity (missing, invalid or expired token)."""

    def __init__(self, message: str = "Not authenticated") -> None:
        self.message = message
        super().__init__(message)


class AuthorizationFailure(Exception):
    """Raised when the resolved identity's role is not allowed for the operation."""

    def __init__(self, message: str = "Insufficient role") -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(Exception):
    """Raised when a referenced user or point of interest does not exist."""

    def __init__(self, entity: str, entity_id: int) -> None:
        self.entity = entity
        self.entity_id = entity_id
        self.message = f"{entity} {entity_id} not found"
        super().__init__(self.message)


class ValidationFailure(Exception):
    """Raised for input the schema layer accepted but the store rejects."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DuplicateEmailError(ValidationFailure):
    """Raised when creating or updating a user with an email already registered."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("Email is already registered.")
