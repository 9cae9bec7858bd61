"""
Custom exception classes for consistent error handling across all modules.
"""

from typing import Any


class KostKelolaException(Exception):
    """Base exception for all KostKelola related errors."""

    status_code: int = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ResourceNotFoundError(KostKelolaException):
    """Raised when a requested resource is not found."""

    status_code = 404

    def __init__(
        self,
        resource_type: str,
        identifier: Any,
        details: dict[str, Any] | None = None,
    ):
        message = f"{resource_type} with identifier '{identifier}' not found"
        super().__init__(message, details)
        self.resource_type = resource_type
        self.identifier = identifier


class ResourceAlreadyExistsError(KostKelolaException):
    """Raised when trying to create a resource that already exists."""

    status_code = 409

    def __init__(
        self,
        resource_type: str,
        identifier: Any,
        details: dict[str, Any] | None = None,
    ):
        message = f"{resource_type} with identifier '{identifier}' already exists"
        super().__init__(message, details)
        self.resource_type = resource_type
        self.identifier = identifier


class ValidationError(KostKelolaException):
    """Raised when data validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        details: dict[str, Any] | None = None,
    ):
        if field:
            full_message = f"Validation error for field '{field}': {message}"
        else:
            full_message = message
        super().__init__(full_message, details)
        self.field = field
        self.value = value


class BusinessLogicError(KostKelolaException):
    """Raised when business logic constraints are violated."""

    status_code = 409


class RoomTypeInUseError(BusinessLogicError):
    """Raised when a room type is renamed or deleted while rooms still use it."""

    def __init__(
        self,
        room_type_name: str,
        affected_rooms: list[dict[str, Any]],
        action: str = "rename",
    ):
        names = ", ".join(room["name"] for room in affected_rooms)
        message = (
            f"Room type '{room_type_name}' is used by {len(affected_rooms)} room(s): "
            f"{names}. Cannot {action} it"
        )
        if action == "rename":
            message += " without cascading the rename to those rooms."
        else:
            message += ". Move those rooms to another type first."
        super().__init__(message, {"affected_rooms": affected_rooms})
        self.room_type_name = room_type_name
        self.affected_rooms = affected_rooms


class LimitExceededError(KostKelolaException):
    """Raised when a subscription plan cap would be exceeded."""

    status_code = 403

    def __init__(self, resource_type: str, limit: int, scope: str = "account"):
        message = (
            f"You have reached the maximum number of {resource_type} ({limit}) "
            f"allowed per {scope} by your subscription plan. "
            f"Please upgrade your plan to add more."
        )
        super().__init__(message, {"resource_type": resource_type, "limit": limit})
        self.resource_type = resource_type
        self.limit = limit


class FeatureNotAvailableError(KostKelolaException):
    """Raised when the caller's plan does not include a gated feature."""

    status_code = 403

    def __init__(self, feature: str):
        super().__init__(
            f"Your subscription plan does not include '{feature}'",
            {"feature": feature},
        )
        self.feature = feature


class PermissionError(KostKelolaException):
    """Raised when user lacks permission to perform an action."""

    status_code = 403

    def __init__(
        self, action: str, resource_type: str, details: dict[str, Any] | None = None
    ):
        message = f"Permission denied: cannot {action} {resource_type}"
        super().__init__(message, details)
        self.action = action
        self.resource_type = resource_type


class AuthenticationError(KostKelolaException):
    """Raised when authentication fails."""

    status_code = 401

    def __init__(
        self,
        message: str = "Authentication failed",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)


class NotFoundError(KostKelolaException):
    """Raised when a resource is not found (simplified version)."""

    status_code = 404

    def __init__(
        self, message: str = "Resource not found", details: dict[str, Any] | None = None
    ):
        super().__init__(message, details)


class ExternalServiceError(KostKelolaException):
    """Raised when external service integration fails."""

    status_code = 502

    def __init__(
        self,
        service_name: str,
        operation: str,
        details: dict[str, Any] | None = None,
    ):
        message = f"External service '{service_name}' failed during '{operation}'"
        super().__init__(message, details)
        self.service_name = service_name
        self.operation = operation
