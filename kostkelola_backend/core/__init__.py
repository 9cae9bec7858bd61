"""Core infrastructure for KostKelola backend."""

from .base_crud import BaseCRUD
from .database_types import UUID, StringList
from .exceptions import (
    AuthenticationError,
    BusinessLogicError,
    ExternalServiceError,
    FeatureNotAvailableError,
    KostKelolaException,
    LimitExceededError,
    NotFoundError,
    PermissionError,
    ResourceAlreadyExistsError,
    ResourceNotFoundError,
    RoomTypeInUseError,
    ValidationError,
)

__all__ = [
    "BaseCRUD",
    "UUID",
    "StringList",
    "KostKelolaException",
    "ResourceNotFoundError",
    "ResourceAlreadyExistsError",
    "ValidationError",
    "BusinessLogicError",
    "RoomTypeInUseError",
    "LimitExceededError",
    "FeatureNotAvailableError",
    "PermissionError",
    "AuthenticationError",
    "NotFoundError",
    "ExternalServiceError",
]
