"""Exception classes for the storage layer."""

from typing import Any, Optional


class StorageError(Exception):
    """Base exception for storage-related errors."""

    def __init__(self, message: str, entity_id: Optional[str] = None, details: Optional[Any] = None):
        self.entity_id = entity_id
        self.details = details
        super().__init__(message)


class RecordError(StorageError):
    """Exception for records that cannot be turned back into entities."""

    def __init__(self, message: str, field: Optional[str] = None, value: Optional[Any] = None):
        self.field = field
        self.value = value
        super().__init__(message, details={"field": field, "value": value})
