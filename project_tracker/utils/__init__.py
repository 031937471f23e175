"""Shared helpers: structured errors and logging setup."""

from .errors import (
    DuplicateEntityError,
    InvalidPayloadError,
    MultipleErrors,
    NotFoundError,
    TrackerError,
)
from .logs import setup_logger

__all__ = [
    "TrackerError",
    "InvalidPayloadError",
    "NotFoundError",
    "DuplicateEntityError",
    "MultipleErrors",
    "setup_logger",
]
