"""Exception classes for the schedulable entity model.

This module defines the exceptions raised by identifier parsing, fail-fast
collection removals and whole-entity validation, so callers can tell a
rejected input apart from a programming error.
"""

from typing import Any, List, Optional


class DomainError(Exception):
    """Base exception for entity model errors."""


class IdParseError(DomainError, ValueError):
    """Base exception for identifier parsing failures."""

    def __init__(self, message: str, raw: Any = None, expected_prefix: Optional[str] = None):
        self.raw = raw
        self.expected_prefix = expected_prefix
        super().__init__(message)


class InvalidFormatError(IdParseError):
    """The input has no ``prefix-token`` separator."""


class WrongPrefixError(IdParseError):
    """The prefix belongs to another entity kind."""

    def __init__(self, message: str, raw: Any, expected_prefix: str, found_prefix: str):
        self.found_prefix = found_prefix
        super().__init__(message, raw, expected_prefix)


class InvalidUlidError(IdParseError):
    """The token part is not a valid ULID."""


class ElementNotFoundError(DomainError, LookupError):
    """Exception when removing a tag, child or dependency that is not present."""

    def __init__(self, message: str, entity_id: Any = None, element: Any = None):
        self.entity_id = entity_id
        self.element = element
        super().__init__(message)


class EntityValidationError(DomainError):
    """Exception carrying every issue found by the cross-field validation pass."""

    def __init__(self, issues: List[Any], entity_id: Any = None):
        self.issues = list(issues)
        self.entity_id = entity_id
        super().__init__(
            f"{len(self.issues)} validation issue(s) found for {entity_id}: "
            + "; ".join(self.messages)
        )

    @property
    def messages(self) -> List[str]:
        return [issue.message for issue in self.issues]
