"""Typed, sortable identifiers for every entity kind.

Every identifier renders as ``"{prefix}-{token}"`` where the token is a
26 character ULID. Each entity kind gets its own ``Identifier`` subclass,
so a ``ProjectId`` never compares equal to a ``TaskId`` even if both carry
the same token.

Example Usage:
    ```python
    from project_tracker.domain.ids import ProjectId

    project_id = ProjectId.new()
    assert ProjectId.parse(str(project_id)) == project_id
    ```
"""

from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from functools import total_ordering
from typing import Any, ClassVar, Dict, Optional, Type, TypeVar

from ulid import ULID

from project_tracker.constants import (
    ID_SEPARATOR,
    PERSON_PREFIX,
    PROJECT_PREFIX,
    TAG_PREFIX,
    TASK_PREFIX,
)
from .exceptions import InvalidFormatError, InvalidUlidError, WrongPrefixError

# Crockford base32, first character bounded so the value fits in 128 bits
_ULID_PATTERN = re.compile(r"^[0-7][0-9A-HJKMNP-TV-Z]{25}$")

IdT = TypeVar("IdT", bound="Identifier")


class EntityKind(str, Enum):
    """Entity kinds and their fixed identifier prefixes."""
    PERSON = PERSON_PREFIX
    TAG = TAG_PREFIX
    PROJECT = PROJECT_PREFIX
    TASK = TASK_PREFIX

    @property
    def prefix(self) -> str:
        return self.value


@total_ordering
class Identifier:
    """Immutable identifier tagged with the entity kind it belongs to.

    Not instantiated directly: use one of the concrete subclasses
    (``PersonId``, ``TagId``, ``ProjectId``, ``TaskId``).
    """

    kind: ClassVar[EntityKind]
    __slots__ = ("_ulid",)

    def __init__(self, value: Optional[ULID] = None):
        if type(self) is Identifier:
            raise TypeError("Identifier is abstract; use a kind-specific subclass")
        if value is not None and not isinstance(value, ULID):
            raise TypeError(f"Expected a ULID, got {type(value).__name__}")
        object.__setattr__(self, "_ulid", value if value is not None else ULID())

    @classmethod
    def new(cls: Type[IdT]) -> IdT:
        """Generate a fresh, time-ordered identifier."""
        return cls()

    @classmethod
    def parse(cls: Type[IdT], raw: str) -> IdT:
        """Parse ``"{prefix}-{token}"`` into an identifier of this kind.

        Args:
            raw: The canonical string form

        Returns:
            Identifier of the calling kind

        Raises:
            InvalidFormatError: If there is no separator
            WrongPrefixError: If the prefix belongs to another kind
            InvalidUlidError: If the token is not a valid ULID
        """
        if not isinstance(raw, str):
            raise InvalidFormatError(
                f"Expected a string identifier, got {type(raw).__name__}",
                raw, cls.kind.prefix,
            )

        prefix, separator, token = raw.partition(ID_SEPARATOR)
        if not separator:
            raise InvalidFormatError(
                f"Identifier '{raw}' is not of the form '{cls.kind.prefix}-<ulid>'",
                raw, cls.kind.prefix,
            )
        if prefix != cls.kind.prefix:
            raise WrongPrefixError(
                f"Identifier '{raw}' has prefix '{prefix}', expected '{cls.kind.prefix}'",
                raw, cls.kind.prefix, prefix,
            )

        normalized = token.upper()
        if not _ULID_PATTERN.match(normalized):
            raise InvalidUlidError(f"Identifier '{raw}' has an invalid ULID token", raw, cls.kind.prefix)
        try:
            value = ULID.from_str(normalized)
        except ValueError as e:
            raise InvalidUlidError(
                f"Identifier '{raw}' has an invalid ULID token: {e}", raw, cls.kind.prefix
            ) from e
        return cls(value)

    @property
    def prefix(self) -> str:
        return self.kind.prefix

    @property
    def token(self) -> str:
        """The 26 character ULID part of the identifier."""
        return str(self._ulid)

    @property
    def timestamp(self) -> datetime:
        """Creation time encoded in the ULID (UTC)."""
        return self._ulid.datetime

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __str__(self) -> str:
        return f"{self.kind.prefix}{ID_SEPARATOR}{self._ulid}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self}')"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Identifier):
            return NotImplemented
        return self.kind is other.kind and self._ulid == other._ulid

    def __hash__(self) -> int:
        return hash((self.kind.prefix, self._ulid.bytes))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Identifier):
            return NotImplemented
        if self.kind is not other.kind:
            raise TypeError(
                f"Cannot order {type(self).__name__} against {type(other).__name__}"
            )
        return self._ulid.bytes < other._ulid.bytes

    def __reduce__(self):
        return (type(self).parse, (str(self),))


class PersonId(Identifier):
    kind = EntityKind.PERSON
    __slots__ = ()


class TagId(Identifier):
    kind = EntityKind.TAG
    __slots__ = ()


class ProjectId(Identifier):
    kind = EntityKind.PROJECT
    __slots__ = ()


class TaskId(Identifier):
    kind = EntityKind.TASK
    __slots__ = ()


ID_TYPES: Dict[EntityKind, Type[Identifier]] = {
    EntityKind.PERSON: PersonId,
    EntityKind.TAG: TagId,
    EntityKind.PROJECT: ProjectId,
    EntityKind.TASK: TaskId,
}


def id_type_for(kind: EntityKind) -> Type[Identifier]:
    """Return the identifier class for an entity kind."""
    return ID_TYPES[EntityKind(kind)]


def require_id(id_type: Type[IdT], value: object) -> IdT:
    """Return ``value`` if it is an identifier of ``id_type``, else raise ``TypeError``."""
    if not isinstance(value, id_type):
        raise TypeError(f"Expected a {id_type.__name__}, got {type(value).__name__}")
    return value
