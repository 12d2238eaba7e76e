"""Permission triples, entry kinds and named ACL entries."""

from __future__ import annotations

import enum
from dataclasses import dataclass


@dataclass(frozen=True)
class Permissions:
    """A read/write/execute permission triple."""

    reading: bool = False
    writing: bool = False
    execution: bool = False

    @classmethod
    def from_bits(cls, bits: int) -> Permissions:
        """Build permissions from an octal digit (4 = read, 2 = write, 1 = execute)."""
        if not 0 <= bits <= 7:
            raise ValueError(f"permission bits out of range: {bits!r}")
        return cls(bool(bits & 4), bool(bits & 2), bool(bits & 1))

    def to_bits(self) -> int:
        """Return the permissions as an octal digit."""
        return (4 if self.reading else 0) | (2 if self.writing else 0) | (1 if self.execution else 0)

    def __str__(self) -> str:
        return (
            ("r" if self.reading else "-")
            + ("w" if self.writing else "-")
            + ("x" if self.execution else "-")
        )


class ElementKind(enum.Enum):
    """The kind of a row in an ACL listing."""

    USER = enum.auto()
    GROUP = enum.auto()
    OTHERS = enum.auto()
    ACL_USER = enum.auto()
    ACL_GROUP = enum.auto()
    MASK = enum.auto()
    DEFAULT_USER = enum.auto()
    DEFAULT_GROUP = enum.auto()
    DEFAULT_OTHERS = enum.auto()
    DEFAULT_ACL_USER = enum.auto()
    DEFAULT_ACL_GROUP = enum.auto()
    DEFAULT_MASK = enum.auto()

    def is_default(self) -> bool:
        """Whether this kind belongs to the default ACL."""
        return self.name.startswith("DEFAULT_")


@dataclass
class AclEntry:
    """A named user or group entry of an ACL."""

    name: str
    perms: Permissions
    qualifier: int | None = None
    valid_name: bool = True

    @property
    def reading(self) -> bool:
        return self.perms.reading

    @property
    def writing(self) -> bool:
        return self.perms.writing

    @property
    def execution(self) -> bool:
        return self.perms.execution

    def written_name(self) -> str:
        """The name used in the textual form: the name if known, else the numeric id."""
        if self.valid_name:
            return self.name
        return str(self.qualifier)


def permission_to_str(perms: Permissions) -> str:
    """Render permissions in the rwx form used by ACL text."""
    return str(perms)