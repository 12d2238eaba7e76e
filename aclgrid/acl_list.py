"""The ordered list of ACL rows shown to the user, and the edits made on it."""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass

from .permissions import ElementKind, Permissions

MASK_LABEL = "Mask"
OTHER_LABEL = "Other"
DEFAULT_MASK_LABEL = "Default Mask"
DEFAULT_OTHER_LABEL = "Default Other"

_PERMISSION_FIELDS = {"r": "reading", "w": "writing", "x": "execution"}

_DEFAULT_KINDS = frozenset(kind for kind in ElementKind if kind.is_default())


class ListMode(enum.Enum):
    """What a list may show: anything, only directory entries or only file entries."""

    DEFAULT = enum.auto()
    ONLY_DIRECTORY = enum.auto()
    ONLY_FILE = enum.auto()


@dataclass
class AclItem:
    """One row of the list: a participant, its permissions and whether masking hides them."""

    kind: ElementKind
    name: str
    reading: bool = False
    writing: bool = False
    execution: bool = False
    removable: bool = False
    read_ineffective: bool = False
    write_ineffective: bool = False
    execute_ineffective: bool = False

    @property
    def perms(self) -> Permissions:
        return Permissions(self.reading, self.writing, self.execution)

    def set_permission(self, permission: str, value: bool) -> None:
        """Set one permission, named ``r``, ``w`` or ``x``."""
        try:
            field = _PERMISSION_FIELDS[permission]
        except KeyError:
            raise ValueError(f"unknown permission {permission!r}") from None
        setattr(self, field, bool(value))


class AclListModel:
    """Rows of an ACL in display order, kept consistent as entries come and go."""

    def __init__(self, mode: ListMode = ListMode.DEFAULT):
        self.mode = mode
        self._items: list[AclItem] = []
        self.readonly = False
        self.can_edit_default = mode is ListMode.ONLY_DIRECTORY
        self.editing_default = False
        self.exist_ineffective_permissions = False

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[AclItem]:
        return iter(self._items)

    def clear(self) -> None:
        """Remove every row."""
        self._items.clear()

    def find(self, name: str, kind: ElementKind) -> int | None:
        """Position of the row with this name and kind, or None."""
        for position, item in enumerate(self._items):
            if item.kind is kind and item.name == name:
                return position
        return None

    def add_non_removable(self, title, reading, writing, execution, kind) -> None:
        self._items.append(AclItem(kind, title, reading, writing, execution, removable=False))

    def add_removable(self, title, reading, writing, execution, kind) -> None:
        self._items.append(AclItem(kind, title, reading, writing, execution, removable=True))

    def _insert_before(
        self, name: str, new_kind: ElementKind, before_kind: ElementKind, removable: bool
    ) -> None:
        if self.find(name, new_kind) is not None:
            return
        position = next(
            (index for index, item in enumerate(self._items) if item.kind is before_kind),
            None,
        )
        if position is None:
            return
        self._items.insert(position, AclItem(new_kind, name, True, True, True, removable))

    def _populate_required_nondefault_entries(self) -> None:
        self._insert_before(MASK_LABEL, ElementKind.MASK, ElementKind.OTHERS, removable=False)

    def insert_user(self, name: str) -> None:
        self._populate_required_nondefault_entries()
        self._insert_before(name, ElementKind.ACL_USER, ElementKind.GROUP, removable=True)

    def insert_group(self, name: str) -> None:
        self._populate_required_nondefault_entries()
        self._insert_before(name, ElementKind.ACL_GROUP, ElementKind.MASK, removable=True)

    def insert_default_user(self, name: str) -> None:
        self.populate_required_default_entries()
        self._insert_before(
            name, ElementKind.DEFAULT_ACL_USER, ElementKind.DEFAULT_GROUP, removable=True
        )

    def insert_default_group(self, name: str) -> None:
        self.populate_required_default_entries()
        self._insert_before(
            name, ElementKind.DEFAULT_ACL_GROUP, ElementKind.DEFAULT_MASK, removable=True
        )

    def populate_required_default_entries(self) -> None:
        """Add the default owner, group, mask and other rows unless already present."""
        user_owner = group_owner = ""
        for item in self._items:
            if item.kind is ElementKind.USER:
                user_owner = item.name
            elif item.kind is ElementKind.GROUP:
                group_owner = item.name
            elif item.kind is ElementKind.DEFAULT_OTHERS:
                return

        self.add_non_removable(DEFAULT_OTHER_LABEL, True, True, True, ElementKind.DEFAULT_OTHERS)
        self._insert_before(
            DEFAULT_MASK_LABEL, ElementKind.DEFAULT_MASK, ElementKind.DEFAULT_OTHERS, removable=False
        )
        self._insert_before(
            group_owner, ElementKind.DEFAULT_GROUP, ElementKind.DEFAULT_MASK, removable=False
        )
        self._insert_before(
            user_owner, ElementKind.DEFAULT_USER, ElementKind.DEFAULT_GROUP, removable=False
        )
        self.editing_default = True

    def remove_all_default_entries(self) -> None:
        """Drop every row that belongs to the default ACL."""
        self._items = [item for item in self._items if item.kind not in _DEFAULT_KINDS]

    def remove_entry(self, name: str, kind: ElementKind) -> None:
        """Remove one row, then any mask that is no longer needed."""
        position = self.find(name, kind)
        if position is not None:
            del self._items[position]
        self.remove_unneeded_entries()

    def _nondefault_acl_is_empty(self) -> bool:
        return not any(
            item.kind in (ElementKind.ACL_USER, ElementKind.ACL_GROUP) for item in self._items
        )

    def remove_unneeded_entries(self) -> None:
        """Remove the access mask when no named user or group remains."""
        if not self._nondefault_acl_is_empty():
            return
        for position, item in enumerate(self._items):
            if item.kind is ElementKind.MASK:
                del self._items[position]
                return