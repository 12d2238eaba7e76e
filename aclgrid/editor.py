"""Editing the ACL of one opened file or directory through its list of rows."""

from __future__ import annotations

import os
from collections.abc import Callable

from .acl_list import AclListModel, ListMode
from .list_analysis import textual_representation, update_acl_ineffective
from .list_filler import effective_masks, fill_acl_list
from .manager import ACLManager, ACLManagerError
from .permissions import ElementKind, Permissions
from .recursive import apply_recursively as _apply_tree

_FULL = Permissions.from_bits(7)

_TO_DEFAULT = {
    ElementKind.ACL_USER: ElementKind.DEFAULT_ACL_USER,
    ElementKind.ACL_GROUP: ElementKind.DEFAULT_ACL_GROUP,
}


class ACLEditorError(Exception):
    """Raised when an edit of the opened ACL cannot be carried out."""


class ACLEditor:
    """Keeps an opened path, its ACL and the rows that show it in step."""

    def __init__(self):
        self.manager: ACLManager | None = None
        self.filename: str | None = None
        self.model = AclListModel(ListMode.DEFAULT)
        self.active = False
        self.readonly = False
        self.can_edit_enclosed_files = False

    def _require_manager(self) -> ACLManager:
        if self.manager is None:
            raise ACLEditorError("No file opened")
        return self.manager

    def open_file(self, filename) -> bool:
        """Open a path; on failure the editor is left empty and inactive."""
        try:
            manager = ACLManager(filename)
        except ACLManagerError:
            self.manager = None
            self.filename = None
            self.active = False
            self.model.clear()
            self.can_edit_enclosed_files = False
            return False
        self.manager = manager
        self._redraw()
        self.active = True
        self._check_editable()
        self.filename = manager.filename
        return True

    def opened_file(self) -> bool:
        """Whether a path is currently open."""
        return self.manager is not None

    def is_directory(self) -> bool:
        """Whether the opened path is a directory; False when nothing is open."""
        return self.manager is not None and self.manager.is_directory

    def _check_editable(self) -> None:
        uid = os.getuid()
        self.readonly = uid != 0 and uid != self.manager.owner_uid
        self.model.readonly = self.readonly

    def _update_ineffective(self) -> None:
        effective, effective_default = effective_masks(self.manager)
        update_acl_ineffective(self.model, effective, effective_default)

    def _redraw(self) -> None:
        self.model.clear()
        fill_acl_list(self.model, self.manager, include_default_entries=True)
        self.can_edit_enclosed_files = self.manager.is_directory
        self._update_ineffective()

    def add_acl_entry(self, name: str, kind: ElementKind, is_default: bool = False) -> int | None:
        """Add a named user or group with full permissions; return its row position."""
        manager = self._require_manager()
        if is_default:
            kind = _TO_DEFAULT.get(kind, kind)
        actions = {
            ElementKind.ACL_USER: manager.modify_acl_user,
            ElementKind.ACL_GROUP: manager.modify_acl_group,
            ElementKind.DEFAULT_ACL_USER: manager.modify_acl_default_user,
            ElementKind.DEFAULT_ACL_GROUP: manager.modify_acl_default_group,
        }
        try:
            action = actions.get(kind)
            if action is not None:
                action(name, _FULL)
            self._redraw()
        except ACLManagerError as error:
            raise ACLEditorError(f"Could not add ACL entry: {error}") from error
        return self.model.find(name, kind)

    def remove_acl(self, name: str, kind: ElementKind) -> bool:
        """Remove a named entry; return False when the kind cannot be removed."""
        manager = self._require_manager()
        actions = {
            ElementKind.ACL_USER: manager.remove_acl_user,
            ElementKind.ACL_GROUP: manager.remove_acl_group,
            ElementKind.DEFAULT_ACL_USER: manager.remove_acl_user_default,
            ElementKind.DEFAULT_ACL_GROUP: manager.remove_acl_group_default,
        }
        action = actions.get(kind)
        if action is None:
            return False
        try:
            action(name)
        except ACLManagerError as error:
            raise ACLEditorError(f"Could not remove ACL entry: {error}") from error
        self.model.remove_entry(name, kind)
        return True

    def update_acl_entry(
        self, kind: ElementKind, name: str, reading: bool, writing: bool, execution: bool
    ) -> None:
        """Change the permissions of one entry and refresh the masked flags."""
        manager = self._require_manager()
        perms = Permissions(bool(reading), bool(writing), bool(execution))
        unnamed = {
            ElementKind.MASK: manager.modify_mask,
            ElementKind.DEFAULT_MASK: manager.modify_mask_default,
            ElementKind.USER: manager.modify_owner_perms,
            ElementKind.GROUP: manager.modify_group_perms,
            ElementKind.OTHERS: manager.modify_others_perms,
            ElementKind.DEFAULT_USER: manager.modify_owner_perms_default,
            ElementKind.DEFAULT_GROUP: manager.modify_group_perms_default,
            ElementKind.DEFAULT_OTHERS: manager.modify_others_perms_default,
        }
        named = {
            ElementKind.ACL_USER: manager.modify_acl_user,
            ElementKind.ACL_GROUP: manager.modify_acl_group,
            ElementKind.DEFAULT_ACL_USER: manager.modify_acl_default_user,
            ElementKind.DEFAULT_ACL_GROUP: manager.modify_acl_default_group,
        }
        try:
            if kind in unnamed:
                unnamed[kind](perms)
            else:
                named[kind](name, perms)
        except ACLManagerError as error:
            raise ACLEditorError(f"Could not modify ACL entry: {error}") from error
        position = self.model.find(name, kind)
        if position is not None:
            item = list(self.model)[position]
            item.reading, item.writing, item.execution = perms.reading, perms.writing, perms.execution
        self._update_ineffective()

    def toggle_default_acl(self, enabled: bool) -> bool:
        """Create or drop the default ACL; return whether the change was stored."""
        manager = self._require_manager()
        self.model.editing_default = bool(enabled)
        try:
            if enabled:
                manager.create_default_acl()
            else:
                manager.clear_default_acl()
        except ACLManagerError:
            return False
        self._redraw()
        return True

    def enclosed_texts(self) -> tuple[str, str, str]:
        """Textual ACLs for enclosed items: directory access, directory default, file access."""
        manager = self._require_manager()
        effective, effective_default = effective_masks(manager)

        files = AclListModel(ListMode.ONLY_FILE)
        fill_acl_list(files, manager, include_default_entries=False)
        update_acl_ineffective(files, effective, effective_default)
        files.can_edit_default = False

        directories = AclListModel(ListMode.ONLY_DIRECTORY)
        fill_acl_list(directories, manager, include_default_entries=True)
        update_acl_ineffective(directories, effective, effective_default)
        directories.can_edit_default = True

        directory_access, directory_default = textual_representation(directories)
        file_access, _ = textual_representation(files)
        return directory_access, directory_default, file_access

    def apply_recursively(
        self,
        directory_access_text: str,
        directory_default_text: str,
        file_access_text: str,
        progress: Callable[[float], None] | None = None,
    ) -> list[tuple[str, str]]:
        """Apply ACLs to the opened directory and everything below it, then reopen it."""
        self._require_manager()
        if not self.is_directory():
            raise ACLEditorError("Enclosed files can only be edited for a directory")
        root = self.filename
        self.active = False
        try:
            failures = _apply_tree(
                root, directory_access_text, directory_default_text, file_access_text, progress
            )
        finally:
            self.open_file(root)
        return failures