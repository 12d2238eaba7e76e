"""The ACL of one file or directory, editable and written back on every change."""

from __future__ import annotations

import grp
import os
import pwd
import stat
from collections.abc import Callable

from .permissions import AclEntry, Permissions
from .posix_acl import (
    AclFormatError,
    AclTag,
    RawAclEntry,
    delete_default_acl,
    parse_acl_text,
    read_acl,
    write_acl,
)


class ACLManagerError(Exception):
    """Raised when an ACL cannot be read, understood or stored."""


def _describe(error: OSError) -> str:
    return error.strerror or str(error)


def _user_name(uid: int) -> str | None:
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return None


def _group_name(gid: int) -> str | None:
    try:
        return grp.getgrgid(gid).gr_name
    except KeyError:
        return None


def _named(entry: RawAclEntry, lookup: Callable[[int], str | None]) -> AclEntry:
    name = lookup(entry.qualifier)
    if name is None:
        return AclEntry(f"({entry.qualifier})", entry.perms, entry.qualifier, valid_name=False)
    return AclEntry(name, entry.perms, entry.qualifier, valid_name=True)


def _set_generic(name: str, entries: list[AclEntry], perms: Permissions) -> None:
    for entry in entries:
        if entry.name == name:
            entry.perms = perms
            return
    entries.append(AclEntry(name, perms, valid_name=True))


def _remove_generic(name: str, entries: list[AclEntry]) -> None:
    entries[:] = [entry for entry in entries if entry.name != name]


class ACLManager:
    """Holds the access and default ACL of a path and commits each change to it."""

    def __init__(self, filename):
        self.filename = os.fspath(filename)
        self.owner_perms = Permissions()
        self.group_perms = Permissions()
        self.others_perms = Permissions()
        self.mask: Permissions | None = None
        self.user_acl: list[AclEntry] = []
        self.group_acl: list[AclEntry] = []
        self.default_user: Permissions | None = None
        self.default_group: Permissions | None = None
        self.default_others: Permissions | None = None
        self.default_mask: Permissions | None = None
        self.default_user_acl: list[AclEntry] = []
        self.default_group_acl: list[AclEntry] = []
        self._text_access = ""
        self._text_default = ""

        self._read_ownership()
        self._read_access_entries()
        if self.is_directory:
            self._read_default_entries()
        self._update_text()

    def _read_ownership(self) -> None:
        try:
            info = os.stat(self.filename)
        except OSError as error:
            raise ACLManagerError(_describe(error)) from error
        if not (stat.S_ISREG(info.st_mode) or stat.S_ISDIR(info.st_mode)):
            raise ACLManagerError("Only regular files or directories supported")
        self.is_directory = stat.S_ISDIR(info.st_mode)
        self.owner_uid = info.st_uid
        self.owner_name = _user_name(info.st_uid) or f"({info.st_uid})"
        self.group_name = _group_name(info.st_gid) or f"({info.st_gid})"

    def _read_access_entries(self) -> None:
        self.user_acl = []
        self.group_acl = []
        self.mask = None
        try:
            entries = read_acl(self.filename, default=False)
        except OSError as error:
            raise ACLManagerError(_describe(error)) from error
        except AclFormatError as error:
            raise ACLManagerError(str(error)) from error
        for entry in entries:
            if entry.tag is AclTag.USER:
                self.user_acl.append(_named(entry, _user_name))
            elif entry.tag is AclTag.GROUP:
                self.group_acl.append(_named(entry, _group_name))
            elif entry.tag is AclTag.MASK:
                self.mask = entry.perms
            elif entry.tag is AclTag.USER_OBJ:
                self.owner_perms = entry.perms
            elif entry.tag is AclTag.GROUP_OBJ:
                self.group_perms = entry.perms
            elif entry.tag is AclTag.OTHER:
                self.others_perms = entry.perms

    def _read_default_entries(self) -> None:
        self.default_user = self.default_group = None
        self.default_others = self.default_mask = None
        self.default_user_acl = []
        self.default_group_acl = []
        try:
            entries = read_acl(self.filename, default=True)
        except (OSError, AclFormatError):
            entries = []
        for entry in entries:
            if entry.tag is AclTag.USER:
                self.default_user_acl.append(_named(entry, _user_name))
            elif entry.tag is AclTag.GROUP:
                self.default_group_acl.append(_named(entry, _group_name))
            elif entry.tag is AclTag.USER_OBJ:
                self.default_user = entry.perms
            elif entry.tag is AclTag.GROUP_OBJ:
                self.default_group = entry.perms
            elif entry.tag is AclTag.OTHER:
                self.default_others = entry.perms
            elif entry.tag is AclTag.MASK:
                self.default_mask = entry.perms

    def _update_text(self) -> None:
        lines = [f"u::{self.owner_perms}\n"]
        lines += [f"u:{e.written_name()}:{e.perms}\n" for e in self.user_acl]
        lines.append(f"g::{self.group_perms}\n")
        lines += [f"g:{e.written_name()}:{e.perms}\n" for e in self.group_acl]
        if self.mask is not None:
            lines.append(f"m::{self.mask}\n")
        lines.append(f"o::{self.others_perms}\n")
        self._text_access = "".join(lines)

        lines = []
        if self.is_directory:
            if self.default_user is not None:
                lines.append(f"u::{self.default_user}\n")
            if self.default_group is not None:
                lines.append(f"g::{self.default_group}\n")
            if self.default_others is not None:
                lines.append(f"o::{self.default_others}\n")
            lines += [f"u:{e.written_name()}:{e.perms}\n" for e in self.default_user_acl]
            lines += [f"g:{e.written_name()}:{e.perms}\n" for e in self.default_group_acl]
            if self.default_mask is not None:
                lines.append(f"m::{self.default_mask}\n")
        self._text_default = "".join(lines)

    def access_text(self) -> str:
        """The access ACL in textual form."""
        return self._text_access

    def default_text(self) -> str:
        """The default ACL in textual form; empty when there is none."""
        return self._text_default

    def _update_access(self) -> None:
        if self.user_acl or self.group_acl:
            if self.mask is None:
                self.mask = Permissions.from_bits(7)
        else:
            self.mask = None
        self._update_text()
        self.commit_changes_to_file()

    def _fill_needed_default(self) -> None:
        if self.default_user is None:
            self.default_user = self.owner_perms
        if self.default_group is None:
            self.default_group = self.group_perms
        if self.default_others is None:
            self.default_others = self.others_perms
        if self.default_mask is None:
            self.default_mask = Permissions.from_bits(7)

    def _update_default(self) -> None:
        if self.default_user_acl or self.default_group_acl:
            self._fill_needed_default()
        self._update_text()
        self.commit_changes_to_file()

    def modify_acl_user(self, username: str, perms: Permissions) -> None:
        _set_generic(username, self.user_acl, perms)
        self._update_access()

    def modify_acl_group(self, groupname: str, perms: Permissions) -> None:
        _set_generic(groupname, self.group_acl, perms)
        self._update_access()

    def modify_acl_default_user(self, username: str, perms: Permissions) -> None:
        _set_generic(username, self.default_user_acl, perms)
        self._update_default()

    def modify_acl_default_group(self, groupname: str, perms: Permissions) -> None:
        _set_generic(groupname, self.default_group_acl, perms)
        self._update_default()

    def remove_acl_user(self, username: str) -> None:
        _remove_generic(username, self.user_acl)
        self._update_access()

    def remove_acl_group(self, groupname: str) -> None:
        _remove_generic(groupname, self.group_acl)
        self._update_access()

    def remove_acl_user_default(self, username: str) -> None:
        _remove_generic(username, self.default_user_acl)
        self._update_default()

    def remove_acl_group_default(self, groupname: str) -> None:
        _remove_generic(groupname, self.default_group_acl)
        self._update_default()

    def modify_owner_perms(self, perms: Permissions) -> None:
        self.owner_perms = perms
        self._update_access()

    def modify_group_perms(self, perms: Permissions) -> None:
        self.group_perms = perms
        self._update_access()

    def modify_others_perms(self, perms: Permissions) -> None:
        self.others_perms = perms
        self._update_access()

    def modify_mask(self, perms: Permissions) -> None:
        self.mask = perms
        self._update_access()

    def modify_owner_perms_default(self, perms: Permissions) -> None:
        self.default_user = perms
        self._fill_needed_default()
        self._update_default()

    def modify_group_perms_default(self, perms: Permissions) -> None:
        self.default_group = perms
        self._fill_needed_default()
        self._update_default()

    def modify_others_perms_default(self, perms: Permissions) -> None:
        self.default_others = perms
        self._fill_needed_default()
        self._update_default()

    def modify_mask_default(self, perms: Permissions) -> None:
        self.default_mask = perms
        self._fill_needed_default()
        self._update_default()

    def clear_default_acl(self) -> None:
        """Drop every default entry."""
        self.default_user = self.default_group = None
        self.default_others = self.default_mask = None
        self.default_user_acl.clear()
        self.default_group_acl.clear()
        self._update_default()

    def clear_all_acl(self) -> None:
        """Drop named access entries, the mask and the default owner entries."""
        self.user_acl.clear()
        self.group_acl.clear()
        self.mask = None
        self.default_user = self.default_group = None
        self.default_others = self.default_mask = None
        self._update_text()
        self.commit_changes_to_file()

    def create_default_acl(self) -> None:
        """Create a default ACL seeded from the access permissions."""
        self._fill_needed_default()
        self._update_default()

    def commit_changes_to_file(self) -> None:
        """Write the textual ACLs to the file."""
        try:
            access = parse_acl_text(self._text_access)
        except AclFormatError as error:
            raise ACLManagerError("Textual representation of the ACL is wrong") from error
        try:
            write_acl(self.filename, access, default=False)
        except OSError as error:
            raise ACLManagerError(_describe(error)) from error

        if not self.is_directory:
            return
        try:
            delete_default_acl(self.filename)
        except OSError as error:
            raise ACLManagerError(_describe(error)) from error
        if self._text_default:
            try:
                default = parse_acl_text(self._text_default)
            except AclFormatError as error:
                raise ACLManagerError(
                    "Default textual representation of the ACL is wrong"
                ) from error
            try:
                write_acl(self.filename, default, default=True)
            except OSError as error:
                raise ACLManagerError(_describe(error)) from error

    @staticmethod
    def set_file_acl(filename, access_acl_text: str, default_acl_text: str) -> None:
        """Replace the ACLs of a file with the given textual forms."""
        target = ACLManager(filename)
        target._text_access = access_acl_text
        target._text_default = default_acl_text
        target.commit_changes_to_file()