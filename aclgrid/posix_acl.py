"""Reading and writing POSIX ACLs through their extended-attribute encoding."""

from __future__ import annotations

import enum
import errno
import grp
import os
import pwd
import re
import stat
import struct
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass

from .permissions import Permissions

ACCESS_XATTR = "system.posix_acl_access"
DEFAULT_XATTR = "system.posix_acl_default"

_VERSION = 2
_UNDEFINED_ID = 0xFFFFFFFF
_HEADER = struct.Struct("<I")
_ENTRY = struct.Struct("<HHI")

_NO_DATA = {code for code in (getattr(errno, "ENODATA", None), getattr(errno, "ENOATTR", None)) if code}
_UNSUPPORTED = {code for code in (getattr(errno, "ENOTSUP", None), getattr(errno, "EOPNOTSUPP", None)) if code}


class AclTag(enum.IntEnum):
    """Tag of an ACL entry, with its on-disk value."""

    USER_OBJ = 0x01
    USER = 0x02
    GROUP_OBJ = 0x04
    GROUP = 0x08
    MASK = 0x10
    OTHER = 0x20


@dataclass(frozen=True)
class RawAclEntry:
    """One ACL entry as stored: a tag, permissions and an optional numeric id."""

    tag: AclTag
    perms: Permissions
    qualifier: int | None = None


class AclFormatError(ValueError):
    """Raised when binary or textual ACL data cannot be understood."""


def _sort_key(entry: RawAclEntry) -> tuple[int, int]:
    return int(entry.tag), -1 if entry.qualifier is None else entry.qualifier


def decode_acl(data: bytes) -> list[RawAclEntry]:
    """Decode the extended-attribute form of an ACL."""
    data = bytes(data)
    if len(data) < _HEADER.size:
        raise AclFormatError("ACL data too short")
    (version,) = _HEADER.unpack_from(data)
    if version != _VERSION:
        raise AclFormatError(f"unsupported ACL version {version}")
    body = data[_HEADER.size:]
    if len(body) % _ENTRY.size:
        raise AclFormatError("ACL data has a truncated entry")
    entries = []
    for tag_value, perm_value, ident in _ENTRY.iter_unpack(body):
        try:
            tag = AclTag(tag_value)
        except ValueError:
            raise AclFormatError(f"unknown ACL tag {tag_value:#x}") from None
        if perm_value & ~0o7:
            raise AclFormatError(f"invalid ACL permissions {perm_value:#o}")
        qualifier = ident if tag in (AclTag.USER, AclTag.GROUP) else None
        entries.append(RawAclEntry(tag, Permissions.from_bits(perm_value), qualifier))
    return entries


def encode_acl(entries: Iterable[RawAclEntry]) -> bytes:
    """Encode entries in the extended-attribute form, sorted as the kernel expects."""
    parts = [_HEADER.pack(_VERSION)]
    for entry in sorted(entries, key=_sort_key):
        ident = _UNDEFINED_ID if entry.qualifier is None else entry.qualifier
        parts.append(_ENTRY.pack(int(entry.tag), entry.perms.to_bits(), ident))
    return b"".join(parts)


_TAG_WORDS = {
    "u": AclTag.USER_OBJ,
    "user": AclTag.USER_OBJ,
    "g": AclTag.GROUP_OBJ,
    "group": AclTag.GROUP_OBJ,
    "m": AclTag.MASK,
    "mask": AclTag.MASK,
    "o": AclTag.OTHER,
    "other": AclTag.OTHER,
}


def _parse_perms(text: str) -> Permissions:
    reading = writing = execution = False
    for char in text:
        if char == "r":
            reading = True
        elif char == "w":
            writing = True
        elif char == "x":
            execution = True
        elif char != "-":
            raise AclFormatError(f"invalid permission character {char!r}")
    return Permissions(reading, writing, execution)


def _resolve(name: str, lookup) -> int:
    try:
        return lookup(name)
    except KeyError:
        if name.isdigit():
            return int(name)
        raise AclFormatError(f"unknown name {name!r}") from None


def parse_acl_text(text: str) -> list[RawAclEntry]:
    """Parse the short textual ACL form (lines such as ``u:name:rwx``)."""
    entries = []
    for raw in re.split(r"[\n,]", text):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        parts = [part.strip() for part in line.split(":")]
        if len(parts) != 3:
            raise AclFormatError(f"malformed ACL entry {line!r}")
        tag_word, qualifier_text, perm_text = parts
        tag = _TAG_WORDS.get(tag_word)
        if tag is None:
            raise AclFormatError(f"unknown ACL tag {tag_word!r}")
        perms = _parse_perms(perm_text)
        qualifier = None
        if qualifier_text:
            if tag is AclTag.USER_OBJ:
                tag = AclTag.USER
                qualifier = _resolve(qualifier_text, lambda n: pwd.getpwnam(n).pw_uid)
            elif tag is AclTag.GROUP_OBJ:
                tag = AclTag.GROUP
                qualifier = _resolve(qualifier_text, lambda n: grp.getgrnam(n).gr_gid)
            else:
                raise AclFormatError(f"entry {line!r} cannot have a qualifier")
        entries.append(RawAclEntry(tag, perms, qualifier))
    return entries


def _validate(entries: list[RawAclEntry]) -> None:
    counts = Counter(entry.tag for entry in entries)
    keys = Counter(_sort_key(entry) for entry in entries)
    named = counts[AclTag.USER] + counts[AclTag.GROUP]
    valid = (
        counts[AclTag.USER_OBJ] == 1
        and counts[AclTag.GROUP_OBJ] == 1
        and counts[AclTag.OTHER] == 1
        and counts[AclTag.MASK] <= 1
        and (named == 0 or counts[AclTag.MASK] == 1)
        and all(count == 1 for count in keys.values())
    )
    if not valid:
        raise OSError(errno.EINVAL, os.strerror(errno.EINVAL))


def _unsupported() -> OSError:
    return OSError(errno.ENOTSUP, os.strerror(errno.ENOTSUP))


def _getxattr(path, attribute: str) -> bytes:
    if not hasattr(os, "getxattr"):
        raise _unsupported()
    return os.getxattr(path, attribute)


def _setxattr(path, attribute: str, value: bytes) -> None:
    if not hasattr(os, "setxattr"):
        raise _unsupported()
    os.setxattr(path, attribute, value)


def _removexattr(path, attribute: str) -> None:
    if not hasattr(os, "removexattr"):
        raise _unsupported()
    os.removexattr(path, attribute)


def _from_mode(mode: int) -> list[RawAclEntry]:
    return [
        RawAclEntry(AclTag.USER_OBJ, Permissions.from_bits((mode >> 6) & 0o7)),
        RawAclEntry(AclTag.GROUP_OBJ, Permissions.from_bits((mode >> 3) & 0o7)),
        RawAclEntry(AclTag.OTHER, Permissions.from_bits(mode & 0o7)),
    ]


def read_acl(path, default: bool = False) -> list[RawAclEntry]:
    """Read the access ACL (derived from the mode if none is stored) or the default ACL."""
    attribute = DEFAULT_XATTR if default else ACCESS_XATTR
    try:
        data = _getxattr(path, attribute)
    except OSError as error:
        if error.errno not in _NO_DATA | _UNSUPPORTED:
            raise
        return [] if default else _from_mode(os.stat(path).st_mode)
    return decode_acl(data)


def _remove(path, attribute: str, ignored: set[int]) -> None:
    try:
        _removexattr(path, attribute)
    except OSError as error:
        if error.errno not in ignored:
            raise


def write_acl(path, entries: Iterable[RawAclEntry], default: bool = False) -> None:
    """Store an ACL; a minimal access ACL is stored as plain mode bits."""
    entries = list(entries)
    if default and not entries:
        delete_default_acl(path)
        return
    _validate(entries)
    if not default and len(entries) == 3:
        _remove(path, ACCESS_XATTR, _NO_DATA | _UNSUPPORTED)
        bits = {entry.tag: entry.perms.to_bits() for entry in entries}
        special = stat.S_IMODE(os.stat(path).st_mode) & 0o7000
        os.chmod(
            path,
            special | bits[AclTag.USER_OBJ] << 6 | bits[AclTag.GROUP_OBJ] << 3 | bits[AclTag.OTHER],
        )
        return
    attribute = DEFAULT_XATTR if default else ACCESS_XATTR
    _setxattr(path, attribute, encode_acl(entries))


def delete_default_acl(path) -> None:
    """Remove the default ACL of a directory; having none is not an error."""
    _remove(path, DEFAULT_XATTR, _NO_DATA)