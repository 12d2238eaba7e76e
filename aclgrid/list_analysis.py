"""Derived views of an ACL list: masked permissions, textual form and masks."""

from __future__ import annotations

from .acl_list import AclItem, AclListModel
from .permissions import ElementKind, Permissions

_FULL = Permissions.from_bits(7)

_MASKED_BY_ACCESS = frozenset({ElementKind.GROUP, ElementKind.ACL_USER, ElementKind.ACL_GROUP})
_MASKED_BY_DEFAULT = frozenset(
    {ElementKind.DEFAULT_GROUP, ElementKind.DEFAULT_ACL_USER, ElementKind.DEFAULT_ACL_GROUP}
)

_ACCESS_PREFIX = {
    ElementKind.USER: "u",
    ElementKind.ACL_USER: "u",
    ElementKind.GROUP: "g",
    ElementKind.ACL_GROUP: "g",
    ElementKind.MASK: "m",
    ElementKind.OTHERS: "o",
}
_DEFAULT_PREFIX = {
    ElementKind.DEFAULT_USER: "u",
    ElementKind.DEFAULT_ACL_USER: "u",
    ElementKind.DEFAULT_GROUP: "g",
    ElementKind.DEFAULT_ACL_GROUP: "g",
    ElementKind.DEFAULT_MASK: "m",
    ElementKind.DEFAULT_OTHERS: "o",
}
_NAMED_KINDS = frozenset(
    {
        ElementKind.ACL_USER,
        ElementKind.ACL_GROUP,
        ElementKind.DEFAULT_ACL_USER,
        ElementKind.DEFAULT_ACL_GROUP,
    }
)


def _apply_mask(item: AclItem, mask: Permissions) -> bool:
    item.read_ineffective = not mask.reading
    item.write_ineffective = not mask.writing
    item.execute_ineffective = not mask.execution
    return (
        (item.read_ineffective and item.reading)
        or (item.write_ineffective and item.writing)
        or (item.execute_ineffective and item.execution)
    )


def update_acl_ineffective(
    model: AclListModel, effective: Permissions, effective_default: Permissions
) -> bool:
    """Mark the permissions hidden by the masks; return whether any granted one is hidden."""
    found = False
    for item in model:
        if item.kind in _MASKED_BY_ACCESS:
            found = _apply_mask(item, effective) or found
        elif item.kind in _MASKED_BY_DEFAULT:
            found = _apply_mask(item, effective_default) or found
    model.exist_ineffective_permissions = found
    return found


def textual_representation(model: AclListModel) -> tuple[str, str]:
    """The access and default ACL of the list in textual form, in row order."""
    access: list[str] = []
    default: list[str] = []
    for item in model:
        if item.kind in _ACCESS_PREFIX:
            target, prefix = access, _ACCESS_PREFIX[item.kind]
        else:
            target, prefix = default, _DEFAULT_PREFIX[item.kind]
        name = item.name if item.kind in _NAMED_KINDS else ""
        target.append(f"{prefix}:{name}:{item.perms}\n")
    return "".join(access), "".join(default)


def _first_of_kind(model: AclListModel, kind: ElementKind) -> Permissions:
    for item in model:
        if item.kind is kind:
            return item.perms
    return _FULL


def mask_permissions(model: AclListModel) -> Permissions:
    """Permissions of the access mask row, full permissions if there is none."""
    return _first_of_kind(model, ElementKind.MASK)


def default_mask_permissions(model: AclListModel) -> Permissions:
    """Permissions of the default mask row, full permissions if there is none."""
    return _first_of_kind(model, ElementKind.DEFAULT_MASK)