"""Filling an ACL list from the ACL held by a manager."""

from __future__ import annotations

from .acl_list import DEFAULT_MASK_LABEL, DEFAULT_OTHER_LABEL, MASK_LABEL, OTHER_LABEL, AclListModel
from .permissions import ElementKind, Permissions

_FULL = Permissions.from_bits(7)


def effective_masks(manager) -> tuple[Permissions, Permissions]:
    """The access and default masks, each full permissions when absent."""
    effective = manager.mask if manager.mask is not None else _FULL
    default_mask = getattr(manager, "default_mask", None)
    effective_default = default_mask if default_mask is not None else _FULL
    return effective, effective_default


def _add(model: AclListModel, title: str, perms: Permissions, kind: ElementKind, removable: bool):
    adder = model.add_removable if removable else model.add_non_removable
    adder(title, perms.reading, perms.writing, perms.execution, kind)


def fill_acl_list(model: AclListModel, manager, include_default_entries: bool) -> None:
    """Append the rows of the manager's ACL to the model, in display order."""
    _add(model, manager.owner_name, manager.owner_perms, ElementKind.USER, False)
    for entry in manager.user_acl:
        _add(model, entry.name, entry.perms, ElementKind.ACL_USER, True)

    _add(model, manager.group_name, manager.group_perms, ElementKind.GROUP, False)
    for entry in manager.group_acl:
        _add(model, entry.name, entry.perms, ElementKind.ACL_GROUP, True)

    if manager.mask is not None:
        _add(model, MASK_LABEL, manager.mask, ElementKind.MASK, False)
    _add(model, OTHER_LABEL, manager.others_perms, ElementKind.OTHERS, False)

    model.can_edit_default = manager.is_directory
    model.editing_default = False

    if not (include_default_entries and manager.is_directory):
        return

    there_is_default_acl = False
    if manager.default_user is not None:
        _add(model, manager.owner_name, manager.default_user, ElementKind.DEFAULT_USER, False)
        there_is_default_acl = True

    for entry in manager.default_user_acl:
        _add(model, entry.name, entry.perms, ElementKind.DEFAULT_ACL_USER, True)
        there_is_default_acl = True

    if manager.default_group is not None:
        _add(model, manager.group_name, manager.default_group, ElementKind.DEFAULT_GROUP, False)
        there_is_default_acl = True

    for entry in manager.default_group_acl:
        _add(model, entry.name, entry.perms, ElementKind.DEFAULT_ACL_GROUP, True)
        there_is_default_acl = True

    if manager.default_mask is not None:
        _add(model, DEFAULT_MASK_LABEL, manager.default_mask, ElementKind.DEFAULT_MASK, False)
        there_is_default_acl = True

    if manager.default_others is not None:
        _add(model, DEFAULT_OTHER_LABEL, manager.default_others, ElementKind.DEFAULT_OTHERS, False)
        there_is_default_acl = True

    model.editing_default = there_is_default_acl