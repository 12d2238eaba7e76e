import pytest

from aclgrid.acl_list import AclListModel
from aclgrid.list_analysis import (
    default_mask_permissions,
    mask_permissions,
    textual_representation,
    update_acl_ineffective,
)
from aclgrid.permissions import ElementKind, Permissions

FULL = Permissions.from_bits(7)


def _model():
    model = AclListModel()
    model.add_non_removable("alice", True, True, False, ElementKind.USER)
    model.add_removable("bob", True, False, False, ElementKind.ACL_USER)
    model.add_non_removable("staff", True, False, True, ElementKind.GROUP)
    model.add_removable("devs", True, True, True, ElementKind.ACL_GROUP)
    model.add_non_removable("Mask", True, False, True, ElementKind.MASK)
    model.add_non_removable("Other", False, False, False, ElementKind.OTHERS)
    return model


def _with_defaults(model):
    model.add_non_removable("alice", True, True, True, ElementKind.DEFAULT_USER)
    model.add_removable("carol", False, True, False, ElementKind.DEFAULT_ACL_USER)
    model.add_non_removable("staff", True, False, False, ElementKind.DEFAULT_GROUP)
    model.add_removable("ops", True, False, False, ElementKind.DEFAULT_ACL_GROUP)
    model.add_non_removable("Default Mask", True, False, False, ElementKind.DEFAULT_MASK)
    model.add_non_removable("Default Other", True, False, False, ElementKind.DEFAULT_OTHERS)
    return model


def test_textual_representation_access_only():
    access, default = textual_representation(_model())
    assert access == "u::rw-\nu:bob:r--\ng::r-x\ng:devs:rwx\nm::r-x\no::---\n"
    assert default == ""


def test_textual_representation_with_defaults():
    access, default = textual_representation(_with_defaults(_model()))
    assert access.startswith("u::rw-\n")
    assert default == "u::rwx\nu:carol:-w-\ng::r--\ng:ops:r--\nm::r--\no::r--\n"


def test_textual_representation_empty_model():
    assert textual_representation(AclListModel()) == ("", "")


def test_mask_permissions_reads_mask_row():
    assert mask_permissions(_model()) == Permissions(True, False, True)


def test_mask_permissions_full_when_absent():
    model = AclListModel()
    model.add_non_removable("alice", False, False, False, ElementKind.USER)
    assert mask_permissions(model) == FULL
    assert default_mask_permissions(model) == FULL


def test_default_mask_permissions():
    model = _with_defaults(_model())
    assert default_mask_permissions(model) == Permissions(True, False, False)
    assert default_mask_permissions(_model()) == FULL


def test_update_acl_ineffective_marks_masked_rows():
    model = _model()
    result = update_acl_ineffective(model, Permissions(True, False, True), FULL)
    assert result is True
    assert model.exist_ineffective_permissions is True
    devs = next(item for item in model if item.name == "devs")
    assert devs.write_ineffective is True
    assert devs.read_ineffective is False
    assert devs.execute_ineffective is False


def test_update_acl_ineffective_leaves_unmasked_kinds():
    model = _model()
    update_acl_ineffective(model, Permissions(), Permissions())
    for item in model:
        if item.kind in (ElementKind.USER, ElementKind.OTHERS, ElementKind.MASK):
            assert not (item.read_ineffective or item.write_ineffective or item.execute_ineffective)
        else:
            assert item.read_ineffective and item.write_ineffective and item.execute_ineffective


def test_update_acl_ineffective_none_when_mask_full():
    model = _with_defaults(_model())
    assert update_acl_ineffective(model, FULL, FULL) is False
    assert model.exist_ineffective_permissions is False
    assert not any(item.read_ineffective for item in model)


def test_update_acl_ineffective_masked_but_not_granted():
    model = AclListModel()
    model.add_removable("bob", True, False, False, ElementKind.ACL_USER)
    assert update_acl_ineffective(model, Permissions(True, False, False), FULL) is False
    assert next(iter(model)).write_ineffective is True


def test_update_acl_ineffective_uses_default_mask_for_default_rows():
    model = _with_defaults(AclListModel())
    result = update_acl_ineffective(model, FULL, Permissions(True, False, False))
    assert result is True
    carol = next(item for item in model if item.name == "carol")
    assert carol.write_ineffective is True


@pytest.mark.parametrize("bits", range(8))
def test_mask_round_trip_through_text(bits):
    model = AclListModel()
    perms = Permissions.from_bits(bits)
    model.add_non_removable("Mask", perms.reading, perms.writing, perms.execution, ElementKind.MASK)
    access, _ = textual_representation(model)
    assert access == f"m::{perms}\n"
    assert mask_permissions(model) == perms