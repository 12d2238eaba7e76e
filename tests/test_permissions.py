import pytest

from aclgrid.permissions import AclEntry, ElementKind, Permissions, permission_to_str


@pytest.mark.parametrize("bits", range(8))
def test_bits_round_trip(bits):
    assert Permissions.from_bits(bits).to_bits() == bits


@pytest.mark.parametrize("bits", [-1, 8, 64])
def test_from_bits_rejects_out_of_range(bits):
    with pytest.raises(ValueError):
        Permissions.from_bits(bits)


def test_str_forms():
    assert str(Permissions.from_bits(7)) == "rwx"
    assert str(Permissions.from_bits(0)) == "---"
    assert str(Permissions.from_bits(5)) == "r-x"


@pytest.mark.parametrize("bits", range(8))
def test_permission_to_str_matches_str(bits):
    perms = Permissions.from_bits(bits)
    assert permission_to_str(perms) == str(perms)
    assert len(permission_to_str(perms)) == 3


def test_default_constructor_has_no_permissions():
    assert Permissions().to_bits() == 0


@pytest.mark.parametrize(
    ("kind", "expected"),
    [
        (ElementKind.USER, False),
        (ElementKind.GROUP, False),
        (ElementKind.OTHERS, False),
        (ElementKind.ACL_USER, False),
        (ElementKind.ACL_GROUP, False),
        (ElementKind.MASK, False),
        (ElementKind.DEFAULT_USER, True),
        (ElementKind.DEFAULT_GROUP, True),
        (ElementKind.DEFAULT_OTHERS, True),
        (ElementKind.DEFAULT_ACL_USER, True),
        (ElementKind.DEFAULT_ACL_GROUP, True),
        (ElementKind.DEFAULT_MASK, True),
    ],
)
def test_is_default_kinds(kind, expected):
    assert ElementKind.is_default(kind) is expected


def test_written_name_valid_uses_name():
    entry = AclEntry("alice", Permissions.from_bits(6), qualifier=1234, valid_name=True)
    assert entry.written_name() == "alice"


def test_written_name_invalid_uses_qualifier():
    entry = AclEntry("(1234)", Permissions.from_bits(6), qualifier=1234, valid_name=False)
    assert entry.written_name() == "1234"


def test_entry_permission_properties_follow_perms():
    perms = Permissions.from_bits(3)
    entry = AclEntry("bob", perms)
    assert (entry.reading, entry.writing, entry.execution) == (
        perms.reading,
        perms.writing,
        perms.execution,
    )