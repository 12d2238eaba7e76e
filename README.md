# aclgrid

`aclgrid` reads and edits the POSIX access control lists (ACLs) of regular
files and directories. It works on the `system.posix_acl_access` and
`system.posix_acl_default` extended attributes directly, through `os.getxattr`,
`os.setxattr` and `os.removexattr`, and needs no helper programs. An access
ACL that has only owner, group and other entries is stored as plain mode bits.

Where extended attributes are not available, the access ACL is read from the
mode bits, and writing an extended ACL fails.

## Installation

```
pip install .
```

## Command line

```
aclgrid PATH
aclgrid --text PATH
```

`aclgrid PATH` opens `PATH` and prints it, followed by one row for each ACL
entry: its kind (user, acl user, group, mask, other, and the default kinds
for a directory), its participant name and its `rwx` permissions. Permissions
that the mask hides are marked as ineffective. If any are hidden, a closing
line says so.

`aclgrid --text PATH` prints the access ACL in its short textual form, for
example `u::rwx`, `g:staff:r-x` and `m::rwx`. If the path has a default ACL,
it follows after a `# default` line.

If the path cannot be opened, the command prints `No file opened` and exits
with status 1. Only regular files and directories can be opened.

## Library use

```python
from aclgrid.manager import ACLManager
from aclgrid.permissions import Permissions

manager = ACLManager("/srv/shared")
manager.modify_acl_user("alice", Permissions.from_bits(6))
print(manager.access_text())
print(manager.default_text())
```

Each `modify_*` and `remove_*` call writes the change to the file at once.
The ACL mask is added when named user or group entries appear, and removed
when the last of them goes. On a directory, a change to any default entry
fills in the other required default entries (owner, group, others and mask).
`create_default_acl` and `clear_default_acl` add or remove the whole default
ACL. Failures raise `ACLManagerError`.

`ACLManager.set_file_acl(filename, access_acl_text, default_acl_text)` sets a
file's ACLs from their textual form.

The lower level lives in `aclgrid.posix_acl`. `read_acl`, `write_acl` and
`delete_default_acl` work on a path. `decode_acl`, `encode_acl` and
`parse_acl_text` convert between the binary attribute form, the textual form
and `RawAclEntry` values. Data that cannot be understood raises
`AclFormatError`.

### Editing through a list of rows

`aclgrid.editor.ACLEditor` ties an `ACLManager` to an
`aclgrid.acl_list.AclListModel`. The model is the ordered list of `AclItem`
rows that an editor shows. Through the editor you can:

- open a path with `open_file`;
- change entries with `add_acl_entry`, `remove_acl` and `update_acl_entry`;
- add or drop the default ACL with `toggle_default_acl`.

Errors raise `ACLEditorError`. An opened path that is owned by neither the
current user nor root is marked read-only.

For a directory, `enclosed_texts` returns the textual ACLs to use for
enclosed directories and files. `apply_recursively` sets them on the
directory and everything below it, then reopens the directory. Symbolic links
are not followed. Failures on single files are logged and returned as
`(path, message)` pairs instead of being raised. An optional callback
receives the fraction done after each file.

`aclgrid.list_filler.fill_acl_list` fills a model from a manager. The
functions in `aclgrid.list_analysis` work on a filled model:

- `update_acl_ineffective` marks the permissions that the masks hide;
- `textual_representation` renders the rows back into access and default ACL
  text;
- `mask_permissions` and `default_mask_permissions` read the mask rows.

## What it does not do

There is no graphical editor. The command line only shows ACLs; changing them
is done through the library. Extended attributes other than the two ACL
attributes are not shown or edited.

## Tests

```
pip install .[test]
pytest
```