"""Command line front end: show the ACL of a file or directory."""

from __future__ import annotations

import argparse
import sys

from .editor import ACLEditor

_KIND_LABELS = {
    "USER": "user",
    "GROUP": "group",
    "OTHERS": "other",
    "ACL_USER": "acl user",
    "ACL_GROUP": "acl group",
    "MASK": "mask",
    "DEFAULT_USER": "default user",
    "DEFAULT_GROUP": "default group",
    "DEFAULT_OTHERS": "default other",
    "DEFAULT_ACL_USER": "default acl user",
    "DEFAULT_ACL_GROUP": "default acl group",
    "DEFAULT_MASK": "default mask",
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aclgrid", description="Show the access control list of a file or directory."
    )
    parser.add_argument("path", help="file or directory to open")
    parser.add_argument(
        "--text", action="store_true", help="print the ACL in its textual form"
    )
    return parser


def main(argv=None) -> int:
    """Open a path and print its ACL; return 1 if it cannot be opened."""
    args = _build_parser().parse_args(argv)
    editor = ACLEditor()
    if not editor.open_file(args.path):
        print("No file opened", file=sys.stderr)
        return 1

    if args.text:
        sys.stdout.write(editor.manager.access_text())
        default = editor.manager.default_text()
        if default:
            print("# default")
            sys.stdout.write(default)
        return 0

    print(editor.filename)
    for item in editor.model:
        marks = []
        for flag, granted, letter in (
            (item.read_ineffective, item.reading, "r"),
            (item.write_ineffective, item.writing, "w"),
            (item.execute_ineffective, item.execution, "x"),
        ):
            if flag and granted:
                marks.append(letter)
        note = f"  (ineffective: {''.join(marks)})" if marks else ""
        print(f"{_KIND_LABELS[item.kind.name]:<18} {item.name:<20} {item.perms}{note}")
    if editor.model.exist_ineffective_permissions:
        print("There are ineffective permissions")
    return 0


if __name__ == "__main__":
    sys.exit(main())