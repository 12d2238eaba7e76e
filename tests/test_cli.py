import os

from aclgrid.cli import main
from aclgrid.manager import ACLManager


def test_missing_path_fails(tmp_path, capsys):
    assert main([str(tmp_path / "missing")]) == 1
    assert "No file opened" in capsys.readouterr().err


def test_listing_shows_path_and_rows(tmp_path, capsys):
    path = tmp_path / "f.txt"
    path.write_text("x")
    os.chmod(path, 0o640)
    assert main([str(path)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == str(path)
    assert len(lines) == 4
    assert lines[1].endswith("rw-")
    assert lines[2].endswith("r--")
    assert lines[3].endswith("---")
    assert lines[3].startswith("other")


def test_text_output_matches_manager(tmp_path, capsys):
    path = tmp_path / "f.txt"
    path.write_text("x")
    os.chmod(path, 0o604)
    assert main(["--text", str(path)]) == 0
    assert capsys.readouterr().out == ACLManager(path).access_text()