"""Tests for boost targets: reading, replacing and editor resolution."""

import io

import pytest

from promptboost.editor import (
    LineRange,
    open_in_editor,
    parse_line_range,
    read_target,
    replace_target,
    resolve_editor_command,
)
from promptboost.errors import DocumentError, PromptBoostError


def test_parse_line_range():
    assert parse_line_range("2:4") == LineRange(2, 4)
    assert parse_line_range("7") == LineRange(7, 7)


@pytest.mark.parametrize("value", ["", "a:b", "0:2", "5:3", "1:"])
def test_parse_line_range_rejects_bad_values(value):
    with pytest.raises(DocumentError):
        parse_line_range(value)


def test_read_whole_file_and_replace(tmp_path):
    path = tmp_path / "task.prompt.md"
    path.write_text("old prompt\n", encoding="utf-8")

    target = read_target(path)
    replace_target(target, "new prompt\n")

    assert target.text == "old prompt\n"
    assert path.read_text(encoding="utf-8") == "new prompt\n"


def test_line_range_replacement_touches_only_selection(tmp_path):
    path = tmp_path / "notes.prompt.md"
    path.write_bytes(b"# Title\r\nline two\r\nline three\r\nfooter\r\n")

    target = read_target(path, LineRange(2, 3))
    assert target.text == "line two\r\nline three"

    replace_target(target, "Boosted text")

    assert path.read_bytes() == b"# Title\r\nBoosted text\r\nfooter\r\n"


def test_last_line_without_newline(tmp_path):
    path = tmp_path / "a.md"
    path.write_text("one\ntwo", encoding="utf-8")

    target = read_target(path, LineRange(2, 2))
    replace_target(target, "TWO")

    assert path.read_text(encoding="utf-8") == "one\nTWO"


def test_only_crlf_lf_and_cr_end_lines(tmp_path):
    path = tmp_path / "odd.prompt.md"
    path.write_bytes("page\fbreak\nsep\u2028here\x0bvt\nlast\n".encode("utf-8"))

    target = read_target(path, LineRange(2, 2))
    assert target.text == "sep\u2028here\x0bvt"

    replace_target(target, "second")

    assert path.read_bytes() == b"page\x0cbreak\nsecond\nlast\n"


def test_range_outside_file_is_rejected(tmp_path):
    path = tmp_path / "a.md"
    path.write_text("one\n", encoding="utf-8")

    with pytest.raises(DocumentError, match="outside the file"):
        read_target(path, LineRange(2, 3))


def test_missing_file_is_rejected(tmp_path):
    with pytest.raises(DocumentError, match="File not found"):
        read_target(tmp_path / "missing.md")


def test_replace_refuses_when_file_changed(tmp_path):
    path = tmp_path / "a.md"
    path.write_text("one\n", encoding="utf-8")
    target = read_target(path)
    path.write_text("edited meanwhile\n", encoding="utf-8")

    with pytest.raises(DocumentError, match="changed on disk"):
        replace_target(target, "boosted")

    assert path.read_text(encoding="utf-8") == "edited meanwhile\n"


def test_stdin_target():
    target = read_target(None, stdin=io.StringIO("from stdin"))

    assert target.is_stdin
    assert target.text == "from stdin"
    with pytest.raises(DocumentError):
        replace_target(target, "x")


def test_stdin_with_line_range_is_rejected():
    with pytest.raises(DocumentError):
        read_target(None, LineRange(1, 1), stdin=io.StringIO("x"))


def test_editor_from_environment(monkeypatch):
    monkeypatch.setenv("VISUAL", "code --wait")
    assert resolve_editor_command() == ["code", "--wait"]

    monkeypatch.delenv("VISUAL")
    monkeypatch.setenv("EDITOR", "vim")
    assert resolve_editor_command() == ["vim"]


def test_open_in_editor_runs_command(monkeypatch, tmp_path):
    monkeypatch.setenv("VISUAL", "myeditor")
    calls = []

    class _Completed:
        returncode = 0

    def _fake_run(command, check):
        calls.append(command)
        return _Completed()

    monkeypatch.setattr("promptboost.editor.subprocess.run", _fake_run)

    assert open_in_editor(tmp_path / "boost.prompt.md") == 0
    assert calls == [["myeditor", str(tmp_path / "boost.prompt.md")]]


def test_open_in_editor_reports_missing_binary(monkeypatch, tmp_path):
    monkeypatch.setenv("VISUAL", "definitely-not-an-editor-binary")

    def _fake_run(command, check):
        raise FileNotFoundError(command[0])

    monkeypatch.setattr("promptboost.editor.subprocess.run", _fake_run)

    with pytest.raises(PromptBoostError, match="Cannot start editor"):
        open_in_editor(tmp_path / "x.md")
