"""
Tests for the IDL document writer.

These tests verify:
1. Output is stable pretty JSON with a trailing newline
2. Writes replace existing files and leave no temporary files
3. Filesystem failures map to IO without partial output
"""

import json

import pytest

from idlfetch import writer as writer_module
from idlfetch.errors import ErrorKind, IdlError
from idlfetch.writer import output_path_for, render_document, write_document


DOCUMENT = {"version": "0.1.0", "name": "counter", "instructions": [], "accounts": []}


class TestRender:
    """Test the text form of documents."""

    def test_pretty_sorted_newline_terminated(self):
        text = render_document({"b": 1, "a": [1, 2]})

        assert text == '{\n  "a": [\n    1,\n    2\n  ],\n  "b": 1\n}\n'

    def test_is_stable_across_key_order(self):
        assert render_document({"x": 1, "y": 2}) == render_document({"y": 2, "x": 1})

    def test_keeps_non_ascii(self):
        assert "✓" in render_document({"docs": "✓"})


class TestOutputPath:
    """Test output path derivation."""

    def test_path_is_program_id_dot_json(self, tmp_path):
        program = "ADcaide4vBtKuyZQqdU689YqEGZMCmS4tL35bdTv9wJa"

        assert output_path_for(program, tmp_path) == tmp_path / f"{program}.json"

    def test_default_directory_is_cwd(self):
        assert str(output_path_for("abc")) == "abc.json"


class TestWriteDocument:
    """Test writing documents to disk."""

    def test_writes_document(self, tmp_path):
        path = write_document(DOCUMENT, tmp_path / "out.json")

        text = path.read_text(encoding="utf-8")
        assert json.loads(text) == DOCUMENT
        assert text.endswith("}\n")

    def test_replaces_existing_file(self, tmp_path):
        target = tmp_path / "out.json"
        target.write_text("stale contents that are much longer than the new document")

        write_document({}, target)

        assert target.read_text(encoding="utf-8") == "{}\n"

    def test_leaves_no_temporary_files(self, tmp_path):
        write_document(DOCUMENT, tmp_path / "out.json")

        assert [p.name for p in tmp_path.iterdir()] == ["out.json"]

    def test_missing_directory_is_io_error(self, tmp_path):
        target = tmp_path / "missing" / "out.json"

        with pytest.raises(IdlError) as exc_info:
            write_document(DOCUMENT, target)

        assert exc_info.value.kind == ErrorKind.IO
        assert isinstance(exc_info.value.cause, OSError)
        assert exc_info.value.details["path"] == str(target)
        assert not target.exists()

    def test_unserializable_document_writes_nothing(self, tmp_path):
        target = tmp_path / "out.json"

        with pytest.raises(TypeError):
            write_document({"bad": object()}, target)

        assert list(tmp_path.iterdir()) == []

    def test_unencodable_document_writes_nothing(self, tmp_path):
        target = tmp_path / "out.json"

        with pytest.raises(UnicodeEncodeError):
            write_document({"a": "\ud800"}, target)

        assert list(tmp_path.iterdir()) == []

    def test_failed_rename_removes_temporary_file(self, tmp_path, monkeypatch):
        def failing_replace(src, dst):
            raise PermissionError("rename refused")

        monkeypatch.setattr(writer_module.os, "replace", failing_replace)
        target = tmp_path / "out.json"

        with pytest.raises(IdlError) as exc_info:
            write_document(DOCUMENT, target)

        assert exc_info.value.kind == ErrorKind.IO
        assert list(tmp_path.iterdir()) == []
