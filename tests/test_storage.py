"""
Tests for the upload file store.
"""

import io

import pytest

from work_suite.errors import ValidationFailedError
from work_suite.storage import FileStore, normalize_folder, safe_filename


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("report.pdf", "report.pdf"),
        ("../../etc/passwd", "passwd"),
        ("C:\\Users\\ada\\notes.txt", "notes.txt"),
        ("weird name$%.txt", "weird name_.txt"),
        ("...", "upload"),
    ],
)
def test_safe_filename(raw, expected):
    assert safe_filename(raw) == expected


class TestNormalizeFolder:
    def test_empty(self):
        assert normalize_folder(None) == ""
        assert normalize_folder("") == ""
        assert normalize_folder(".") == ""

    def test_nested(self):
        assert normalize_folder("plans/2024/") == "plans/2024"
        assert normalize_folder("plans\\q4") == "plans/q4"

    @pytest.mark.parametrize("folder", ["../up", "a/../../b", "/abs"])
    def test_rejects_escapes(self, folder):
        with pytest.raises(ValidationFailedError):
            normalize_folder(folder)


class TestFileStore:
    def test_save_and_remove(self, files):
        path = files.save("we", "shared", "deck.md", io.BytesIO(b"# hi"))
        assert path.startswith("we/shared/")
        assert files.resolve(path).read_bytes() == b"# hi"

        assert files.remove(path) is True
        assert files.remove(path) is False

    def test_invalid_scope(self, files):
        with pytest.raises(ValidationFailedError):
            files.save("everyone", None, "x.txt", io.BytesIO(b"x"))

    def test_size_limit_removes_partial_file(self, files):
        with pytest.raises(ValidationFailedError):
            files.save("me", None, "big.bin", io.BytesIO(b"x" * 10), max_bytes=5)
        assert list((files.root / "me").iterdir()) == []

    def test_original_filename_keeps_inner_dashes(self, files):
        path = files.save("me", "docs", "my-q3-report.txt", io.BytesIO(b"x"))
        assert files.original_filename(path) == "my-q3-report.txt"

    @pytest.mark.parametrize(
        "stored, expected",
        [
            ("me/docs/1700000000000-my-file.txt", "my-file.txt"),
            ("me/plain-name.txt", "plain-name.txt"),
        ],
    )
    def test_original_filename(self, stored, expected):
        assert FileStore.original_filename(stored) == expected

    def test_resolve_is_confined(self, files):
        with pytest.raises(ValidationFailedError):
            files.resolve("../outside.txt")

    def test_remove_outside_root_is_refused(self, files, tmp_path):
        outside = tmp_path / "keep.txt"
        outside.write_text("keep")
        assert files.remove("../keep.txt") is False
        assert outside.exists()
