"""Tests for directory scanning."""

import pytest

from infrastructure.upload_scanner import guess_mime_type, scan_upload


class TestUploadScanner:
    def test_relative_paths_include_root(self, tmp_path):
        root = tmp_path / "batch"
        (root / "Site001" / "Damage").mkdir(parents=True)
        (root / "Site001" / "Damage" / "a.JPG").write_bytes(b"x")
        (root / "Site001" / "notes.txt").write_text("hi", encoding="utf-8")

        uploads = scan_upload(root)
        by_rel = {u.relative_path: u for u in uploads}

        assert set(by_rel) == {"batch/Site001/Damage/a.JPG", "batch/Site001/notes.txt"}
        assert by_rel["batch/Site001/Damage/a.JPG"].mime_type == "image/jpeg"
        assert by_rel["batch/Site001/notes.txt"].mime_type == "text/plain"
        assert by_rel["batch/Site001/notes.txt"].modified_at is not None

    def test_missing_root(self, tmp_path):
        with pytest.raises(NotADirectoryError):
            scan_upload(tmp_path / "nope")

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("a.heic", "image/heic"),
            ("b.png", "image/png"),
            ("c.unknownext", "application/octet-stream"),
        ],
    )
    def test_guess_mime_type(self, name, expected):
        assert guess_mime_type(name) == expected

