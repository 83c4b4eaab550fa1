"""Tests for dotted-key JSON settings."""

import json

import pytest

from infrastructure.settings import JsonSettings


class TestJsonSettings:
    def test_dotted_access(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"ingest": {"max_workers": "8", "bad": "x"}}), encoding="utf-8")
        settings = JsonSettings(path)
        assert settings.get("ingest.max_workers") == "8"
        assert settings.get_int("ingest.max_workers", 4) == 8
        assert settings.get_int("ingest.bad", 4) == 4
        assert settings.get_int("ingest.missing", 4) == 4
        assert settings.get("nope.deeper", "d") == "d"
        assert settings.get_path("review.store_path", tmp_path / "r.json") == tmp_path / "r.json"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            JsonSettings(tmp_path / "settings.json")
