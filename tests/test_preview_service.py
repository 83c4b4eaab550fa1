"""Tests for cached preview thumbnails."""

import json

from PIL import Image
import pytest

from infrastructure.preview_service import PreviewService
from infrastructure.settings import JsonSettings


@pytest.fixture()
def settings(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"preview": {"thumbnail_side": 16, "cache_dir": str(tmp_path / "thumbs")}}),
        encoding="utf-8",
    )
    return JsonSettings(path)


class TestPreviewService:
    def test_thumbnail_cached(self, tmp_path, settings):
        src = tmp_path / "big.jpg"
        Image.new("RGB", (64, 32), "blue").save(src, "JPEG")
        service = PreviewService(settings)

        uri = service.get_preview_uri(str(src))
        assert uri.startswith("file://")
        thumbs = list(service.cache_path.glob("*.jpg"))
        assert len(thumbs) == 1
        with Image.open(thumbs[0]) as im:
            assert max(im.size) == 16
        assert service.get_preview_uri(str(src)) == uri
        assert service.clear() == 1

    def test_unreadable_file_falls_back_to_file_uri(self, tmp_path, settings):
        src = tmp_path / "broken.jpg"
        src.write_bytes(b"not an image")
        service = PreviewService(settings)
        assert service.get_preview_uri(str(src)) == src.resolve().as_uri()

    def test_path_with_nul_byte_falls_back_to_file_uri(self, tmp_path, settings):
        uri = PreviewService(settings).get_preview_uri(str(tmp_path / "bad\x00name.jpg"))
        assert uri.startswith("file://")
        assert uri.endswith("bad%00name.jpg")
