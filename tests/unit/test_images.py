"""Unit tests for image intake (validation, compression, source loading)."""

import base64
from io import BytesIO
from unittest.mock import AsyncMock, patch

import pytest
from PIL import Image

from chefinbox.services.images import (
    compress_image,
    detect_mime_type,
    load_image_source,
    normalize_mime_type,
    validate_image,
)
from chefinbox.utils.config import config
from chefinbox.utils.exceptions import AnalysisFailure, InvalidImageError


def _noisy_png(width: int = 1600, height: int = 1200) -> bytes:
    img = Image.effect_noise((width, height), 20).convert("RGB")
    output = BytesIO()
    img.save(output, format="PNG")
    return output.getvalue()


class TestDetectMimeType:
    """Format sniffing from magic bytes."""

    def test_jpeg(self, jpeg_bytes):
        assert detect_mime_type(jpeg_bytes) == "image/jpeg"

    def test_png(self, png_bytes):
        assert detect_mime_type(png_bytes) == "image/png"

    def test_unknown(self):
        assert detect_mime_type(b"not an image") is None

    def test_empty(self):
        assert detect_mime_type(b"") is None


class TestValidateImage:
    """Recognition input constraints."""

    def test_valid_jpeg(self, jpeg_bytes):
        assert validate_image(jpeg_bytes, "image/jpeg") == "image/jpeg"

    def test_valid_png(self, png_bytes):
        assert validate_image(png_bytes, "image/png") == "image/png"

    def test_jpg_alias_normalised(self, jpeg_bytes):
        assert normalize_mime_type(" IMAGE/JPG ") == "image/jpeg"
        assert validate_image(jpeg_bytes, "image/jpg") == "image/jpeg"

    def test_empty_payload(self):
        with pytest.raises(InvalidImageError, match="empty"):
            validate_image(b"", "image/jpeg")

    def test_unsupported_type(self):
        gif = b"GIF89a\x01\x00\x01\x00\x80\x00\x00"
        with pytest.raises(InvalidImageError, match="Unsupported"):
            validate_image(gif, "image/gif")

    def test_declared_type_must_match_content(self, png_bytes):
        with pytest.raises(InvalidImageError, match="does not match"):
            validate_image(png_bytes, "image/jpeg")

    def test_too_large(self, jpeg_bytes):
        with patch.object(config, "MAX_IMAGE_SIZE_MB", 1):
            data = jpeg_bytes + b"\x00" * (1024 * 1024)
            with pytest.raises(InvalidImageError, match="exceeds limit") as exc:
                validate_image(data, "image/jpeg")
        assert exc.value.size_bytes == len(data)

    def test_invalid_image_is_analysis_failure(self):
        with pytest.raises(AnalysisFailure):
            validate_image(b"", "image/jpeg")


class TestCompressImage:
    """Optional JPEG recompression."""

    def test_small_image_untouched(self, png_bytes):
        assert compress_image(png_bytes, "image/png") == (png_bytes, "image/png")

    def test_disabled(self):
        data = _noisy_png(400, 300)
        with patch.object(config, "COMPRESS_IMG", False), patch.object(config, "COMPRESS_IMG_THRESHOLD_KB", 1):
            assert compress_image(data, "image/png") == (data, "image/png")

    def test_large_image_recompressed_and_resized(self):
        data = _noisy_png()
        with patch.object(config, "COMPRESS_IMG", True), patch.object(config, "COMPRESS_IMG_THRESHOLD_KB", 1):
            compressed, mime_type = compress_image(data, "image/png")

        assert mime_type == "image/jpeg"
        assert len(compressed) < len(data)
        assert Image.open(BytesIO(compressed)).width == 1024

    def test_failure_falls_back_to_original(self):
        data = b"\x89PNG\r\n\x1a\n" + b"\x00" * 4096
        with patch.object(config, "COMPRESS_IMG", True), patch.object(config, "COMPRESS_IMG_THRESHOLD_KB", 1):
            assert compress_image(data, "image/png") == (data, "image/png")


class TestLoadImageSource:
    """Resolving the supported image sources."""

    @pytest.mark.asyncio
    async def test_bytes(self, jpeg_bytes):
        assert await load_image_source(jpeg_bytes) == (jpeg_bytes, "image/jpeg")

    @pytest.mark.asyncio
    async def test_file_path(self, tmp_path, png_bytes):
        path = tmp_path / "fridge.png"
        path.write_bytes(png_bytes)

        assert await load_image_source(path) == (png_bytes, "image/png")
        assert await load_image_source(str(path)) == (png_bytes, "image/png")

    @pytest.mark.asyncio
    async def test_data_url(self, jpeg_bytes):
        source = "data:image/jpeg;base64," + base64.b64encode(jpeg_bytes).decode()
        assert await load_image_source(source) == (jpeg_bytes, "image/jpeg")

    @pytest.mark.asyncio
    async def test_plain_base64(self, jpeg_bytes):
        source = base64.b64encode(jpeg_bytes).decode()
        assert await load_image_source(source) == (jpeg_bytes, "image/jpeg")

    @pytest.mark.asyncio
    async def test_long_base64_not_mistaken_for_path(self, jpeg_bytes):
        payload = jpeg_bytes + b"\x00" * 4096
        source = base64.b64encode(payload).decode()
        image_bytes, mime_type = await load_image_source(source)
        assert image_bytes == payload
        assert mime_type == "image/jpeg"

    @pytest.mark.asyncio
    @patch("chefinbox.services.images._fetch_url", new_callable=AsyncMock)
    async def test_http_url(self, mock_fetch, png_bytes):
        mock_fetch.return_value = png_bytes

        result = await load_image_source("https://example.com/fridge.png")

        assert result == (png_bytes, "image/png")
        mock_fetch.assert_awaited_once_with("https://example.com/fridge.png")

    @pytest.mark.asyncio
    async def test_non_base64_data_url_rejected(self):
        with pytest.raises(InvalidImageError, match="base64"):
            await load_image_source("data:image/svg+xml,<svg></svg>")

    @pytest.mark.asyncio
    async def test_invalid_base64(self):
        with pytest.raises(InvalidImageError, match="base64"):
            await load_image_source("this is not base64!")

    @pytest.mark.asyncio
    async def test_unknown_format(self):
        with pytest.raises(InvalidImageError, match="format"):
            await load_image_source(b"plain text, not an image")
