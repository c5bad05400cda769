"""Image intake for ingredient recognition.

Core Functions:
- load_image_source(): bytes / file path / data URL / base64 / http(s) URL -> (bytes, mime type)
- detect_mime_type(): sniff the encoding from magic bytes
- validate_image(): enforce the recognition input constraints
- compress_image(): optional JPEG recompression before upload
"""

import asyncio
import base64
import binascii
from io import BytesIO
from pathlib import Path
from typing import Callable, Optional, TypeVar

import aiohttp
import filetype
from PIL import Image

from chefinbox.utils.config import config
from chefinbox.utils.exceptions import InvalidImageError
from chefinbox.utils.logger import logger

T = TypeVar("T")

SUPPORTED_MIME_TYPES = ("image/jpeg", "image/png")

# Browsers and cameras disagree on the JPEG media type
MIME_ALIASES = {"image/jpg": "image/jpeg", "image/pjpeg": "image/jpeg"}

FETCH_TIMEOUT_SECONDS = 10


def safe_execute_sync(
    func: Callable[[], T],
    operation_name: str,
    default_return: Optional[T] = None,
) -> Optional[T]:
    """Run an optional step, logging and returning ``default_return`` on failure.

    Only for steps whose failure must not abort the caller (e.g. compression
    falls back to the original bytes).
    """
    try:
        return func()
    except Exception as e:
        logger.warning(f"{operation_name}: {e}")
        return default_return


def normalize_mime_type(mime_type: Optional[str]) -> str:
    value = (mime_type or "").strip().lower()
    return MIME_ALIASES.get(value, value)


def detect_mime_type(image_bytes: bytes) -> Optional[str]:
    """Return the sniffed media type of ``image_bytes``, or None if unknown."""
    if not image_bytes:
        return None
    kind = filetype.guess(image_bytes)
    return kind.mime if kind is not None else None


def validate_image(image_bytes: bytes, mime_type: str) -> str:
    """Check an image against the recognition input constraints.

    Args:
        image_bytes: Encoded image.
        mime_type: Declared media type.

    Returns:
        str: Normalised media type.

    Raises:
        InvalidImageError: Empty payload, unsupported or mismatching media type,
            or payload over MAX_IMAGE_SIZE_MB.
    """
    normalized = normalize_mime_type(mime_type)
    size = len(image_bytes) if image_bytes else 0

    if not size:
        raise InvalidImageError("Image payload is empty", mime_type=normalized, size_bytes=0)

    if normalized not in SUPPORTED_MIME_TYPES:
        raise InvalidImageError(
            f"Unsupported image type '{mime_type}'. Supported: {', '.join(SUPPORTED_MIME_TYPES)}",
            mime_type=normalized,
            size_bytes=size,
        )

    size_mb = size / (1024 * 1024)
    if size_mb > config.MAX_IMAGE_SIZE_MB:
        raise InvalidImageError(
            f"Image size {size_mb:.2f}MB exceeds limit of {config.MAX_IMAGE_SIZE_MB}MB",
            mime_type=normalized,
            size_bytes=size,
        )

    detected = detect_mime_type(image_bytes)
    if detected != normalized:
        raise InvalidImageError(
            f"Image content ({detected or 'unknown'}) does not match declared type {normalized}",
            mime_type=normalized,
            size_bytes=size,
        )

    return normalized


def compress_image(image_bytes: bytes, mime_type: str, max_width: int = 1024) -> tuple[bytes, str]:
    """Recompress large images to JPEG before upload.

    Images at or below COMPRESS_IMG_THRESHOLD_KB, or all images when
    COMPRESS_IMG is off, are returned untouched.

    Returns:
        tuple: (image bytes, media type of those bytes)
    """
    size_kb = len(image_bytes) / 1024
    if not config.COMPRESS_IMG or size_kb <= config.COMPRESS_IMG_THRESHOLD_KB:
        return image_bytes, mime_type

    def _compress() -> bytes:
        img = Image.open(BytesIO(image_bytes))

        # JPEG has no alpha channel
        if img.mode in ("RGBA", "LA", "P"):
            img = img.convert("RGBA")
            rgb_img = Image.new("RGB", img.size, (255, 255, 255))
            rgb_img.paste(img, mask=img.split()[-1])
            img = rgb_img
        elif img.mode != "RGB":
            img = img.convert("RGB")

        if img.width > max_width:
            ratio = max_width / img.width
            img = img.resize((max_width, int(img.height * ratio)), Image.Resampling.LANCZOS)

        output = BytesIO()
        img.save(output, format="JPEG", quality=85, optimize=True, progressive=True)
        return output.getvalue()

    compressed = safe_execute_sync(_compress, "Image compression", default_return=None)
    if compressed is None or len(compressed) >= len(image_bytes):
        return image_bytes, mime_type

    logger.debug(f"Image compressed: {size_kb:.1f}KB -> {len(compressed) / 1024:.1f}KB")
    return compressed, "image/jpeg"


def _decode_base64(data: str) -> bytes:
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImageError(f"Invalid base64 image data: {e}") from e


def _is_local_file(source: str) -> bool:
    if source.startswith(("data:", "http://", "https://")):
        return False
    try:
        return Path(source).is_file()
    except OSError:
        # base64 payloads can exceed the maximum path length
        return False


async def _fetch_url(url: str) -> bytes:
    timeout = aiohttp.ClientTimeout(total=FETCH_TIMEOUT_SECONDS)
    try:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(url) as response:
                response.raise_for_status()
                return await response.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise InvalidImageError(f"Failed to fetch image from {url}: {e}") from e


async def load_image_source(source: str | bytes | Path) -> tuple[bytes, str]:
    """Resolve an image source into raw bytes and a media type.

    Accepted sources:
    - bytes: used as-is
    - Path, or a string naming an existing file: read from disk
    - data URL (``data:image/jpeg;base64,...``): decoded
    - http/https URL: fetched with aiohttp (10s timeout)
    - anything else: treated as plain base64 (what a canvas capture yields)

    Raises:
        InvalidImageError: Source cannot be read or its format is unknown.
    """
    if isinstance(source, bytes):
        image_bytes = source
    elif isinstance(source, Path) or _is_local_file(source):
        path = Path(source)
        try:
            image_bytes = path.read_bytes()
        except OSError as e:
            raise InvalidImageError(f"Cannot read image file {path}: {e}") from e
    elif source.startswith("data:"):
        header, _, data = source.partition(",")
        if ";base64" not in header or not data:
            raise InvalidImageError("Only base64 data URLs are supported")
        image_bytes = _decode_base64(data)
    elif source.startswith(("http://", "https://")):
        image_bytes = await _fetch_url(source)
    else:
        image_bytes = _decode_base64(source.strip())

    mime_type = detect_mime_type(image_bytes)
    if mime_type is None:
        raise InvalidImageError("Unable to determine image format", size_bytes=len(image_bytes))
    return image_bytes, mime_type
