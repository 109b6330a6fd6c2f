"""Image helpers shared by uploads and generated illustrations.

Core Functions:
- detect_image_type(): extension and MIME type from magic bytes
- validate_image_format(): JPEG/PNG/WEBP/GIF only
- validate_image_size(): MAX_IMAGE_SIZE_MB limit
- compress_image(): Pillow re-encode of large uploads
"""

from io import BytesIO
from typing import Optional

import filetype
from PIL import Image

from src.utils.errors import safe_execute_sync
from src.utils.logger import logger


SUPPORTED_EXTENSIONS = ("jpg", "png", "webp", "gif")


def detect_image_type(image_bytes: bytes) -> Optional[tuple[str, str]]:
    """Detect image type from magic bytes, not from the file name.

    Args:
        image_bytes: Raw image bytes.

    Returns:
        (extension, mime_type) tuple, or None if not a supported image.
    """
    if not image_bytes:
        return None
    kind = filetype.guess(image_bytes)
    if kind is None or kind.extension not in SUPPORTED_EXTENSIONS:
        return None
    return kind.extension, kind.mime


def validate_image_format(image_bytes: bytes) -> bool:
    """Validate image format (JPEG, PNG, WEBP or GIF).

    Args:
        image_bytes: Raw image bytes.

    Returns:
        True if valid format, False otherwise.
    """
    if detect_image_type(image_bytes) is None:
        logger.warning("Invalid image format. Only JPEG, PNG, WEBP and GIF supported.")
        return False
    return True


def validate_image_size(image_bytes: bytes, max_size_mb: int) -> bool:
    """Validate image size against the configured limit.

    Args:
        image_bytes: Raw image bytes.
        max_size_mb: Maximum accepted size in megabytes.

    Returns:
        True if size valid, False if exceeds limit.
    """
    size_mb = len(image_bytes) / (1024 * 1024)
    if size_mb > max_size_mb:
        logger.warning(f"Image size {size_mb:.2f}MB exceeds limit of {max_size_mb}MB")
        return False
    return True


def compress_image(image_bytes: bytes, threshold_kb: int, max_width: int = 1600) -> bytes:
    """Compress an image for storage using Pillow.

    Re-encodes as JPEG (quality 85, optimized, progressive), resizing images
    wider than max_width. Images below threshold_kb and animated GIFs are
    returned untouched, as is the original if Pillow cannot decode it.

    Args:
        image_bytes: Raw image bytes to compress
        threshold_kb: Only compress images at least this large
        max_width: Maximum image width in pixels

    Returns:
        Compressed image bytes, or the original bytes.
    """
    size_kb = len(image_bytes) / 1024
    if size_kb < threshold_kb:
        logger.debug(f"Image size {size_kb:.1f}KB below compression threshold ({threshold_kb}KB)")
        return image_bytes

    detected = detect_image_type(image_bytes)
    if detected and detected[0] == "gif":
        return image_bytes

    def _compress():
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
        compressed = output.getvalue()

        # Already well-compressed sources can grow when re-encoded
        if len(compressed) >= len(image_bytes):
            return image_bytes

        logger.debug(f"Image compressed: {size_kb:.1f}KB → {len(compressed) / 1024:.1f}KB")
        return compressed

    return safe_execute_sync(_compress, "Image compression", log_level="warning", default_return=image_bytes)
