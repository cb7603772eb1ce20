"""WebP decoding support probe."""

from __future__ import annotations

import asyncio
import base64
import io
import logging

from PIL import Image

logger: logging.Logger = logging.getLogger(__name__)

# Plain 1x1 lossy WebP from the Modernizr test. Alpha, lossless and
# animated WebP are not covered.
WEBP_SAMPLE: bytes = base64.b64decode(
    "UklGRiQAAABXRUJQVlA4IBgAAAAwAQCdASoBAAEAAwA0JaQAA3AA/vuUAAA="
)


def _decoded_width(sample: bytes) -> int:
    with Image.open(io.BytesIO(sample)) as image:
        image.load()
        return image.width


async def supports_webp() -> bool:
    """Test asynchronously whether the host image decoder supports WebP.

    Never raises: a decode error means no support. There is no timeout,
    wrap the call in ``asyncio.wait_for`` if one is needed.

    Example::

        supports = await supports_webp()
    """
    try:
        width = await asyncio.to_thread(_decoded_width, WEBP_SAMPLE)
    except (OSError, ValueError):
        logger.debug("webp_probe_decode_failed", exc_info=True)
        return False
    return width == 1
