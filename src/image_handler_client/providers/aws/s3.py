"""AWS S3 naming conventions and key safety helpers."""

from __future__ import annotations

import logging
import re

logger: logging.Logger = logging.getLogger(__name__)

S3_HOST: str = "s3.amazonaws.com"

# ASCII word characters plus the punctuation S3 documents as safe for keys.
_WHITESPACE_RUN = re.compile(r"\s+")
_UNSAFE_CHAR = re.compile(r"[^\w\-!./]", re.ASCII)


def s3_bucket_url(bucket: str) -> str:
    """Return the virtual-hosted-style URL of an S3 bucket."""
    return f"https://{bucket}.{S3_HOST}"


def get_safe_s3_string(text: str) -> str:
    """Make a URI or filename safe for use as an S3 object key.

    Whitespace runs become a single hyphen, then every character outside
    ``[A-Za-z0-9_-!./]`` is removed.
    See https://docs.aws.amazon.com/AmazonS3/latest/userguide/object-keys.html

    Example:
        ``get_safe_s3_string("special~©harŝ éeè.png")`` returns
        ``"specialhar-e.png"``.
    """
    return _UNSAFE_CHAR.sub("", _WHITESPACE_RUN.sub("-", text))


def unsafe_s3_chars(text: str) -> list[str]:
    """Return the distinct characters ``get_safe_s3_string`` would drop.

    Whitespace is not reported since it is replaced rather than removed.
    """
    found: list[str] = []
    for char in _UNSAFE_CHAR.findall(_WHITESPACE_RUN.sub("-", text)):
        if char not in found:
            found.append(char)
    return found
