"""Image request payload understood by the AWS Serverless Image Handler."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

logger: logging.Logger = logging.getLogger(__name__)


class ImageRequest(BaseModel):
    """``{bucket, key, edits}`` object carried base64-encoded in the CDN URL path.

    ``edits`` holds sharp operations such as ``{"resize": {"width": 800}}``
    and is passed through as-is.
    """

    model_config = ConfigDict(frozen=True)

    bucket: str
    key: str
    edits: dict[str, Any] = {}

    def to_json(self) -> str:
        """Serialize to compact JSON, keeping non-ASCII characters unescaped."""
        return self.model_dump_json()

    def encode(self) -> str:
        """Return the base64 path segment of the UTF-8 encoded JSON request.

        The handler decodes the segment as single-byte characters, so the
        text goes through UTF-8 before base64.
        """
        return base64.b64encode(self.to_json().encode("utf-8")).decode("ascii")

    @classmethod
    def decode(cls, segment: str) -> ImageRequest:
        """Parse a path segment produced by ``encode``.

        Raises:
            ValueError: If the segment is not base64 encoded UTF-8 JSON
                describing an image request.
        """
        try:
            raw = base64.b64decode(segment, validate=True)
            return cls.model_validate_json(raw.decode("utf-8"))
        except (binascii.Error, UnicodeDecodeError, ValidationError) as exc:
            raise ValueError(f"Not an encoded image request: {segment!r}") from exc
