"""CDN image URLs with sharp edits applied by the AWS Serverless Image Handler (v4).

Builds CDN image URLs with edit operations such as resizing or WebP
compression, see
https://docs.aws.amazon.com/solutions/latest/serverless-image-handler/deployment.html

Example::

    cdn = Cdn(base="https://my-distribution.cloudfront.net/", bucket="s3-bucket-name")
    url = cdn.get_url("filename.jpg", {"webp": True, "resize": {"width": 800, "height": 600}})
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import unquote, urlsplit

from image_handler_client.components.membership import (
    NOT_MEMBER,
    MemberWithBucketOverride,
    MembershipPredicate,
    MembershipResult,
    NotMember,
    as_membership,
    default_membership,
    is_absolute_url,
)
from image_handler_client.components.request import ImageRequest
from image_handler_client.config import CdnSettings
from image_handler_client.providers.aws.s3 import (
    get_safe_s3_string,
    s3_bucket_url,
    unsafe_s3_chars,
)

logger: logging.Logger = logging.getLogger(__name__)

# The handler enables WebP on mere key presence, whatever the value.
WEBP_EDIT: str = "webp"

_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class Cdn:
    """CDN parameters and image URL builder.

    Configuration is fixed at construction; build a new instance to change it.
    """

    def __init__(
        self,
        base: str,
        bucket: str,
        served_from_cdn_bucket: MembershipPredicate | None = None,
        warnings: bool = True,
    ) -> None:
        """Initialise the CDN configuration.

        Args:
            base: Base URL of the CDN handling images, such as
                ``"https://cdn.stelace.com"``.
            bucket: Plain S3 bucket name such as ``"my-files"``.
            served_from_cdn_bucket: Optional predicate called with
                ``(uri, base, bucket_url)`` replacing ``default_membership``.
                May return a ``MembershipResult``, a falsy value, a truthy
                value, or a bucket name used as a one-time override in
                ``get_url``.
            warnings: Log a warning for special characters in S3 keys.
        """
        self._base: str = base
        self._bucket: str = bucket
        self._s3_bucket_url: str = s3_bucket_url(bucket)
        self._predicate: MembershipPredicate | None = served_from_cdn_bucket
        self._warnings: bool = warnings

    @classmethod
    def from_settings(
        cls,
        settings: CdnSettings,
        served_from_cdn_bucket: MembershipPredicate | None = None,
    ) -> Cdn:
        """Build a ``Cdn`` from environment-driven settings."""
        return cls(
            base=settings.base,
            bucket=settings.bucket,
            served_from_cdn_bucket=served_from_cdn_bucket,
            warnings=settings.warnings,
        )

    @property
    def base(self) -> str:
        """Base URL of the CDN handling images."""
        return self._base

    @property
    def bucket(self) -> str:
        """Default S3 bucket name."""
        return self._bucket

    @property
    def s3_bucket_url(self) -> str:
        """S3 bucket URL derived from ``bucket``."""
        return self._s3_bucket_url

    @property
    def warnings(self) -> bool:
        """Whether unsafe S3 key characters are reported."""
        return self._warnings

    def served_from_cdn_bucket(
        self,
        uri: object,
        base: str | None = None,
        bucket_url: str | None = None,
    ) -> MembershipResult:
        """Check that a file URI is served from the CDN before applying edits.

        Args:
            uri: File URI, possibly a full URL including host and protocol.
            base: CDN base URL to check against, defaults to ``self.base``.
            bucket_url: S3 bucket URL to check against, defaults to
                ``self.s3_bucket_url``.
        """
        if not isinstance(uri, str):
            return NOT_MEMBER
        base = self._base if base is None else base
        bucket_url = self._s3_bucket_url if bucket_url is None else bucket_url
        if self._predicate is None:
            return default_membership(uri, base, bucket_url)
        return as_membership(self._predicate(uri, base, bucket_url))

    def get_url(
        self,
        uri: str,
        edits: Mapping[str, Any] | None = None,
        *,
        bucket: str | None = None,
    ) -> str:
        """Turn a CDN file URI into an image URL with edit operations.

        URIs not served from the CDN are returned unchanged and ``edits`` are
        ignored, so any third-party URL can go through this method. Never
        raises: on any failure ``uri`` is returned as is.

        Args:
            uri: File URI, possibly a full URL including host and protocol.
            edits: Sharp transforms such as ``{"webp": True}``.
            bucket: Bucket overriding both the default one and any bucket
                returned by the membership predicate.

        Returns:
            Full URL with the encoded image request.
        """
        if not isinstance(uri, str):
            return uri

        edits = dict(edits or {})
        if WEBP_EDIT in edits and not edits[WEBP_EDIT]:
            del edits[WEBP_EDIT]

        try:
            path = _uri_path(uri)
        except ValueError:
            logger.debug("cdn_uri_unparsable", extra={"uri": uri})
            return uri

        try:
            membership = self.served_from_cdn_bucket(uri)
            if isinstance(membership, NotMember):
                return uri
            # URL paths are percent-encoded, keys in the bucket are not.
            key = _decode_key(path)
            image_request = ImageRequest(
                bucket=self._resolve_bucket(bucket, membership),
                key=key,
                edits=edits,
            )
            # The image handler only supports ASCII chars in keys.
            if self._warnings and key != get_safe_s3_string(key):
                logger.warning(
                    "unsafe_s3_key",
                    extra={"key": key, "unsafe_chars": unsafe_s3_chars(key)},
                )
            return f"{self._base.removesuffix('/')}/{image_request.encode()}"
        except Exception:
            logger.debug("cdn_url_encoding_failed", extra={"uri": uri}, exc_info=True)
            return uri

    def _resolve_bucket(self, bucket: str | None, membership: MembershipResult) -> str:
        """Per-call bucket, then membership override, then the default bucket."""
        if bucket:
            return bucket
        if isinstance(membership, MemberWithBucketOverride):
            return membership.bucket
        return self._bucket


def _uri_path(uri: str) -> str:
    """Return the raw path of an absolute URL, or ``uri`` itself otherwise.

    Raises:
        ValueError: If ``uri`` looks like a URL but cannot be parsed.
    """
    if is_absolute_url(uri):
        return urlsplit(uri).path
    return uri


def _decode_key(path: str) -> str:
    """Strip one leading slash and percent-decode ``path`` into an S3 key.

    Raises:
        ValueError: On a ``%`` not followed by two hex digits or escapes that
            are not valid UTF-8.
    """
    key = path.removeprefix("/")
    if _MALFORMED_ESCAPE.search(key):
        raise ValueError(f"Malformed percent-encoding in {path!r}")
    return unquote(key, errors="strict")
