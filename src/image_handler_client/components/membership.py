"""Membership of a file URI in the CDN bucket, as a tagged result type."""

from __future__ import annotations

import logging
from typing import Literal, Protocol
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict

logger: logging.Logger = logging.getLogger(__name__)


class NotMember(BaseModel):
    """The URI is not served from the CDN bucket; edits are ignored."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["not_member"] = "not_member"

    def __bool__(self) -> bool:
        return False


class Member(BaseModel):
    """The URI is served from the CDN bucket."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["member"] = "member"


class MemberWithBucketOverride(BaseModel):
    """The URI is served from the CDN, from ``bucket`` instead of the default one."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["member_with_bucket_override"] = "member_with_bucket_override"
    bucket: str


MembershipResult = NotMember | Member | MemberWithBucketOverride

NOT_MEMBER: NotMember = NotMember()
MEMBER: Member = Member()


class MembershipPredicate(Protocol):
    """Decides whether a file URI is served from the CDN bucket.

    Besides a ``MembershipResult``, implementations may return a falsy value,
    a truthy value or a bucket name string; see ``as_membership``.
    """

    def __call__(
        self, uri: str, base: str, bucket_url: str
    ) -> MembershipResult | bool | str | None:
        ...


def as_membership(value: object) -> MembershipResult:
    """Coerce a predicate return value into a ``MembershipResult``.

    A non-empty string is a one-time bucket override, any other truthy value
    means membership and a falsy value means no membership.
    """
    if isinstance(value, (NotMember, Member, MemberWithBucketOverride)):
        return value
    if isinstance(value, str) and value:
        return MemberWithBucketOverride(bucket=value)
    return MEMBER if value else NOT_MEMBER


def is_absolute_url(uri: str) -> bool:
    """Whether ``uri`` has a scheme or a network location.

    Raises:
        ValueError: If ``uri`` looks like a URL but cannot be parsed.
    """
    parts = urlsplit(uri)
    return bool(parts.scheme or parts.netloc)


def default_membership(uri: str, base: str, bucket_url: str) -> MembershipResult:
    """Default policy for ``Cdn.served_from_cdn_bucket``.

    A bare filename or relative path is a key in the CDN bucket. Any URI with
    a scheme or a network location (``data:``, ``blob:``, ``//host/...``) is
    served from the CDN only when it starts with the CDN base URL or the S3
    bucket URL. Unparsable URIs are not members.
    """
    if not uri:
        return NOT_MEMBER
    try:
        absolute = is_absolute_url(uri)
    except ValueError:
        logger.debug("cdn_uri_unparsable", extra={"uri": uri})
        return NOT_MEMBER
    if not absolute:
        return MEMBER
    if base and uri.startswith(base):
        return MEMBER
    if bucket_url and uri.startswith(bucket_url):
        return MEMBER
    return NOT_MEMBER
