"""Tests for S3 naming and key safety helpers."""
from __future__ import annotations

import pytest

from image_handler_client.providers.aws.s3 import (
    get_safe_s3_string,
    s3_bucket_url,
    unsafe_s3_chars,
)

SAMPLES = [
    "special~©harŝ éeè.png",
    "  leading and   trailing  ",
    "folder/sub folder/file (1).jpg",
    "safe-name_1!.jpg",
    "tabs\tand\nnewlines",
    "",
]


def test_s3_bucket_url() -> None:
    assert s3_bucket_url("my-files") == "https://my-files.s3.amazonaws.com"


def test_get_safe_s3_string_example() -> None:
    assert get_safe_s3_string("special~©harŝ éeè.png") == "specialhar-e.png"


def test_get_safe_s3_string_collapses_whitespace_runs() -> None:
    assert get_safe_s3_string("a  b\t\nc") == "a-b-c"


def test_get_safe_s3_string_keeps_allowed_punctuation() -> None:
    assert get_safe_s3_string("dir/a-b_c!d.e") == "dir/a-b_c!d.e"


def test_get_safe_s3_string_drops_non_ascii_word_characters() -> None:
    assert get_safe_s3_string("日本1.png") == "1.png"


@pytest.mark.parametrize("text", SAMPLES)
def test_get_safe_s3_string_is_idempotent(text: str) -> None:
    once = get_safe_s3_string(text)
    assert get_safe_s3_string(once) == once


def test_unsafe_s3_chars_lists_distinct_dropped_characters() -> None:
    assert unsafe_s3_chars("special~©harŝ éeè (é).png") == ["~", "©", "ŝ", "é", "è", "(", ")"]


def test_unsafe_s3_chars_ignores_whitespace() -> None:
    assert unsafe_s3_chars("a b\tc") == []
