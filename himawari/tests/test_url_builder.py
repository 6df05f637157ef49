"""
Tests for url_builder.py

Validate that capture timestamps are turned into image URLs exactly the way the Himawari
service lays out its archive, and that timestamps that can't be right are refused.
"""

from datetime import datetime

import pytest

# following entities are tested in this module:
from himawari.url_builder import build_image_url
from himawari.url_builder import parse_timestamp
from himawari.url_builder import MalformedTimestamp
from himawari.url_builder import ValidationError

TEMPLATE = "https://himawari8-dl.nict.go.jp/himawari8/img/D531106/1d/550"


@pytest.mark.parametrize(
    "timestamp, expected",
    [
        ("2023-10-27 08:03:05", "/2023/10/27/080305_0_0.png"),
        ("2024-01-01 00:00:00", "/2024/01/01/000000_0_0.png"),
        ("2019-12-31 23:50:00", "/2019/12/31/235000_0_0.png"),
        ("2024-02-29 12:10:00", "/2024/02/29/121000_0_0.png"),
    ],
)
def test_build_image_url(timestamp, expected):
    assert build_image_url(timestamp, TEMPLATE) == TEMPLATE + expected


def test_build_image_url_from_datetime():
    """
    A parsed datetime and the raw vendor string must give the same URL.
    """

    from_string = build_image_url("2023-10-27 08:03:05", TEMPLATE)
    from_datetime = build_image_url(datetime(2023, 10, 27, 8, 3, 5), TEMPLATE)

    assert from_string == from_datetime


def test_build_image_url_is_deterministic():
    assert build_image_url("2023-10-27 08:03:05", TEMPLATE) == build_image_url(
        "2023-10-27 08:03:05", TEMPLATE
    )


def test_build_image_url_trailing_slash():
    assert build_image_url("2023-10-27 08:03:05", TEMPLATE + "/") == (
        TEMPLATE + "/2023/10/27/080305_0_0.png"
    )


def test_parse_timestamp_is_naive():
    """
    The vendor doesn't say which timezone it uses, so no timezone may be attached.
    """

    parsed = parse_timestamp("2023-10-27 08:03:05")

    assert parsed == datetime(2023, 10, 27, 8, 3, 5)
    assert parsed.tzinfo is None


def test_parse_timestamp_surrounding_whitespace():
    assert parse_timestamp("  2023-10-27 08:03:05\n") == datetime(2023, 10, 27, 8, 3, 5)


@pytest.mark.parametrize(
    "timestamp",
    [
        "",
        "null",
        "2023-10-27",
        "08:03:05",
        "2023-10-27T08:03:05",
        "2023-1-27 08:03:05",
        "abcd-10-27 08:03:05",
        "2023-13-01 00:00:00",
        "2023-00-10 00:00:00",
        "2023-02-30 00:00:00",
        "2023-10-27 24:00:00",
        "2023-10-27 08:60:00",
        "2023-10-27 08:03:61",
        "0000-01-01 00:00:00",
    ],
)
def test_parse_timestamp_malformed(timestamp):
    with pytest.raises(MalformedTimestamp):
        parse_timestamp(timestamp)


@pytest.mark.parametrize("timestamp", [None, 42, 1698393785.0])
def test_build_image_url_invalid_type(timestamp):
    with pytest.raises(ValidationError):
        build_image_url(timestamp, TEMPLATE)


def test_malformed_timestamp_is_validation_error():
    assert issubclass(MalformedTimestamp, ValidationError)
