"""
Himawari Image API - URL Builder

NICT publishes every full-disk capture under a date partitioned path:

    {template}/{YYYY}/{MM}/{DD}/{HHMMSS}_0_0.png

where template is e.g. https://himawari8-dl.nict.go.jp/himawari8/img/D531106/1d/550
(1d = a single 1x1 tile, 550 = tile width in pixels) and the trailing _0_0 is the
tile's column/row. This module turns the capture timestamp reported by latest.json
into that path. It does no I/O.

The service doesn't say which timezone its "date" field is in. We don't need to know:
the same string is what the path is built from, so the timestamp is treated as an
opaque naive value and never converted to or from local time.
"""

import re
from datetime import datetime
from typing import Union


class ValidationError(Exception):
    """
    Raised when an input to the URL builder can't be used to build a URL.
    """

    pass


class MalformedTimestamp(ValidationError):
    """
    Raised when a capture timestamp is not of the form YYYY-MM-DD HH:MM:SS or one of its
    components is out of range (month 13, 25 o'clock, Feb 30th...).
    """

    pass


TIMESTAMP_PATTERN = re.compile(
    r"^(?P<year>[0-9]{4})-(?P<month>[0-9]{2})-(?P<day>[0-9]{2})"
    r" (?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})$"
)


def parse_timestamp(text: str) -> datetime:
    """
    Parse the vendor timestamp string into a naive datetime. Surrounding whitespace is
    ignored, anything else that doesn't match the expected layout raises MalformedTimestamp.
    """

    if not isinstance(text, str):
        raise MalformedTimestamp(f"Timestamp must be a string, got {type(text).__name__}.")

    match = TIMESTAMP_PATTERN.match(text.strip())
    if match is None:
        raise MalformedTimestamp(
            f"Timestamp {text!r} is not of the form YYYY-MM-DD HH:MM:SS."
        )

    # datetime() does the range checks for us, including days per month and leap years
    try:
        return datetime(**{key: int(value) for key, value in match.groupdict().items()})
    except ValueError as error:
        raise MalformedTimestamp(f"Timestamp {text!r} is out of range: {error}.")


def build_image_url(timestamp: Union[datetime, str], template: str) -> str:
    """
    Build the URL of the image captured at timestamp. Accepts either an already parsed
    datetime or the raw vendor string.

    >>> build_image_url("2023-10-27 08:03:05", "https://example.com/1d/550")
    'https://example.com/1d/550/2023/10/27/080305_0_0.png'
    """

    if isinstance(timestamp, str):
        timestamp = parse_timestamp(timestamp)

    elif not isinstance(timestamp, datetime):
        raise MalformedTimestamp(
            f"Timestamp must be a datetime or a string, got {type(timestamp).__name__}."
        )

    # strftime zero pads %m %d %H %M %S, but %Y does not pad years below 1000 on every
    # platform so format the year ourselves
    path_components = [
        template.removesuffix("/"),
        f"{timestamp.year:04d}",
        timestamp.strftime("%m"),
        timestamp.strftime("%d"),
        timestamp.strftime("%H%M%S") + "_0_0.png",
    ]

    return "/".join(path_components)
