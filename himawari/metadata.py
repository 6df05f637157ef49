"""
Metadata Fetcher

Retrieve latest.json from the Himawari image service and pull the capture timestamp of
the most recent full-disk image out of it. The document looks like:

    {"date": "2023-10-27 08:00:00", "file": "PI_H08_20231027_0800_TRC_FLDK_R10_PGPFD.png"}

Only "date" is used, everything else is ignored. The response body is kept in memory and
the connection is released as soon as the document is parsed.
"""

from dataclasses import dataclass
from datetime import datetime

import requests

from himawari.url_builder import MalformedTimestamp
from himawari.url_builder import parse_timestamp


class FetchError(Exception):
    """
    Raised when the latest image timestamp can't be retrieved.
    """

    pass


class NetworkFailure(FetchError):
    """
    Raised when latest.json could not be downloaded (connection problems, timeouts,
    or a non 2XX response).
    """

    pass


class ParseFailure(FetchError):
    """
    Raised when latest.json was downloaded but doesn't contain a usable "date" field.
    """

    pass


@dataclass(frozen=True)
class LatestImageMetadata:
    """
    What we know about the newest published image. raw_date is kept verbatim for logging.
    """

    capture_timestamp: datetime
    raw_date: str


def parse_metadata(document) -> LatestImageMetadata:
    """
    Extract the capture timestamp from an already decoded latest.json document.
    A missing, empty, null or "null" date is a ParseFailure, as is one that isn't
    a well formed timestamp.
    """

    if not isinstance(document, dict):
        raise ParseFailure(
            f"Expected a JSON object describing the latest image, got {type(document).__name__}."
        )

    raw_date = document.get("date")

    if not isinstance(raw_date, str):
        raise ParseFailure("Could not parse date from JSON: 'date' field is missing or not a string.")

    raw_date = raw_date.strip()
    if raw_date in ("", "null"):
        raise ParseFailure("Could not parse date from JSON: 'date' field is empty.")

    try:
        capture_timestamp = parse_timestamp(raw_date)
    except MalformedTimestamp as error:
        raise ParseFailure(f"Could not parse date from JSON: {error}")

    return LatestImageMetadata(capture_timestamp=capture_timestamp, raw_date=raw_date)


def fetch_latest_metadata(url: str, timeout: float = 30.0) -> LatestImageMetadata:
    """
    Download and parse the latest.json document found at url.
    """

    try:
        r = requests.get(url, timeout=timeout)
    except requests.exceptions.RequestException as error:
        raise NetworkFailure(
            f"Failed to download latest timestamp JSON from {url}: {error}"
        )

    try:
        # successful request but received a bad response from the server.
        try:
            r.raise_for_status()
        except requests.exceptions.HTTPError:
            raise NetworkFailure(
                f"Failed to download latest timestamp JSON from {url} (status code {r.status_code})"
            )

        # requests raises a ValueError subclass when the body is not valid JSON
        try:
            document = r.json()
        except ValueError as error:
            raise ParseFailure(f"Response from {url} is not valid JSON: {error}")

    finally:
        r.close()

    return parse_metadata(document)


def fetch_latest_timestamp(url: str, timeout: float = 30.0) -> datetime:
    """
    Shortcut for callers that only care about when the latest image was captured.
    """

    return fetch_latest_metadata(url, timeout=timeout).capture_timestamp
