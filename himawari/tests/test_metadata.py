"""
Tests for metadata.py

Validate that the latest image timestamp is read from latest.json and that every way the
document can be unusable is reported as the right kind of FetchError.

*** MOCKING REQUEST CALLS ***

requests.get is patched with a MagicMock so no network call is made. Responses are built
with the make_response fixture from conftest.py.
"""

import unittest.mock
from datetime import datetime

import pytest
import requests

# following entities are tested in this module:
from himawari.metadata import fetch_latest_metadata
from himawari.metadata import fetch_latest_timestamp
from himawari.metadata import parse_metadata
from himawari.metadata import FetchError
from himawari.metadata import NetworkFailure
from himawari.metadata import ParseFailure

JSON_URL = "https://himawari8-dl.nict.go.jp/himawari8/img/D531106/latest.json"


@unittest.mock.patch("himawari.metadata.requests.get", autospec=True)
def test_fetch_latest_metadata_success(mock_get, make_response):

    response = make_response(
        json={
            "date": "2023-10-27 08:00:00",
            "file": "PI_H08_20231027_0800_TRC_FLDK_R10_PGPFD.png",
        }
    )
    mock_get.return_value = response

    metadata = fetch_latest_metadata(JSON_URL, timeout=5)

    assert metadata.capture_timestamp == datetime(2023, 10, 27, 8, 0, 0)
    assert metadata.raw_date == "2023-10-27 08:00:00"
    mock_get.assert_called_once_with(JSON_URL, timeout=5)
    response.close.assert_called_once()


@unittest.mock.patch("himawari.metadata.requests.get", autospec=True)
def test_fetch_latest_timestamp(mock_get, make_response):

    mock_get.return_value = make_response(json={"date": "2024-01-01 00:00:00"})

    assert fetch_latest_timestamp(JSON_URL) == datetime(2024, 1, 1)


@pytest.mark.parametrize(
    "document",
    [
        {"date": None},
        {},
        {"date": ""},
        {"date": "   "},
        {"date": "null"},
        {"date": "yesterday"},
        {"date": "2023-13-45 99:99:99"},
        {"date": 20240101},
        ["2024-01-01 00:00:00"],
        "2024-01-01 00:00:00",
        None,
    ],
)
@unittest.mock.patch("himawari.metadata.requests.get", autospec=True)
def test_fetch_latest_metadata_parse_failure(mock_get, make_response, document):

    response = make_response(json=document)
    mock_get.return_value = response

    with pytest.raises(ParseFailure):
        fetch_latest_metadata(JSON_URL)

    response.close.assert_called_once()


@unittest.mock.patch("himawari.metadata.requests.get", autospec=True)
def test_fetch_latest_metadata_not_json(mock_get, make_response):

    response = make_response()
    response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    mock_get.return_value = response

    with pytest.raises(ParseFailure):
        fetch_latest_metadata(JSON_URL)

    response.close.assert_called_once()


@pytest.mark.parametrize(
    "error",
    [
        requests.exceptions.ConnectionError("connection refused"),
        requests.exceptions.Timeout("read timed out"),
        requests.exceptions.TooManyRedirects("too many redirects"),
    ],
)
@unittest.mock.patch("himawari.metadata.requests.get", autospec=True)
def test_fetch_latest_metadata_network_failure(mock_get, error):

    mock_get.side_effect = error

    with pytest.raises(NetworkFailure):
        fetch_latest_metadata(JSON_URL)


@pytest.mark.parametrize("status_code", [404, 500, 503])
@unittest.mock.patch("himawari.metadata.requests.get", autospec=True)
def test_fetch_latest_metadata_bad_status(mock_get, make_response, status_code):

    response = make_response(json={"date": "2024-01-01 00:00:00"}, status_code=status_code)
    mock_get.return_value = response

    with pytest.raises(NetworkFailure) as excinfo:
        fetch_latest_metadata(JSON_URL)

    assert str(status_code) in str(excinfo.value)
    response.close.assert_called_once()


def test_parse_metadata_ignores_other_fields():
    metadata = parse_metadata({"date": "2023-10-27 08:03:05", "file": "x.png", "extra": 1})

    assert metadata.capture_timestamp == datetime(2023, 10, 27, 8, 3, 5)


def test_fetch_errors_share_a_base():
    assert issubclass(NetworkFailure, FetchError)
    assert issubclass(ParseFailure, FetchError)
