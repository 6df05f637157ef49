"""
conftest.py

Test configuration for himawari tests.

Defines Pytest fixtures for supplying test data to tests across the entire
test suite. Fixtures used within only a single module are defined
directly in that module. Conftest.py should only be used for universal
fixtures.

*** FakeExecutor ***

None of the tests run a real desktop command. Backends receive a FakeExecutor instead of
a CommandExecutor: it pretends that exactly the programs it was given are installed,
records every command it is asked to run and answers with canned results.
"""

import io
from dataclasses import replace
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests
from PIL import Image

from himawari.executor import CommandResult
from himawari.executor import EXIT_NOT_FOUND


class FakeExecutor:
    """
    Stand-in for CommandExecutor.

    programs: names which() reports as installed. Running anything else fails with 127.
    results: maps an argv prefix (tuple) to either a return code or a (return code, stdout)
             pair. The longest matching prefix wins; unmatched commands succeed with no output.
    """

    def __init__(self, programs=(), results=None):
        self.programs = set(programs)
        self.results = dict(results or {})
        self.calls = []

    def which(self, name):
        return f"/usr/bin/{name}" if name in self.programs else None

    def run(self, args, timeout=None):
        args = tuple(str(arg) for arg in args)
        self.calls.append(args)

        if args[0] not in self.programs:
            return CommandResult(args, EXIT_NOT_FOUND, "", f"{args[0]}: not found")

        for prefix in sorted(self.results, key=len, reverse=True):
            if args[: len(prefix)] == tuple(prefix):
                outcome = self.results[prefix]
                if isinstance(outcome, CommandResult):
                    return replace(outcome, args=args)
                if isinstance(outcome, int):
                    return CommandResult(args, outcome)
                returncode, stdout = outcome
                return CommandResult(args, returncode, stdout)

        return CommandResult(args, 0)

    def ran(self, *prefix) -> list:
        """Every recorded command starting with prefix."""

        return [call for call in self.calls if call[: len(prefix)] == prefix]


@pytest.fixture
def fake_executor():
    """
    Return the FakeExecutor class so tests can build one with the programs they need.
    """

    return FakeExecutor


@pytest.fixture(scope="session")
def png_bytes() -> bytes:
    """
    A small but complete PNG image, standing in for a Himawari full-disk image.
    """

    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=(12, 34, 56)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def test_image(tmp_path, png_bytes) -> Path:
    """
    Returns the Path of a valid PNG written into the test's temporary directory.
    """

    image = tmp_path / "himawari8_latest.png"
    image.write_bytes(png_bytes)
    return image


@pytest.fixture
def make_response():
    """
    Build a MagicMock standing in for requests.Response. json is the decoded body returned
    by .json(); content is the raw body yielded by .iter_content(); status_code >= 400 makes
    raise_for_status() raise an HTTPError like the real thing.
    """

    def inner(json=None, content=b"", status_code=200):
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = json
        response.iter_content.return_value = [content] if content else []

        if status_code >= 400:
            response.raise_for_status.side_effect = requests.exceptions.HTTPError(
                f"{status_code} Error"
            )

        return response

    return inner
