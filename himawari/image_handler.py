"""
Image Handler

Download the full-disk image to its fixed location on disk and make sure what we got is
actually an image. The Himawari service answers some requests for images that don't exist
(yet) with an HTML error page or an empty body, and setting that as a wallpaper leaves the
desktop blank, so a file that fails validation is deleted instead of left in place.

The destination is overwritten on every run; only one image is ever kept. The body is
first written to a hidden ".part" file next to it and moved over the destination once it
has been validated, so the desktop never reads a half written image.
"""

import os
from pathlib import Path
from time import monotonic

from PIL import Image, UnidentifiedImageError
import requests

CHUNK_SIZE = 64 * 1024

# the requests timeout only bounds each read, this bounds the whole transfer
MAX_DOWNLOAD_SECONDS = 300.0


class DownloadError(Exception):
    """
    Raised when an image download is unsuccessful.
    """

    pass


class NetworkFailure(DownloadError):
    """
    Raised when the image could not be transferred to the destination, either because of
    the network or because the destination can't be written.
    """

    pass


class InvalidContent(DownloadError):
    """
    Raised when the downloaded file is not an image. Wrapper around the PIL
    UnidentifiedImageError for better identification of errors during debugging
    and custom error messaging.
    """

    pass


def validate_image(input) -> str:
    """
    Determine whether input is a valid image and return its format (e.g. 'PNG').
    Uses PIL to identify the file from its header and verify() to check the data
    that follows without decoding the whole image.
    See the PIL docs on identifying images for more info: https://pillow.readthedocs.io/en/stable/handbook/tutorial.html#identify-image-files
    """

    path = Path(input)

    try:
        if path.stat().st_size == 0:
            raise InvalidContent(f"{path} is empty.")
    except FileNotFoundError:
        raise InvalidContent(f"{path} could not be found.")

    try:
        with Image.open(path) as image:
            image_format = image.format
            image.verify()

    except UnidentifiedImageError:
        raise InvalidContent(f"{path} does not appear to be an image.")

    # verify() reports truncated or corrupt data with a variety of exception types
    except (OSError, SyntaxError, ValueError) as error:
        raise InvalidContent(f"{path} is not a valid image: {error}")

    return image_format


def _remove(path: Path) -> None:
    path.unlink(missing_ok=True)


def partial_path(destination: Path) -> Path:
    """
    Where an image is written while it is being downloaded, e.g. .himawari8_latest.png.part
    """

    return destination.with_name(f".{destination.name}.part")


def download_and_validate(
    url: str,
    destination,
    timeout: float = 30.0,
    max_duration: float = MAX_DOWNLOAD_SECONDS,
) -> Path:
    """
    Download the image at url to destination, overwriting whatever is there, and validate it.
    The parent directory is created if it does not exist. Returns the absolute location of
    the saved image.

    timeout bounds connecting and each read; max_duration bounds the whole transfer.

    Raise NetworkFailure if the transfer fails and InvalidContent if the result is not an
    image. A failed transfer leaves the previous image untouched; content that is not an
    image removes it, so no file is left at destination.
    """

    destination_path = Path(destination).expanduser().absolute()
    partial = partial_path(destination_path)

    # edge case where destination path is a folder
    if destination_path.is_dir():
        raise NetworkFailure(f"Destination file {destination_path} is a directory.")

    try:
        destination_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise NetworkFailure(
            f"Could not create save directory {destination_path.parent}: {error}"
        )

    started = monotonic()

    try:
        r = requests.get(url, timeout=timeout, stream=True)
    except requests.exceptions.RequestException as error:
        raise NetworkFailure(f"Failed to download image from {url}: {error}")

    try:
        # successful request but received a bad response from the server.
        try:
            r.raise_for_status()
        except requests.exceptions.HTTPError:
            raise NetworkFailure(
                f"Failed to download image from {url} (status code {r.status_code})"
            )

        try:
            with open(partial, "wb") as file:
                for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
                    file.write(chunk)

                    if monotonic() - started > max_duration:
                        raise NetworkFailure(
                            f"Download of {url} took longer than {max_duration:g}s, giving up."
                        )

        except NetworkFailure:
            _remove(partial)
            raise

        except requests.exceptions.RequestException as error:
            _remove(partial)
            raise NetworkFailure(f"Download of {url} was interrupted: {error}")

        except OSError as error:
            _remove(partial)
            raise NetworkFailure(f"Could not write {destination_path}: {error}")

    finally:
        r.close()

    # successful request but did not get back image data as the response.
    try:
        validate_image(partial)
    except InvalidContent as error:
        _remove(partial)
        _remove(destination_path)
        raise InvalidContent(
            f"Downloaded file does not appear to be a valid image ({error}). "
            f"Check the URL manually: {url}"
        )

    try:
        os.replace(partial, destination_path)
    except OSError as error:
        _remove(partial)
        raise NetworkFailure(f"Could not write {destination_path}: {error}")

    return destination_path
