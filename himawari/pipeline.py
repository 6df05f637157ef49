"""
himawari pipeline

Ties the four stages together:

    latest.json -> capture timestamp -> image URL -> image on disk -> desktop background

Stages 1-3 fail fast: each one's output is required by the next, so any error propagates
to the caller (see cli.py for how they're reported). Stage 4 never raises; when no backend
manages to set the wallpaper the downloaded image is kept and the result says so.
"""

import os
from typing import Mapping, Optional

from himawari.config import HimawariConfig
from himawari.console import confirm_success
from himawari.console import describe
from himawari.executor import CommandExecutor
from himawari.image_handler import download_and_validate
from himawari.metadata import fetch_latest_metadata
from himawari.url_builder import build_image_url
from himawari.wallpaper_handler import ApplierResult
from himawari.wallpaper_handler import apply_wallpaper
from himawari.wallpaper_handler import desktop_hint


def run(
    config: HimawariConfig,
    executor: CommandExecutor = None,
    env: Mapping[str, str] = None,
    apply: bool = True,
) -> Optional[ApplierResult]:
    """
    Download the latest Himawari image to config.HIMAWARI_IMAGE_PATH and, if apply is set,
    make it the desktop background. Returns the applier result, or None when apply is off.
    """

    if executor is None:
        executor = CommandExecutor(timeout=config.HIMAWARI_COMMAND_TIMEOUT)
    env = os.environ if env is None else env

    describe(f"fetching latest image timestamp from {config.json_url} ...")
    metadata = fetch_latest_metadata(config.json_url, timeout=config.HIMAWARI_TIMEOUT)
    describe(f"latest image timestamp: {metadata.raw_date}")

    image_url = build_image_url(metadata.capture_timestamp, config.image_url_template)
    describe(f"constructed image URL: {image_url}")

    describe(f"downloading latest image to {config.HIMAWARI_IMAGE_PATH} ...")
    image_path = download_and_validate(
        image_url, config.HIMAWARI_IMAGE_PATH, timeout=config.HIMAWARI_TIMEOUT
    )
    confirm_success(f"image downloaded successfully to {image_path}")

    if not apply:
        return None

    describe(
        f"attempting to set wallpaper (desktop reported as '{desktop_hint(env) or 'unknown'}') ..."
    )
    return apply_wallpaper(image_path, executor=executor, env=env)
