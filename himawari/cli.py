"""
himawari

Set the latest full-disk image from the Himawari weather satellite as your desktop wallpaper.

This module defines the entry point to the himawari CLI. It takes no arguments: run it from
cron (or a systemd timer) every 10 minutes or so and the desktop follows the earth around.

Exit codes:
    0  the image was downloaded and set as the wallpaper
    1  the image could not be retrieved (network trouble, bad metadata, not an image)
    2  the image was downloaded but no wallpaper backend could apply it
"""

from io import StringIO
from pathlib import Path
from sys import exit
from functools import wraps

import click
from rich.table import Table

from himawari import pipeline
from himawari.config import load_config
from himawari.console import confirm_success
from himawari.console import console
from himawari.console import fail
from himawari.console import warn
from himawari.executor import CommandExecutor
from himawari.wallpaper_handler import available_backends

EXIT_FAILURE = 1
EXIT_NOT_APPLIED = 2


def catch_errors(func):
    """
    Catch and format errors with the "fail" console template and gracefully
    exit the application with an error code.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception as error:
            fail(str(error))
            exit(EXIT_FAILURE)

    return wrapper


def print_backends(executor: CommandExecutor):
    """
    Show every wallpaper backend in the order it would be tried and whether it is usable here.
    """

    table = Table(title="wallpaper backends")
    table.add_column("#", justify="right")
    table.add_column("backend")
    table.add_column("available")

    for position, (name, available) in enumerate(available_backends(executor), start=1):
        table.add_row(str(position), name, "yes" if available else "[dim]no[/]")

    console.print(table)


@click.command()
@click.option(
    "--output",
    "-o",
    "output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Where to save the image. Overwritten on every run. [default: ~/Pictures/Wallpapers/himawari8_latest.png]",
)
@click.option(
    "--base-url",
    "base_url",
    type=str,
    default=None,
    help="Base URL of the Himawari image service.",
)
@click.option(
    "--timeout",
    "timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds to wait on each network request. [default: 30]",
)
@click.option(
    "--no-apply",
    "no_apply",
    is_flag=True,
    help="Only download the image, don't touch the desktop background.",
)
@click.option(
    "--list-backends",
    "list_backends",
    is_flag=True,
    help="Show which wallpaper backends are available on this system and exit.",
)
@click.option(
    "--verbose",
    "verbosity",
    flag_value="verbose",
    default=True,
    help="Print progress to stdout.",
)
@click.option(
    "--quiet",
    "verbosity",
    flag_value="quiet",
    help="Silence progress output. Errors are still printed to stderr.",
)
@click.version_option(package_name="himawari-wallpaper")
@catch_errors
def cli(output, base_url, timeout, no_apply, list_backends, verbosity):
    """
    Himawari

    Download the most recent full-disk image of the earth taken by the Himawari
    weather satellite and set it as your desktop wallpaper.

    GNOME, Ubuntu, Budgie, Cinnamon, MATE, XFCE, KDE Plasma, LXQt, LXDE, Sway,
    Hyprland and Enlightenment are supported, as well as any window manager
    when feh, hsetroot, nitrogen or xwallpaper is installed.

    Run it every 10 minutes from cron to keep the wallpaper current:

    \b
        */10 * * * * himawari --quiet
    """

    # if verbosity is set to quiet, capture all std_out to a junk stream.
    if verbosity == "quiet":
        console.file = StringIO()

    try:
        update_wallpaper(output, base_url, timeout, no_apply, list_backends)
    finally:
        # None makes rich go back to whatever sys.stdout currently is
        console.file = None


def update_wallpaper(output, base_url, timeout, no_apply, list_backends):
    """
    Body of the cli command, run with stdout already redirected when --quiet is set.
    """

    config = load_config().override(
        HIMAWARI_IMAGE_PATH=output,
        HIMAWARI_BASE_URL=base_url,
        HIMAWARI_TIMEOUT=timeout,
    )
    executor = CommandExecutor(timeout=config.HIMAWARI_COMMAND_TIMEOUT)

    if list_backends:
        print_backends(executor)
        return

    result = pipeline.run(config, executor=executor, apply=not no_apply)

    if result is None:
        confirm_success(f"image saved to {config.HIMAWARI_IMAGE_PATH}")
        return

    if not result.applied:
        warn("wallpaper could not be set automatically.")
        warn(f"image saved to: {config.HIMAWARI_IMAGE_PATH}")
        warn("you may need to set it manually using your desktop environment's settings.")
        exit(EXIT_NOT_APPLIED)

    confirm_success(f"wallpaper updated successfully via '{result.method}'.")


def main():
    cli()


if __name__ == "__main__":
    main()
