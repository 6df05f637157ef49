"""
himawari console utilities

This module provides application-wide access to Rich Console objects for writing
progress to stdout and problems to stderr. Every line is prefixed with the time it
was written, which makes the output readable when himawari runs from cron and its
output is appended to a log file.
"""

from rich.console import Console
from rich.theme import Theme

himawari_theme = Theme(
    {"warning": "orange_red1", "fail": "bold red", "confirm": "bold", "describe": ""}
)

console = Console(theme=himawari_theme, log_path=False)
error_console = Console(theme=himawari_theme, stderr=True, log_path=False)


"""
Formatting helpers
"""


def warn(msg: str):
    """
    Format msg and print to stderr.
    """

    error_console.log(f"[bold]warning:[/] {msg}", style="warning")


def describe(msg: str, **kwargs):
    """
    Format descriptive msg and print to stdout.
    """

    console.log(msg, style="describe", **kwargs)


def confirm_success(msg: str, **kwargs):
    """
    Format confirmation msg and print to stdout. Accept any additional kwargs that
    console.log from rich exposes.
    """

    console.log(msg, style="confirm", **kwargs)


def fail(msg: str):
    """
    Format failure msg and print to stderr.
    """

    error_console.log(f"failed. {msg}", style="fail")
