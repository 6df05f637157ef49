"""
Wallpaper Handler

This module sets the desktop background on whatever desktop environment is running. There
is no reliable way to ask Linux "which desktop is this?", so instead of guessing we try
each known backend in turn:

    1. skip it if the program it needs isn't installed (capability probe)
    2. otherwise run it, and stop at the first one that reports success
    3. if it fails, carry on with the next one

The order below is the priority order. Desktop specific backends come before the generic
X11 tools, and for Plasma the dedicated CLI comes before the older scripting bridge.
XDG_CURRENT_DESKTOP and DESKTOP_SESSION are consulted only to move the running desktop's
backends to the front; when they're missing or wrong every backend is still tried.
"""

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

from himawari.backends import compositors
from himawari.backends import generic
from himawari.backends import gnome
from himawari.backends import kde
from himawari.backends import lxqt
from himawari.backends import xfce
from himawari.backends.base import Strategy
from himawari.console import describe
from himawari.console import warn
from himawari.executor import CommandExecutor

STRATEGIES = (
    gnome.cinnamon,
    gnome.mate,
    gnome.gnome,
    xfce.xfce,
    kde.plasma_apply,
    kde.plasma_script,
    lxqt.pcmanfm_qt,
    lxqt.pcmanfm,
    compositors.sway,
    compositors.hyprland,
    compositors.enlightenment,
    generic.feh,
    generic.hsetroot,
    generic.nitrogen,
    generic.xwallpaper,
)


@dataclass(frozen=True)
class ApplierResult:
    """
    Outcome of apply_wallpaper. method is the name of the backend that set the wallpaper,
    or None if none did. attempted lists every backend whose apply() was called, in order.
    """

    method: Optional[str] = None
    attempted: tuple = ()

    @property
    def applied(self) -> bool:
        return self.method is not None


def desktop_hint(env: Mapping[str, str]) -> str:
    """
    Lowercased XDG_CURRENT_DESKTOP and DESKTOP_SESSION, e.g. 'ubuntu:gnome:ubuntu'.
    """

    values = [env.get("XDG_CURRENT_DESKTOP", ""), env.get("DESKTOP_SESSION", "")]
    return ":".join(value for value in values if value).lower()


def desktop_tokens(env: Mapping[str, str]) -> list:
    """
    Split the desktop hint into whole names, e.g. 'X-Cinnamon' -> ['x', 'cinnamon'].
    """

    return [token for token in re.split(r"[:\-]", desktop_hint(env)) if token]


def ordered_strategies(
    strategies: Sequence[Strategy], env: Mapping[str, str]
) -> list:
    """
    Move the backends belonging to the desktop named in the environment to the front,
    keeping the relative order of both groups. Nothing is ever dropped.
    """

    tokens = desktop_tokens(env)
    if not tokens:
        return list(strategies)

    # a token naming the desktop itself beats a bare distribution name
    preferred = [
        strategy
        for strategy in strategies
        if strategy.matches_desktop(tokens, distributions=False)
    ]
    if not preferred:
        preferred = [strategy for strategy in strategies if strategy.matches_desktop(tokens)]

    rest = [strategy for strategy in strategies if strategy not in preferred]

    return preferred + rest


def available_backends(
    executor: CommandExecutor = None,
    env: Mapping[str, str] = None,
    strategies: Sequence[Strategy] = STRATEGIES,
) -> list:
    """
    Return (name, available) pairs in the order apply_wallpaper would try them. This is a
    diagnostic: probing doesn't change the wallpaper.
    """

    executor = CommandExecutor() if executor is None else executor
    env = os.environ if env is None else env

    return [
        (strategy.name, bool(strategy.is_available(executor, env)))
        for strategy in ordered_strategies(strategies, env)
    ]


def apply_wallpaper(
    img_path: Path,
    executor: CommandExecutor = None,
    env: Mapping[str, str] = None,
    strategies: Sequence[Strategy] = STRATEGIES,
) -> ApplierResult:
    """
    Set the desktop background to img_path using the first backend that works. Never raises
    because a backend failed: if nothing worked the returned result has applied == False
    and the image is left where it is for the user to apply by hand.
    """

    executor = CommandExecutor() if executor is None else executor
    env = os.environ if env is None else env
    img_path = Path(img_path).expanduser().absolute()

    attempted = []

    for strategy in ordered_strategies(strategies, env):

        try:
            if not strategy.is_available(executor, env):
                continue

            attempted.append(strategy.name)
            describe(f"trying '{strategy.name}' ...")

            if strategy.apply(img_path, executor):
                return ApplierResult(method=strategy.name, attempted=tuple(attempted))

        # a broken backend must not stop the others from being tried
        except Exception as error:
            warn(f"'{strategy.name}' raised an unexpected error: {error}")
            continue

        describe(f"'{strategy.name}' did not set the wallpaper, moving on.")

    return ApplierResult(method=None, attempted=tuple(attempted))
