"""
Window manager and compositor backends (Sway, Hyprland, Enlightenment)

Sway and Hyprland are Wayland compositors: their tools only work from inside a Wayland
session, so those backends are unavailable unless WAYLAND_DISPLAY is set.
"""

from pathlib import Path

from himawari.backends.base import CommandStrategy
from himawari.backends.base import Strategy
from himawari.executor import CommandExecutor

HYPRCTL = "hyprctl"


class HyprpaperStrategy(Strategy):
    """
    Hyprland draws wallpapers with hyprpaper, which must preload an image before it can be
    shown. An empty monitor name applies it to every monitor.
    """

    name = "hyprland"
    desktops = ("hyprland",)
    requires = (HYPRCTL,)
    wayland_only = True

    def apply(self, path: Path, executor: CommandExecutor) -> bool:
        path = str(Path(path).absolute())

        if not executor.run([HYPRCTL, "hyprpaper", "preload", path]).ok:
            return False

        return executor.run([HYPRCTL, "hyprpaper", "wallpaper", f",{path}"]).ok


sway = CommandStrategy(
    name="sway",
    command=("swaymsg", "output", "*", "bg", "{path}", "fill"),
    desktops=("sway",),
    wayland_only=True,
)

hyprland = HyprpaperStrategy()

enlightenment = CommandStrategy(
    name="enlightenment",
    command=("enlightenment_remote", "-desktop-bg-add", "0", "0", "0", "0", "{path}"),
    desktops=("enlightenment",),
)
