"""
Wallpaper backend base classes

A backend (Strategy) is one self contained way of setting the desktop wallpaper. Each
has two halves:

- is_available(): a capability probe. Is the program this backend drives installed,
  and (for Wayland compositors) is a Wayland session running? Probing never changes
  anything on the desktop.
- apply(): actually set the wallpaper. Returns True on success and False otherwise.
  A backend whose program exists but fails (wrong desktop, daemon not running...)
  returns False so the next backend gets a chance.

desktops lists lowercase prefixes of the XDG_CURRENT_DESKTOP / DESKTOP_SESSION tokens the
backend belongs to. They're only used to try the backend for the running desktop first,
never to decide whether it is available.

Most backends boil down to a single command, which CommandStrategy expresses
declaratively. Backends that need several commands subclass Strategy.
"""

from pathlib import Path
from typing import Mapping, Optional, Sequence

from himawari.executor import CommandExecutor

# distributions that put their own name in XDG_CURRENT_DESKTOP / DESKTOP_SESSION. Their
# flavours (xubuntu, lubuntu...) run other desktops, so these only count when no token
# names an actual desktop.
DISTRIBUTION_TAGS = ("ubuntu", "pop")


def file_uri(path: Path) -> str:
    """
    Return path as an absolute file:// URI, percent-encoding anything that needs it.
    """

    return Path(path).absolute().as_uri()


class Strategy:
    """
    Base class for wallpaper backends.
    """

    name: str = ""
    desktops: tuple = ()
    requires: tuple = ()
    wayland_only: bool = False

    def is_available(self, executor: CommandExecutor, env: Mapping[str, str]) -> bool:
        if self.wayland_only and not env.get("WAYLAND_DISPLAY"):
            return False

        return all(executor.which(program) for program in self.requires)

    def apply(self, path: Path, executor: CommandExecutor) -> bool:
        raise NotImplementedError

    def matches_desktop(self, tokens: Sequence[str], distributions: bool = True) -> bool:
        """
        True if one of the desktop hint tokens names one of this backend's desktops.
        A token matches a tag it starts with, so "plasmawayland" counts as "plasma" but
        "xubuntu" doesn't count as "ubuntu". With distributions=False, tags that name a
        distribution rather than a desktop (see DISTRIBUTION_TAGS) are ignored.
        """

        desktops = [
            desktop
            for desktop in self.desktops
            if distributions or desktop not in DISTRIBUTION_TAGS
        ]

        return any(token.startswith(desktop) for token in tokens for desktop in desktops)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


class CommandStrategy(Strategy):
    """
    A backend that sets the wallpaper with a single command. command is an argv template
    where "{path}" and "{uri}" are replaced with the image's absolute path and
    file:// URI respectively. The first item is the program; it is also the
    capability probe unless requires says otherwise.
    """

    def __init__(
        self,
        name: str,
        command: tuple,
        desktops: tuple = (),
        requires: Optional[tuple] = None,
        wayland_only: bool = False,
    ):
        self.name = name
        self.command = tuple(command)
        self.desktops = tuple(desktops)
        self.requires = tuple(requires) if requires is not None else (self.command[0],)
        self.wayland_only = wayland_only

    def build_command(self, path: Path) -> list:
        path = Path(path).absolute()
        return [
            arg.format(path=path, uri=file_uri(path)) for arg in self.command
        ]

    def apply(self, path: Path, executor: CommandExecutor) -> bool:
        return executor.run(self.build_command(path)).ok
