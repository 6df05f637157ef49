"""
KDE Plasma backends

Plasma 5.24+ ships plasma-apply-wallpaperimage, a single purpose CLI that does exactly
what we need. Older installs are reached through Plasma's scripting bridge instead: a
small JavaScript snippet is evaluated by plasmashell over D-Bus which switches every
virtual desktop to the image wallpaper plugin and points it at our file.

The D-Bus CLI is called qdbus6 on Plasma 6, qdbus on most Plasma 5 distros and
qdbus-qt5 on a few (Fedora, Arch).
"""

import json
from pathlib import Path
from typing import Mapping, Optional

from himawari.backends.base import CommandStrategy
from himawari.backends.base import Strategy
from himawari.backends.base import file_uri
from himawari.executor import CommandExecutor

QDBUS_PROGRAMS = ("qdbus6", "qdbus", "qdbus-qt5")

PLASMA_SCRIPT = """
var allDesktops = desktops();
for (var i = 0; i < allDesktops.length; i++) {{
    var d = allDesktops[i];
    d.wallpaperPlugin = "org.kde.image";
    d.currentConfigGroup = Array("Wallpaper", "org.kde.image", "General");
    d.writeConfig("Image", {uri});
}}
"""


class PlasmaScriptStrategy(Strategy):
    name = "plasma-script"
    desktops = ("kde", "plasma")

    def qdbus(self, executor: CommandExecutor) -> Optional[str]:
        for program in QDBUS_PROGRAMS:
            if executor.which(program):
                return program

        return None

    def is_available(self, executor: CommandExecutor, env: Mapping[str, str]) -> bool:
        return self.qdbus(executor) is not None

    def script(self, path: Path) -> str:
        # json.dumps gives a correctly quoted and escaped JavaScript string literal
        return PLASMA_SCRIPT.format(uri=json.dumps(file_uri(path)))

    def apply(self, path: Path, executor: CommandExecutor) -> bool:
        program = self.qdbus(executor)
        if program is None:
            return False

        return executor.run(
            [
                program,
                "org.kde.plasmashell",
                "/PlasmaShell",
                "org.kde.PlasmaShell.evaluateScript",
                self.script(path),
            ]
        ).ok


plasma_apply = CommandStrategy(
    name="plasma-apply-wallpaperimage",
    command=("plasma-apply-wallpaperimage", "{path}"),
    desktops=("kde", "plasma"),
)

plasma_script = PlasmaScriptStrategy()
