"""
XFCE backend

xfdesktop keeps a separate wallpaper per monitor and per workspace, stored in the
xfce4-desktop xfconf channel under properties like

    /backdrop/screen0/monitorHDMI-1/workspace0/last-image

so we list the channel and set every property ending in last-image. The number and
names of those properties depend on the hardware, which is why nothing is hard coded.
"""

from pathlib import Path

from himawari.backends.base import Strategy
from himawari.executor import CommandExecutor

XFCONF_QUERY = "xfconf-query"
CHANNEL = "xfce4-desktop"


class XfconfStrategy(Strategy):
    name = "xfce"
    desktops = ("xfce",)
    requires = (XFCONF_QUERY,)

    def image_properties(self, executor: CommandExecutor) -> list:
        result = executor.run([XFCONF_QUERY, "-c", CHANNEL, "-l"])
        if not result.ok:
            return []

        return [
            line.strip()
            for line in result.stdout.splitlines()
            if line.strip().endswith("last-image")
        ]

    def apply(self, path: Path, executor: CommandExecutor) -> bool:
        """
        Succeeds if at least one last-image property exists and could be set.
        """

        properties = self.image_properties(executor)
        if not properties:
            return False

        value = str(Path(path).absolute())
        results = [
            executor.run([XFCONF_QUERY, "-c", CHANNEL, "-p", prop, "-s", value]).ok
            for prop in properties
        ]

        return any(results)


xfce = XfconfStrategy()
