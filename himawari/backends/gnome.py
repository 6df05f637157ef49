"""
GNOME family backends (GNOME, Ubuntu, Budgie, Cinnamon, MATE)

All of these desktops keep the wallpaper in a GSettings key and are driven through the
gsettings CLI, but each reads its own schema:

    GNOME / Ubuntu / Budgie   org.gnome.desktop.background    picture-uri (file:// URI)
                                                              picture-uri-dark (GNOME 42+)
    Cinnamon                  org.cinnamon.desktop.background picture-uri (file:// URI)
    MATE                      org.mate.background             picture-filename (raw path)

Since GNOME 42 the desktop shows picture-uri-dark while dark mode is active, so both keys
are set whenever the dark key exists. Older releases don't have it.

A schema that isn't installed means the desktop isn't either, so availability is probed
with `gsettings list-keys <schema>` on top of looking for the gsettings executable.
More information on the schemas can be found at:
https://github.com/GNOME/gsettings-desktop-schemas/blob/master/schemas/org.gnome.desktop.background.gschema.xml.in
"""

from pathlib import Path
from typing import Mapping

from himawari.backends.base import Strategy
from himawari.backends.base import file_uri
from himawari.executor import CommandExecutor

GSETTINGS = "gsettings"


class GSettingsStrategy(Strategy):
    """
    Set the wallpaper by writing key (and any optional_keys that the schema has)
    in a GSettings schema. use_uri selects a file:// URI or a plain path as the value.
    """

    requires = (GSETTINGS,)

    def __init__(
        self,
        name: str,
        schema: str,
        key: str,
        desktops: tuple,
        optional_keys: tuple = (),
        use_uri: bool = True,
    ):
        self.name = name
        self.schema = schema
        self.key = key
        self.desktops = desktops
        self.optional_keys = optional_keys
        self.use_uri = use_uri

    def _list_keys(self, executor: CommandExecutor):
        """
        Return the keys of the schema, or None if it isn't installed.
        """

        result = executor.run([GSETTINGS, "list-keys", self.schema])
        if not result.ok:
            return None

        return set(result.stdout.split())

    def is_available(self, executor: CommandExecutor, env: Mapping[str, str]) -> bool:
        if not super().is_available(executor, env):
            return False

        keys = self._list_keys(executor)
        return keys is not None and self.key in keys

    def apply(self, path: Path, executor: CommandExecutor) -> bool:
        value = file_uri(path) if self.use_uri else str(Path(path).absolute())

        if not executor.run([GSETTINGS, "set", self.schema, self.key, value]).ok:
            return False

        if not self.optional_keys:
            return True

        keys = self._list_keys(executor) or set()
        for key in self.optional_keys:
            if key in keys and not executor.run(
                [GSETTINGS, "set", self.schema, key, value]
            ).ok:
                return False

        return True


cinnamon = GSettingsStrategy(
    name="cinnamon",
    schema="org.cinnamon.desktop.background",
    key="picture-uri",
    desktops=("cinnamon",),
)

mate = GSettingsStrategy(
    name="mate",
    schema="org.mate.background",
    key="picture-filename",
    desktops=("mate",),
    use_uri=False,
)

gnome = GSettingsStrategy(
    name="gnome",
    schema="org.gnome.desktop.background",
    key="picture-uri",
    optional_keys=("picture-uri-dark",),
    desktops=("gnome", "ubuntu", "budgie", "unity", "pop"),
)
