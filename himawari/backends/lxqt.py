"""
LXQt / LXDE backends

Both desktops draw the wallpaper from their file manager (pcmanfm-qt on LXQt, pcmanfm on
LXDE), which accepts the wallpaper on its command line and hands it to the running
instance. stretch fills the screen; the full disk image is square, so fit would leave
bars on either side.
"""

from himawari.backends.base import CommandStrategy

WALLPAPER_MODE = "stretch"

pcmanfm_qt = CommandStrategy(
    name="pcmanfm-qt",
    command=("pcmanfm-qt", "--set-wallpaper={path}", f"--wallpaper-mode={WALLPAPER_MODE}"),
    desktops=("lxqt",),
)

pcmanfm = CommandStrategy(
    name="pcmanfm",
    command=("pcmanfm", "--set-wallpaper={path}", f"--wallpaper-mode={WALLPAPER_MODE}"),
    desktops=("lxde",),
)
