"""
Generic X11 wallpaper tools

Used by bare window managers (i3, bspwm, openbox...) that have no wallpaper setting of
their own. These are the last resort since they draw on the X root window, which a full
desktop environment would simply paint over.
"""

from himawari.backends.base import CommandStrategy

feh = CommandStrategy(name="feh", command=("feh", "--bg-scale", "{path}"))

hsetroot = CommandStrategy(name="hsetroot", command=("hsetroot", "-fill", "{path}"))

nitrogen = CommandStrategy(
    name="nitrogen", command=("nitrogen", "--set-scaled", "--save", "{path}")
)

xwallpaper = CommandStrategy(name="xwallpaper", command=("xwallpaper", "--stretch", "{path}"))
