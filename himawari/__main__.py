"""
__main__.py

This file adds support for running himawari as a python module instead of invoking the
"himawari" command line entrypoint:

    $ python -m himawari --no-apply
"""


from himawari.cli import main


if __name__ == "__main__":
    main()
