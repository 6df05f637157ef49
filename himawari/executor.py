"""
Command Executor

Every desktop integration in himawari comes down to running some external program
(gsettings, xfconf-query, qdbus, feh...) and looking at its exit status. CommandExecutor
wraps subprocess so that the wallpaper backends never deal with processes directly:
they ask whether a program exists (which) and run it (run), and always get a
CommandResult back instead of an exception. Tests swap in a fake executor.
"""

import shutil
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence

DEFAULT_COMMAND_TIMEOUT = 15.0

# exit statuses used by the shell for the same situations
EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124


@dataclass(frozen=True)
class CommandResult:
    """
    Outcome of a single command invocation.
    """

    args: tuple
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandExecutor:
    """
    Run external commands through subprocess with a bounded timeout.
    """

    def __init__(self, timeout: float = DEFAULT_COMMAND_TIMEOUT):
        self.timeout = timeout

    def which(self, name: str) -> Optional[str]:
        """
        Capability probe. Return the full path of executable name, or None if it is not
        on PATH.
        """

        return shutil.which(name)

    def run(self, args: Sequence[str], timeout: Optional[float] = None) -> CommandResult:
        """
        Run args (no shell involved) and capture its output. A non-zero exit, a missing
        executable or a timeout are all reported through the returned CommandResult.
        """

        args = tuple(str(arg) for arg in args)
        if timeout is None:
            timeout = self.timeout

        try:
            process = subprocess.run(
                args,
                check=True,
                text=True,
                # desktop tools sometimes print paths that are not valid UTF-8
                errors="replace",
                timeout=timeout,
                stdin=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                stdout=subprocess.PIPE,
            )

        except subprocess.CalledProcessError as error:
            return CommandResult(
                args, error.returncode, error.stdout or "", error.stderr or ""
            )

        except subprocess.TimeoutExpired:
            return CommandResult(
                args, EXIT_TIMEOUT, "", f"{args[0]} timed out after {timeout}s"
            )

        except OSError as error:
            return CommandResult(args, EXIT_NOT_FOUND, "", str(error))

        return CommandResult(args, process.returncode, process.stdout, process.stderr)
