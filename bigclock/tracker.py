import logging
import subprocess
import threading
from typing import List, Optional

log = logging.getLogger(__name__)


class CommandError(RuntimeError):
    """An external tool could not be launched."""


def split_command(command: str) -> List[str]:
    # Plain whitespace split; quoting is not supported.
    return command.split()


class Tracker:
    """Time-tracking hooks, e.g. ``timew continue`` / ``timew stop``.

    A tracker without a program is a no-op.
    """

    def __init__(self, program: Optional[str] = "timew") -> None:
        self.program = program

    @property
    def enabled(self) -> bool:
        return bool(self.program)

    def _run(self, action: str) -> None:
        if not self.enabled:
            return
        args = [self.program, action]
        log.info("tracker: %s", " ".join(args))
        try:
            subprocess.run(args, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL, check=False)
        except OSError as exc:
            raise CommandError(f"failed to run {' '.join(args)!r}: {exc}") from exc

    def resume(self) -> None:
        self._run("continue")

    def stop(self) -> None:
        self._run("stop")


def launch(command: str) -> subprocess.Popen:
    """Start ``command`` detached from this process and return immediately."""
    args = split_command(command)
    if not args:
        raise CommandError("empty command")
    log.info("launching completion command: %s", args)
    try:
        proc = subprocess.Popen(args, start_new_session=True)
    except OSError as exc:
        raise CommandError(f"failed to run {command!r}: {exc}") from exc
    # reap the child once it exits
    threading.Thread(target=proc.wait, name="bigclock-reaper", daemon=True).start()
    return proc
