import logging
import os
import sys
import termios
import threading
from contextlib import contextmanager
from typing import Iterator, Optional, Union

log = logging.getLogger(__name__)

PAUSE_KEY = " "
QUIT_KEY = "q"


class Controls:
    """Run and pause flags shared between the key watcher and a display loop.

    The watcher thread is the only writer; loops only read the flags and wait
    on them.
    """

    def __init__(self) -> None:
        self._stopped = threading.Event()
        self._paused = threading.Event()

    @property
    def running(self) -> bool:
        return not self._stopped.is_set()

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    def quit(self) -> None:
        self._stopped.set()

    def toggle_pause(self) -> None:
        if self._paused.is_set():
            self._paused.clear()
        else:
            self._paused.set()

    def handle_key(self, key: Union[bytes, str]) -> None:
        if isinstance(key, bytes):
            key = key.decode("latin-1")
        if key == PAUSE_KEY:
            self.toggle_pause()
            log.debug("pause toggled: paused=%s", self.paused)
        elif key == QUIT_KEY:
            self.quit()
            log.debug("quit requested")

    def wait(self, seconds: float) -> bool:
        """Sleep up to ``seconds``; returns early once quit is requested.

        Returns True while the loop should keep running.
        """
        return not self._stopped.wait(max(0.0, seconds))


@contextmanager
def raw_terminal(fd: Optional[int] = None) -> Iterator[bool]:
    """Disable line buffering and echo on ``fd`` until the block exits.

    Yields False without touching anything when ``fd`` is not a terminal.
    """
    if fd is None:
        fd = sys.stdin.fileno()
    if not os.isatty(fd):
        yield False
        return
    original = termios.tcgetattr(fd)
    changed = termios.tcgetattr(fd)
    changed[3] &= ~(termios.ICANON | termios.ECHO)
    termios.tcsetattr(fd, termios.TCSANOW, changed)
    try:
        yield True
    finally:
        termios.tcsetattr(fd, termios.TCSANOW, original)


class InputWatcher(threading.Thread):
    """Daemon thread feeding single keystrokes from ``fd`` into ``controls``."""

    def __init__(self, controls: Controls, fd: Optional[int] = None) -> None:
        super().__init__(name="bigclock-input", daemon=True)
        self.controls = controls
        self.fd = sys.stdin.fileno() if fd is None else fd

    def run(self) -> None:
        while self.controls.running:
            try:
                key = os.read(self.fd, 1)
            except OSError as exc:
                log.warning("stopped reading keys: %s", exc)
                return
            if not key:
                log.debug("input closed")
                return
            self.controls.handle_key(key)
