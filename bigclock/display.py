import shutil
import sys
from enum import Enum
from typing import Optional, TextIO

from pyfiglet import Figlet

from .config import DEFAULT_FONT

CLEAR = "\x1bc"
RESET = "\x1b[0m"


class Color(Enum):
    RED = "\x1b[31m"
    GREEN = "\x1b[32m"
    YELLOW = "\x1b[33m"
    BLUE = "\x1b[34m"
    MAGENTA = "\x1b[35m"
    CYAN = "\x1b[36m"
    WHITE = "\x1b[37m"
    GRAY = "\x1b[90m"
    BLACK = "\x1b[30m"
    BRIGHT_BLUE = "\x1b[94m"


PALETTE = {
    1: Color.RED,
    2: Color.GREEN,
    3: Color.YELLOW,
    4: Color.BLUE,
    5: Color.MAGENTA,
    6: Color.CYAN,
    7: Color.WHITE,
    8: Color.GRAY,
    9: Color.BLACK,
}

PAUSED_COLOR = Color.BRIGHT_BLUE


def get_color(index: int) -> Color:
    return PALETTE.get(index, Color.WHITE)


def center_line(text: str, width: int) -> str:
    padding = max(0, (width - len(text)) // 2)
    return " " * padding + text


class Display:
    """Full-screen redraw of a single big readout."""

    def __init__(self, stream: Optional[TextIO] = None, font: str = DEFAULT_FONT) -> None:
        self.stream = stream if stream is not None else sys.stdout
        # raises pyfiglet.FontNotFound for an unknown font name
        self.figlet = Figlet(font=font, justify="center")

    def _columns(self) -> int:
        return shutil.get_terminal_size().columns

    def render(self, text: str) -> str:
        self.figlet.width = self._columns()
        return self.figlet.renderText(text)

    def show(self, text: str, color: Color) -> None:
        art = self.render(text)
        self.stream.write(f"{CLEAR}{color.value}{art}{RESET}\n")
        self.stream.flush()

    def footer(self, line: str) -> None:
        self.stream.write(center_line(line, self._columns()) + "\n")
        self.stream.flush()

    def message(self, line: str) -> None:
        self.stream.write(line + "\n")
        self.stream.flush()
