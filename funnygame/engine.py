"""Terminal drawing primitives and a diff-redrawing character board."""

from __future__ import annotations

import io
import math
import os
import random
import select
import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterator, Optional, TextIO

try:
    import termios
except ImportError:  # pragma: no cover - platforms without termios
    termios = None  # type: ignore[assignment]

ESC = "\x1b"
DEFAULT_COLOR = 16


class Color(IntEnum):
    """ANSI foreground colour codes; background codes are these plus 10."""

    BLACK = 30
    RED = 31
    GREEN = 32
    YELLOW = 33
    BLUE = 34
    PURPLE = 35
    CYAN = 36
    LIGHT_GRAY = 37
    GRAY = 90
    LIGHT_RED = 91
    LIGHT_GREEN = 92
    LIGHT_YELLOW = 93
    LIGHT_BLUE = 94
    MAGENTA = 95
    SKY_BLUE = 96
    WHITE = 97


class Key(str, Enum):
    """Characters produced by special keys; arrows are the final escape byte."""

    ENTER = "\n"
    P = "p"
    SPACE = " "
    UP = "A"
    LEFT = "D"
    DOWN = "B"
    RIGHT = "C"


@dataclass(frozen=True)
class Pixel:
    """A single board cell: a character with background and foreground colours."""

    val: str
    bgc: int = DEFAULT_COLOR
    fgc: int = DEFAULT_COLOR


def dist(x1: int, y1: int, x2: int, y2: int) -> float:
    """Euclidean distance between two points."""
    return math.hypot(x2 - x1, y2 - y1)


def rand_int(limit: int, rng: Optional[random.Random] = None) -> int:
    """Return a random integer between 0 and limit, both inclusive."""
    if limit < 0:
        raise ValueError("limit must not be negative")
    source = rng if rng is not None else random
    return source.randint(0, limit)


def delay(ms: int) -> None:
    """Sleep for the given number of milliseconds."""
    time.sleep(ms / 1000)


class Terminal:
    """ANSI terminal output and keyboard input over a pair of text streams."""

    def __init__(self, out: Optional[TextIO] = None, inp: Optional[TextIO] = None):
        self.out = out if out is not None else sys.stdout
        self.inp = inp if inp is not None else sys.stdin

    def write(self, text: str) -> None:
        self.out.write(text)

    def flush(self) -> None:
        self.out.flush()

    def clear_screen(self) -> None:
        self.write("\033[2J\033[1;1H")

    def show_cursor(self, show: bool) -> None:
        self.write("\033[?25h" if show else "\033[?25l")

    def color(self, bgc: int, font_color: int) -> None:
        """Set background and text colour; (16, 16) restores the defaults."""
        if bgc == DEFAULT_COLOR and font_color == DEFAULT_COLOR:
            self.write("\033[0m")
        else:
            self.write(f"\033[{int(bgc) + 10};{int(font_color)}m")

    def reset_color(self) -> None:
        self.color(DEFAULT_COLOR, DEFAULT_COLOR)

    def set_cursor_pos(self, row: int, col: int) -> None:
        """Move the cursor to a zero-based row and column."""
        self.write(f"\033[{row + 1};{col + 1}H")

    def draw_pixel(self, pix: Pixel) -> None:
        """Draw a pixel at the current cursor position."""
        self.color(pix.fgc, pix.bgc)
        self.write(f"{pix.val} ")
        self.reset_color()

    def _fileno(self) -> Optional[int]:
        try:
            return self.inp.fileno()
        except (AttributeError, OSError, ValueError):
            return None

    @contextmanager
    def raw_mode(self) -> Iterator["Terminal"]:
        """Disable line buffering and echo on the input while inside the block."""
        fd = self._fileno()
        if termios is None or fd is None or not os.isatty(fd):
            yield self
            return
        old = termios.tcgetattr(fd)
        current = termios.tcgetattr(fd)
        current[3] &= ~(termios.ICANON | termios.ECHO)
        current[6][termios.VMIN] = 1
        current[6][termios.VTIME] = 0
        termios.tcsetattr(fd, termios.TCSANOW, current)
        try:
            yield self
        finally:
            termios.tcsetattr(fd, termios.TCSANOW, old)

    def _read_char(self) -> Optional[str]:
        fd = self._fileno()
        if fd is not None:
            data = os.read(fd, 1)
            return data.decode("latin-1") if data else None
        char = self.inp.read(1)
        return char or None

    def _ready(self) -> bool:
        fd = self._fileno()
        if fd is None:
            return True
        readable, _, _ = select.select([fd], [], [], 0)
        return bool(readable)

    def _read_key(self) -> Optional[str]:
        key = self._read_char()
        if key == ESC and self._read_char() == "[":
            key = self._read_char()
        return key

    def wait_for_key(self) -> Optional[str]:
        """Block until a key is read; arrow keys yield their final escape byte.

        Returns None when the input is exhausted.
        """
        return self._read_key()

    def get_key(self) -> Optional[str]:
        """Return a pending key without waiting, or None if there is none."""
        if not self._ready():
            return None
        return self._read_key()


class Board:
    """A grid of pixels that redraws only the cells changed since the last draw."""

    def __init__(self, length: int, height: int, filler: Pixel,
                 terminal: Optional[Terminal] = None):
        if length < 0 or height < 0:
            raise ValueError("board dimensions must not be negative")
        self.length = length
        self.height = height
        self.filler = filler
        self.terminal = terminal if terminal is not None else Terminal()
        self._board: list[list[Optional[Pixel]]] = self._blank()
        self._old: list[list[Optional[Pixel]]] = self._blank()
        self.clear(False)

    def _blank(self) -> list[list[Optional[Pixel]]]:
        return [[None] * self.length for _ in range(self.height)]

    def _check(self, row: int, col: int) -> None:
        if not (0 <= row < self.height and 0 <= col < self.length):
            raise IndexError(f"position ({row}, {col}) is outside the board")

    def write(self, row: int, col: int, pixel: Pixel) -> None:
        self._check(row, col)
        self._board[row][col] = pixel

    def erase(self, row: int, col: int) -> None:
        """Write the filler pixel at a position."""
        self.write(row, col, self.filler)

    def pixel_at(self, row: int, col: int) -> Pixel:
        self._check(row, col)
        pixel = self._board[row][col]
        assert pixel is not None
        return pixel

    def clear(self, redraw_whole_board: bool) -> None:
        """Fill the board with the filler; optionally force a full redraw next time."""
        self._board = [[self.filler] * self.length for _ in range(self.height)]
        if redraw_whole_board:
            self._old = self._blank()

    def draw(self, height_offset: int, last_col_no_space: bool) -> None:
        """Draw every cell that differs from what was drawn last time."""
        term = self.terminal
        for row, (cells, old_cells) in enumerate(zip(self._board, self._old)):
            for col, (pix, old) in enumerate(zip(cells, old_cells)):
                if pix == old or pix is None:
                    continue
                term.set_cursor_pos(row + height_offset, col * 2)
                term.color(pix.bgc, pix.fgc)
                if last_col_no_space and col >= self.length - 1:
                    term.write(pix.val)
                else:
                    term.write(f"{pix.val} ")
        self._old = [list(cells) for cells in self._board]
        term.reset_color()