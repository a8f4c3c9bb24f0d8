"""
Terminal drawing primitives.

The full-screen UI draws through a ``CellRenderer`` (anything with
``set_cell``). ``CellBuffer`` is the in-memory implementation: it backs the
CLI's one-shot rendering and the tests. Terminal size is process-wide state,
kept current by a SIGWINCH handler.
"""

from __future__ import annotations

import os
import signal
import sys
import unicodedata
from dataclasses import dataclass
from typing import Callable, Protocol

from services.colors import COLOR_BACKGROUND, COLOR_DEFAULT


class CellRenderer(Protocol):
    def set_cell(self, x: int, y: int, ch: str, fg: int, bg: int) -> None: ...


def rune_width(ch: str) -> int:
    """Number of terminal columns *ch* occupies (0, 1 or 2)."""
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in ("W", "F"):
        return 2
    return 1


def str_width(s: str) -> int:
    return sum(rune_width(c) for c in s)


# ---------------------------------------------------------------------------
# Terminal size
# ---------------------------------------------------------------------------

_term_width = 80
_term_height = 24


def get_term_size() -> tuple[int, int]:
    return _term_width, _term_height


def set_term_size(width: int, height: int) -> None:
    global _term_width, _term_height
    _term_width, _term_height = width, height


def query_term_size(fallback: tuple[int, int] = (80, 24)) -> tuple[int, int]:
    """Ask the OS for the current size; *fallback* when not attached to a tty."""
    try:
        size = os.get_terminal_size()
        return size.columns, size.lines
    except OSError:
        return fallback


def install_resize_handler(on_resize: Callable[[int, int], None] | None = None) -> None:
    """
    Keep ``get_term_size`` current by listening for SIGWINCH.

    *on_resize* (optional) is called with the new ``(width, height)`` so the
    screen can redraw. A handler installed earlier keeps running first.
    No-op on platforms without SIGWINCH.
    """
    set_term_size(*query_term_size())

    if sys.platform == "win32" or not hasattr(signal, "SIGWINCH"):
        return

    previous = signal.getsignal(signal.SIGWINCH)

    def handler(signum, frame):
        if callable(previous):
            previous(signum, frame)
        width, height = query_term_size()
        set_term_size(width, height)
        if on_resize is not None:
            on_resize(width, height)

    signal.signal(signal.SIGWINCH, handler)


# ---------------------------------------------------------------------------
# Drawing helpers
# ---------------------------------------------------------------------------

def draw_text(text: str, x: int, y: int, fg: int, bg: int, renderer: CellRenderer) -> int:
    """Draw *text* with one color pair; return the column after the last rune."""
    pos = x
    for c in text:
        renderer.set_cell(pos, y, c, fg, bg)
        pos += rune_width(c)
    return pos


def fill_line(offset: int, y: int, bg: int, renderer: CellRenderer) -> None:
    """Paint row *y* from *offset* to the right edge of the terminal."""
    width, _ = get_term_size()
    for x in range(offset, width):
        renderer.set_cell(x, y, " ", COLOR_BACKGROUND, bg)


# ---------------------------------------------------------------------------
# In-memory renderer
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Cell:
    ch: str
    fg: int = COLOR_DEFAULT
    bg: int = COLOR_DEFAULT


# Marks the right half of a wide character
_WIDE_TAIL = Cell("")


def _sgr(fg: int, bg: int) -> str:
    codes = ["0"]
    if fg != COLOR_DEFAULT:
        codes.append(f"38;5;{fg}")
    if bg != COLOR_DEFAULT:
        codes.append(f"48;5;{bg}")
    return "\033[" + ";".join(codes) + "m"


class CellBuffer:
    """A width x height grid of cells; writes outside the grid are dropped."""

    def __init__(self, width: int, height: int = 1):
        self.width = width
        self.height = height
        self._rows: list[list[Cell | None]] = [[None] * width for _ in range(height)]

    def set_cell(self, x: int, y: int, ch: str, fg: int, bg: int) -> None:
        if not 0 <= y < self.height:
            return
        if rune_width(ch) == 0 and 0 < x <= self.width:
            # Combining mark: join the character drawn just before it
            bx = x - 1
            if self._rows[y][bx] is _WIDE_TAIL:
                bx -= 1
            base = self._rows[y][bx]
            if base is not None:
                self._rows[y][bx] = Cell(base.ch + ch, base.fg, base.bg)
                return
        if not 0 <= x < self.width:
            return
        self._rows[y][x] = Cell(ch, fg, bg)
        if rune_width(ch) == 2 and x + 1 < self.width:
            self._rows[y][x + 1] = _WIDE_TAIL

    def cell(self, x: int, y: int) -> Cell | None:
        return self._rows[y][x]

    def text(self, y: int) -> str:
        """Plain text of row *y*, trailing blanks removed."""
        out = []
        for cell in self._rows[y]:
            if cell is _WIDE_TAIL:
                continue
            out.append(cell.ch if cell is not None else " ")
        return "".join(out).rstrip()

    def render(self) -> list[str]:
        """Rows as ANSI 256-color strings, each ending with a reset."""
        lines = []
        for row in self._rows:
            # Leave out unwritten cells at the end of the row
            last = max((i for i, cell in enumerate(row) if cell is not None), default=-1)
            parts = []
            current = None
            for cell in row[:last + 1]:
                if cell is _WIDE_TAIL:
                    continue
                if cell is None:
                    cell = Cell(" ")
                pair = (cell.fg, cell.bg)
                if pair != current:
                    parts.append(_sgr(*pair))
                    current = pair
                parts.append(cell.ch)
            parts.append("\033[0m")
            lines.append("".join(parts))
        return lines
