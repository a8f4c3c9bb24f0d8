# Mention / hashtag highlighting for status text.
#
# One left-to-right pass with one rune of lookahead:
#   @name        background → COLOR_LOWLIGHT while the runes are handle-usable
#   #tag #tag2   foreground → COLOR_BLUE until a space not followed by '#'
# A hashtag only starts at the very beginning of the text or right after a
# space, and never when the '#' is followed by a space.

from __future__ import annotations

from enum import Enum
from typing import Iterator

from services.colors import COLOR_BLUE, COLOR_LOWLIGHT
from services.terminal import CellRenderer, rune_width


class HighlightMode(Enum):
    NORMAL = "normal"
    MENTION = "mention"
    HASHTAG = "hashtag"


def is_screen_name_usable(ch: str | None) -> bool:
    """ASCII letter, digit or underscore."""
    if ch is None:
        return False
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ("0" <= ch <= "9") or ch == "_"


def is_screen_name_usable_str(s: str) -> bool:
    return all(is_screen_name_usable(c) for c in s)


def iter_highlighted(
    text: str,
    fg: int,
    bg: int,
    mention_bg: int = COLOR_LOWLIGHT,
    hashtag_fg: int = COLOR_BLUE,
) -> Iterator[tuple[int, str, int, int]]:
    """
    Yield ``(column, rune, fg, bg)`` for every rune of *text*.

    Columns start at 0 and advance by display width, so a wide character
    takes two.
    """
    mode = HighlightMode.NORMAL
    fore, back = fg, bg
    col = 0
    prev: str | None = None
    last = len(text) - 1

    for i, c in enumerate(text):
        nxt = text[i + 1] if i < last else None

        if mode is HighlightMode.NORMAL:
            if c == "@":
                if is_screen_name_usable(nxt):
                    back = mention_bg
                    mode = HighlightMode.MENTION
            elif c == "#" and (i == 0 or prev == " ") and nxt is not None and nxt != " ":
                fore = hashtag_fg
                mode = HighlightMode.HASHTAG
        elif mode is HighlightMode.MENTION:
            if not is_screen_name_usable(c):
                back = bg
                mode = HighlightMode.NORMAL
        elif c == " " and nxt != "#":
            fore = fg
            mode = HighlightMode.NORMAL

        yield col, c, fore, back
        col += rune_width(c)
        prev = c


def draw_text_with_auto_notice(
    text: str,
    x: int,
    y: int,
    fg: int,
    bg: int,
    renderer: CellRenderer,
) -> int:
    """Draw *text* at (x, y) with mentions and hashtags highlighted.

    Returns the column just past the last rune.
    """
    end = x
    for col, c, fore, back in iter_highlighted(text, fg, bg):
        renderer.set_cell(x + col, y, c, fore, back)
        end = x + col + rune_width(c)
    return end
