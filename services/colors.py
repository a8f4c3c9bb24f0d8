# Terminal colors (xterm 256-color indices) and per-user label colors.
#
# COLOR_DEFAULT (-1) means "leave the terminal's own color alone".

from __future__ import annotations

import hashlib
import threading

COLOR_DEFAULT    = -1
COLOR_BACKGROUND = 234
COLOR_LOWLIGHT   = 238  # mention background
COLOR_BLUE       = 33   # hashtag foreground

# Name label colors, one picked per user id
LABEL_COLORS: tuple[int, ...] = (
    160,  # red
    166,  # orange
    178,  # gold
    70,   # green
    37,   # teal
    39,   # sky
    62,   # slate blue
    128,  # purple
    168,  # pink
    137,  # tan
)


class LabelColorAssigner:
    """
    Memoized user-id → label color lookup.

    The palette index is an md5 of the id modulo the palette size, so the same
    id gets the same color in every run. Entries are only ever added.
    """

    def __init__(self, palette: tuple[int, ...] = LABEL_COLORS):
        if not palette:
            raise ValueError("palette must not be empty")
        self._palette = palette
        self._assigned: dict[str, int] = {}
        self._lock = threading.Lock()

    def index_for(self, ident: int | str) -> int:
        key = str(ident)
        with self._lock:
            index = self._assigned.get(key)
            if index is None:
                digest = hashlib.md5(key.encode("utf-8")).digest()
                index = int.from_bytes(digest[:8], "big") % len(self._palette)
                self._assigned[key] = index
            return index

    def color_for(self, ident: int | str) -> int:
        return self._palette[self.index_for(ident)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._assigned)


# Shared instance for the whole process
label_colors = LabelColorAssigner()
