"""Copy-mode cursor, search and text selection over a screen's lines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

MAX_COORD = 0xFFFF

Point = tuple[int, int]


@dataclass
class CopyCursor:
    """Cursor and optional selection anchor used in copy mode."""

    x: int = 0
    y: int = 0
    anchor: Optional[Point] = None

    @property
    def position(self) -> Point:
        """The cursor as an (x, y) pair."""
        return self.x, self.y

    def move_up(self) -> None:
        """Move up one row, stopping at the top."""
        self.y = max(self.y - 1, 0)

    def move_down(self) -> None:
        """Move down one row."""
        self.y = min(self.y + 1, MAX_COORD)

    def move_left(self) -> None:
        """Move left one column, stopping at the left edge."""
        self.x = max(self.x - 1, 0)

    def move_right(self) -> None:
        """Move right one column."""
        self.x = min(self.x + 1, MAX_COORD)

    def start_selection(self) -> None:
        """Anchor the selection at the cursor."""
        self.anchor = self.position

    def reset(self) -> None:
        """Return the cursor to the origin and drop the selection."""
        self.x = 0
        self.y = 0
        self.anchor = None


def _as_lines(lines: Union[str, Iterable[str]]) -> list[str]:
    if isinstance(lines, str):
        return lines.splitlines()
    return list(lines)


def find_in_lines(lines: Union[str, Iterable[str]], query: str) -> Optional[Point]:
    """Return the (x, y) of the first match of the trimmed query, if any."""
    needle = query.strip()
    if not needle:
        return None
    for y, line in enumerate(_as_lines(lines)):
        x = line.find(needle)
        if x >= 0:
            return x, y
    return None


def extract_selection(
    lines: Union[str, Sequence[str]],
    anchor: Optional[Point],
    cursor: Point,
) -> Optional[str]:
    """Return the text between anchor and cursor, or None without a selection."""
    if anchor is None:
        return None
    rows = _as_lines(lines)
    if not rows:
        return None

    sx, sy = anchor
    ex, ey = cursor
    y0, y1 = min(sy, ey), max(sy, ey)
    out: list[str] = []
    for y, line in enumerate(rows[y0 : min(y1, len(rows) - 1) + 1], start=y0):
        last = len(line) - 1
        if y == y0 and y == y1:
            x0, x1 = min(sx, ex), max(sx, ex)
        elif y == y0:
            x0, x1 = sx, last
        elif y == y1:
            x0, x1 = 0, ex
        else:
            x0, x1 = 0, last
        if not line:
            out.append("")
            continue
        start = min(x0, last)
        end = min(x1, last)
        out.append(line[start : end + 1])
    return "\n".join(out)