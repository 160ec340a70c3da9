"""Cell metrics, grid sizing and colour mapping for drawing terminal panes."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Tuple, Union

RGB = Tuple[int, int, int]
# A terminal colour: None for the default colour, an int for a palette index,
# or an (r, g, b) tuple for a true colour.
TermColor = Optional[Union[int, RGB]]

MIN_COLS = 20
MIN_ROWS = 8
_HORIZONTAL_CHROME = 22.0
_VERTICAL_CHROME = 42.0

DEFAULT_FG: RGB = (210, 220, 230)
DEFAULT_BG: RGB = (22, 25, 29)

_BASE_COLORS: tuple[RGB, ...] = (
    (0, 0, 0),
    (205, 49, 49),
    (13, 188, 121),
    (229, 229, 16),
    (36, 114, 200),
    (188, 63, 188),
    (17, 168, 205),
    (229, 229, 229),
    (102, 102, 102),
    (241, 76, 76),
    (35, 209, 139),
    (245, 245, 67),
    (59, 142, 234),
    (214, 112, 214),
    (41, 184, 219),
    (255, 255, 255),
)


class RenderPreset(enum.Enum):
    """Named cell size presets for pane rendering."""

    BALANCED = "balanced"
    COMPACT = "compact"
    PIXEL = "pixel"

    def label(self) -> str:
        """Return the human-readable name of the preset."""
        return self.name.capitalize()


@dataclass(frozen=True)
class RenderMetrics:
    """Cell width, cell height and font size used to draw a pane."""

    cell_w: float
    cell_h: float
    font_size: float

    @classmethod
    def for_preset(cls, preset: RenderPreset) -> "RenderMetrics":
        """Return the metrics belonging to a preset."""
        return _PRESET_METRICS[preset]


_PRESET_METRICS = {
    RenderPreset.BALANCED: RenderMetrics(cell_w=9.0, cell_h=18.0, font_size=14.0),
    RenderPreset.COMPACT: RenderMetrics(cell_w=8.0, cell_h=16.0, font_size=12.5),
    RenderPreset.PIXEL: RenderMetrics(cell_w=10.0, cell_h=20.0, font_size=15.0),
}


def grid_size(width: float, height: float, preset: RenderPreset) -> tuple[int, int]:
    """Return the (cols, rows) that fit a pane of the given pixel size."""
    metrics = RenderMetrics.for_preset(preset)
    cols = int(max((width - _HORIZONTAL_CHROME) / metrics.cell_w, float(MIN_COLS)))
    rows = int(max((height - _VERTICAL_CHROME) / metrics.cell_h, float(MIN_ROWS)))
    return cols, rows


def _cube_level(value: int) -> int:
    return 0 if value == 0 else 55 + value * 40


def ansi256_to_rgb(index: int) -> RGB:
    """Return the RGB value of an entry of the 256-colour palette."""
    if not 0 <= index <= 255:
        raise ValueError(f"palette index out of range: {index}")
    if index < 16:
        return _BASE_COLORS[index]
    if index <= 231:
        cube = index - 16
        return (
            _cube_level(cube // 36),
            _cube_level((cube % 36) // 6),
            _cube_level(cube % 6),
        )
    gray = 8 + (index - 232) * 10
    return gray, gray, gray


def _resolve(color: TermColor, default: RGB) -> RGB:
    if color is None:
        return default
    if isinstance(color, int):
        return ansi256_to_rgb(color)
    r, g, b = color
    return r, g, b


def fg_color(color: TermColor) -> RGB:
    """Return the RGB foreground for a terminal colour."""
    return _resolve(color, DEFAULT_FG)


def bg_color(color: TermColor) -> RGB:
    """Return the RGB background for a terminal colour."""
    return _resolve(color, DEFAULT_BG)