"""Key bindings for the normal, prefix and copy input modes."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


class Mode(enum.Enum):
    """Input mode that decides how key presses are interpreted."""

    NORMAL = "normal"
    PREFIX = "prefix"
    COPY = "copy"
    COPY_SEARCH = "copy_search"


class Action(enum.Enum):
    """Actions a key binding can trigger."""

    ENTER_PREFIX = "enter_prefix"
    ENTER_COPY_MODE = "enter_copy_mode"
    EXIT_COPY_MODE = "exit_copy_mode"
    SPLIT_HORIZONTAL = "split_horizontal"
    SPLIT_VERTICAL = "split_vertical"
    CLOSE_PANE = "close_pane"
    TOGGLE_ZOOM = "toggle_zoom"
    FOCUS_PREV = "focus_prev"
    FOCUS_NEXT = "focus_next"
    COPY_MOVE_UP = "copy_move_up"
    COPY_MOVE_DOWN = "copy_move_down"
    COPY_MOVE_LEFT = "copy_move_left"
    COPY_MOVE_RIGHT = "copy_move_right"
    COPY_START_SELECTION = "copy_start_selection"
    COPY_COPY_SELECTION = "copy_copy_selection"
    COPY_SEARCH_START = "copy_search_start"
    COPY_SEARCH_APPLY = "copy_search_apply"
    SEND_ENTER = "send_enter"
    OPEN_FOLDER = "open_folder"


class Key(enum.Enum):
    """Physical keys the terminal reacts to."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    G = "G"
    H = "H"
    I = "I"  # noqa: E741
    J = "J"
    K = "K"
    L = "L"
    M = "M"
    N = "N"
    O = "O"  # noqa: E741
    P = "P"
    Q = "Q"
    R = "R"
    S = "S"
    T = "T"
    U = "U"
    V = "V"
    W = "W"
    X = "X"
    Y = "Y"
    Z = "Z"
    ENTER = "Enter"
    BACKSPACE = "Backspace"
    TAB = "Tab"
    ESCAPE = "Escape"
    SPACE = "Space"
    SLASH = "Slash"
    OPEN_BRACKET = "OpenBracket"
    ARROW_UP = "ArrowUp"
    ARROW_DOWN = "ArrowDown"
    ARROW_LEFT = "ArrowLeft"
    ARROW_RIGHT = "ArrowRight"
    HOME = "Home"
    END = "End"
    INSERT = "Insert"
    DELETE = "Delete"
    PAGE_UP = "PageUp"
    PAGE_DOWN = "PageDown"
    F1 = "F1"
    F2 = "F2"
    F3 = "F3"
    F4 = "F4"
    F5 = "F5"
    F6 = "F6"
    F7 = "F7"
    F8 = "F8"
    F9 = "F9"
    F10 = "F10"
    F11 = "F11"
    F12 = "F12"


@dataclass(frozen=True)
class Modifiers:
    """Modifier keys held during a key press."""

    ctrl: bool = False
    alt: bool = False
    shift: bool = False
    command: bool = False


_PREFIX_BINDINGS = {
    Key.S: Action.SPLIT_HORIZONTAL,
    Key.V: Action.SPLIT_VERTICAL,
    Key.X: Action.CLOSE_PANE,
    Key.Z: Action.TOGGLE_ZOOM,
    Key.ARROW_LEFT: Action.FOCUS_PREV,
    Key.ARROW_UP: Action.FOCUS_PREV,
    Key.ARROW_RIGHT: Action.FOCUS_NEXT,
    Key.ARROW_DOWN: Action.FOCUS_NEXT,
    Key.OPEN_BRACKET: Action.ENTER_COPY_MODE,
    Key.ESCAPE: Action.EXIT_COPY_MODE,
}

_COPY_BINDINGS = {
    Key.ARROW_UP: Action.COPY_MOVE_UP,
    Key.ARROW_DOWN: Action.COPY_MOVE_DOWN,
    Key.ARROW_LEFT: Action.COPY_MOVE_LEFT,
    Key.ARROW_RIGHT: Action.COPY_MOVE_RIGHT,
    Key.SPACE: Action.COPY_START_SELECTION,
    Key.ENTER: Action.COPY_COPY_SELECTION,
    Key.SLASH: Action.COPY_SEARCH_START,
    Key.ESCAPE: Action.EXIT_COPY_MODE,
}

_COPY_SEARCH_BINDINGS = {
    Key.ENTER: Action.COPY_SEARCH_APPLY,
    Key.ESCAPE: Action.EXIT_COPY_MODE,
}


def map_key(mode: Mode, key: Key, modifiers: Modifiers = Modifiers()) -> Optional[Action]:
    """Return the action bound to a key press in the given mode, if any."""
    if modifiers.command and key is Key.O:
        return Action.OPEN_FOLDER
    if mode is Mode.NORMAL:
        if modifiers.ctrl and key is Key.B:
            return Action.ENTER_PREFIX
        if modifiers.ctrl and key is Key.ENTER:
            return Action.SEND_ENTER
        return None
    if mode is Mode.PREFIX:
        return _PREFIX_BINDINGS.get(key)
    if mode is Mode.COPY:
        return _COPY_BINDINGS.get(key)
    return _COPY_SEARCH_BINDINGS.get(key)