"""Byte sequences sent to a shell for key presses, pastes and directory changes."""

from __future__ import annotations

from typing import Optional

from orchestraterm.keymap import Key, Modifiers

_LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_CTRL_BYTES = {Key[letter]: code for code, letter in enumerate(_LETTERS, start=1)}

_ALT_KEYS = {
    Key.ARROW_LEFT: b"\x1bb",
    Key.ARROW_RIGHT: b"\x1bf",
}

_PLAIN_KEYS = {
    Key.ENTER: b"\r",
    Key.BACKSPACE: b"\x7f",
    Key.TAB: b"\t",
    Key.ARROW_UP: b"\x1b[A",
    Key.ARROW_DOWN: b"\x1b[B",
    Key.ARROW_RIGHT: b"\x1b[C",
    Key.ARROW_LEFT: b"\x1b[D",
    Key.HOME: b"\x1b[H",
    Key.END: b"\x1b[F",
    Key.INSERT: b"\x1b[2~",
    Key.DELETE: b"\x1b[3~",
    Key.PAGE_UP: b"\x1b[5~",
    Key.PAGE_DOWN: b"\x1b[6~",
    Key.F1: b"\x1bOP",
    Key.F2: b"\x1bOQ",
    Key.F3: b"\x1bOR",
    Key.F4: b"\x1bOS",
    Key.F5: b"\x1b[15~",
    Key.F6: b"\x1b[17~",
    Key.F7: b"\x1b[18~",
    Key.F8: b"\x1b[19~",
    Key.F9: b"\x1b[20~",
    Key.F10: b"\x1b[21~",
    Key.F11: b"\x1b[23~",
    Key.F12: b"\x1b[24~",
    Key.ESCAPE: b"\x1b",
}

PASTE_START = b"\x1b[200~"
PASTE_END = b"\x1b[201~"


def ctrl_key_to_byte(key: Key) -> Optional[int]:
    """Return the control character for Ctrl plus a letter key."""
    return _CTRL_BYTES.get(key)


def key_to_bytes(key: Key, modifiers: Modifiers = Modifiers()) -> Optional[bytes]:
    """Return the bytes a key press sends to the shell, or None if it sends nothing."""
    if modifiers.command:
        return None
    if modifiers.ctrl:
        code = ctrl_key_to_byte(key)
        return None if code is None else bytes([code])
    if modifiers.alt:
        return _ALT_KEYS.get(key)
    if key is Key.TAB and modifiers.shift:
        return b"\x1b[Z"
    return _PLAIN_KEYS.get(key)


def paste_bytes(text: str) -> bytes:
    """Wrap pasted text in bracketed-paste markers."""
    return PASTE_START + text.encode("utf-8") + PASTE_END


def shell_quote(text: str) -> str:
    """Quote text in single quotes for a POSIX shell."""
    return "'" + text.replace("'", "'\"'\"'") + "'"


def cd_command(path: str) -> str:
    """Return the shell command that changes into the given directory."""
    return f"cd {shell_quote(path)}"