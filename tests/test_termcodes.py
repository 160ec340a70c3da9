import shlex

import pytest

from orchestraterm.keymap import Key, Modifiers
from orchestraterm.termcodes import (
    cd_command,
    ctrl_key_to_byte,
    key_to_bytes,
    paste_bytes,
    shell_quote,
)

LETTERS = [Key[ch] for ch in "ABCDEFGHIJKLMNOPQRSTUVWXYZ"]


def test_ctrl_letters_pin_ends():
    assert ctrl_key_to_byte(Key.A) == 0x01
    assert ctrl_key_to_byte(Key.Z) == 0x1A


def test_ctrl_letters_are_consecutive_control_codes():
    codes = [ctrl_key_to_byte(key) for key in LETTERS]
    assert codes == sorted(codes)
    assert len(set(codes)) == 26
    assert all(1 <= code <= 26 for code in codes)


@pytest.mark.parametrize("key", [Key.ENTER, Key.F1, Key.SPACE, Key.ARROW_UP])
def test_ctrl_non_letters_have_no_byte(key):
    assert ctrl_key_to_byte(key) is None


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        (Key.ENTER, b"\r"),
        (Key.BACKSPACE, b"\x7f"),
        (Key.TAB, b"\t"),
        (Key.ARROW_UP, b"\x1b[A"),
        (Key.ARROW_DOWN, b"\x1b[B"),
        (Key.ARROW_RIGHT, b"\x1b[C"),
        (Key.ARROW_LEFT, b"\x1b[D"),
        (Key.HOME, b"\x1b[H"),
        (Key.END, b"\x1b[F"),
        (Key.INSERT, b"\x1b[2~"),
        (Key.DELETE, b"\x1b[3~"),
        (Key.PAGE_UP, b"\x1b[5~"),
        (Key.PAGE_DOWN, b"\x1b[6~"),
        (Key.F1, b"\x1bOP"),
        (Key.F4, b"\x1bOS"),
        (Key.F5, b"\x1b[15~"),
        (Key.F11, b"\x1b[23~"),
        (Key.F12, b"\x1b[24~"),
        (Key.ESCAPE, b"\x1b"),
    ],
)
def test_plain_key_sequences(key, expected):
    assert key_to_bytes(key, Modifiers()) == expected


def test_shift_tab_is_back_tab():
    assert key_to_bytes(Key.TAB, Modifiers(shift=True)) == b"\x1b[Z"


def test_ctrl_letter_sends_control_byte():
    assert key_to_bytes(Key.C, Modifiers(ctrl=True)) == bytes([0x03])
    assert key_to_bytes(Key.ENTER, Modifiers(ctrl=True)) is None


def test_alt_arrows_move_by_word():
    assert key_to_bytes(Key.ARROW_LEFT, Modifiers(alt=True)) == b"\x1bb"
    assert key_to_bytes(Key.ARROW_RIGHT, Modifiers(alt=True)) == b"\x1bf"
    assert key_to_bytes(Key.ARROW_UP, Modifiers(alt=True)) is None


def test_command_keys_send_nothing():
    assert key_to_bytes(Key.ENTER, Modifiers(command=True)) is None


def test_letters_without_modifiers_send_nothing():
    assert key_to_bytes(Key.A, Modifiers()) is None


def test_paste_is_bracketed():
    data = paste_bytes("echo 한")
    assert data.startswith(b"\x1b[200~")
    assert data.endswith(b"\x1b[201~")
    assert data[6:-6].decode("utf-8") == "echo 한"


def test_empty_paste_still_sends_markers():
    assert paste_bytes("") == b"\x1b[200~\x1b[201~"


@pytest.mark.parametrize("text", ["/tmp/plain", "/tmp/with space", "it's", "a'b'c", ""])
def test_shell_quote_round_trips_through_shell_parsing(text):
    quoted = shell_quote(text)
    assert quoted.startswith("'") and quoted.endswith("'")
    assert shlex.split(quoted) == [text]


def test_shell_quote_simple_path():
    assert shell_quote("/tmp/a b") == "'/tmp/a b'"


def test_cd_command_changes_into_path():
    path = "/home/o'neil/work dir"
    command = cd_command(path)
    assert command.startswith("cd ")
    assert shlex.split(command) == ["cd", path]