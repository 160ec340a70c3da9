import pytest

from orchestraterm.keymap import Action, Key, Mode, Modifiers, map_key

CTRL = Modifiers(ctrl=True)
CMD = Modifiers(command=True)


@pytest.mark.parametrize("mode", list(Mode))
def test_command_o_opens_folder_in_every_mode(mode):
    assert map_key(mode, Key.O, CMD) is Action.OPEN_FOLDER


def test_normal_mode_bindings():
    assert map_key(Mode.NORMAL, Key.B, CTRL) is Action.ENTER_PREFIX
    assert map_key(Mode.NORMAL, Key.ENTER, CTRL) is Action.SEND_ENTER


@pytest.mark.parametrize("key", [Key.B, Key.ENTER, Key.S, Key.ESCAPE])
def test_normal_mode_without_ctrl_is_unbound(key):
    assert map_key(Mode.NORMAL, key, Modifiers()) is None


def test_plain_o_is_not_open_folder():
    assert map_key(Mode.PREFIX, Key.O, Modifiers()) is None


@pytest.mark.parametrize(
    ("key", "action"),
    [
        (Key.S, Action.SPLIT_HORIZONTAL),
        (Key.V, Action.SPLIT_VERTICAL),
        (Key.X, Action.CLOSE_PANE),
        (Key.Z, Action.TOGGLE_ZOOM),
        (Key.ARROW_LEFT, Action.FOCUS_PREV),
        (Key.ARROW_UP, Action.FOCUS_PREV),
        (Key.ARROW_RIGHT, Action.FOCUS_NEXT),
        (Key.ARROW_DOWN, Action.FOCUS_NEXT),
        (Key.OPEN_BRACKET, Action.ENTER_COPY_MODE),
        (Key.ESCAPE, Action.EXIT_COPY_MODE),
    ],
)
def test_prefix_mode_bindings(key, action):
    assert map_key(Mode.PREFIX, key, Modifiers()) is action


@pytest.mark.parametrize(
    ("key", "action"),
    [
        (Key.ARROW_UP, Action.COPY_MOVE_UP),
        (Key.ARROW_DOWN, Action.COPY_MOVE_DOWN),
        (Key.ARROW_LEFT, Action.COPY_MOVE_LEFT),
        (Key.ARROW_RIGHT, Action.COPY_MOVE_RIGHT),
        (Key.SPACE, Action.COPY_START_SELECTION),
        (Key.ENTER, Action.COPY_COPY_SELECTION),
        (Key.SLASH, Action.COPY_SEARCH_START),
        (Key.ESCAPE, Action.EXIT_COPY_MODE),
    ],
)
def test_copy_mode_bindings(key, action):
    assert map_key(Mode.COPY, key, Modifiers()) is action


def test_copy_search_bindings():
    assert map_key(Mode.COPY_SEARCH, Key.ENTER, Modifiers()) is Action.COPY_SEARCH_APPLY
    assert map_key(Mode.COPY_SEARCH, Key.ESCAPE, Modifiers()) is Action.EXIT_COPY_MODE
    assert map_key(Mode.COPY_SEARCH, Key.SLASH, Modifiers()) is None


def test_unbound_keys_return_none():
    assert map_key(Mode.PREFIX, Key.F5, Modifiers()) is None
    assert map_key(Mode.COPY, Key.S, Modifiers()) is None


def test_default_modifiers_are_empty():
    assert map_key(Mode.PREFIX, Key.S) is Action.SPLIT_HORIZONTAL
    assert map_key(Mode.NORMAL, Key.B) is None