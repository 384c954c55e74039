"""Key press events, key types and their friendly names."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class KeyType(enum.IntEnum):
    """The kind of key pressed.

    Control keys carry their ASCII control code; every other special key has
    a negative value. Printable input is reported as ``RUNES``.
    """

    # Control keys, named by their usual meaning.
    NULL = 0
    BREAK = 3
    ENTER = 13
    BACKSPACE = 127
    TAB = 9
    ESC = 27
    ESCAPE = 27

    # Control keys, named by the key combination that produces them.
    CTRL_AT = 0
    CTRL_A = 1
    CTRL_B = 2
    CTRL_C = 3
    CTRL_D = 4
    CTRL_E = 5
    CTRL_F = 6
    CTRL_G = 7
    CTRL_H = 8
    CTRL_I = 9
    CTRL_J = 10
    CTRL_K = 11
    CTRL_L = 12
    CTRL_M = 13
    CTRL_N = 14
    CTRL_O = 15
    CTRL_P = 16
    CTRL_Q = 17
    CTRL_R = 18
    CTRL_S = 19
    CTRL_T = 20
    CTRL_U = 21
    CTRL_V = 22
    CTRL_W = 23
    CTRL_X = 24
    CTRL_Y = 25
    CTRL_Z = 26
    CTRL_OPEN_BRACKET = 27
    CTRL_BACKSLASH = 28
    CTRL_CLOSE_BRACKET = 29
    CTRL_CARET = 30
    CTRL_UNDERSCORE = 31
    CTRL_QUESTION_MARK = 127

    # Other keys.
    RUNES = -1
    UP = -2
    DOWN = -3
    RIGHT = -4
    LEFT = -5
    SHIFT_TAB = -6
    HOME = -7
    END = -8
    PGUP = -9
    PGDOWN = -10
    CTRL_PGUP = -11
    CTRL_PGDOWN = -12
    DELETE = -13
    INSERT = -14
    SPACE = -15
    CTRL_UP = -16
    CTRL_DOWN = -17
    CTRL_RIGHT = -18
    CTRL_LEFT = -19
    CTRL_HOME = -20
    CTRL_END = -21
    SHIFT_UP = -22
    SHIFT_DOWN = -23
    SHIFT_RIGHT = -24
    SHIFT_LEFT = -25
    SHIFT_HOME = -26
    SHIFT_END = -27
    CTRL_SHIFT_UP = -28
    CTRL_SHIFT_DOWN = -29
    CTRL_SHIFT_LEFT = -30
    CTRL_SHIFT_RIGHT = -31
    CTRL_SHIFT_HOME = -32
    CTRL_SHIFT_END = -33
    F1 = -34
    F2 = -35
    F3 = -36
    F4 = -37
    F5 = -38
    F6 = -39
    F7 = -40
    F8 = -41
    F9 = -42
    F10 = -43
    F11 = -44
    F12 = -45
    F13 = -46
    F14 = -47
    F15 = -48
    F16 = -49
    F17 = -50
    F18 = -51
    F19 = -52
    F20 = -53

    def __str__(self) -> str:
        return key_name(self)


def _build_key_names() -> dict[int, str]:
    names: dict[int, str] = {0: "ctrl+@"}
    names.update({code: f"ctrl+{chr(ord('a') + code - 1)}" for code in range(1, 27)})
    names.update(
        {
            9: "tab",
            13: "enter",
            27: "esc",
            28: "ctrl+\\",
            29: "ctrl+]",
            30: "ctrl+^",
            31: "ctrl+_",
            127: "backspace",
        }
    )
    names.update(
        {
            KeyType.RUNES: "runes",
            KeyType.UP: "up",
            KeyType.DOWN: "down",
            KeyType.RIGHT: "right",
            KeyType.SPACE: " ",
            KeyType.LEFT: "left",
            KeyType.SHIFT_TAB: "shift+tab",
            KeyType.HOME: "home",
            KeyType.END: "end",
            KeyType.CTRL_HOME: "ctrl+home",
            KeyType.CTRL_END: "ctrl+end",
            KeyType.SHIFT_HOME: "shift+home",
            KeyType.SHIFT_END: "shift+end",
            KeyType.CTRL_SHIFT_HOME: "ctrl+shift+home",
            KeyType.CTRL_SHIFT_END: "ctrl+shift+end",
            KeyType.PGUP: "pgup",
            KeyType.PGDOWN: "pgdown",
            KeyType.CTRL_PGUP: "ctrl+pgup",
            KeyType.CTRL_PGDOWN: "ctrl+pgdown",
            KeyType.DELETE: "delete",
            KeyType.INSERT: "insert",
            KeyType.CTRL_UP: "ctrl+up",
            KeyType.CTRL_DOWN: "ctrl+down",
            KeyType.CTRL_RIGHT: "ctrl+right",
            KeyType.CTRL_LEFT: "ctrl+left",
            KeyType.SHIFT_UP: "shift+up",
            KeyType.SHIFT_DOWN: "shift+down",
            KeyType.SHIFT_RIGHT: "shift+right",
            KeyType.SHIFT_LEFT: "shift+left",
            KeyType.CTRL_SHIFT_UP: "ctrl+shift+up",
            KeyType.CTRL_SHIFT_DOWN: "ctrl+shift+down",
            KeyType.CTRL_SHIFT_LEFT: "ctrl+shift+left",
            KeyType.CTRL_SHIFT_RIGHT: "ctrl+shift+right",
        }
    )
    names.update({KeyType[f"F{n}"]: f"f{n}" for n in range(1, 21)})
    return {int(code): name for code, name in names.items()}


_KEY_NAMES = _build_key_names()


def key_name(key_type: int) -> str:
    """Return the friendly name of a key type, or ``""`` if it has none."""
    return _KEY_NAMES.get(int(key_type), "")


@dataclass(frozen=True)
class Key:
    """A key press.

    ``runes`` holds the typed characters for ``KeyType.RUNES`` events; it
    can hold several characters at once, for example from an input method
    or a bracketed paste.
    """

    type: int
    runes: str = ""
    alt: bool = False
    paste: bool = False

    def __str__(self) -> str:
        prefix = "alt+" if self.alt else ""
        if self.type == KeyType.RUNES:
            if self.paste:
                # Pastes are bracketed so they never match key bindings.
                return f"{prefix}[{self.runes}]"
            return prefix + self.runes
        name = key_name(self.type)
        if name:
            return prefix + name
        return ""


@dataclass(frozen=True)
class KeyMsg(Key):
    """A key press delivered to a program's update function."""