"""Mouse events and parsing of X10 and SGR mouse reports."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, replace


class MouseAction(enum.IntEnum):
    """What happened in a mouse event."""

    PRESS = 0
    RELEASE = 1
    MOTION = 2


class MouseButton(enum.IntEnum):
    """The button involved in a mouse event, following X11 button codes."""

    NONE = 0
    LEFT = 1
    MIDDLE = 2
    RIGHT = 3
    WHEEL_UP = 4
    WHEEL_DOWN = 5
    WHEEL_LEFT = 6
    WHEEL_RIGHT = 7
    BACKWARD = 8
    FORWARD = 9
    BUTTON_10 = 10
    BUTTON_11 = 11


class MouseEventType(enum.IntEnum):
    """Legacy classification of mouse events; prefer action and button."""

    UNKNOWN = 0
    LEFT = 1
    RIGHT = 2
    MIDDLE = 3
    RELEASE = 4
    WHEEL_UP = 5
    WHEEL_DOWN = 6
    WHEEL_LEFT = 7
    WHEEL_RIGHT = 8
    BACKWARD = 9
    FORWARD = 10
    MOTION = 11


_ACTION_NAMES = {
    MouseAction.PRESS: "press",
    MouseAction.RELEASE: "release",
    MouseAction.MOTION: "motion",
}

_BUTTON_NAMES = {
    MouseButton.NONE: "none",
    MouseButton.LEFT: "left",
    MouseButton.MIDDLE: "middle",
    MouseButton.RIGHT: "right",
    MouseButton.WHEEL_UP: "wheel up",
    MouseButton.WHEEL_DOWN: "wheel down",
    MouseButton.WHEEL_LEFT: "wheel left",
    MouseButton.WHEEL_RIGHT: "wheel right",
    MouseButton.BACKWARD: "backward",
    MouseButton.FORWARD: "forward",
    MouseButton.BUTTON_10: "button 10",
    MouseButton.BUTTON_11: "button 11",
}

_WHEEL_BUTTONS = frozenset(
    {
        MouseButton.WHEEL_UP,
        MouseButton.WHEEL_DOWN,
        MouseButton.WHEEL_LEFT,
        MouseButton.WHEEL_RIGHT,
    }
)

# Body of an SGR mouse report, after the leading "ESC [ <".
MOUSE_SGR_PATTERN = re.compile(rb"(\d+);(\d+);(\d+)([Mm])")

X10_MOUSE_BYTE_OFFSET = 32
X10_MOUSE_EVENT_LEN = 6

_BIT_SHIFT = 0b0000_0100
_BIT_ALT = 0b0000_1000
_BIT_CTRL = 0b0001_0000
_BIT_MOTION = 0b0010_0000
_BIT_WHEEL = 0b0100_0000
_BIT_ADD = 0b1000_0000
_BITS_MASK = 0b0000_0011


@dataclass(frozen=True)
class MouseEvent:
    """A click, wheel movement, cursor movement or a combination."""

    x: int = 0
    y: int = 0
    shift: bool = False
    alt: bool = False
    ctrl: bool = False
    action: int = MouseAction.PRESS
    button: int = MouseButton.NONE
    type: int = MouseEventType.UNKNOWN

    def is_wheel(self) -> bool:
        """Return True if this is a wheel event."""
        return self.button in _WHEEL_BUTTONS

    def __str__(self) -> str:
        parts = []
        if self.ctrl:
            parts.append("ctrl+")
        if self.alt:
            parts.append("alt+")
        if self.shift:
            parts.append("shift+")

        if self.button == MouseButton.NONE:
            if self.action in (MouseAction.MOTION, MouseAction.RELEASE):
                parts.append(_ACTION_NAMES[self.action])
            else:
                parts.append("unknown")
        elif self.is_wheel():
            parts.append(_BUTTON_NAMES[self.button])
        else:
            parts.append(_BUTTON_NAMES.get(self.button, ""))
            action = _ACTION_NAMES.get(self.action, "")
            if action:
                parts.append(" " + action)
        return "".join(parts)


@dataclass(frozen=True)
class MouseMsg(MouseEvent):
    """A mouse event delivered to a program's update function."""


def _legacy_type(button: int, action: int) -> MouseEventType:
    if action == MouseAction.PRESS:
        return {
            MouseButton.LEFT: MouseEventType.LEFT,
            MouseButton.MIDDLE: MouseEventType.MIDDLE,
            MouseButton.RIGHT: MouseEventType.RIGHT,
            MouseButton.WHEEL_UP: MouseEventType.WHEEL_UP,
            MouseButton.WHEEL_DOWN: MouseEventType.WHEEL_DOWN,
            MouseButton.WHEEL_LEFT: MouseEventType.WHEEL_LEFT,
            MouseButton.WHEEL_RIGHT: MouseEventType.WHEEL_RIGHT,
            MouseButton.BACKWARD: MouseEventType.BACKWARD,
            MouseButton.FORWARD: MouseEventType.FORWARD,
        }.get(button, MouseEventType.UNKNOWN)
    if action == MouseAction.RELEASE and button == MouseButton.NONE:
        return MouseEventType.RELEASE
    if action == MouseAction.MOTION:
        return {
            MouseButton.LEFT: MouseEventType.LEFT,
            MouseButton.MIDDLE: MouseEventType.MIDDLE,
            MouseButton.RIGHT: MouseEventType.RIGHT,
            MouseButton.BACKWARD: MouseEventType.BACKWARD,
            MouseButton.FORWARD: MouseEventType.FORWARD,
        }.get(button, MouseEventType.MOTION)
    return MouseEventType.UNKNOWN


def parse_mouse_button(b: int, is_sgr: bool) -> MouseEvent:
    """Decode an encoded button byte into a MouseEvent without coordinates."""
    e = b if is_sgr else b - X10_MOUSE_BYTE_OFFSET
    action = MouseAction.PRESS
    low = e & _BITS_MASK

    if e & _BIT_ADD:
        button = MouseButton(MouseButton.BACKWARD + low)
    elif e & _BIT_WHEEL:
        button = MouseButton(MouseButton.WHEEL_UP + low)
    elif low == _BITS_MASK:
        # X10 reports a release as the lowest two bits both set.
        action = MouseAction.RELEASE
        button = MouseButton.NONE
    else:
        button = MouseButton(MouseButton.LEFT + low)

    if e & _BIT_MOTION and button not in _WHEEL_BUTTONS:
        action = MouseAction.MOTION

    return MouseEvent(
        shift=bool(e & _BIT_SHIFT),
        alt=bool(e & _BIT_ALT),
        ctrl=bool(e & _BIT_CTRL),
        action=action,
        button=button,
        type=_legacy_type(button, action),
    )


def parse_sgr_mouse_event(buf: bytes) -> MouseEvent:
    """Parse an SGR mouse report such as ``ESC [ < Cb ; Cx ; Cy M``.

    Raises ValueError if the report is malformed.
    """
    match = MOUSE_SGR_PATTERN.search(bytes(buf[3:]))
    if match is None:
        raise ValueError(f"invalid SGR mouse event: {bytes(buf)!r}")

    code, px, py, final = match.groups()
    event = parse_mouse_button(int(code), True)

    # Wheels have no release; some terminals report motion as a release.
    if (
        final == b"m"
        and event.action != MouseAction.MOTION
        and not event.is_wheel()
    ):
        event = replace(
            event, action=MouseAction.RELEASE, type=MouseEventType.RELEASE
        )

    # Terminal coordinates start at (1, 1).
    return replace(event, x=int(px) - 1, y=int(py) - 1)


def parse_x10_mouse_event(buf: bytes) -> MouseEvent:
    """Parse an X10 mouse report: ``ESC [ M Cb Cx Cy``.

    Raises ValueError if fewer than six bytes are given.
    """
    if len(buf) < X10_MOUSE_EVENT_LEN:
        raise ValueError(f"X10 mouse event too short: {bytes(buf)!r}")
    code, cx, cy = buf[3:6]
    event = parse_mouse_button(code, False)
    return replace(
        event,
        x=cx - X10_MOUSE_BYTE_OFFSET - 1,
        y=cy - X10_MOUSE_BYTE_OFFSET - 1,
    )