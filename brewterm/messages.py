"""Messages and commands that control the screen and the renderer.

A command is a callable taking no arguments that returns a message. The
functions without parameters below are commands themselves. The functions
with parameters return a command.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Tuple

Command = Callable[[], object]


@dataclass(frozen=True)
class WindowSizeMsg:
    """The terminal size, sent once at start-up and again on every resize."""

    width: int
    height: int


@dataclass(frozen=True)
class RepaintMsg:
    """Forces a full repaint."""


@dataclass(frozen=True)
class ClearScreenMsg:
    """Clears the screen before the next update."""


@dataclass(frozen=True)
class EnterAltScreenMsg:
    """Switches to the alternate screen buffer."""


@dataclass(frozen=True)
class ExitAltScreenMsg:
    """Leaves the alternate screen buffer."""


@dataclass(frozen=True)
class EnableMouseCellMotionMsg:
    """Starts reporting clicks, wheel events and drag motion."""


@dataclass(frozen=True)
class EnableMouseAllMotionMsg:
    """Starts reporting clicks, wheel events and all motion."""


@dataclass(frozen=True)
class DisableMouseMsg:
    """Stops reporting mouse events."""


@dataclass(frozen=True)
class HideCursorMsg:
    """Hides the cursor."""


@dataclass(frozen=True)
class ShowCursorMsg:
    """Shows the cursor."""


@dataclass(frozen=True)
class EnableBracketedPasteMsg:
    """Turns bracketed paste on."""


@dataclass(frozen=True)
class DisableBracketedPasteMsg:
    """Turns bracketed paste off."""


@dataclass(frozen=True)
class EnableReportFocusMsg:
    """Turns focus reporting on."""


@dataclass(frozen=True)
class DisableReportFocusMsg:
    """Turns focus reporting off."""


@dataclass(frozen=True)
class SyncScrollAreaMsg:
    """Repaints the whole region set aside for scrolling."""

    lines: Tuple[str, ...]
    top_boundary: int
    bottom_boundary: int


@dataclass(frozen=True)
class ClearScrollAreaMsg:
    """Hands the scrolling region back to the normal renderer."""


@dataclass(frozen=True)
class ScrollUpMsg:
    """Inserts lines at the top of the scrolling region."""

    lines: Tuple[str, ...]
    top_boundary: int
    bottom_boundary: int


@dataclass(frozen=True)
class ScrollDownMsg:
    """Inserts lines at the bottom of the scrolling region."""

    lines: Tuple[str, ...]
    top_boundary: int
    bottom_boundary: int


@dataclass(frozen=True)
class PrintLineMsg:
    """Text to print above the program, outside the managed view."""

    message_body: str


def clear_screen() -> ClearScreenMsg:
    """Clear the screen before the next update."""
    return ClearScreenMsg()


def enter_alt_screen() -> EnterAltScreenMsg:
    """Enter the alternate screen buffer."""
    return EnterAltScreenMsg()


def exit_alt_screen() -> ExitAltScreenMsg:
    """Exit the alternate screen buffer."""
    return ExitAltScreenMsg()


def enable_mouse_cell_motion() -> EnableMouseCellMotionMsg:
    """Enable clicks, wheel events and motion while a button is held."""
    return EnableMouseCellMotionMsg()


def enable_mouse_all_motion() -> EnableMouseAllMotionMsg:
    """Enable clicks, wheel events and all motion."""
    return EnableMouseAllMotionMsg()


def disable_mouse() -> DisableMouseMsg:
    """Stop listening for mouse events."""
    return DisableMouseMsg()


def hide_cursor() -> HideCursorMsg:
    """Hide the cursor."""
    return HideCursorMsg()


def show_cursor() -> ShowCursorMsg:
    """Show the cursor."""
    return ShowCursorMsg()


def enable_bracketed_paste() -> EnableBracketedPasteMsg:
    """Accept bracketed paste input."""
    return EnableBracketedPasteMsg()


def disable_bracketed_paste() -> DisableBracketedPasteMsg:
    """Stop accepting bracketed paste input."""
    return DisableBracketedPasteMsg()


def enable_report_focus() -> EnableReportFocusMsg:
    """Report focus and blur events to the program."""
    return EnableReportFocusMsg()


def disable_report_focus() -> DisableReportFocusMsg:
    """Stop reporting focus and blur events."""
    return DisableReportFocusMsg()


def sync_scroll_area(
    lines: Iterable[str], top_boundary: int, bottom_boundary: int
) -> Command:
    """Return a command that paints the whole scrolling region."""
    msg = SyncScrollAreaMsg(tuple(lines), top_boundary, bottom_boundary)
    return lambda: msg


def clear_scroll_area() -> ClearScrollAreaMsg:
    """Release the scrolling region back to the normal renderer."""
    return ClearScrollAreaMsg()


def scroll_up(
    new_lines: Iterable[str], top_boundary: int, bottom_boundary: int
) -> Command:
    """Return a command that adds lines to the top of the scrolling region."""
    msg = ScrollUpMsg(tuple(new_lines), top_boundary, bottom_boundary)
    return lambda: msg


def scroll_down(
    new_lines: Iterable[str], top_boundary: int, bottom_boundary: int
) -> Command:
    """Return a command that adds lines to the bottom of the scrolling region."""
    msg = ScrollDownMsg(tuple(new_lines), top_boundary, bottom_boundary)
    return lambda: msg


def _join_operands(args: Tuple[object, ...]) -> str:
    # A space goes between two operands only when neither is a string.
    parts = []
    previous_is_str = True
    for index, arg in enumerate(args):
        is_str = isinstance(arg, str)
        if index > 0 and not is_str and not previous_is_str:
            parts.append(" ")
        parts.append(str(arg))
        previous_is_str = is_str
    return "".join(parts)


def println(*args: object) -> Command:
    """Return a command that prints its arguments on a line above the program.

    Nothing is printed while the alternate screen is active.
    """
    msg = PrintLineMsg(_join_operands(args))
    return lambda: msg


def printf(template: str, *args: object) -> Command:
    """Return a command that prints a formatted line above the program.

    The template uses %-style formatting. Nothing is printed while the
    alternate screen is active.
    """
    body = template % args if args else template
    msg = PrintLineMsg(body)
    return lambda: msg