"""Terminal renderers that paint a program's view at a limited frame rate."""

from __future__ import annotations

import abc
import re
import threading
from typing import Iterable, Optional, TextIO

from wcwidth import wcwidth

from .messages import (
    ClearScrollAreaMsg,
    PrintLineMsg,
    RepaintMsg,
    ScrollDownMsg,
    ScrollUpMsg,
    SyncScrollAreaMsg,
    WindowSizeMsg,
)

DEFAULT_FPS = 60
MAX_FPS = 120

_CSI = "\x1b["

ERASE_ENTIRE_LINE = "\x1b[2K"
ERASE_LINE_RIGHT = "\x1b[K"
ERASE_ENTIRE_SCREEN = "\x1b[2J"
ERASE_SCREEN_BELOW = "\x1b[J"
CURSOR_HOME_POSITION = "\x1b[H"
CURSOR_UP_ONE = "\x1b[A"
SHOW_CURSOR = "\x1b[?25h"
HIDE_CURSOR = "\x1b[?25l"
SET_ALT_SCREEN = "\x1b[?1049h"
RESET_ALT_SCREEN = "\x1b[?1049l"
SET_BUTTON_EVENT_MOUSE = "\x1b[?1002h"
RESET_BUTTON_EVENT_MOUSE = "\x1b[?1002l"
SET_ANY_EVENT_MOUSE = "\x1b[?1003h"
RESET_ANY_EVENT_MOUSE = "\x1b[?1003l"
SET_SGR_EXT_MOUSE = "\x1b[?1006h"
RESET_SGR_EXT_MOUSE = "\x1b[?1006l"
SET_BRACKETED_PASTE = "\x1b[?2004h"
RESET_BRACKETED_PASTE = "\x1b[?2004l"
SET_FOCUS_EVENT = "\x1b[?1004h"
RESET_FOCUS_EVENT = "\x1b[?1004l"


def _count(n: int) -> str:
    return str(n) if n > 1 else ""


def _cursor_up(n: int) -> str:
    return f"{_CSI}{_count(n)}A"


def _cursor_backward(n: int) -> str:
    return f"{_CSI}{_count(n)}D"


def _insert_line(n: int) -> str:
    return f"{_CSI}{_count(n)}L"


def _cursor_position(col: int, row: int) -> str:
    if col <= 0 and row <= 0:
        return CURSOR_HOME_POSITION
    r = str(row) if row > 0 else ""
    c = str(col) if col > 0 else ""
    return f"{_CSI}{r};{c}H"


def _set_top_bottom_margins(top: int, bottom: int) -> str:
    t = str(top) if top > 0 else ""
    b = str(bottom) if bottom > 0 else ""
    return f"{_CSI}{t};{b}r"


def _set_window_title(title: str) -> str:
    return f"\x1b]2;{title}\x07"


_TOKEN_PATTERN = re.compile(
    r"\x1b\[[0-?]*[ -/]*[@-~]"  # CSI
    r"|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)"  # OSC
    r"|\x1b[@-Z\\-_]"  # other two-byte escapes
    r"|[\s\S]",
)


def _tokens(s: str) -> Iterable[tuple[str, int]]:
    """Split a string into (text, cell width) pieces; escapes have width 0."""
    for match in _TOKEN_PATTERN.finditer(s):
        text = match.group(0)
        if len(text) > 1:
            yield text, 0
        else:
            yield text, max(wcwidth(text), 0)


def string_width(s: str) -> int:
    """Return the number of terminal cells ``s`` occupies, ignoring escapes."""
    return sum(width for _, width in _tokens(s))


def truncate(s: str, width: int, tail: str) -> str:
    """Cut ``s`` to at most ``width`` cells, appending ``tail`` where it is cut.

    Escape sequences are kept even after the cut so styles stay balanced.
    """
    if string_width(s) <= width:
        return s
    limit = width - string_width(tail)
    if limit < 0:
        return ""
    out = []
    used = 0
    cut = False
    for text, cells in _tokens(s):
        if len(text) > 1:
            out.append(text)
            continue
        if cut:
            continue
        if used + cells > limit:
            cut = True
            out.append(tail)
            continue
        out.append(text)
        used += cells
    return "".join(out)


class Renderer(abc.ABC):
    """The operations every renderer provides."""

    @abc.abstractmethod
    def start(self) -> None:
        """Start rendering."""

    @abc.abstractmethod
    def stop(self) -> None:
        """Stop rendering after painting the pending frame."""

    @abc.abstractmethod
    def kill(self) -> None:
        """Stop rendering without painting the pending frame."""

    @abc.abstractmethod
    def write(self, s: str) -> None:
        """Queue a frame for painting."""

    @abc.abstractmethod
    def repaint(self) -> None:
        """Make the next paint a full one."""

    @abc.abstractmethod
    def clear_screen(self) -> None:
        """Clear the terminal."""

    @abc.abstractmethod
    def alt_screen(self) -> bool:
        """Return whether the alternate screen is active."""

    @abc.abstractmethod
    def enter_alt_screen(self) -> None:
        """Switch to the alternate screen."""

    @abc.abstractmethod
    def exit_alt_screen(self) -> None:
        """Leave the alternate screen."""

    @abc.abstractmethod
    def show_cursor(self) -> None:
        """Show the cursor."""

    @abc.abstractmethod
    def hide_cursor(self) -> None:
        """Hide the cursor."""

    @abc.abstractmethod
    def enable_mouse_cell_motion(self) -> None:
        """Report clicks, wheel and drag motion."""

    @abc.abstractmethod
    def disable_mouse_cell_motion(self) -> None:
        """Stop cell motion reporting."""

    @abc.abstractmethod
    def enable_mouse_all_motion(self) -> None:
        """Report clicks, wheel and all motion."""

    @abc.abstractmethod
    def disable_mouse_all_motion(self) -> None:
        """Stop all motion reporting."""

    @abc.abstractmethod
    def enable_mouse_sgr_mode(self) -> None:
        """Use the extended SGR mouse encoding."""

    @abc.abstractmethod
    def disable_mouse_sgr_mode(self) -> None:
        """Stop using the SGR mouse encoding."""

    @abc.abstractmethod
    def enable_bracketed_paste(self) -> None:
        """Turn bracketed paste on."""

    @abc.abstractmethod
    def disable_bracketed_paste(self) -> None:
        """Turn bracketed paste off."""

    @abc.abstractmethod
    def bracketed_paste_active(self) -> bool:
        """Return whether bracketed paste is on."""

    @abc.abstractmethod
    def set_window_title(self, title: str) -> None:
        """Set the terminal window title."""

    @abc.abstractmethod
    def report_focus(self) -> bool:
        """Return whether focus reporting is on."""

    @abc.abstractmethod
    def enable_report_focus(self) -> None:
        """Turn focus reporting on."""

    @abc.abstractmethod
    def disable_report_focus(self) -> None:
        """Turn focus reporting off."""

    @abc.abstractmethod
    def reset_lines_rendered(self) -> None:
        """Forget how many lines were painted, keeping them on screen."""


class NilRenderer(Renderer):
    """A renderer that draws nothing."""

    def start(self) -> None:
        pass

    def stop(self) -> None:
        pass

    def kill(self) -> None:
        pass

    def write(self, s: str) -> None:
        pass

    def repaint(self) -> None:
        pass

    def clear_screen(self) -> None:
        pass

    def alt_screen(self) -> bool:
        return False

    def enter_alt_screen(self) -> None:
        pass

    def exit_alt_screen(self) -> None:
        pass

    def show_cursor(self) -> None:
        pass

    def hide_cursor(self) -> None:
        pass

    def enable_mouse_cell_motion(self) -> None:
        pass

    def disable_mouse_cell_motion(self) -> None:
        pass

    def enable_mouse_all_motion(self) -> None:
        pass

    def disable_mouse_all_motion(self) -> None:
        pass

    def enable_mouse_sgr_mode(self) -> None:
        pass

    def disable_mouse_sgr_mode(self) -> None:
        pass

    def enable_bracketed_paste(self) -> None:
        pass

    def disable_bracketed_paste(self) -> None:
        pass

    def bracketed_paste_active(self) -> bool:
        return False

    def set_window_title(self, title: str) -> None:
        pass

    def report_focus(self) -> bool:
        return False

    def enable_report_focus(self) -> None:
        pass

    def disable_report_focus(self) -> None:
        pass

    def reset_lines_rendered(self) -> None:
        pass


class StandardRenderer(Renderer):
    """Paints the latest frame at most ``fps`` times a second.

    Only lines that changed since the last paint are redrawn. Ranges of
    lines may be set aside so they can be written to directly.
    """

    def __init__(self, out: TextIO, fps: int = DEFAULT_FPS) -> None:
        if fps < 1:
            fps = DEFAULT_FPS
        elif fps > MAX_FPS:
            fps = MAX_FPS
        self.framerate = 1.0 / fps
        self._out = out
        self._lock = threading.RLock()
        self._buf = ""
        self._queued_lines: list[str] = []
        self._last_render = ""
        self._last_rendered_lines: Optional[list[str]] = None
        self._lines_rendered = 0
        self._alt_lines_rendered = 0
        self._cursor_hidden = False
        self._alt_screen_active = False
        self._bp_active = False
        self._reporting_focus = False
        self._width = 0
        self._height = 0
        self._ignore_lines: Optional[set[int]] = None
        self._thread: Optional[threading.Thread] = None
        self._done: Optional[threading.Event] = None

    def _execute(self, seq: str) -> None:
        self._out.write(seq)

    def _listen(self, done: threading.Event) -> None:
        while not done.wait(self.framerate):
            self.flush()

    def _halt(self) -> None:
        if self._done is not None:
            self._done.set()
        if self._thread is not None:
            self._thread.join()
        self._thread = None
        self._done = None

    def start(self) -> None:
        self._halt()
        self._done = threading.Event()
        self._thread = threading.Thread(
            target=self._listen, args=(self._done,), daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        self._halt()
        self.flush()
        with self._lock:
            self._execute(ERASE_ENTIRE_LINE)
            self._execute("\r")

    def kill(self) -> None:
        self._halt()
        with self._lock:
            self._execute(ERASE_ENTIRE_LINE)
            self._execute("\r")

    def _last_lines_rendered(self) -> int:
        if self._alt_screen_active:
            return self._alt_lines_rendered
        return self._lines_rendered

    def flush(self) -> None:
        """Paint the pending frame if it differs from the last one."""
        with self._lock:
            if not self._buf or self._buf == self._last_render:
                return

            out: list[str] = []
            if self._alt_screen_active:
                out.append(CURSOR_HOME_POSITION)
            elif self._lines_rendered > 1:
                out.append(_cursor_up(self._lines_rendered - 1))

            new_lines = self._buf.split("\n")
            # Lines above the window cannot be reached, so drop them.
            if self._height > 0 and len(new_lines) > self._height:
                new_lines = new_lines[len(new_lines) - self._height:]

            flush_queued = bool(self._queued_lines) and not self._alt_screen_active
            if flush_queued:
                for line in self._queued_lines:
                    if string_width(line) < self._width:
                        line += ERASE_LINE_RIGHT
                    out.append(line)
                    out.append("\r\n")
                self._queued_lines = []

            previous = self._last_rendered_lines or []
            ignored = self._ignore_lines or set()
            last = len(new_lines) - 1
            for i, line in enumerate(new_lines):
                can_skip = (
                    not flush_queued and i < len(previous) and previous[i] == line
                )
                if i in ignored or can_skip:
                    if i < last:
                        out.append("\n")
                    continue

                if i == 0 and self._last_render == "":
                    out.append("\r")

                if self._width > 0:
                    line = truncate(line, self._width, "")
                if string_width(line) < self._width:
                    line += ERASE_LINE_RIGHT
                out.append(line)
                if i < last:
                    out.append("\r\n")

            if self._last_lines_rendered() > len(new_lines):
                out.append(ERASE_SCREEN_BELOW)

            if self._alt_screen_active:
                self._alt_lines_rendered = len(new_lines)
                out.append(_cursor_position(0, len(new_lines)))
            else:
                self._lines_rendered = len(new_lines)
                out.append(_cursor_backward(self._width))

            self._out.write("".join(out))
            self._last_render = self._buf
            self._last_rendered_lines = new_lines
            self._buf = ""

    def write(self, s: str) -> None:
        with self._lock:
            # An empty frame is drawn as a space so old output gets cleared.
            self._buf = s or " "

    def repaint(self) -> None:
        with self._lock:
            self._last_render = ""
            self._last_rendered_lines = None

    def clear_screen(self) -> None:
        with self._lock:
            self._execute(ERASE_ENTIRE_SCREEN)
            self._execute(CURSOR_HOME_POSITION)
            self.repaint()

    def alt_screen(self) -> bool:
        with self._lock:
            return self._alt_screen_active

    def _restore_cursor_visibility(self) -> None:
        self._execute(HIDE_CURSOR if self._cursor_hidden else SHOW_CURSOR)

    def enter_alt_screen(self) -> None:
        with self._lock:
            if self._alt_screen_active:
                return
            self._alt_screen_active = True
            self._execute(SET_ALT_SCREEN)
            # Clear even where the alternate screen is unsupported.
            self._execute(ERASE_ENTIRE_SCREEN)
            self._execute(CURSOR_HOME_POSITION)
            self._restore_cursor_visibility()
            self._alt_lines_rendered = 0
            self.repaint()

    def exit_alt_screen(self) -> None:
        with self._lock:
            if not self._alt_screen_active:
                return
            self._alt_screen_active = False
            self._execute(RESET_ALT_SCREEN)
            self._restore_cursor_visibility()
            self.repaint()

    def show_cursor(self) -> None:
        with self._lock:
            self._cursor_hidden = False
            self._execute(SHOW_CURSOR)

    def hide_cursor(self) -> None:
        with self._lock:
            self._cursor_hidden = True
            self._execute(HIDE_CURSOR)

    def enable_mouse_cell_motion(self) -> None:
        with self._lock:
            self._execute(SET_BUTTON_EVENT_MOUSE)

    def disable_mouse_cell_motion(self) -> None:
        with self._lock:
            self._execute(RESET_BUTTON_EVENT_MOUSE)

    def enable_mouse_all_motion(self) -> None:
        with self._lock:
            self._execute(SET_ANY_EVENT_MOUSE)

    def disable_mouse_all_motion(self) -> None:
        with self._lock:
            self._execute(RESET_ANY_EVENT_MOUSE)

    def enable_mouse_sgr_mode(self) -> None:
        with self._lock:
            self._execute(SET_SGR_EXT_MOUSE)

    def disable_mouse_sgr_mode(self) -> None:
        with self._lock:
            self._execute(RESET_SGR_EXT_MOUSE)

    def enable_bracketed_paste(self) -> None:
        with self._lock:
            self._execute(SET_BRACKETED_PASTE)
            self._bp_active = True

    def disable_bracketed_paste(self) -> None:
        with self._lock:
            self._execute(RESET_BRACKETED_PASTE)
            self._bp_active = False

    def bracketed_paste_active(self) -> bool:
        with self._lock:
            return self._bp_active

    def set_window_title(self, title: str) -> None:
        with self._lock:
            self._execute(_set_window_title(title))

    def report_focus(self) -> bool:
        with self._lock:
            return self._reporting_focus

    def enable_report_focus(self) -> None:
        with self._lock:
            self._execute(SET_FOCUS_EVENT)
            self._reporting_focus = True

    def disable_report_focus(self) -> None:
        with self._lock:
            self._execute(RESET_FOCUS_EVENT)
            self._reporting_focus = False

    def reset_lines_rendered(self) -> None:
        with self._lock:
            self._lines_rendered = 0

    def set_ignored_lines(self, start: int, end: int) -> None:
        """Leave lines ``start`` up to ``end`` alone, erasing what they hold."""
        with self._lock:
            if self._ignore_lines is None:
                self._ignore_lines = set()
            self._ignore_lines.update(range(start, end))

            last = self._last_lines_rendered()
            if last > 0:
                out = []
                for i in range(last - 1, -1, -1):
                    if i in self._ignore_lines:
                        out.append(ERASE_ENTIRE_LINE)
                    out.append(CURSOR_UP_ONE)
                out.append(_cursor_position(0, last))
                self._out.write("".join(out))

    def clear_ignored_lines(self) -> None:
        """Hand every ignored line back to the renderer."""
        with self._lock:
            self._ignore_lines = None

    def insert_top(
        self, lines: Iterable[str], top_boundary: int, bottom_boundary: int
    ) -> None:
        """Insert lines at the top of a scrolling region, pushing the rest down."""
        lines = list(lines)
        with self._lock:
            self._out.write(
                _set_top_bottom_margins(top_boundary, bottom_boundary)
                + _cursor_position(0, top_boundary)
                + _insert_line(len(lines))
                + "\r\n".join(lines)
                + _set_top_bottom_margins(0, self._height)
                + _cursor_position(0, self._last_lines_rendered())
            )

    def insert_bottom(
        self, lines: Iterable[str], top_boundary: int, bottom_boundary: int
    ) -> None:
        """Insert lines at the bottom of a scrolling region, pushing the rest up."""
        lines = list(lines)
        with self._lock:
            self._out.write(
                _set_top_bottom_margins(top_boundary, bottom_boundary)
                + _cursor_position(0, bottom_boundary)
                + "\r\n"
                + "\r\n".join(lines)
                + _set_top_bottom_margins(0, self._height)
                + _cursor_position(0, self._last_lines_rendered())
            )

    def handle_messages(self, msg: object) -> None:
        """React to the messages that concern the renderer."""
        if isinstance(msg, RepaintMsg):
            self.repaint()
        elif isinstance(msg, WindowSizeMsg):
            with self._lock:
                self._width = msg.width
                self._height = msg.height
                self.repaint()
        elif isinstance(msg, ClearScrollAreaMsg):
            self.clear_ignored_lines()
            self.repaint()
        elif isinstance(msg, SyncScrollAreaMsg):
            self.clear_ignored_lines()
            self.set_ignored_lines(msg.top_boundary, msg.bottom_boundary)
            self.insert_top(msg.lines, msg.top_boundary, msg.bottom_boundary)
            self.repaint()
        elif isinstance(msg, ScrollUpMsg):
            self.insert_top(msg.lines, msg.top_boundary, msg.bottom_boundary)
        elif isinstance(msg, ScrollDownMsg):
            self.insert_bottom(msg.lines, msg.top_boundary, msg.bottom_boundary)
        elif isinstance(msg, PrintLineMsg):
            with self._lock:
                if not self._alt_screen_active:
                    self._queued_lines.extend(msg.message_body.split("\n"))
                    self.repaint()