"""Settings for a program and the options that change them."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import IO, Callable, List, Optional

from .renderer import NilRenderer, Renderer


class InputType(enum.Enum):
    """Where a program reads its input from."""

    DEFAULT = "default input"
    TTY = "tty input"
    CUSTOM = "custom input"

    def __str__(self) -> str:
        return self.value


class StartupOptions(enum.IntFlag):
    """Switches applied when a program starts."""

    NONE = 0
    WITH_ALT_SCREEN = 1 << 0
    WITH_MOUSE_CELL_MOTION = 1 << 1
    WITH_MOUSE_ALL_MOTION = 1 << 2
    WITH_ANSI_COMPRESSOR = 1 << 3
    WITHOUT_SIGNAL_HANDLER = 1 << 4
    WITHOUT_CATCH_PANICS = 1 << 5
    WITHOUT_BRACKETED_PASTE = 1 << 6
    WITH_REPORT_FOCUS = 1 << 7


@dataclass
class ProgramSettings:
    """Everything the options can set on a program.

    An ``output`` of None means standard output. An ``input`` of None means
    standard input unless ``input_type`` is ``InputType.CUSTOM``, in which
    case input is disabled. A ``renderer`` of None means the standard
    renderer, and an ``fps`` below 1 means the default frame rate.
    """

    context: object = None
    output: Optional[IO] = None
    input: Optional[IO] = None
    input_type: InputType = InputType.DEFAULT
    environ: Optional[List[str]] = None
    startup_options: StartupOptions = StartupOptions.NONE
    ignore_signals: bool = False
    renderer: Optional[Renderer] = None
    filter: Optional[Callable[[object, object], object]] = None
    fps: int = 0


Option = Callable[[ProgramSettings], None]


def _set_flag(settings: ProgramSettings, flag: StartupOptions) -> None:
    settings.startup_options = StartupOptions(settings.startup_options | flag)


def _clear_flag(settings: ProgramSettings, flag: StartupOptions) -> None:
    settings.startup_options = StartupOptions(
        int(settings.startup_options) & ~int(flag)
    )


def build_settings(*args: Option) -> ProgramSettings:
    """Return default settings with the given options applied in order."""
    settings = ProgramSettings()
    for option in args:
        option(settings)
    return settings


def with_context(ctx: object) -> Option:
    """Run the program within an outside context that can cancel it."""

    def apply(settings: ProgramSettings) -> None:
        settings.context = ctx

    return apply


def with_output(output: IO) -> Option:
    """Write the program's output to ``output`` instead of standard output."""

    def apply(settings: ProgramSettings) -> None:
        settings.output = output

    return apply


def with_input(input_stream: Optional[IO]) -> Option:
    """Read input from ``input_stream``; pass None to disable input."""

    def apply(settings: ProgramSettings) -> None:
        settings.input = input_stream
        settings.input_type = InputType.CUSTOM

    return apply


def with_input_tty() -> Option:
    """Open a new terminal device for input."""

    def apply(settings: ProgramSettings) -> None:
        settings.input_type = InputType.TTY

    return apply


def with_environment(env: List[str]) -> Option:
    """Use the given ``NAME=value`` environment entries."""

    def apply(settings: ProgramSettings) -> None:
        settings.environ = list(env)

    return apply


def without_signal_handler() -> Option:
    """Do not install a signal handler."""

    def apply(settings: ProgramSettings) -> None:
        _set_flag(settings, StartupOptions.WITHOUT_SIGNAL_HANDLER)

    return apply


def without_catch_panics() -> Option:
    """Let unexpected errors escape without restoring the terminal."""

    def apply(settings: ProgramSettings) -> None:
        _set_flag(settings, StartupOptions.WITHOUT_CATCH_PANICS)

    return apply


def without_signals() -> Option:
    """Ignore operating-system signals."""

    def apply(settings: ProgramSettings) -> None:
        settings.ignore_signals = True

    return apply


def with_alt_screen() -> Option:
    """Start in the alternate screen buffer."""

    def apply(settings: ProgramSettings) -> None:
        _set_flag(settings, StartupOptions.WITH_ALT_SCREEN)

    return apply


def without_bracketed_paste() -> Option:
    """Start with bracketed paste disabled."""

    def apply(settings: ProgramSettings) -> None:
        _set_flag(settings, StartupOptions.WITHOUT_BRACKETED_PASTE)

    return apply


def with_mouse_cell_motion() -> Option:
    """Start with clicks, wheel and drag motion reported."""

    def apply(settings: ProgramSettings) -> None:
        _set_flag(settings, StartupOptions.WITH_MOUSE_CELL_MOTION)
        _clear_flag(settings, StartupOptions.WITH_MOUSE_ALL_MOTION)

    return apply


def with_mouse_all_motion() -> Option:
    """Start with clicks, wheel and all motion reported."""

    def apply(settings: ProgramSettings) -> None:
        _set_flag(settings, StartupOptions.WITH_MOUSE_ALL_MOTION)
        _clear_flag(settings, StartupOptions.WITH_MOUSE_CELL_MOTION)

    return apply


def without_renderer() -> Option:
    """Send output plainly, without any rendering."""

    def apply(settings: ProgramSettings) -> None:
        settings.renderer = NilRenderer()

    return apply


def with_ansi_compressor() -> Option:
    """Ask for redundant escape sequences to be removed from the output."""

    def apply(settings: ProgramSettings) -> None:
        _set_flag(settings, StartupOptions.WITH_ANSI_COMPRESSOR)

    return apply


def with_filter(filter_fn: Callable[[object, object], object]) -> Option:
    """Pass every message through ``filter_fn(model, msg)`` first.

    The filter returns the message to handle, or None to drop it.
    """

    def apply(settings: ProgramSettings) -> None:
        settings.filter = filter_fn

    return apply


def with_fps(fps: int) -> Option:
    """Set the maximum frame rate; below 1 means 60, above 120 means 120."""

    def apply(settings: ProgramSettings) -> None:
        settings.fps = fps

    return apply


def with_report_focus() -> Option:
    """Report focus and blur events to the program."""

    def apply(settings: ProgramSettings) -> None:
        _set_flag(settings, StartupOptions.WITH_REPORT_FOCUS)

    return apply