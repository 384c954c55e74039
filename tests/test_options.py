import io
import threading

import pytest

from brewterm.options import (
    InputType,
    StartupOptions,
    build_settings,
    with_alt_screen,
    with_ansi_compressor,
    with_context,
    with_environment,
    with_filter,
    with_fps,
    with_input,
    with_input_tty,
    with_mouse_all_motion,
    with_mouse_cell_motion,
    with_output,
    with_report_focus,
    without_bracketed_paste,
    without_catch_panics,
    without_renderer,
    without_signal_handler,
    without_signals,
)
from brewterm.renderer import NilRenderer


def test_defaults():
    settings = build_settings()
    assert settings.input_type is InputType.DEFAULT
    assert settings.startup_options == StartupOptions.NONE
    assert settings.ignore_signals is False
    assert settings.renderer is None
    assert settings.fps == 0


def test_output():
    buf = io.StringIO()
    settings = build_settings(with_output(buf))
    assert settings.output is buf


def test_custom_input():
    buf = io.BytesIO()
    settings = build_settings(with_input(buf))
    assert settings.input is buf
    assert settings.input_type is InputType.CUSTOM


def test_disabled_input():
    settings = build_settings(with_input(None))
    assert settings.input is None
    assert settings.input_type is InputType.CUSTOM


def test_renderer():
    renderer = build_settings(without_renderer()).renderer
    assert isinstance(renderer, NilRenderer)
    renderer.enter_alt_screen()
    assert renderer.alt_screen() is False
    renderer.enable_bracketed_paste()
    assert renderer.bracketed_paste_active() is False


def test_without_signals():
    assert build_settings(without_signals()).ignore_signals is True


def test_filter():
    def keep(model, msg):
        return msg

    settings = build_settings(with_filter(keep))
    assert settings.filter is keep
    assert settings.filter(None, "msg") == "msg"


def test_external_context():
    ctx = threading.Event()
    settings = build_settings(with_context(ctx))
    assert settings.context is ctx


def test_environment():
    env = ["TERM=xterm-256color"]
    assert build_settings(with_environment(env)).environ == env


def test_fps():
    assert build_settings(with_fps(30)).fps == 30


@pytest.mark.parametrize(
    "option, expected",
    [
        (with_input_tty(), InputType.TTY),
        (with_input(io.BytesIO()), InputType.CUSTOM),
    ],
)
def test_input_options(option, expected):
    assert build_settings(option).input_type is expected


@pytest.mark.parametrize(
    "option, flag",
    [
        (with_alt_screen(), StartupOptions.WITH_ALT_SCREEN),
        (without_bracketed_paste(), StartupOptions.WITHOUT_BRACKETED_PASTE),
        (with_ansi_compressor(), StartupOptions.WITH_ANSI_COMPRESSOR),
        (without_catch_panics(), StartupOptions.WITHOUT_CATCH_PANICS),
        (without_signal_handler(), StartupOptions.WITHOUT_SIGNAL_HANDLER),
        (with_report_focus(), StartupOptions.WITH_REPORT_FOCUS),
    ],
)
def test_startup_options(option, flag):
    assert flag in build_settings(option).startup_options


def test_mouse_cell_motion_wins_when_last():
    opts = build_settings(with_mouse_all_motion(), with_mouse_cell_motion()).startup_options
    assert StartupOptions.WITH_MOUSE_CELL_MOTION in opts
    assert StartupOptions.WITH_MOUSE_ALL_MOTION not in opts


def test_mouse_all_motion_wins_when_last():
    opts = build_settings(with_mouse_cell_motion(), with_mouse_all_motion()).startup_options
    assert StartupOptions.WITH_MOUSE_ALL_MOTION in opts
    assert StartupOptions.WITH_MOUSE_CELL_MOTION not in opts


def test_multiple():
    settings = build_settings(
        with_mouse_all_motion(),
        without_bracketed_paste(),
        with_alt_screen(),
        with_input_tty(),
    )
    for flag in (
        StartupOptions.WITH_MOUSE_ALL_MOTION,
        StartupOptions.WITHOUT_BRACKETED_PASTE,
        StartupOptions.WITH_ALT_SCREEN,
    ):
        assert flag in settings.startup_options
    assert settings.input_type is InputType.TTY


def test_input_type_names():
    assert str(build_settings(with_input_tty()).input_type) == "tty input"
    assert str(build_settings(with_input(io.BytesIO())).input_type) == "custom input"