"""Decoding of raw terminal input into key, mouse and focus messages."""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass
from typing import BinaryIO, Iterator, Optional, Tuple

from .keys import KeyMsg, KeyType
from .mouse import (
    MOUSE_SGR_PATTERN,
    X10_MOUSE_EVENT_LEN,
    MouseEvent,
    MouseMsg,
    parse_sgr_mouse_event,
    parse_x10_mouse_event,
)

_READ_SIZE = 256

_BRACKETED_PASTE_START = b"\x1b[200~"
_BRACKETED_PASTE_END = b"\x1b[201~"

_UNKNOWN_CSI_PATTERN = re.compile(rb"\x1b\[[\x30-\x3f]*[\x20-\x2f]*[\x40-\x7e]")


@dataclass(frozen=True)
class FocusMsg:
    """The terminal gained focus."""


@dataclass(frozen=True)
class BlurMsg:
    """The terminal lost focus."""


@dataclass(frozen=True)
class UnknownInputByteMsg:
    """A byte on the input that is not valid UTF-8."""

    value: int

    def __str__(self) -> str:
        return f"?0x{self.value:02x}?"


@dataclass(frozen=True)
class UnknownCSISequenceMsg:
    """A CSI sequence on the input that is not recognised."""

    sequence: bytes

    def __str__(self) -> str:
        body = " ".join(str(b) for b in self.sequence[2:])
        return f"?CSI[{body}]?"


def _k(key_type: KeyType, alt: bool = False) -> KeyMsg:
    return KeyMsg(key_type, alt=alt)


K = KeyType

SEQUENCES: dict[bytes, KeyMsg] = {
    # Arrow keys
    b"\x1b[A": _k(K.UP),
    b"\x1b[B": _k(K.DOWN),
    b"\x1b[C": _k(K.RIGHT),
    b"\x1b[D": _k(K.LEFT),
    b"\x1b[1;2A": _k(K.SHIFT_UP),
    b"\x1b[1;2B": _k(K.SHIFT_DOWN),
    b"\x1b[1;2C": _k(K.SHIFT_RIGHT),
    b"\x1b[1;2D": _k(K.SHIFT_LEFT),
    b"\x1b[OA": _k(K.SHIFT_UP),  # DECCKM
    b"\x1b[OB": _k(K.SHIFT_DOWN),
    b"\x1b[OC": _k(K.SHIFT_RIGHT),
    b"\x1b[OD": _k(K.SHIFT_LEFT),
    b"\x1b[a": _k(K.SHIFT_UP),  # urxvt
    b"\x1b[b": _k(K.SHIFT_DOWN),
    b"\x1b[c": _k(K.SHIFT_RIGHT),
    b"\x1b[d": _k(K.SHIFT_LEFT),
    b"\x1b[1;3A": _k(K.UP, True),
    b"\x1b[1;3B": _k(K.DOWN, True),
    b"\x1b[1;3C": _k(K.RIGHT, True),
    b"\x1b[1;3D": _k(K.LEFT, True),
    b"\x1b[1;4A": _k(K.SHIFT_UP, True),
    b"\x1b[1;4B": _k(K.SHIFT_DOWN, True),
    b"\x1b[1;4C": _k(K.SHIFT_RIGHT, True),
    b"\x1b[1;4D": _k(K.SHIFT_LEFT, True),
    b"\x1b[1;5A": _k(K.CTRL_UP),
    b"\x1b[1;5B": _k(K.CTRL_DOWN),
    b"\x1b[1;5C": _k(K.CTRL_RIGHT),
    b"\x1b[1;5D": _k(K.CTRL_LEFT),
    b"\x1b[Oa": _k(K.CTRL_UP, True),  # urxvt
    b"\x1b[Ob": _k(K.CTRL_DOWN, True),
    b"\x1b[Oc": _k(K.CTRL_RIGHT, True),
    b"\x1b[Od": _k(K.CTRL_LEFT, True),
    b"\x1b[1;6A": _k(K.CTRL_SHIFT_UP),
    b"\x1b[1;6B": _k(K.CTRL_SHIFT_DOWN),
    b"\x1b[1;6C": _k(K.CTRL_SHIFT_RIGHT),
    b"\x1b[1;6D": _k(K.CTRL_SHIFT_LEFT),
    b"\x1b[1;7A": _k(K.CTRL_UP, True),
    b"\x1b[1;7B": _k(K.CTRL_DOWN, True),
    b"\x1b[1;7C": _k(K.CTRL_RIGHT, True),
    b"\x1b[1;7D": _k(K.CTRL_LEFT, True),
    b"\x1b[1;8A": _k(K.CTRL_SHIFT_UP, True),
    b"\x1b[1;8B": _k(K.CTRL_SHIFT_DOWN, True),
    b"\x1b[1;8C": _k(K.CTRL_SHIFT_RIGHT, True),
    b"\x1b[1;8D": _k(K.CTRL_SHIFT_LEFT, True),
    # Miscellaneous keys
    b"\x1b[Z": _k(K.SHIFT_TAB),
    b"\x1b[2~": _k(K.INSERT),
    b"\x1b[3;2~": _k(K.INSERT, True),
    b"\x1b[3~": _k(K.DELETE),
    b"\x1b[3;3~": _k(K.DELETE, True),
    b"\x1b[5~": _k(K.PGUP),
    b"\x1b[5;3~": _k(K.PGUP, True),
    b"\x1b[5;5~": _k(K.CTRL_PGUP),
    b"\x1b[5^": _k(K.CTRL_PGUP),  # urxvt
    b"\x1b[5;7~": _k(K.CTRL_PGUP, True),
    b"\x1b[6~": _k(K.PGDOWN),
    b"\x1b[6;3~": _k(K.PGDOWN, True),
    b"\x1b[6;5~": _k(K.CTRL_PGDOWN),
    b"\x1b[6^": _k(K.CTRL_PGDOWN),  # urxvt
    b"\x1b[6;7~": _k(K.CTRL_PGDOWN, True),
    b"\x1b[1~": _k(K.HOME),
    b"\x1b[H": _k(K.HOME),  # xterm, lxterm
    b"\x1b[1;3H": _k(K.HOME, True),
    b"\x1b[1;5H": _k(K.CTRL_HOME),
    b"\x1b[1;7H": _k(K.CTRL_HOME, True),
    b"\x1b[1;2H": _k(K.SHIFT_HOME),
    b"\x1b[1;4H": _k(K.SHIFT_HOME, True),
    b"\x1b[1;6H": _k(K.CTRL_SHIFT_HOME),
    b"\x1b[1;8H": _k(K.CTRL_SHIFT_HOME, True),
    b"\x1b[4~": _k(K.END),
    b"\x1b[F": _k(K.END),  # xterm, lxterm
    b"\x1b[1;3F": _k(K.END, True),
    b"\x1b[1;5F": _k(K.CTRL_END),
    b"\x1b[1;7F": _k(K.CTRL_END, True),
    b"\x1b[1;2F": _k(K.SHIFT_END),
    b"\x1b[1;4F": _k(K.SHIFT_END, True),
    b"\x1b[1;6F": _k(K.CTRL_SHIFT_END),
    b"\x1b[1;8F": _k(K.CTRL_SHIFT_END, True),
    b"\x1b[7~": _k(K.HOME),  # urxvt
    b"\x1b[7^": _k(K.CTRL_HOME),
    b"\x1b[7$": _k(K.SHIFT_HOME),
    b"\x1b[7@": _k(K.CTRL_SHIFT_HOME),
    b"\x1b[8~": _k(K.END),  # urxvt
    b"\x1b[8^": _k(K.CTRL_END),
    b"\x1b[8$": _k(K.SHIFT_END),
    b"\x1b[8@": _k(K.CTRL_SHIFT_END),
    # Function keys, Linux console
    b"\x1b[[A": _k(K.F1),
    b"\x1b[[B": _k(K.F2),
    b"\x1b[[C": _k(K.F3),
    b"\x1b[[D": _k(K.F4),
    b"\x1b[[E": _k(K.F5),
    # Function keys, X11
    b"\x1bOP": _k(K.F1),  # vt100, xterm
    b"\x1bOQ": _k(K.F2),
    b"\x1bOR": _k(K.F3),
    b"\x1bOS": _k(K.F4),
    b"\x1b[1;3P": _k(K.F1, True),
    b"\x1b[1;3Q": _k(K.F2, True),
    b"\x1b[1;3R": _k(K.F3, True),
    b"\x1b[1;3S": _k(K.F4, True),
    b"\x1b[11~": _k(K.F1),  # urxvt
    b"\x1b[12~": _k(K.F2),
    b"\x1b[13~": _k(K.F3),
    b"\x1b[14~": _k(K.F4),
    b"\x1b[15~": _k(K.F5),
    b"\x1b[15;3~": _k(K.F5, True),
    b"\x1b[17~": _k(K.F6),
    b"\x1b[18~": _k(K.F7),
    b"\x1b[19~": _k(K.F8),
    b"\x1b[20~": _k(K.F9),
    b"\x1b[21~": _k(K.F10),
    b"\x1b[17;3~": _k(K.F6, True),
    b"\x1b[18;3~": _k(K.F7, True),
    b"\x1b[19;3~": _k(K.F8, True),
    b"\x1b[20;3~": _k(K.F9, True),
    b"\x1b[21;3~": _k(K.F10, True),
    b"\x1b[23~": _k(K.F11),
    b"\x1b[24~": _k(K.F12),
    b"\x1b[23;3~": _k(K.F11, True),
    b"\x1b[24;3~": _k(K.F12, True),
    b"\x1b[1;2P": _k(K.F13),
    b"\x1b[1;2Q": _k(K.F14),
    b"\x1b[25~": _k(K.F13),
    b"\x1b[26~": _k(K.F14),
    b"\x1b[25;3~": _k(K.F13, True),
    b"\x1b[26;3~": _k(K.F14, True),
    b"\x1b[1;2R": _k(K.F15),
    b"\x1b[1;2S": _k(K.F16),
    b"\x1b[28~": _k(K.F15),
    b"\x1b[29~": _k(K.F16),
    b"\x1b[28;3~": _k(K.F15, True),
    b"\x1b[29;3~": _k(K.F16, True),
    b"\x1b[15;2~": _k(K.F17),
    b"\x1b[17;2~": _k(K.F18),
    b"\x1b[18;2~": _k(K.F19),
    b"\x1b[19;2~": _k(K.F20),
    b"\x1b[31~": _k(K.F17),
    b"\x1b[32~": _k(K.F18),
    b"\x1b[33~": _k(K.F19),
    b"\x1b[34~": _k(K.F20),
    # Powershell sequences.
    b"\x1bOA": _k(K.UP),
    b"\x1bOB": _k(K.DOWN),
    b"\x1bOC": _k(K.RIGHT),
    b"\x1bOD": _k(K.LEFT),
}


def _build_ext_sequences() -> dict[bytes, KeyMsg]:
    """Sequences, their alt variants, control characters and space.

    NUL is left out; it is handled by detect_one_msg.
    """
    ext: dict[bytes, KeyMsg] = {}
    for seq, key in SEQUENCES.items():
        ext[seq] = key
        if not key.alt:
            ext[b"\x1b" + seq] = dataclasses.replace(key, alt=True)
    for code in [*range(1, 32), 127]:
        if code == KeyType.ESC:
            continue
        ext[bytes([code])] = KeyMsg(KeyType(code))
        ext[bytes([0x1B, code])] = KeyMsg(KeyType(code), alt=True)
    ext[b" "] = KeyMsg(KeyType.SPACE, runes=" ")
    ext[b"\x1b "] = KeyMsg(KeyType.SPACE, runes=" ", alt=True)
    ext[b"\x1b\x1b"] = KeyMsg(KeyType.ESCAPE, alt=True)
    return ext


_EXT_SEQUENCES = _build_ext_sequences()
_SEQ_LENGTHS = sorted({len(seq) for seq in _EXT_SEQUENCES}, reverse=True)

Detection = Tuple[int, object]


def _decode_rune(data: bytes) -> Tuple[Optional[str], int]:
    """Decode one UTF-8 character; return (None, width) if it is invalid."""
    first = data[0]
    if first < 0x80:
        return chr(first), 1
    if 0xC2 <= first <= 0xDF:
        size = 2
    elif 0xE0 <= first <= 0xEF:
        size = 3
    elif 0xF0 <= first <= 0xF4:
        size = 4
    else:
        return None, 1
    try:
        char = data[:size].decode("utf-8")
    except UnicodeDecodeError:
        return None, 1
    if char == "\ufffd":
        return None, size
    return char, size


def detect_sequence(data: bytes) -> Optional[Detection]:
    """Match the longest known key sequence at the start of ``data``.

    Returns ``(width, msg)`` or None when nothing matches. Unknown CSI
    sequences are reported as UnknownCSISequenceMsg.
    """
    data = bytes(data)
    for size in _SEQ_LENGTHS:
        if size > len(data):
            continue
        key = _EXT_SEQUENCES.get(data[:size])
        if key is not None:
            return size, key
    match = _UNKNOWN_CSI_PATTERN.match(data)
    if match is not None:
        end = match.end()
        return end, UnknownCSISequenceMsg(data[:end])
    return None


def detect_bracketed_paste(data: bytes) -> Optional[Detection]:
    """Detect a bracketed paste at the start of ``data``.

    Returns None if there is none, ``(0, None)`` if the paste has started
    but its end marker has not arrived yet, and ``(width, msg)`` otherwise.
    """
    data = bytes(data)
    if not data.startswith(_BRACKETED_PASTE_START):
        return None
    body = data[len(_BRACKETED_PASTE_START):]
    end = body.find(_BRACKETED_PASTE_END)
    if end == -1:
        return 0, None

    paste = body[:end]
    chars = []
    pos = 0
    while pos < len(paste):
        char, width = _decode_rune(paste[pos:])
        if char is not None:
            chars.append(char)
        pos += width

    width = len(_BRACKETED_PASTE_START) + end + len(_BRACKETED_PASTE_END)
    return width, KeyMsg(KeyType.RUNES, runes="".join(chars), paste=True)


def detect_report_focus(data: bytes) -> Optional[Detection]:
    """Detect a focus or blur report; the input must be exactly the report."""
    data = bytes(data)
    if data == b"\x1b[I":
        return 3, FocusMsg()
    if data == b"\x1b[O":
        return 3, BlurMsg()
    return None


def _as_mouse_msg(event: MouseEvent) -> MouseMsg:
    return MouseMsg(**dataclasses.asdict(event))


def detect_one_msg(data: bytes, can_have_more_data: bool) -> Tuple[int, object]:
    """Decode the first message in ``data``.

    Returns ``(width, msg)``. A width of 0 means more input is needed before
    the message can be decoded. Raises ValueError on empty input.
    """
    data = bytes(data)
    if not data:
        raise ValueError("no input to decode")

    if len(data) >= X10_MOUSE_EVENT_LEN and data[:2] == b"\x1b[":
        if data[2:3] == b"M":
            return X10_MOUSE_EVENT_LEN, _as_mouse_msg(parse_x10_mouse_event(data))
        if data[2:3] == b"<":
            match = MOUSE_SGR_PATTERN.search(data[3:])
            if match is not None:
                return match.end() + 3, _as_mouse_msg(parse_sgr_mouse_event(data))

    for detector in (detect_report_focus, detect_bracketed_paste, detect_sequence):
        found = detector(data)
        if found is not None:
            return found

    alt = data[0] == 0x1B
    i = 1 if alt else 0

    if i < len(data) and data[i] == 0:
        return i + 1, KeyMsg(KeyType.NULL, alt=alt)

    chars = []
    while i < len(data):
        char, width = _decode_rune(data[i:])
        if char is None or ord(char) <= KeyType.CTRL_UNDERSCORE or ord(char) == 127 or char == " ":
            # Control characters and spaces are left for detect_sequence.
            break
        chars.append(char)
        i += width
        if alt:
            # Only a single character may follow an alt escape.
            break

    if i >= len(data) and can_have_more_data:
        return 0, None

    if chars:
        return i, KeyMsg(KeyType.RUNES, runes="".join(chars), alt=alt)

    if alt and len(data) == 1:
        return 1, KeyMsg(KeyType.ESCAPE)

    return 1, UnknownInputByteMsg(data[0])


def read_ansi_inputs(stream: BinaryIO) -> Iterator[object]:
    """Read a binary input stream and yield the messages it carries.

    Stops when the stream reaches end of file.
    """
    read = getattr(stream, "read1", None) or stream.read
    leftover = b""
    while True:
        chunk = read(_READ_SIZE)
        if not chunk:
            return
        data = leftover + bytes(chunk)
        leftover = b""
        # A full read may have cut a message short; anything else ends on
        # a message boundary.
        can_have_more_data = len(chunk) == _READ_SIZE
        pos = 0
        while pos < len(data):
            width, msg = detect_one_msg(data[pos:], can_have_more_data)
            if width == 0:
                leftover = data[pos:]
                break
            yield msg
            pos += width


def read_inputs(stream: BinaryIO) -> Iterator[object]:
    """Yield the messages read from a terminal input stream."""
    return read_ansi_inputs(stream)