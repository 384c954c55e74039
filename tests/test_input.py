import io
import random

import pytest

from brewterm.input import (
    SEQUENCES,
    BlurMsg,
    FocusMsg,
    UnknownCSISequenceMsg,
    UnknownInputByteMsg,
    detect_bracketed_paste,
    detect_one_msg,
    detect_report_focus,
    detect_sequence,
    read_ansi_inputs,
    read_inputs,
)
from brewterm.keys import KeyMsg, KeyType
from brewterm.mouse import MouseAction, MouseButton, MouseEventType, MouseMsg


def _build_base_seq_tests():
    cases = []
    for seq, key in SEQUENCES.items():
        cases.append((seq, key))
        if not key.alt:
            cases.append((b"\x1b" + seq, KeyMsg(key.type, runes=key.runes, alt=True)))
    for code in [*range(1, 32), 127]:
        if code == 27:
            continue
        cases.append((bytes([code]), KeyMsg(KeyType(code))))
        cases.append((bytes([0x1B, code]), KeyMsg(KeyType(code), alt=True)))
    cases.append(
        (b"\x1b[----X", UnknownCSISequenceMsg(b"\x1b[----X")),
    )
    cases.append((b" ", KeyMsg(KeyType.SPACE, runes=" ")))
    cases.append((b"\x1b ", KeyMsg(KeyType.SPACE, runes=" ", alt=True)))
    return cases


BASE_CASES = _build_base_seq_tests()

ONE_MSG_EXTRA = [
    (b"\x1b[I", FocusMsg()),
    (b"\x1b[O", BlurMsg()),
    (
        bytes([0x1B, ord("["), ord("M"), 32 + 0b0100_0000, 65, 49]),
        MouseMsg(
            x=32,
            y=16,
            type=MouseEventType.WHEEL_UP,
            button=MouseButton.WHEEL_UP,
            action=MouseAction.PRESS,
        ),
    ),
    (
        b"\x1b[<0;33;17M",
        MouseMsg(
            x=32,
            y=16,
            type=MouseEventType.LEFT,
            button=MouseButton.LEFT,
            action=MouseAction.PRESS,
        ),
    ),
    (b"a", KeyMsg(KeyType.RUNES, runes="a")),
    (b"\x1ba", KeyMsg(KeyType.RUNES, runes="a", alt=True)),
    (b"aaa", KeyMsg(KeyType.RUNES, runes="aaa")),
    ("☃".encode(), KeyMsg(KeyType.RUNES, runes="☃")),
    (b"\x1b" + "☃".encode(), KeyMsg(KeyType.RUNES, runes="☃", alt=True)),
    (b"\x1b", KeyMsg(KeyType.ESCAPE)),
    (b"\x01", KeyMsg(KeyType.CTRL_A)),
    (b"\x1b\x01", KeyMsg(KeyType.CTRL_A, alt=True)),
    (b"\x00", KeyMsg(KeyType.CTRL_AT)),
    (b"\x1b\x00", KeyMsg(KeyType.CTRL_AT, alt=True)),
    (b"\x80", UnknownInputByteMsg(0x80)),
    (b"\xfe", UnknownInputByteMsg(0xFE)),
]


@pytest.mark.parametrize("seq,expected", BASE_CASES, ids=[repr(c[0]) for c in BASE_CASES])
def test_detect_sequence(seq, expected):
    assert detect_sequence(seq) == (len(seq), expected)


ALL_ONE_MSG = BASE_CASES + ONE_MSG_EXTRA


@pytest.mark.parametrize("seq,expected", ALL_ONE_MSG, ids=[repr(c[0]) for c in ALL_ONE_MSG])
def test_detect_one_msg(seq, expected):
    assert detect_one_msg(seq, False) == (len(seq), expected)


def test_detect_sequence_no_match():
    assert detect_sequence(b"a") is None


def test_detect_one_msg_needs_more_data():
    assert detect_one_msg(b"abc", True) == (0, None)
    assert detect_one_msg(b"\x1b", True) == (0, None)


def test_detect_one_msg_empty_raises():
    with pytest.raises(ValueError):
        detect_one_msg(b"", False)


def test_detect_bracketed_paste():
    data = b"\x1b[200~hi\x1b[201~rest"
    assert detect_bracketed_paste(data) == (
        16,
        KeyMsg(KeyType.RUNES, runes="hi", paste=True),
    )
    assert detect_bracketed_paste(b"\x1b[200~partial") == (0, None)
    assert detect_bracketed_paste(b"plain") is None


def test_detect_bracketed_paste_skips_invalid_bytes():
    width, msg = detect_bracketed_paste(b"\x1b[200~a\xffb\x1b[201~")
    assert width == 15
    assert msg.runes == "ab"


def test_detect_report_focus_requires_exact_input():
    assert detect_report_focus(b"\x1b[I") == (3, FocusMsg())
    assert detect_report_focus(b"\x1b[O") == (3, BlurMsg())
    assert detect_report_focus(b"\x1b[OA") is None


def test_unknown_messages_str():
    assert str(UnknownInputByteMsg(0xFE)) == "?0xfe?"
    assert str(UnknownCSISequenceMsg(b"\x1b[----X")) == "?CSI[45 45 45 45 88]?"


def _read_all(data):
    return list(read_ansi_inputs(io.BytesIO(data)))


def test_read_long_input():
    text = "a" * 1000
    msgs = _read_all(text.encode())
    assert msgs == [KeyMsg(KeyType.RUNES, runes=text)]


def _mouse(x, y, typ, button, action):
    return MouseMsg(x=x, y=y, type=typ, button=button, action=action)


READ_CASES = [
    ("a", b"a", [KeyMsg(KeyType.RUNES, runes="a")]),
    (" ", b" ", [KeyMsg(KeyType.SPACE, runes=" ")]),
    (
        "a alt+a",
        b"a\x1ba",
        [KeyMsg(KeyType.RUNES, runes="a"), KeyMsg(KeyType.RUNES, runes="a", alt=True)],
    ),
    (
        "a alt+a a",
        b"a\x1baa",
        [
            KeyMsg(KeyType.RUNES, runes="a"),
            KeyMsg(KeyType.RUNES, runes="a", alt=True),
            KeyMsg(KeyType.RUNES, runes="a"),
        ],
    ),
    ("ctrl+a", b"\x01", [KeyMsg(KeyType.CTRL_A)]),
    ("ctrl+a ctrl+b", b"\x01\x02", [KeyMsg(KeyType.CTRL_A), KeyMsg(KeyType.CTRL_B)]),
    ("alt+a", b"\x1ba", [KeyMsg(KeyType.RUNES, runes="a", alt=True)]),
    ("abcd", b"abcd", [KeyMsg(KeyType.RUNES, runes="abcd")]),
    ("up", b"\x1b[A", [KeyMsg(KeyType.UP)]),
    (
        "wheel up",
        bytes([0x1B, ord("["), ord("M"), 32 + 0b0100_0000, 65, 49]),
        [
            _mouse(
                32, 16, MouseEventType.WHEEL_UP, MouseButton.WHEEL_UP, MouseAction.PRESS
            )
        ],
    ),
    (
        "left motion release",
        bytes(
            [0x1B, ord("["), ord("M"), 32 + 0b0010_0000, 32 + 33, 16 + 33]
            + [0x1B, ord("["), ord("M"), 32 + 0b0000_0011, 64 + 33, 32 + 33]
        ),
        [
            _mouse(32, 16, MouseEventType.LEFT, MouseButton.LEFT, MouseAction.MOTION),
            _mouse(64, 32, MouseEventType.RELEASE, MouseButton.NONE, MouseAction.RELEASE),
        ],
    ),
    ("shift+tab", b"\x1b[Z", [KeyMsg(KeyType.SHIFT_TAB)]),
    ("enter", b"\r", [KeyMsg(KeyType.ENTER)]),
    ("alt+enter", b"\x1b\r", [KeyMsg(KeyType.ENTER, alt=True)]),
    ("insert", b"\x1b[2~", [KeyMsg(KeyType.INSERT)]),
    ("alt+ctrl+a", b"\x1b\x01", [KeyMsg(KeyType.CTRL_A, alt=True)]),
    ("?CSI[45 45 45 45 88]?", b"\x1b[----X", [UnknownCSISequenceMsg(b"\x1b[----X")]),
    ("up", b"\x1bOA", [KeyMsg(KeyType.UP)]),
    ("down", b"\x1bOB", [KeyMsg(KeyType.DOWN)]),
    ("right", b"\x1bOC", [KeyMsg(KeyType.RIGHT)]),
    ("left", b"\x1bOD", [KeyMsg(KeyType.LEFT)]),
    ("alt+enter", b"\x1b\x0d", [KeyMsg(KeyType.ENTER, alt=True)]),
    ("alt+backspace", b"\x1b\x7f", [KeyMsg(KeyType.BACKSPACE, alt=True)]),
    ("ctrl+@", b"\x00", [KeyMsg(KeyType.CTRL_AT)]),
    ("alt+ctrl+@", b"\x1b\x00", [KeyMsg(KeyType.CTRL_AT, alt=True)]),
    ("esc", b"\x1b", [KeyMsg(KeyType.ESC)]),
    ("alt+esc", b"\x1b\x1b", [KeyMsg(KeyType.ESC, alt=True)]),
    (
        "[a b] o",
        b"\x1b[200~a b\x1b[201~o",
        [
            KeyMsg(KeyType.RUNES, runes="a b", paste=True),
            KeyMsg(KeyType.RUNES, runes="o"),
        ],
    ),
    (
        "[a\x03\nb]",
        b"\x1b[200~a\x03\nb\x1b[201~",
        [KeyMsg(KeyType.RUNES, runes="a\x03\nb", paste=True)],
    ),
    ("?0xfe?", b"\xfe", [UnknownInputByteMsg(0xFE)]),
    (
        "a ?0xfe?   b",
        b"a\xfe b",
        [
            KeyMsg(KeyType.RUNES, runes="a"),
            UnknownInputByteMsg(0xFE),
            KeyMsg(KeyType.SPACE, runes=" "),
            KeyMsg(KeyType.RUNES, runes="b"),
        ],
    ),
]


@pytest.mark.parametrize(
    "title,data,expected",
    READ_CASES,
    ids=[f"{i}: {c[0]!r}" for i, c in enumerate(READ_CASES)],
)
def test_read_input(title, data, expected):
    msgs = list(read_inputs(io.BytesIO(data)))
    assert " ".join(str(m) for m in msgs) == title
    assert msgs == expected


class _ChunkedStream:
    def __init__(self, chunks):
        self._chunks = list(chunks)

    def read1(self, size):
        return self._chunks.pop(0) if self._chunks else b""


def test_read_resumes_sequence_split_across_full_read():
    stream = _ChunkedStream([b"a" * 254 + b"\x1b[", b"A"])
    msgs = list(read_ansi_inputs(stream))
    assert msgs == [KeyMsg(KeyType.RUNES, runes="a" * 254), KeyMsg(KeyType.UP)]


def test_read_paste_split_across_reads():
    stream = _ChunkedStream([b"\x1b[200~xy", b"z\x1b[201~"])
    msgs = list(read_ansi_inputs(stream))
    assert msgs == [KeyMsg(KeyType.RUNES, runes="xyz", paste=True)]


def test_read_empty_stream():
    assert _read_all(b"") == []


def _gen_random_data(seed, length):
    rng = random.Random(seed)
    allseqs = sorted((seq, str(key)) for seq, key in SEQUENCES.items())
    data = bytearray()
    lengths = []
    names = []
    while len(data) < length:
        alt = rng.randrange(2)
        prefix = "alt+" if alt else ""
        esclen = alt
        kind = rng.randrange(3)
        if kind == 0:
            if alt:
                data += b"\x1b"
            data += b"\x01"
            names.append(prefix + "ctrl+a")
            lengths.append(1 + esclen)
        else:
            seq, name = rng.choice(allseqs)
            if name.startswith("alt+"):
                alt, prefix, esclen = 0, "", 0
            if alt:
                data += b"\x1b"
            data += seq
            names.append(prefix + name)
            lengths.append(len(seq) + esclen)
    return bytes(data), lengths, names


@pytest.mark.parametrize("seed", range(10))
def test_detect_random_sequences(seed):
    data, lengths, names = _gen_random_data(seed, 1000)
    pos = 0
    for expected_width, expected_name in zip(lengths, names):
        found = detect_sequence(data[pos:])
        assert found is not None
        width, msg = found
        assert width == expected_width
        assert str(msg) == expected_name
        pos += width
    assert pos == len(data)