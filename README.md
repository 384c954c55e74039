# brewterm

Building blocks for text user interfaces in the terminal:

- **Input decoding** (`brewterm.input`, `brewterm.keys`, `brewterm.mouse`):
  raw bytes from a terminal become key, mouse, focus/blur and bracketed-paste
  messages.
- **Rendering** (`brewterm.renderer`): `StandardRenderer` repaints the latest
  frame at a limited frame rate and redraws only the lines that changed. It
  also controls the alternate screen, cursor visibility, mouse reporting,
  bracketed paste, focus reporting and the window title. `NilRenderer`
  accepts the same calls and outputs nothing.
- **Messages and commands** (`brewterm.messages`): message classes such as
  `WindowSizeMsg` and commands such as `clear_screen`, `enter_alt_screen`,
  `println(...)` and `printf(...)`.
- **Program settings** (`brewterm.options`): option functions such as
  `with_alt_screen()`, `with_mouse_cell_motion()` or `with_fps(30)`, combined
  into a `ProgramSettings` with `build_settings(...)`.
- **Running other programs** (`brewterm.execution`): `exec_process([...],
  callback)` and `run_exec(...)` run a blocking process, such as an editor, on
  given streams and report how it ended.
- **Logging to a file** (`brewterm.logfile`) while the terminal is occupied.

## Installation

```
pip install brewterm
```

## Decoding input

```python
import io
from brewterm.input import read_ansi_inputs

for msg in read_ansi_inputs(io.BytesIO(b"a\x1b[A\x1b[<0;33;17M")):
    print(msg)
# a
# up
# left press
```

`read_ansi_inputs` reads a binary stream until end of file and yields
`KeyMsg`, `MouseMsg`, `FocusMsg`, `BlurMsg`, `UnknownInputByteMsg` and
`UnknownCSISequenceMsg` values. `detect_one_msg(data, can_have_more_data)`
decodes a single message from a byte string and returns `(width, msg)`; a
width of 0 means more bytes are needed.

## Keys and mouse events

```python
from brewterm.keys import Key, KeyType

print(Key(type=KeyType.ENTER))                      # enter
print(Key(type=KeyType.RUNES, runes="a", alt=True))  # alt+a
```

`brewterm.mouse` parses X10 and SGR mouse reports with
`parse_x10_mouse_event` and `parse_sgr_mouse_event`; a `MouseEvent` carries
coordinates, modifiers, a `MouseAction` and a `MouseButton`.

## Rendering

```python
import sys
from brewterm.renderer import StandardRenderer
from brewterm.messages import WindowSizeMsg

r = StandardRenderer(sys.stdout, 60)
r.handle_messages(WindowSizeMsg(width=80, height=24))
r.start()
r.write("Hello\nworld")
r.stop()
```

The frame rate is clamped to between 1 and 120; below 1 means 60.
`handle_messages` also reacts to `RepaintMsg`, `PrintLineMsg` and the
scroll-area messages.

## Running an external program

```python
import sys
from brewterm.execution import OsExecCommand, run_exec

result = run_exec(OsExecCommand(["true"]), lambda err: err, sys.stdin, sys.stdout)
```

The callback receives the exception raised (for example
`subprocess.CalledProcessError` on a non-zero exit) or None.
`exec_process(args, callback)` returns a command producing an `ExecMsg`.

## Logging

```python
from brewterm.logfile import log_to_file

f = log_to_file("debug.log", "debug")
...
f.close()
```

A space is added after a prefix that does not already end in whitespace.
`log_to_file_with` accepts a `logging.Logger` or any object with
`set_output` and `set_prefix` methods.

## What this package does not do

There is no program runtime here: nothing runs a model's update/view loop,
sends commands, reads the terminal on its own, handles signals or resizes,
or puts the terminal into raw mode. `ProgramSettings` only records the
chosen options, and `with_ansi_compressor()` only sets a flag. Input decoding
covers ANSI byte streams; native Windows console input is not handled.