"""Terminal setup/teardown and input polling"""
import os
import re
import sys
import time

from .input import (
    KeyEvent, MouseEvent, MOUSE_PRESS, MOUSE_RELEASE,
    KEY_UP, KEY_DOWN, KEY_ENTER, KEY_ESC, KEY_BACKSPACE, KEY_CTRL_C,
)

WINDOWS = sys.platform == "win32"

if WINDOWS:
    import msvcrt
else:
    import select
    import termios
    import tty

# SGR mouse report: ESC [ < button ; col ; row (M press | m release)
_SGR_MOUSE = re.compile(r"\x1b\[<(\d+);(\d+);(\d+)([Mm])")

_CSI_KEYS = {
    "\x1b[A": KEY_UP,
    "\x1b[B": KEY_DOWN,
    "\x1bOA": KEY_UP,
    "\x1bOB": KEY_DOWN,
}

_WIN_SCAN_KEYS = {
    "H": KEY_UP,
    "P": KEY_DOWN,
    "S": KEY_BACKSPACE,  # Del
}


def decode_char(ch):
    """Map one plain character to an event, or None for unhandled controls."""
    if ch in ("\r", "\n"):
        return KeyEvent(KEY_ENTER)
    if ch in ("\b", "\x7f"):
        return KeyEvent(KEY_BACKSPACE)
    if ch == "\x1b":
        return KeyEvent(KEY_ESC)
    if ch == "\x03":
        return KeyEvent(KEY_CTRL_C)
    if ch.isprintable():
        return KeyEvent(ch)
    return None


def decode_sequence(seq):
    """Decode one chunk read from a POSIX tty into events.

    ``seq`` may hold several keys typed quickly; unknown escape sequences are
    dropped as a whole.
    """
    events = []
    i = 0
    while i < len(seq):
        if seq[i] == "\x1b" and i + 1 < len(seq):
            m = _SGR_MOUSE.match(seq, i)
            if m:
                button, col, row, final = m.groups()
                # bit 5 marks motion, bit 6 the wheel
                if not int(button) & (32 | 64):
                    kind = MOUSE_PRESS if final == "M" else MOUSE_RELEASE
                    events.append(MouseEvent(kind, int(row) - 1, int(col) - 1))
                i = m.end()
                continue
            key = _CSI_KEYS.get(seq[i:i + 3])
            if key:
                events.append(KeyEvent(key))
                i += 3
                continue
            if seq[i + 1] in "[O":
                # unknown CSI/SS3: skip to its final byte
                j = i + 2
                while j < len(seq) and not ("@" <= seq[j] <= "~"):
                    j += 1
                i = j + 1
                continue
        event = decode_char(seq[i])
        if event:
            events.append(event)
        i += 1
    return events


class Terminal:
    """Raw mode, alternate screen and mouse capture for the lifetime of the dashboard."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self._fd = None
        self._saved = None
        self._pending = []

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, *exc):
        self.close()
        return False

    def open(self):
        if WINDOWS:
            # Enable ANSI
            os.system("")
        else:
            self._fd = sys.stdin.fileno()
            self._saved = termios.tcgetattr(self._fd)
            tty.setraw(self._fd)
        # alternate screen, clear, hide cursor, mouse buttons in SGR encoding
        self.stream.write("\033[?1049h\033[2J\033[?25l\033[?1000h\033[?1006h")
        self.stream.flush()

    def close(self):
        self.stream.write("\033[?1006l\033[?1000l\033[?25h\033[0m\033[?1049l")
        self.stream.flush()
        if self._saved is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved)
            self._saved = None

    def poll(self, timeout):
        """Next input event, or None if nothing arrived within ``timeout`` seconds."""
        if self._pending:
            return self._pending.pop(0)
        deadline = time.monotonic() + max(0.0, timeout)
        while True:
            events = self._read_windows() if WINDOWS else self._read_posix(deadline)
            if events:
                self._pending.extend(events[1:])
                return events[0]
            if time.monotonic() >= deadline:
                return None
            if WINDOWS:
                time.sleep(0.02)

    def _read_posix(self, deadline):
        remaining = max(0.0, deadline - time.monotonic())
        ready, _, _ = select.select([self._fd], [], [], remaining)
        if not ready:
            return []
        data = os.read(self._fd, 1024)
        return decode_sequence(data.decode("utf-8", errors="ignore"))

    def _read_windows(self):
        events = []
        while msvcrt.kbhit():
            ch = msvcrt.getwch()
            if ch in ("\x00", "\xe0"):
                if msvcrt.kbhit():
                    key = _WIN_SCAN_KEYS.get(msvcrt.getwch())
                    if key:
                        events.append(KeyEvent(key))
                continue
            event = decode_char(ch)
            if event:
                events.append(event)
        return events
