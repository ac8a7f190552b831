"""Console adapters used by the LC-3 keyboard device and trap routines.

The virtual machine only ever talks to a :class:`Console`. Two adapters are
provided: :class:`TerminalConsole` works on real file descriptors and can put
the controlling terminal into raw mode, :class:`StreamConsole` works on an
in-memory byte buffer and is used for piped input and by the test-suite.
"""

from __future__ import annotations

import io
import os
import select
import sys
import termios
from collections import deque
from contextlib import contextmanager
from typing import BinaryIO, Iterator, Optional, Protocol

from lc3vm.utils import debug_enabled, debug_log


class ConsoleError(RuntimeError):
    """Raised when the console stream is closed or fails."""


class Console(Protocol):
    def poll_ready(self) -> bool:
        ...

    def read_char(self) -> int:
        ...

    def write_char(self, char: int) -> None:
        ...

    def write_text(self, text: str) -> None:
        ...

    def flush(self) -> None:
        ...


def _encode(text: str) -> bytes:
    return text.encode("latin-1", errors="replace")


class TerminalConsole:
    """Console bound to the process standard streams."""

    def __init__(self, stdin=None, stdout=None) -> None:
        stdin = sys.stdin if stdin is None else stdin
        stdout = sys.stdout if stdout is None else stdout
        self._in_fd = stdin.fileno()
        self._output: BinaryIO = getattr(stdout, "buffer", stdout)

    def poll_ready(self) -> bool:
        try:
            readable, _, _ = select.select([self._in_fd], [], [], 0)
        except OSError as exc:
            raise ConsoleError(f"console poll failed: {exc}") from exc
        return bool(readable)

    def read_char(self) -> int:
        try:
            data = os.read(self._in_fd, 1)
        except OSError as exc:
            raise ConsoleError(f"console read failed: {exc}") from exc
        if not data:
            raise ConsoleError("console input closed")
        if debug_enabled("console"):
            debug_log("console", "read=%02x", data[0])
        return data[0]

    def write_char(self, char: int) -> None:
        self._write(bytes([char & 0xFF]))

    def write_text(self, text: str) -> None:
        self._write(_encode(text))

    def flush(self) -> None:
        try:
            self._output.flush()
        except OSError as exc:
            raise ConsoleError(f"console flush failed: {exc}") from exc

    @contextmanager
    def raw_mode(self) -> Iterator[None]:
        """Disable line buffering and echo on the input terminal for the block.

        The saved attributes are restored on every exit path, including
        exceptions and ``KeyboardInterrupt``. Non-tty input is left untouched.
        """

        if not os.isatty(self._in_fd):
            yield
            return

        saved = termios.tcgetattr(self._in_fd)
        attrs = termios.tcgetattr(self._in_fd)
        attrs[3] &= ~(termios.ICANON | termios.ECHO)
        termios.tcsetattr(self._in_fd, termios.TCSAFLUSH, attrs)
        if debug_enabled("console"):
            debug_log("console", "raw mode enabled fd=%d", self._in_fd)
        try:
            yield
        finally:
            termios.tcsetattr(self._in_fd, termios.TCSANOW, saved)
            if debug_enabled("console"):
                debug_log("console", "raw mode restored fd=%d", self._in_fd)

    def _write(self, data: bytes) -> None:
        try:
            self._output.write(data)
        except OSError as exc:
            raise ConsoleError(f"console write failed: {exc}") from exc


class StreamConsole:
    """Console backed by a byte buffer for input and a binary stream for output."""

    def __init__(self, input_data: bytes = b"", output: Optional[BinaryIO] = None) -> None:
        self._pending: deque[int] = deque(input_data)
        self._output: BinaryIO = output if output is not None else io.BytesIO()

    def feed(self, data: bytes) -> None:
        self._pending.extend(data)

    def poll_ready(self) -> bool:
        return bool(self._pending)

    def read_char(self) -> int:
        if not self._pending:
            raise ConsoleError("console input closed")
        return self._pending.popleft()

    def write_char(self, char: int) -> None:
        self._output.write(bytes([char & 0xFF]))

    def write_text(self, text: str) -> None:
        self._output.write(_encode(text))

    def flush(self) -> None:
        self._output.flush()

    def output_bytes(self) -> bytes:
        if isinstance(self._output, io.BytesIO):
            return self._output.getvalue()
        raise TypeError("output stream is not an in-memory buffer")

    def output_text(self) -> str:
        return self.output_bytes().decode("latin-1")
