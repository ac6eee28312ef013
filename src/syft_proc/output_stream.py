"""
Non-blocking, line-oriented access to a process's redirected output
"""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import BinaryIO

logger = logging.getLogger(__name__)


class OutputStream:
    """
    Reads one output stream (stdout or stderr) of a process from its backing file.

    Reads never block: each call returns whatever complete lines were written
    since the previous call. A trailing line without a newline is held back
    until it is completed, or until the process is gone.

    End of stream is a guess. Regular files have no end-of-stream event while
    another process may still write to them, so `is_eof()` is true only once
    the process is no longer alive and nothing unread remains.

    A stream without a path (discarded output) is always empty and at EOF.
    """

    def __init__(
        self,
        path: Path | None,
        is_alive: Callable[[], bool],
        stream_type: str = "stdout",
    ):
        self.path = path
        self.stream_type = stream_type
        self._is_alive = is_alive
        self._file: BinaryIO | None = None
        self._buffer = b""
        self._closed = False

    @property
    def is_open(self) -> bool:
        return self._file is not None

    def _open(self) -> BinaryIO | None:
        # Opened lazily, the process may not have created the file yet
        if self._file is None and not self._closed and self.path is not None:
            try:
                self._file = open(self.path, "rb")
            except FileNotFoundError:
                return None
            except OSError as e:
                logger.warning(f"Failed to open {self.path}: {e}")
                return None
        return self._file

    def _fill(self) -> None:
        f = self._open()
        if f is None:
            return
        try:
            data = f.read()
        except OSError as e:
            logger.warning(f"Failed to read {self.path}: {e}")
            return
        if data:
            self._buffer += data

    def _has_complete_line(self) -> bool:
        return b"\n" in self._buffer

    def can_read(self) -> bool:
        """True if a read_lines() call would return something right now"""
        if self.path is None:
            return False
        alive = self._is_alive()
        self._fill()
        if self._has_complete_line():
            return True
        return bool(self._buffer) and not alive

    def read_lines(self) -> list[str]:
        """All complete lines available since the previous read, possibly none"""
        if self.path is None:
            return []
        # Liveness first: if the process was already gone, the file is complete
        alive = self._is_alive()
        self._fill()

        head, sep, tail = self._buffer.rpartition(b"\n")
        if sep:
            chunk, self._buffer = head, tail
            lines = chunk.split(b"\n")
        else:
            lines = []

        if not alive and self._buffer:
            lines.append(self._buffer)
            self._buffer = b""

        return [self._decode(line) for line in lines]

    def is_eof(self) -> bool:
        """Best-effort end of stream: process gone and no unread data left"""
        if self.path is None:
            return True
        if self._is_alive():
            return False
        self._fill()
        return not self._buffer

    @staticmethod
    def _decode(line: bytes) -> str:
        return line.decode("utf-8", errors="replace").removesuffix("\r")

    def close(self) -> None:
        self._closed = True
        if self._file is not None:
            self._file.close()
            self._file = None

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed" if self._closed else "unopened"
        return f"<OutputStream {self.stream_type}: {self.path or 'discarded'} ({state})>"
