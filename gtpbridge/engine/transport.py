"""
Line Transport - Blocking line I/O with the engine.

The protocol adapter never touches pipes directly. It talks to a
LineTransport, which can be:
- SubprocessTransport: a real engine process (stdin/stdout pipes)
- a scripted fake in tests

Reads are blocking. A read timeout is optional; by default a read waits
for as long as the engine takes.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
import logging
import queue
import shlex
import subprocess
import threading

from .errors import EngineIOError, EngineTimeout

logger = logging.getLogger(__name__)


class LineTransport(ABC):
    """Exclusive channel to one engine process."""

    @abstractmethod
    def write(self, data: str) -> None:
        """Write raw text to the engine input and flush it."""

    @abstractmethod
    def read_line(self, timeout: float | None = None) -> str:
        """
        Read one line from the engine output.

        Returns the line including its newline, or "" at end of stream.
        Raises EngineTimeout if timeout elapses first.
        """

    @abstractmethod
    def close(self) -> None:
        """Forcibly stop the engine and release the pipes."""

    @property
    @abstractmethod
    def is_alive(self) -> bool:
        """Whether the engine is still running."""


class SubprocessTransport(LineTransport):
    """
    Transport backed by an engine subprocess.

    A daemon reader thread pumps stdout into a queue so that reads can
    honour a timeout. The engine's stderr is discarded.
    """

    def __init__(self, process: subprocess.Popen):
        self.process = process
        self._lines: queue.Queue[str | None] = queue.Queue()
        self._eof = False
        self._reader = threading.Thread(
            target=self._pump,
            name=f"gtp-reader-{process.pid}",
            daemon=True,
        )
        self._reader.start()

    @classmethod
    def launch(cls, command: list[str]) -> SubprocessTransport:
        """
        Start the engine process.

        Raises OSError if the executable cannot be started.
        """
        logger.info("Launching engine: %s", shlex.join(command))
        process = subprocess.Popen(
            command,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            bufsize=1,
        )
        return cls(process)

    @property
    def is_alive(self) -> bool:
        return self.process.poll() is None

    def _pump(self):
        stdout = self.process.stdout
        try:
            for line in stdout:
                self._lines.put(line)
        except (OSError, ValueError) as e:
            # Pipe closed underneath us during teardown
            logger.debug("Engine reader stopped: %s", e)
        finally:
            self._lines.put(None)
            stdout.close()

    def write(self, data: str) -> None:
        try:
            self.process.stdin.write(data)
            self.process.stdin.flush()
        except (OSError, ValueError) as e:
            raise EngineIOError(f"Failed to write to engine: {e}") from e

    def read_line(self, timeout: float | None = None) -> str:
        if self._eof:
            return ""
        try:
            line = self._lines.get(timeout=timeout)
        except queue.Empty:
            raise EngineTimeout(
                f"Engine did not respond within {timeout:g} seconds"
            ) from None
        if line is None:
            self._eof = True
            return ""
        return line

    def close(self) -> None:
        if self.process.poll() is None:
            logger.info("Killing engine process %d", self.process.pid)
            self.process.kill()
        self.process.wait()
        try:
            self.process.stdin.close()
        except OSError:
            # Unflushed data on a dead pipe
            pass
        self._reader.join(timeout=1.0)
