"""
Pytest fixtures for GTP Bridge tests.
"""

from collections import deque
from pathlib import Path
import sys
import threading

import pytest

from ..engine.errors import EngineIOError
from ..engine.transport import LineTransport
from ..session import SessionManager
from ..api import GameService, create_app


FAKE_ENGINE = Path(__file__).parent / "fake_engine.py"

# Terminated the way real engines do: marker line plus a blank line
OK = "=\n\n"


class ScriptedTransport(LineTransport):
    """
    In-memory engine.

    Replies are looked up by the exact command, then by the command name.
    A reply of "" simulates the engine dying (end of stream).
    """

    def __init__(self, replies: dict[str, str] | None = None, default: str = OK):
        self.replies = dict(replies or {})
        self.default = default
        self.written: list[str] = []
        self.closed = False
        self._pending: deque[str] = deque()
        self._eof = False

    @property
    def commands(self) -> list[str]:
        return [w.rstrip("\n") for w in self.written]

    @property
    def is_alive(self) -> bool:
        return not self.closed and not self._eof

    def write(self, data: str) -> None:
        if self.closed or self._eof:
            raise EngineIOError("Failed to write to engine: Broken pipe")
        self.written.append(data)
        command = data.strip()
        name = command.split()[0]
        reply = self.replies.get(command, self.replies.get(name, self.default))
        if reply == "":
            self._eof = True
        self._pending.extend(reply.splitlines(keepends=True))

    def read_line(self, timeout: float | None = None) -> str:
        if not self._pending:
            return ""
        return self._pending.popleft()

    def close(self) -> None:
        self.closed = True


class BlockingTransport(ScriptedTransport):
    """Scripted transport whose reads wait until `release` is set."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.reading = threading.Event()
        self.release = threading.Event()
        self.release.set()

    def read_line(self, timeout: float | None = None) -> str:
        self.reading.set()
        self.release.wait(timeout=10)
        return super().read_line(timeout)


class FakeLauncher:
    """Transport factory that records launch commands."""

    def __init__(self, transport: LineTransport):
        self.transport = transport
        self.commands: list[list[str]] = []

    def __call__(self, command: list[str]) -> LineTransport:
        self.commands.append(command)
        return self.transport


@pytest.fixture
def engine() -> ScriptedTransport:
    """A well-behaved engine that answers '=' to everything."""
    return ScriptedTransport(replies={"genmove": "= Q16\n\n"})


@pytest.fixture
def launcher(engine: ScriptedTransport) -> FakeLauncher:
    return FakeLauncher(engine)


@pytest.fixture
def manager(launcher: FakeLauncher) -> SessionManager:
    """Session manager wired to the scripted engine."""
    return SessionManager(engine_command=["katago"], transport_factory=launcher)


@pytest.fixture
def started(manager: SessionManager) -> SessionManager:
    """Session manager with a game already started."""
    manager.start(19, 7.5, "c.cfg", "m.bin")
    return manager


@pytest.fixture
def fake_engine_command() -> list[str]:
    """Command prefix that runs the fake GTP engine script."""
    return [sys.executable, str(FAKE_ENGINE)]


@pytest.fixture
def client(manager: SessionManager):
    """HTTP client over an app using the scripted engine."""
    from fastapi.testclient import TestClient

    app = create_app(GameService(session_manager=manager))
    with TestClient(app) as test_client:
        yield test_client
