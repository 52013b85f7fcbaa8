"""
Session Manager - Owns the single engine session.

LIFECYCLE:
1. start -> launch engine, send boardsize / komi / clear_board
2. play / genmove -> one GTP exchange each
3. end -> quit, kill the process, forget the session

RULES:
- At most one session exists at a time
- A session is either fully set up or does not exist
- Every operation holds the same lock for its whole duration,
  including the blocking engine round-trips
- A broken pipe during play/genmove kills the engine and clears the
  session so the next start can proceed
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable
import logging
import threading
import time

from ..engine.errors import (
    AlreadyRunning,
    NoActiveSession,
    LaunchError,
    EngineRejected,
    EngineIOError,
)
from ..engine.protocol import GTPProtocol, ResponseBlock
from ..engine.transport import LineTransport, SubprocessTransport

logger = logging.getLogger(__name__)

DEFAULT_ENGINE_COMMAND = ["./katago"]

TransportFactory = Callable[[list[str]], LineTransport]


class SessionState(Enum):
    """State of an engine session."""
    UNINITIALIZED = "uninitialized"  # Process launched, board not set up
    ACTIVE = "active"  # Accepting moves
    TERMINATED = "terminated"  # Ended or engine died


@dataclass
class Session:
    """
    One running engine process.

    Only the SessionManager holds a reference to it.
    """
    protocol: GTPProtocol
    board_size: int
    komi: float
    started_at: float = field(default_factory=time.time)
    state: SessionState = SessionState.UNINITIALIZED

    @property
    def transport(self) -> LineTransport:
        return self.protocol.transport

    def is_active(self) -> bool:
        return self.state == SessionState.ACTIVE


class SessionManager:
    """
    Guards the single engine session.

    Create one per process and hand it to the API service.

    Args:
        engine_command: Executable (plus any leading args) for the engine.
            "gtp -model <model> -config <config>" is appended at start.
        response_timeout: Seconds to wait for a response block, or None
            to wait indefinitely.
        transport_factory: Builds a LineTransport from a command line.
            Defaults to launching a subprocess.
    """

    def __init__(
        self,
        engine_command: list[str] | None = None,
        response_timeout: float | None = None,
        transport_factory: TransportFactory | None = None,
    ):
        if response_timeout is not None and response_timeout < 0:
            raise ValueError(f"response_timeout must be non-negative, got {response_timeout}")
        self.engine_command = list(engine_command or DEFAULT_ENGINE_COMMAND)
        self.response_timeout = response_timeout
        self._launch = transport_factory or SubprocessTransport.launch
        self._lock = threading.Lock()
        self._session: Session | None = None

    def build_command(self, config_path: str, model_path: str) -> list[str]:
        """Full engine command line for a game."""
        return [
            *self.engine_command,
            "gtp",
            "-model", model_path,
            "-config", config_path,
        ]

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(
        self,
        board_size: int,
        komi: float,
        config_path: str,
        model_path: str,
    ) -> Session:
        """
        Launch the engine and set up an empty board.

        Setup responses are not checked; a "?" from boardsize or komi does
        not fail the start. Any launch or pipe failure leaves no session.

        Raises:
            AlreadyRunning: a session is active
            LaunchError: the engine could not be launched or set up
        """
        with self._lock:
            if self._session is not None:
                raise AlreadyRunning()

            command = self.build_command(config_path, model_path)
            try:
                transport = self._launch(command)
            except (OSError, ValueError) as e:
                logger.warning("Engine launch failed: %s", e)
                raise LaunchError(f"Failed to launch engine: {e}") from e

            session = Session(
                protocol=GTPProtocol(transport, response_timeout=self.response_timeout),
                board_size=board_size,
                komi=komi,
            )

            try:
                for block in (
                    session.protocol.boardsize(board_size),
                    session.protocol.komi(komi),
                    session.protocol.clear_board(),
                ):
                    if block.failed:
                        logger.warning(
                            "Engine refused setup command %r: %s",
                            block.command, block.text,
                        )
            except BaseException as e:
                logger.warning("Engine failed during setup: %s", e)
                session.state = SessionState.TERMINATED
                transport.close()
                if isinstance(e, EngineIOError):
                    raise LaunchError(f"Engine failed during setup: {e}") from e
                raise

            session.state = SessionState.ACTIVE
            self._session = session
            logger.info("Game started: board %d, komi %.1f", board_size, komi)
            return session

    def end(self) -> bool:
        """
        Quit and kill the engine if a session is active.

        Never fails. Returns True if a session was ended.
        """
        with self._lock:
            session = self._session
            if session is None:
                return False

            self._session = None
            try:
                session.protocol.quit()
            except EngineIOError as e:
                logger.warning("Engine did not acknowledge quit: %s", e)
            finally:
                session.transport.close()
                session.state = SessionState.TERMINATED

            logger.info(
                "Game ended after %d commands", session.protocol.commands_sent
            )
            return True

    def shutdown(self):
        """Process-exit hook: end any active session."""
        self.end()

    # =========================================================================
    # Moves
    # =========================================================================

    def play(self, color: str, move: str) -> str:
        """
        Play a move for color.

        Returns the trimmed response block.

        Raises:
            NoActiveSession: no game running
            EngineRejected: engine answered "?"
            EngineIOError: engine died mid-exchange (session cleared)
        """
        with self._lock:
            block = self._exchange(lambda p: p.play(color, move))
            return block.text

    def generate_move(self, color: str) -> str:
        """
        Ask the engine to pick and play a move for color.

        Returns the bare move token, e.g. "Q16" or "pass".
        """
        with self._lock:
            block = self._exchange(lambda p: p.genmove(color))
            return block.payload

    def _exchange(self, send: Callable[[GTPProtocol], ResponseBlock]) -> ResponseBlock:
        # Caller holds the lock
        session = self._session
        if session is None or not session.is_active():
            raise NoActiveSession()

        try:
            block = send(session.protocol)
        except EngineIOError:
            logger.exception("Engine I/O failed; clearing session")
            self._session = None
            session.state = SessionState.TERMINATED
            session.transport.close()
            raise

        if not block.succeeded:
            raise EngineRejected(block)
        return block

    # =========================================================================
    # Status
    # =========================================================================

    def is_active(self) -> bool:
        """Whether a game session is running. Does not wait on the lock."""
        session = self._session
        return session is not None and session.is_active()

    def status(self) -> dict[str, Any]:
        """
        Snapshot of the current session for health reporting.

        Reads without the lock so it answers while a command is in flight.
        """
        session = self._session
        if session is None or not session.is_active():
            return {"game_running": False}
        return {
            "game_running": True,
            "board_size": session.board_size,
            "komi": session.komi,
            "commands_sent": session.protocol.commands_sent,
            "started_at": session.started_at,
        }
