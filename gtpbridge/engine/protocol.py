"""
GTP Protocol Adapter - Frames one command/response exchange.

Go Text Protocol is line based:
    controller -> engine:  "<command> [args...]\\n"
    engine -> controller:  zero or more lines, then a terminal line
                           starting with "=" (success) or "?" (failure)

One command is written, then lines are read and accumulated until the
terminal line arrives. The terminal line is part of the block.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .errors import EngineIOError
from .transport import LineTransport

logger = logging.getLogger(__name__)

SUCCESS_MARKER = "="
FAILURE_MARKER = "?"


class Command:
    """GTP command names sent to the engine."""
    BOARDSIZE = "boardsize"
    KOMI = "komi"
    CLEAR_BOARD = "clear_board"
    PLAY = "play"       # play <color> <vertex>
    GENMOVE = "genmove"  # genmove <color>
    QUIT = "quit"


def build_command(name: str, *args) -> str:
    """Join a command name and its arguments into one GTP line."""
    text = " ".join([name, *(str(a) for a in args)])
    if "\n" in text or "\r" in text:
        raise ValueError(f"GTP command must be a single line: {text!r}")
    return text


def is_terminal_line(line: str) -> bool:
    """A line whose first character is a success or failure marker."""
    return line[:1] in (SUCCESS_MARKER, FAILURE_MARKER)


@dataclass
class ResponseBlock:
    """
    Every line the engine sent for one command.

    The last line is always the (single) terminal line.
    """
    command: str
    lines: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        """Full block with surrounding whitespace trimmed."""
        return "".join(self.lines).strip()

    @property
    def terminal_line(self) -> str:
        return self.lines[-1].strip() if self.lines else ""

    @property
    def succeeded(self) -> bool:
        return self.terminal_line.startswith(SUCCESS_MARKER)

    @property
    def failed(self) -> bool:
        return self.terminal_line.startswith(FAILURE_MARKER)

    @property
    def payload(self) -> str:
        """Terminal line with the marker and whitespace removed."""
        return self.terminal_line[1:].strip()


class GTPProtocol:
    """
    GTP adapter over a LineTransport.

    Usage:
        protocol = GTPProtocol(transport)
        protocol.boardsize(19)
        block = protocol.genmove("w")
        block.payload  # "Q16"
    """

    def __init__(self, transport: LineTransport, response_timeout: float | None = None):
        self.transport = transport
        self.response_timeout = response_timeout
        self.commands_sent = 0

    def send_command(self, text: str) -> ResponseBlock:
        """
        Write one command and read its whole response block.

        Raises:
            EngineIOError: the pipe broke or the engine closed its output
                before sending a terminal line
            EngineTimeout: response_timeout elapsed
        """
        logger.debug("GTP > %s", text)
        self.transport.write(text + "\n")
        self.commands_sent += 1

        block = ResponseBlock(command=text)
        while True:
            line = self.transport.read_line(timeout=self.response_timeout)
            if not line:
                raise EngineIOError(
                    f"Engine closed its output while answering {text!r}"
                )
            block.lines.append(line)
            if is_terminal_line(line):
                break

        logger.debug("GTP < %s", block.terminal_line)
        return block

    # =========================================================================
    # Commands
    # =========================================================================

    def boardsize(self, size: int) -> ResponseBlock:
        return self.send_command(build_command(Command.BOARDSIZE, size))

    def komi(self, komi: float) -> ResponseBlock:
        return self.send_command(build_command(Command.KOMI, f"{komi:.1f}"))

    def clear_board(self) -> ResponseBlock:
        return self.send_command(build_command(Command.CLEAR_BOARD))

    def play(self, color: str, move: str) -> ResponseBlock:
        return self.send_command(build_command(Command.PLAY, color, move))

    def genmove(self, color: str) -> ResponseBlock:
        return self.send_command(build_command(Command.GENMOVE, color))

    def quit(self) -> ResponseBlock:
        return self.send_command(build_command(Command.QUIT))
