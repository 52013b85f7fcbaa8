"""
Engine Module - Talking GTP to an engine subprocess.

- transport: blocking line I/O (subprocess or fake)
- protocol: command framing and response blocks
- errors: failure kinds shared with the API layer
"""

from .errors import (
    GTPBridgeError,
    AlreadyRunning,
    NoActiveSession,
    LaunchError,
    EngineRejected,
    MalformedRequest,
    EngineIOError,
    EngineTimeout,
)
from .protocol import GTPProtocol, ResponseBlock, Command, build_command
from .transport import LineTransport, SubprocessTransport

__all__ = [
    "GTPBridgeError",
    "AlreadyRunning",
    "NoActiveSession",
    "LaunchError",
    "EngineRejected",
    "MalformedRequest",
    "EngineIOError",
    "EngineTimeout",
    "GTPProtocol",
    "ResponseBlock",
    "Command",
    "build_command",
    "LineTransport",
    "SubprocessTransport",
]
