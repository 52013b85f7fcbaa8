"""
Engine Errors - Failure kinds surfaced to API callers.

Every error carries:
- error_code: machine-readable code (matches api.schemas.ErrorCode)
- status_code: HTTP status used at the request boundary

Nothing is retried. The API layer renders these as {error, error_code}.
"""

from __future__ import annotations


class GTPBridgeError(Exception):
    """Base class for all bridge failures."""

    error_code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AlreadyRunning(GTPBridgeError):
    """Start was called while a game session is active."""

    error_code = "ALREADY_RUNNING"
    status_code = 400

    def __init__(self, message: str = "Game already running"):
        super().__init__(message)


class NoActiveSession(GTPBridgeError):
    """Play, genmove etc. called with no game session."""

    error_code = "NO_ACTIVE_SESSION"
    status_code = 400

    def __init__(self, message: str = "No game running"):
        super().__init__(message)


class LaunchError(GTPBridgeError):
    """The engine process could not be started or configured."""

    error_code = "LAUNCH_ERROR"
    status_code = 500


class EngineRejected(GTPBridgeError):
    """The engine answered with a failure-marked (?) response."""

    error_code = "ENGINE_REJECTED"
    status_code = 400

    def __init__(self, block):
        self.block = block
        super().__init__(block.text)


class MalformedRequest(GTPBridgeError):
    """Request body failed to parse or validate."""

    error_code = "MALFORMED_REQUEST"
    status_code = 400


class EngineIOError(GTPBridgeError):
    """Pipe to the engine broke mid-exchange."""

    error_code = "IO_FAILURE"
    status_code = 500


class EngineTimeout(EngineIOError):
    """Engine did not finish a response within the configured timeout."""
