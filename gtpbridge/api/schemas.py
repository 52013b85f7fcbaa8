"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the JSON contract of the four game endpoints.

Error Codes:
- ALREADY_RUNNING: start_game while a game is active
- NO_ACTIVE_SESSION: play/genmove with no game running
- LAUNCH_ERROR: engine process could not be started or set up
- ENGINE_REJECTED: engine answered with a "?" failure response
- MALFORMED_REQUEST: body failed to parse or validate
- IO_FAILURE: pipe to the engine broke mid-exchange
"""

from enum import Enum
from typing import Optional
from pydantic import AliasChoices, BaseModel, Field


# Colors and vertices go straight onto a GTP line: one token, no whitespace
GTP_TOKEN_PATTERN = r"^\S+$"


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    ALREADY_RUNNING = "ALREADY_RUNNING"
    NO_ACTIVE_SESSION = "NO_ACTIVE_SESSION"
    LAUNCH_ERROR = "LAUNCH_ERROR"
    ENGINE_REJECTED = "ENGINE_REJECTED"
    MALFORMED_REQUEST = "MALFORMED_REQUEST"
    IO_FAILURE = "IO_FAILURE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Request Models
# =============================================================================

class StartGameRequest(BaseModel):
    """Request to launch the engine and set up a board."""
    board_size: int = Field(
        ...,
        gt=0,
        validation_alias=AliasChoices("boardsize", "boardSize", "board_size"),
        description="Board size, e.g. 19",
    )
    komi: float = Field(..., description="Komi, sent with one decimal place")
    config: str = Field(..., min_length=1, description="Path to the engine config file")
    model: str = Field(..., min_length=1, description="Path to the engine model file")


class PlayRequest(BaseModel):
    """Request to play a move."""
    color: str = Field(..., pattern=GTP_TOKEN_PATTERN, description="b, w, black or white")
    move: str = Field(..., pattern=GTP_TOKEN_PATTERN, description="Vertex like D4, or pass")


class GenMoveRequest(BaseModel):
    """Request for an engine-generated move."""
    color: str = Field(..., pattern=GTP_TOKEN_PATTERN, description="b, w, black or white")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")


class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    message: str


class PlayResponse(BaseModel):
    """Response after a move was accepted."""
    message: str = "Move played"
    response: str = Field(..., description="Engine response block, trimmed")


class GenMoveResponse(BaseModel):
    """Response carrying the engine's move."""
    message: str = "Move generated"
    move: str = Field(..., description="Vertex chosen by the engine, e.g. Q16")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    game_running: bool = False
    board_size: Optional[int] = None
    komi: Optional[float] = None
    commands_sent: Optional[int] = None
    started_at: Optional[float] = None
