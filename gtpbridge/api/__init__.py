"""
API Module - HTTP interface.

Exposes the engine session via a small REST API:
1. Start a game (launch the engine, set up the board)
2. Play moves
3. Ask the engine for moves
4. End the game

There is only ever one game. No accounts, no persistence.
"""

from .schemas import (
    # Requests
    StartGameRequest,
    PlayRequest,
    GenMoveRequest,
    # Responses
    MessageResponse,
    PlayResponse,
    GenMoveResponse,
    ErrorResponse,
    HealthResponse,
    # Enums
    ErrorCode,
)
from .service import GameService
from .app import create_app

__all__ = [
    # Requests
    "StartGameRequest",
    "PlayRequest",
    "GenMoveRequest",
    # Responses
    "MessageResponse",
    "PlayResponse",
    "GenMoveResponse",
    "ErrorResponse",
    "HealthResponse",
    # Enums
    "ErrorCode",
    # Service
    "GameService",
    "create_app",
]
