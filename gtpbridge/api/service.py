"""
API Service - Business logic layer between API and engine session.

The service:
1. Translates API requests to SessionManager calls
2. Builds response models

Errors from the session manager propagate unchanged; the web layer
renders them. This layer is framework-agnostic.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .. import __version__
from ..session import SessionManager
from .schemas import (
    StartGameRequest,
    PlayRequest,
    GenMoveRequest,
    MessageResponse,
    PlayResponse,
    GenMoveResponse,
    HealthResponse,
)


@dataclass
class GameService:
    """
    Main API service.

    Usage:
        service = GameService(SessionManager(engine_command=["katago"]))
        service.start_game(StartGameRequest(boardsize=19, komi=7.5, ...))
        service.genmove(GenMoveRequest(color="w")).move
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    def start_game(self, request: StartGameRequest) -> MessageResponse:
        self.session_manager.start(
            board_size=request.board_size,
            komi=request.komi,
            config_path=request.config,
            model_path=request.model,
        )
        return MessageResponse(message="Game started")

    def play(self, request: PlayRequest) -> PlayResponse:
        response = self.session_manager.play(request.color, request.move)
        return PlayResponse(response=response)

    def genmove(self, request: GenMoveRequest) -> GenMoveResponse:
        move = self.session_manager.generate_move(request.color)
        return GenMoveResponse(move=move)

    def end_game(self) -> MessageResponse:
        self.session_manager.end()
        return MessageResponse(message="Game ended")

    def health(self) -> HealthResponse:
        return HealthResponse(
            status="ok",
            service="gtpbridge",
            version=__version__,
            **self.session_manager.status(),
        )
