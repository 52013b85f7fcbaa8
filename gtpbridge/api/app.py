"""
FastAPI Application - HTTP control surface for a GTP engine.

Endpoints:
    POST   /start_game    Launch the engine and set up a board
    POST   /play          Play a move
    POST   /genmove       Ask the engine for a move
    POST   /end_game      Quit and kill the engine
    GET    /health        Service and session status

Handlers are plain (sync) functions: FastAPI runs them in its thread pool,
so a handler waiting on the engine blocks only its own worker. The
session lock serializes them.

All responses are JSON. Errors are {"error": ..., "error_code": ...}.
"""

from contextlib import asynccontextmanager
from typing import Optional
import logging
import os
import shlex

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..engine.errors import (
    GTPBridgeError,
    AlreadyRunning,
    NoActiveSession,
    MalformedRequest,
)
from ..session import SessionManager
from .service import GameService
from .schemas import (
    StartGameRequest,
    PlayRequest,
    GenMoveRequest,
    MessageResponse,
    PlayResponse,
    GenMoveResponse,
    ErrorResponse,
    HealthResponse,
    ErrorCode,
)

logger = logging.getLogger(__name__)


def _parse_timeout(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    timeout = float(value)
    if timeout < 0:
        raise ValueError(f"GTPBRIDGE_RESPONSE_TIMEOUT must be non-negative, got {value!r}")
    return timeout


# Environment configuration
ENGINE_COMMAND = shlex.split(os.getenv("GTPBRIDGE_ENGINE", "./katago"))
RESPONSE_TIMEOUT = _parse_timeout(os.getenv("GTPBRIDGE_RESPONSE_TIMEOUT"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")


def create_app(service: Optional[GameService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional GameService instance (creates one from the
            environment configuration if not provided)

    Returns:
        FastAPI application instance
    """
    api_service = service or GameService(
        session_manager=SessionManager(
            engine_command=ENGINE_COMMAND,
            response_timeout=RESPONSE_TIMEOUT,
        )
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        api_service.session_manager.shutdown()

    app = FastAPI(
        title="GTP Bridge API",
        description="Start a game, play and generate moves against a GTP engine.",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(GTPBridgeError)
    async def handle_bridge_error(request: Request, exc: GTPBridgeError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return make_error_response(
            ErrorCode(exc.error_code),
            exc.message,
            status_code=exc.status_code,
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Session state is checked before the body, as for a valid request
        path = request.url.path
        active = api_service.session_manager.is_active()
        if path == "/start_game" and active:
            return await handle_bridge_error(request, AlreadyRunning())
        if path in ("/play", "/genmove") and not active:
            return await handle_bridge_error(request, NoActiveSession())

        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'] if p != 'body') or 'body'}: {err['msg']}"
            for err in exc.errors()
        )
        return await handle_bridge_error(request, MalformedRequest(details))

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/start_game",
        response_model=MessageResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Game already running"},
            500: {"model": ErrorResponse, "description": "Engine failed to launch"},
        },
        tags=["Game"],
        summary="Launch the engine and set up a board",
    )
    def start_game(body: StartGameRequest) -> MessageResponse:
        """
        Launch the engine with the given model and config, then send
        `boardsize`, `komi` and `clear_board`.
        """
        return api_service.start_game(body)

    @app.post(
        "/play",
        response_model=PlayResponse,
        responses={
            400: {"model": ErrorResponse, "description": "No game running or move rejected"},
            500: {"model": ErrorResponse, "description": "Engine I/O failure"},
        },
        tags=["Game"],
        summary="Play a move",
    )
    def play(body: PlayRequest) -> PlayResponse:
        """Send `play <color> <move>` and return the engine's response."""
        return api_service.play(body)

    @app.post(
        "/genmove",
        response_model=GenMoveResponse,
        responses={
            400: {"model": ErrorResponse, "description": "No game running or request rejected"},
            500: {"model": ErrorResponse, "description": "Engine I/O failure"},
        },
        tags=["Game"],
        summary="Ask the engine for a move",
    )
    def genmove(body: GenMoveRequest) -> GenMoveResponse:
        """Send `genmove <color>` and return the chosen vertex."""
        return api_service.genmove(body)

    @app.post(
        "/end_game",
        response_model=MessageResponse,
        tags=["Game"],
        summary="End the game",
    )
    def end_game() -> MessageResponse:
        """Quit and kill the engine. Succeeds even if no game is running."""
        return api_service.end_game()

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["Health"],
        summary="Service health",
    )
    def health() -> HealthResponse:
        return api_service.health()

    return app


# For running directly: uvicorn gtpbridge.api.app:app
app = create_app()
