"""
FastAPI web application for the chess game service.

Routes:
    POST   /games             Create a game (optional starting FEN)
    GET    /games/{id}        Full game view: FEN, legal moves, history, status
    DELETE /games/{id}        Discard a game
    GET    /games/{id}/moves  Legal moves in UCI
    POST   /games/{id}/moves  Apply one move given in UCI
    GET    /, GET /health     Plain-text banners

Architecture notes:
- Sync endpoints (not async): FastAPI runs sync handlers in a thread pool.
  Rules calls are CPU-bound, and the session store guards itself with a
  threading readers-writer lock, so blocking handlers are the right fit.
- The store is explicit application state: created (or injected) by
  create_app(), stored on app.state, handed to handlers through a
  dependency, and cleared when the application shuts down.
- Errors: core exceptions are translated 1:1 into status codes by the
  handlers registered below and returned as {"error": "<message>"}.
  Anything else is logged with its traceback and answered with a 500 by
  the request trace middleware.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Annotated, AsyncIterator, Optional

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from games import rules
from games.errors import BadRequestError, GameError, GameNotFoundError, IllegalMoveError
from games.moves import apply_move
from games.session import GameSession
from games.store import SessionStore
from web import config
from web.schemas import (
    CreateGameRequest,
    CreateGameResponse,
    ErrorResponse,
    GameResponse,
    MoveRequest,
    MoveResponse,
)

# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
_log = logging.getLogger(__name__)

_ERROR_STATUS: dict[type[GameError], int] = {
    GameNotFoundError: 404,
    BadRequestError: 400,
    IllegalMoveError: 422,
}

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Malformed FEN, UCI or body"},
    404: {"model": ErrorResponse, "description": "Game not found"},
    422: {"model": ErrorResponse, "description": "Illegal move"},
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def get_store(request: Request) -> SessionStore:
    """Dependency: the session store owned by the running application."""
    return request.app.state.store


Store = Annotated[SessionStore, Depends(get_store)]


def create_app(store: SessionStore | None = None) -> FastAPI:
    """
    Build the application around a session store.

    Args:
        store: Registry to serve. A fresh empty store is created when omitted;
               tests pass their own to inspect it directly.

    Returns:
        Configured FastAPI application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        _log.info("Chess API ready")
        yield
        dropped = app.state.store.clear()
        _log.info("Chess API stopped, discarded %d game(s)", dropped)

    app = FastAPI(title="Chess REST API", version="1.0.0", lifespan=lifespan)
    app.state.store = store if store is not None else SessionStore()

    # -----------------------------------------------------------------------
    # Middleware
    # -----------------------------------------------------------------------
    # Added innermost first: the trace logger turns unexpected errors into a
    # 500 body, so that response still passes through gzip and CORS.

    @app.middleware("http")
    async def trace_requests(request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            _log.exception("Unhandled error on %s %s", request.method, request.url.path)
            response = _error(500, "internal server error")
        elapsed_ms = (time.perf_counter() - started) * 1000
        _log.info(
            "%s %s -> %d (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    app.add_middleware(GZipMiddleware, minimum_size=config.GZIP_MINIMUM_SIZE)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Error translation
    # -----------------------------------------------------------------------

    @app.exception_handler(GameError)
    async def handle_game_error(request: Request, exc: GameError) -> JSONResponse:
        for error_type, status_code in _ERROR_STATUS.items():
            if isinstance(exc, error_type):
                return _error(status_code, str(exc))
        _log.error("Unmapped game error on %s: %s", request.url.path, exc)
        return _error(500, "internal server error")

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # 422 is reserved for illegal moves; a malformed body is a bad request.
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        return _error(400, f"invalid request: {problems}")

    # -----------------------------------------------------------------------
    # Banners
    # -----------------------------------------------------------------------

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    def root() -> str:
        return config.ROOT_BANNER

    @app.get("/health", response_class=PlainTextResponse)
    def health() -> str:
        """Liveness probe for load balancers."""
        return config.HEALTH_BANNER

    # -----------------------------------------------------------------------
    # Games
    # -----------------------------------------------------------------------

    @app.post(
        "/games",
        response_model=CreateGameResponse,
        responses={400: _ERROR_RESPONSES[400]},
    )
    def create_game(
        store: Store, request: Optional[CreateGameRequest] = None
    ) -> CreateGameResponse:
        """
        Create a game from a FEN, or from the standard start position.

        Raises:
            InvalidFenError (400): The FEN is malformed or impossible. No game
                                   is created in that case.
        """
        fen = request.fen if request is not None else None
        position = rules.starting_position() if fen is None else rules.decode_fen(fen)
        start_fen = rules.encode_fen(position)

        game_id = store.create(position)
        _log.info("Game %s created from %s", game_id, start_fen)
        return CreateGameResponse(id=game_id, fen=start_fen)

    @app.get(
        "/games/{game_id}",
        response_model=GameResponse,
        responses={404: _ERROR_RESPONSES[404]},
    )
    def get_game(game_id: str, store: Store) -> GameResponse:
        snapshot = store.read(game_id, GameSession.snapshot)
        return GameResponse.from_snapshot(snapshot)

    @app.delete(
        "/games/{game_id}",
        status_code=204,
        response_class=Response,
        responses={404: _ERROR_RESPONSES[404]},
    )
    def delete_game(game_id: str, store: Store) -> Response:
        store.delete(game_id)
        _log.info("Game %s deleted", game_id)
        return Response(status_code=204)

    @app.get(
        "/games/{game_id}/moves",
        response_model=list[str],
        responses={404: _ERROR_RESPONSES[404]},
    )
    def list_legal_moves(game_id: str, store: Store) -> list[str]:
        """Legal moves for the side to move, in UCI. Empty once the game is over."""
        return store.read(game_id, GameSession.legal_moves)

    @app.post(
        "/games/{game_id}/moves",
        response_model=MoveResponse,
        responses=_ERROR_RESPONSES,
    )
    def post_move(game_id: str, request: MoveRequest, store: Store) -> MoveResponse:
        """
        Apply one move to a game.

        Validates the UCI text, checks legality against the current position,
        records the move in both histories and returns the new position with
        its status. A rejected move leaves the game exactly as it was.

        Raises:
            GameNotFoundError (404): Unknown game id.
            InvalidUciError (400):   Text is not a UCI move.
            IllegalMoveError (422):  Move not legal in the current position.
        """
        result = apply_move(store, game_id, request.uci)
        return MoveResponse.from_result(result)

    return app


# For running directly: uvicorn web.app:app
app = create_app()
