"""
Request / response models for the REST API.

Field names are part of the wire contract; clients rely on them verbatim.
The ``status`` field is a tagged union serialized as a single-key object
keyed by the variant name:

    {"ongoing": {"to_move": "white", "in_check": false}}
    {"checkmate": {"winner": "black"}}
    {"stalemate": {}}
    {"draw": {}}
"""

from typing import Any

import chess
from pydantic import BaseModel, field_validator

from games.moves import MoveResult
from games.session import GameSnapshot
from games.status import Checkmate, GameStatus, Ongoing

StatusPayload = dict[str, dict[str, Any]]


def status_payload(status: GameStatus) -> StatusPayload:
    """Serialize a status variant into its single-key wire form."""
    if isinstance(status, Ongoing):
        body: dict[str, Any] = {
            "to_move": chess.COLOR_NAMES[status.to_move],
            "in_check": status.in_check,
        }
    elif isinstance(status, Checkmate):
        body = {"winner": chess.COLOR_NAMES[status.winner]}
    else:
        body = {}
    return {status.tag: body}


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class CreateGameRequest(BaseModel):
    """
    Body of ``POST /games``.

    Fields:
        fen: Starting position. Omitted or null means the standard initial
             position.
    """

    fen: str | None = None


class MoveRequest(BaseModel):
    """
    Body of ``POST /games/{id}/moves``.

    Fields:
        uci: Move in UCI notation, e.g. "e2e4", "g1f3", "e7e8q".
    """

    uci: str

    @field_validator("uci")
    @classmethod
    def strip_uci(cls, v: str) -> str:
        """Drop surrounding whitespace copied along with the move."""
        return v.strip()


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class CreateGameResponse(BaseModel):
    id: str
    fen: str


class GameResponse(BaseModel):
    """Full view of one game."""

    id: str
    fen: str
    legal_moves: list[str]
    moves_uci: list[str]
    moves_san: list[str]
    status: StatusPayload

    @classmethod
    def from_snapshot(cls, snapshot: GameSnapshot) -> "GameResponse":
        return cls(
            id=snapshot.id,
            fen=snapshot.fen,
            legal_moves=snapshot.legal_moves,
            moves_uci=snapshot.moves_uci,
            moves_san=snapshot.moves_san,
            status=status_payload(snapshot.status),
        )


class MoveResponse(BaseModel):
    """
    Result of applying a move.

    Fields:
        applied_uci: The move as recorded in the game's UCI history.
        applied_san: The same move in SAN.
        fen:         Position after the move.
        legal_moves: Legal replies in UCI; empty once the game is over.
    """

    id: str
    applied_uci: str
    applied_san: str
    fen: str
    legal_moves: list[str]
    status: StatusPayload

    @classmethod
    def from_result(cls, result: MoveResult) -> "MoveResponse":
        return cls(
            id=result.id,
            applied_uci=result.applied_uci,
            applied_san=result.applied_san,
            fen=result.fen,
            legal_moves=result.legal_moves,
            status=status_payload(result.status),
        )


class ErrorResponse(BaseModel):
    error: str
