"""
Move application protocol.

Applying a move is the only operation that changes a game. The whole
protocol runs inside SessionStore.update(), i.e. under the store's exclusive
lock, so two requests against the same starting position can never both
succeed. Every step that can fail runs before the new session value exists:

    1. look up the session                  -> GameNotFoundError
    2. parse the UCI text                   -> InvalidUciError
    3. resolve it against the position      -> IllegalMoveError
    4. encode SAN on the pre-move board
    5. apply the move to a copy of the board
    6. build the session with both histories extended (stored by update())
    7. derive status and legal moves for the new position

A move therefore ends up in the history if and only if it was applied.
"""

import logging
from dataclasses import dataclass

from games import rules
from games.errors import BadRequestError, IllegalMoveError
from games.session import GameSession
from games.status import GameStatus, derive_status
from games.store import SessionStore

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoveResult:
    """
    Outcome of a successfully applied move.

    Attributes:
        id:           Game the move was applied to.
        applied_uci:  The move in canonical UCI text, as recorded in history.
        applied_san:  The move in SAN, computed before it was played.
        fen:          Position after the move.
        legal_moves:  Legal replies in UCI text; empty when the game is over.
        status:       Status of the new position.
    """

    id: str
    applied_uci: str
    applied_san: str
    fen: str
    legal_moves: list[str]
    status: GameStatus


def play_move(session: GameSession, uci: str) -> tuple[GameSession, MoveResult]:
    """
    Apply ``uci`` to ``session`` without touching it.

    Returns:
        The successor session and the result to report to the client.

    Raises:
        InvalidUciError: ``uci`` is not UCI move text.
        IllegalMoveError: The move is not legal in the session's position.
    """
    descriptor = rules.parse_uci(uci)
    move = rules.resolve_move(session.position, descriptor)

    # SAN needs the pre-move board for disambiguation and the check suffix.
    san = rules.encode_san(session.position, move)
    position = rules.apply_move(session.position, move)

    applied_uci = move.uci()
    successor = session.with_move(applied_uci, san, position)
    result = MoveResult(
        id=session.id,
        applied_uci=applied_uci,
        applied_san=san,
        fen=rules.encode_fen(position),
        legal_moves=rules.legal_moves_uci(position),
        status=derive_status(position),
    )
    return successor, result


def apply_move(store: SessionStore, game_id: str, uci: str) -> MoveResult:
    """
    Validate and apply one move to the game registered under ``game_id``.

    Raises:
        GameNotFoundError: Unknown ``game_id``.
        InvalidUciError: ``uci`` is not UCI move text.
        IllegalMoveError: The move is not legal in the current position.
    """
    try:
        result = store.update(game_id, lambda session: play_move(session, uci))
    except (BadRequestError, IllegalMoveError) as exc:
        _log.debug("Rejected move %r for game %s: %s", uci, game_id, exc)
        raise

    _log.info(
        "Game %s: applied %s (%s) status=%s",
        game_id,
        result.applied_uci,
        result.applied_san,
        result.status.tag,
    )
    return result
