"""
Game session value.

A GameSession is immutable once built: applying a move produces a new
session that replaces the old one in the store. Readers holding a session
can therefore never observe a half-applied move, and a failed move attempt
leaves nothing behind to roll back.
"""

import uuid
from dataclasses import dataclass, field

import chess

from games import rules
from games.status import GameStatus, derive_status


def new_game_id() -> str:
    """Random 128-bit identifier in canonical UUID text form."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class GameSnapshot:
    """Everything a client can learn about a game, computed at one instant."""

    id: str
    fen: str
    legal_moves: list[str]
    moves_uci: list[str]
    moves_san: list[str]
    status: GameStatus


@dataclass(frozen=True)
class GameSession:
    """
    One game's position and move history.

    Attributes:
        id:         Opaque identifier assigned at creation.
        position:   Current board. Owned by this session and never mutated;
                    its move stack replays ``moves_uci`` from the creation
                    position.
        moves_uci:  Applied moves in UCI text, oldest first.
        moves_san:  The same moves in SAN, parallel to ``moves_uci``.
    """

    id: str
    position: chess.Board = field(compare=False)
    moves_uci: tuple[str, ...] = ()
    moves_san: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if len(self.moves_uci) != len(self.moves_san):
            raise ValueError(
                f"history length mismatch: {len(self.moves_uci)} UCI "
                f"vs {len(self.moves_san)} SAN"
            )

    @classmethod
    def start(cls, game_id: str, position: chess.Board) -> "GameSession":
        return cls(id=game_id, position=position)

    def with_move(self, uci: str, san: str, position: chess.Board) -> "GameSession":
        """Return the session that results from appending one applied move."""
        return GameSession(
            id=self.id,
            position=position,
            moves_uci=self.moves_uci + (uci,),
            moves_san=self.moves_san + (san,),
        )

    @property
    def ply_count(self) -> int:
        return len(self.moves_uci)

    def fen(self) -> str:
        return rules.encode_fen(self.position)

    def legal_moves(self) -> list[str]:
        return rules.legal_moves_uci(self.position)

    def status(self) -> GameStatus:
        return derive_status(self.position)

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            id=self.id,
            fen=self.fen(),
            legal_moves=self.legal_moves(),
            moves_uci=list(self.moves_uci),
            moves_san=list(self.moves_san),
            status=self.status(),
        )
