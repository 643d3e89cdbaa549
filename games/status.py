"""
Game status derivation.

Status is never stored on a session. It is recomputed from the position on
every read, so a "terminal" status is simply one whose position has no legal
moves left.
"""

from dataclasses import dataclass
from typing import ClassVar, Union

import chess

from games import rules


@dataclass(frozen=True)
class Ongoing:
    tag: ClassVar[str] = "ongoing"

    to_move: chess.Color
    in_check: bool


@dataclass(frozen=True)
class Checkmate:
    tag: ClassVar[str] = "checkmate"

    winner: chess.Color


@dataclass(frozen=True)
class Stalemate:
    tag: ClassVar[str] = "stalemate"


@dataclass(frozen=True)
class Draw:
    tag: ClassVar[str] = "draw"


GameStatus = Union[Ongoing, Checkmate, Stalemate, Draw]


def derive_status(board: chess.Board) -> GameStatus:
    """
    Map the rules outcome of ``board`` onto a client-facing status.

    - No outcome: ``Ongoing`` with the side to move and whether its king is
      attacked.
    - Decisive outcome: ``Checkmate`` crediting the side that delivered mate.
    - Drawn with the side to move out of moves and not in check:
      ``Stalemate``.
    - Any other draw (insufficient material, repetition, move-count rules):
      ``Draw``.

    Args:
        board: The position to classify. Not modified.

    Returns:
        One of the four status variants.
    """
    result = rules.outcome(board)
    if result is None:
        return Ongoing(to_move=board.turn, in_check=board.is_check())
    if result.winner is not None:
        return Checkmate(winner=result.winner)
    if board.is_stalemate():
        return Stalemate()
    return Draw()
