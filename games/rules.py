"""
Rules adapter: the only module that talks to python-chess directly.

The rest of the core treats a position as an opaque ``chess.Board`` and goes
through the functions below for legality, move application, notation and
outcome classification. Two conventions hold everywhere:

- Boards handed in are never mutated. python-chess implements several
  queries (SAN check suffixes, repetition detection) by pushing and popping
  moves on the board itself, so those run on private copies. This lets many
  readers inspect the same stored board at once.
- A concluded position (checkmate, stalemate, any draw) has no legal moves.
  python-chess keeps generating moves after a claimable draw; this adapter
  does not, so every move attempt after the end of a game is illegal.
"""

import chess

from games.errors import IllegalMoveError, InvalidFenError, InvalidUciError

# ---------------------------------------------------------------------------
# Draw thresholds
# ---------------------------------------------------------------------------
# python-chess ends the game on its own only at fivefold repetition and at
# the seventy-five-move rule. The service ends it earlier, at the classical
# thresholds, because nobody is there to claim the draw on a player's behalf.

REPETITION_COUNT: int = 3
FIFTY_MOVE_HALFMOVES: int = 100


# ---------------------------------------------------------------------------
# FEN
# ---------------------------------------------------------------------------


def starting_position() -> chess.Board:
    """Return a fresh board in the standard initial position."""
    return chess.Board()


def decode_fen(fen: str) -> chess.Board:
    """
    Parse a FEN string into a board.

    Rejects both malformed text and positions python-chess parses but
    considers impossible (no king, too many pawns, the side not to move in
    check, castling rights that do not match the pieces, ...).

    Raises:
        InvalidFenError: The string cannot be used as a starting position.
    """
    try:
        board = chess.Board(fen)
    except ValueError as exc:
        raise InvalidFenError(str(exc)) from exc

    status = board.status()
    if status != chess.STATUS_VALID:
        problems = ", ".join(
            flag.name.lower() for flag in chess.Status if flag and flag in status
        )
        raise InvalidFenError(f"invalid position ({problems})")
    return board


def encode_fen(board: chess.Board) -> str:
    """
    Encode a board as FEN.

    The en-passant square is written only when an en-passant capture is
    actually legal, so a client never sees a capture square it cannot use.
    """
    return board.fen(en_passant="legal")


# ---------------------------------------------------------------------------
# Moves
# ---------------------------------------------------------------------------


def outcome(board: chess.Board) -> chess.Outcome | None:
    """
    Classify the position: ``None`` while the game goes on.

    Extends ``chess.Board.outcome()`` with threefold repetition and the
    fifty-move rule as automatic draws.
    """
    # Fivefold and threefold checks replay the move stack in place.
    board = board.copy()
    result = board.outcome()
    if result is not None:
        return result
    if board.halfmove_clock >= FIFTY_MOVE_HALFMOVES:
        return chess.Outcome(chess.Termination.FIFTY_MOVES, None)
    if board.is_repetition(REPETITION_COUNT):
        return chess.Outcome(chess.Termination.THREEFOLD_REPETITION, None)
    return None


def is_concluded(board: chess.Board) -> bool:
    return outcome(board) is not None


def legal_moves(board: chess.Board) -> list[chess.Move]:
    """All legal moves in the position, empty once the game has ended."""
    if is_concluded(board):
        return []
    return list(board.legal_moves)


def legal_moves_uci(board: chess.Board) -> list[str]:
    return [move.uci() for move in legal_moves(board)]


def parse_uci(text: str) -> chess.Move:
    """
    Parse UCI move text into a move descriptor without looking at a board.

    Raises:
        InvalidUciError: The text does not match UCI grammar.
    """
    try:
        return chess.Move.from_uci(text)
    except chess.InvalidMoveError as exc:
        raise InvalidUciError(str(exc)) from exc


def resolve_move(board: chess.Board, move: chess.Move) -> chess.Move:
    """
    Match a parsed descriptor against the legal moves of ``board``.

    Null moves and piece drops parse as UCI but are never legal in standard
    chess. python-chess is the sole authority on everything else.

    Raises:
        IllegalMoveError: No legal move corresponds to ``move``.
    """
    if not move:
        raise IllegalMoveError("null move is not allowed")
    if move.drop is not None:
        raise IllegalMoveError(f"{move.uci()} is a piece drop")
    if is_concluded(board):
        raise IllegalMoveError(f"{move.uci()}: the game is over")
    try:
        return board.parse_uci(move.uci())
    except chess.IllegalMoveError as exc:
        raise IllegalMoveError(f"{move.uci()} in {encode_fen(board)}") from exc


def encode_san(board: chess.Board, move: chess.Move) -> str:
    """SAN for ``move``; ``board`` must be the position before the move."""
    return board.copy().san(move)


def apply_move(board: chess.Board, move: chess.Move) -> chess.Board:
    """
    Return the position after ``move``, leaving ``board`` untouched.

    The returned board keeps the full move stack so later repetition checks
    see the whole game.
    """
    after = board.copy()
    after.push(move)
    return after
