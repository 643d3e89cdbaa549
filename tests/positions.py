"""
Move sequences and positions reused across the test modules.
"""

import chess

from games import rules

# Shortest checkmate: black mates on move two.
FOOLS_MATE = ["f2f3", "e7e5", "g2g4", "d8h4"]

# Both knights out and back twice; the start position occurs for the third
# time after the last move.
KNIGHT_SHUFFLE = ["g1f3", "g8f6", "f3g1", "f6g8"] * 2

# Ends with a legal en-passant capture available on d6.
EN_PASSANT_OPENING = ["e2e4", "a7a6", "e4e5", "d7d5"]

# White to move; Qf1-f7 stalemates the black king on h8.
STALEMATE_IN_ONE = "7k/8/6K1/8/8/8/8/5Q2 w - - 0 1"

# Black to move and stalemated, although K+B vs K is also a material draw.
BISHOP_STALEMATE = "k7/8/1K6/4B3/8/8/8/8 b - - 0 1"

# White to move, halfmove clock at 99: any quiet move reaches the fifty-move rule.
FIFTY_MOVE_EDGE = "8/8/8/4k3/8/8/8/4K2Q w - - 99 80"

# White king in check from the queen on d2; Kxd2 leaves bare kings.
CAPTURE_TO_BARE_KINGS = "8/8/8/4k3/8/8/3q4/4K3 w - - 0 1"

# The c6 en-passant square is pseudo-legal only: bxc6 would expose the white
# king on a5 to the rook on h5.
PINNED_EN_PASSANT = "4k3/8/8/KPp4r/8/8/8/8 w - c6 0 2"


def play(board: chess.Board, moves: list[str]) -> chess.Board:
    """Replay UCI moves through the rules adapter."""
    for uci in moves:
        move = rules.resolve_move(board, rules.parse_uci(uci))
        board = rules.apply_move(board, move)
    return board
