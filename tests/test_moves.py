"""
Tests for the move application protocol.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import chess
import pytest

from games import rules
from games.errors import GameNotFoundError, IllegalMoveError, InvalidUciError
from games.moves import apply_move
from games.status import Checkmate, Draw, Ongoing, Stalemate
from tests.positions import (
    EN_PASSANT_OPENING,
    FIFTY_MOVE_EDGE,
    FOOLS_MATE,
    KNIGHT_SHUFFLE,
    STALEMATE_IN_ONE,
)


def play_all(store, game_id, moves):
    result = None
    for uci in moves:
        result = apply_move(store, game_id, uci)
    return result


class TestApplyMove:
    def test_first_move(self, store, game_id):
        result = apply_move(store, game_id, "e2e4")

        assert result.id == game_id
        assert result.applied_uci == "e2e4"
        assert result.applied_san == "e4"
        assert result.fen.split()[1] == "b"
        assert result.status == Ongoing(to_move=chess.BLACK, in_check=False)
        assert len(result.legal_moves) == 20

        session = store.get(game_id)
        assert session.moves_uci == ("e2e4",)
        assert session.moves_san == ("e4",)
        assert session.fen() == result.fen

    def test_histories_stay_parallel(self, store, game_id):
        play_all(store, game_id, ["e2e4", "e7e5", "g1f3", "b8c6", "f1b5"])

        session = store.get(game_id)
        assert list(session.moves_uci) == ["e2e4", "e7e5", "g1f3", "b8c6", "f1b5"]
        assert list(session.moves_san) == ["e4", "e5", "Nf3", "Nc6", "Bb5"]

    def test_position_matches_replayed_history(self, store, game_id):
        play_all(store, game_id, EN_PASSANT_OPENING + ["e5d6"])

        session = store.get(game_id)
        replayed = chess.Board()
        for uci in session.moves_uci:
            replayed.push_uci(uci)
        assert session.fen() == rules.encode_fen(replayed)
        assert session.moves_san[-1] == "exd6"

    def test_illegal_move_leaves_game_unchanged(self, store, game_id):
        before = store.get(game_id)

        with pytest.raises(IllegalMoveError):
            apply_move(store, game_id, "e2e5")

        after = store.get(game_id)
        assert after is before
        assert after.ply_count == 0
        assert after.fen() == rules.encode_fen(chess.Board())

    def test_malformed_uci_leaves_game_unchanged(self, store, game_id):
        apply_move(store, game_id, "d2d4")
        before = store.get(game_id)

        with pytest.raises(InvalidUciError):
            apply_move(store, game_id, "d7")

        assert store.get(game_id) is before

    def test_unknown_game(self, store):
        with pytest.raises(GameNotFoundError):
            apply_move(store, "no-such-game", "e2e4")

    def test_unknown_game_reported_before_bad_syntax(self, store):
        with pytest.raises(GameNotFoundError):
            apply_move(store, "no-such-game", "garbage")

    def test_promotion(self, store):
        game_id = store.create(rules.decode_fen("8/P7/8/8/8/8/8/k6K w - - 0 1"))

        result = apply_move(store, game_id, "a7a8q")

        assert result.applied_uci == "a7a8q"
        assert result.applied_san == "a8=Q+"
        assert result.status == Ongoing(to_move=chess.BLACK, in_check=True)

    def test_castling(self, store):
        game_id = store.create(rules.decode_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"))

        result = apply_move(store, game_id, "e1g1")

        assert result.applied_san == "O-O"
        assert result.fen.split()[2] == "kq"

    def test_king_onto_rook_castling_is_recorded_canonically(self, store):
        game_id = store.create(rules.decode_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"))

        result = apply_move(store, game_id, "e1h1")

        assert result.applied_uci == "e1g1"
        assert result.applied_san == "O-O"
        assert store.get(game_id).moves_uci == ("e1g1",)


class TestGameEnd:
    def test_forced_mate(self, store, game_id):
        result = play_all(store, game_id, FOOLS_MATE)

        assert result.applied_san == "Qh4#"
        assert result.status == Checkmate(winner=chess.BLACK)
        assert result.legal_moves == []

    def test_no_moves_after_mate(self, store, game_id):
        play_all(store, game_id, FOOLS_MATE)

        with pytest.raises(IllegalMoveError):
            apply_move(store, game_id, "a2a3")
        assert store.get(game_id).ply_count == len(FOOLS_MATE)

    def test_stalemate(self, store):
        game_id = store.create(rules.decode_fen(STALEMATE_IN_ONE))

        result = apply_move(store, game_id, "f1f7")

        assert result.status == Stalemate()
        assert result.legal_moves == []

    def test_threefold_repetition(self, store, game_id):
        result = play_all(store, game_id, KNIGHT_SHUFFLE)

        assert result.status == Draw()
        assert result.legal_moves == []
        with pytest.raises(IllegalMoveError):
            apply_move(store, game_id, "g1f3")

    def test_fifty_move_rule(self, store):
        game_id = store.create(rules.decode_fen(FIFTY_MOVE_EDGE))

        result = apply_move(store, game_id, "h1h3")

        assert result.status == Draw()
        assert result.legal_moves == []


class TestFenRoundTrip:
    @pytest.mark.parametrize(
        "moves",
        [
            [],
            ["e2e4"],
            EN_PASSANT_OPENING,
            ["e2e4", "e7e5", "g1f3", "b8c6", "f1c4", "g8f6", "e1g1"],
            ["d2d4", "d7d5", "c2c4", "d5c4", "e2e3", "b7b5", "a2a4", "c7c6"],
        ],
    )
    def test_reloaded_fen_has_same_legal_moves(self, store, game_id, moves):
        play_all(store, game_id, moves)
        original = store.get(game_id)

        copy_id = store.create(rules.decode_fen(original.fen()))
        copy = store.get(copy_id)

        assert set(copy.legal_moves()) == set(original.legal_moves())
        assert copy.fen() == original.fen()


class TestConcurrency:
    def test_same_move_succeeds_once(self, store, game_id):
        barrier = threading.Barrier(8, timeout=5)

        def attempt(_):
            barrier.wait()
            try:
                apply_move(store, game_id, "e2e4")
                return True
            except IllegalMoveError:
                return False

        with ThreadPoolExecutor(max_workers=8) as pool:
            outcomes = list(pool.map(attempt, range(8)))

        assert outcomes.count(True) == 1
        assert store.get(game_id).moves_uci == ("e2e4",)

    def test_moves_on_different_games(self, store):
        ids = [store.create(rules.starting_position()) for _ in range(10)]

        with ThreadPoolExecutor(max_workers=10) as pool:
            list(pool.map(lambda game_id: play_all(store, game_id, FOOLS_MATE), ids))

        for game_id in ids:
            assert store.get(game_id).status() == Checkmate(winner=chess.BLACK)
