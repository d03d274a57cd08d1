"""Tests for FEN placement parsing and serialization."""

import pytest

from chessguard.core.board import Board
from chessguard.core.enums import Color, PieceType
from chessguard.core.fen import STARTING_FEN, board_from_fen, board_to_fen, side_from_fen
from chessguard.core.types import E2, E4, E7, H1


class TestBoardFromFen:
    def test_starting_matches_initial(self) -> None:
        assert board_from_fen(STARTING_FEN) == Board.initial()

    def test_round_trip_placement(self) -> None:
        placement = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR"
        assert board_to_fen(board_from_fen(placement)) == placement

    def test_placement_only_is_accepted(self) -> None:
        board = board_from_fen("8/8/8/8/8/8/8/7K")
        piece = board[H1]
        assert piece is not None and piece.piece_type == PieceType.KING

    def test_pawn_off_home_rank_is_marked_moved(self) -> None:
        board = board_from_fen("8/4p3/8/8/4P3/8/4P3/8")
        advanced, home, black = board[E4], board[E2], board[E7]
        assert advanced is not None and advanced.has_moved
        assert home is not None and not home.has_moved
        assert black is not None and not black.has_moved

    @pytest.mark.parametrize(
        "fen",
        [
            "",
            "8/8/8/8/8/8/8 w",
            "9/8/8/8/8/8/8/8 w",
            "ppppppppp/8/8/8/8/8/8/8 w",
            "7/8/8/8/8/8/8/8 w",
            "x7/8/8/8/8/8/8/8 w",
            "K6K/8/8/8/8/8/8/8 w",
        ],
    )
    def test_invalid_fen_raises(self, fen: str) -> None:
        with pytest.raises(ValueError):
            board_from_fen(fen)


class TestSideFromFen:
    def test_white_default(self) -> None:
        assert side_from_fen("8/8/8/8/8/8/8/8") == Color.WHITE

    def test_black(self) -> None:
        assert side_from_fen("8/8/8/8/8/8/8/8 b - - 0 1") == Color.BLACK

    def test_invalid(self) -> None:
        with pytest.raises(ValueError):
            side_from_fen("8/8/8/8/8/8/8/8 x")
