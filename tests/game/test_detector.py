"""Tests for CheckmateDetector — move submission and game end."""

from chessguard.core.board import Board, MoveRecord
from chessguard.core.enums import Color, GameResult
from chessguard.core.types import parse_square
from chessguard.game.detector import CheckmateDetector

FOOLS_MATE = ("f2f3", "e7e5", "g2g4", "d8h4")


def _play(detector: CheckmateDetector, uci: str) -> bool:
    piece = detector.board[parse_square(uci[:2])]
    assert piece is not None, f"No piece on {uci[:2]}"
    return detector.submit_move(piece, parse_square(uci[2:]))


class TestSubmitMove:
    def test_legal_move_accepted(self) -> None:
        detector = CheckmateDetector()
        assert _play(detector, "e2e4")
        assert detector.side_to_move == Color.BLACK
        assert detector.board[parse_square("e4")] is not None
        assert len(detector.history) == 1

    def test_illegal_move_rejected(self) -> None:
        detector = CheckmateDetector()
        assert not _play(detector, "e2e5")
        assert detector.side_to_move == Color.WHITE
        assert detector.board == Board.initial()

    def test_wrong_side_rejected(self) -> None:
        detector = CheckmateDetector()
        assert not _play(detector, "e7e5")
        assert detector.history == []

    def test_move_into_check_rejected(self) -> None:
        detector = CheckmateDetector.from_fen("4r2k/8/8/8/8/8/4B3/4K3 w")
        assert not _play(detector, "e2d3")
        assert _play(detector, "e1d1")

    def test_move_event_fires(self) -> None:
        detector = CheckmateDetector()
        records: list[MoveRecord] = []
        detector.events.on_move.append(records.append)
        _play(detector, "g1f3")
        assert len(records) == 1
        assert records[0].to_sq == parse_square("f3")


class TestGameEnd:
    def test_fools_mate(self) -> None:
        detector = CheckmateDetector()
        checks: list[Color] = []
        results: list[GameResult] = []
        detector.events.on_check.append(checks.append)
        detector.events.on_game_over.append(results.append)

        for uci in FOOLS_MATE:
            assert _play(detector, uci)

        assert checks == [Color.WHITE]
        assert results == [GameResult.BLACK_WINS]
        assert detector.result == GameResult.BLACK_WINS
        assert detector.is_game_over
        assert detector.is_checkmated(Color.WHITE)
        assert detector.get_allowable_squares(Color.WHITE) == set()

    def test_no_moves_after_game_over(self) -> None:
        detector = CheckmateDetector()
        for uci in FOOLS_MATE:
            _play(detector, uci)
        assert not _play(detector, "a2a3")
        assert len(detector.history) == 4

    def test_stalemate_is_draw(self) -> None:
        detector = CheckmateDetector.from_fen("k7/8/1Q6/8/8/8/8/7K w")
        results: list[GameResult] = []
        detector.events.on_game_over.append(results.append)
        assert _play(detector, "b6c7")
        assert detector.is_stalemate(Color.BLACK)
        assert results == [GameResult.DRAW]

    def test_check_without_mate_keeps_playing(self) -> None:
        detector = CheckmateDetector.from_fen("4k3/8/8/8/8/8/8/R3K3 w")
        checks: list[Color] = []
        detector.events.on_check.append(checks.append)
        assert _play(detector, "a1a8")
        assert checks == [Color.BLACK]
        assert not detector.is_game_over
        assert detector.get_allowable_squares(Color.BLACK) == {
            parse_square("d7"),
            parse_square("e7"),
            parse_square("f7"),
        }


class TestUndo:
    def test_undo_restores_position(self) -> None:
        detector = CheckmateDetector()
        _play(detector, "e2e4")
        pawn = detector.board[parse_square("e4")]
        assert detector.undo_move()
        assert detector.board == Board.initial()
        assert detector.side_to_move == Color.WHITE
        assert pawn is not None and not pawn.has_moved

    def test_undo_empty_history(self) -> None:
        assert not CheckmateDetector().undo_move()

    def test_undo_reopens_finished_game(self) -> None:
        detector = CheckmateDetector()
        for uci in FOOLS_MATE:
            _play(detector, uci)
        assert detector.undo_move()
        assert not detector.is_game_over
        assert detector.side_to_move == Color.BLACK
        assert not detector.is_in_check(Color.WHITE)

    def test_undo_event_fires(self) -> None:
        detector = CheckmateDetector()
        undone: list[MoveRecord] = []
        detector.events.on_undo.append(undone.append)
        _play(detector, "e2e4")
        detector.undo_move()
        assert len(undone) == 1
        assert undone[0].from_sq == parse_square("e2")
        assert undone[0].to_sq == parse_square("e4")

    def test_empty_undo_fires_nothing(self) -> None:
        detector = CheckmateDetector()
        undone: list[MoveRecord] = []
        detector.events.on_undo.append(undone.append)
        detector.undo_move()
        assert undone == []


class TestInitialResult:
    def test_mated_position_is_finished(self) -> None:
        detector = CheckmateDetector.from_fen("R3k3/3ppp2/8/8/8/8/8/6K1 b")
        assert detector.result == GameResult.WHITE_WINS
        assert detector.is_game_over
        assert not _play(detector, "e8d8")

    def test_stalemated_position_is_draw(self) -> None:
        detector = CheckmateDetector.from_fen("k7/2Q5/8/8/8/8/8/7K b")
        assert detector.result == GameResult.DRAW
        assert detector.is_game_over

    def test_update_after_external_change(self) -> None:
        detector = CheckmateDetector.from_fen("4k3/3ppp2/8/8/8/8/8/R5K1 b")
        assert detector.result == GameResult.IN_PROGRESS
        rook = detector.board[parse_square("a1")]
        assert rook is not None
        detector.board.move_piece(rook, parse_square("a8"))
        detector.update()
        assert detector.result == GameResult.WHITE_WINS
        assert detector.is_game_over


class TestQueries:
    def test_from_fen_side_to_move(self) -> None:
        detector = CheckmateDetector.from_fen("4k3/8/8/8/8/8/8/4K3 b")
        assert detector.side_to_move == Color.BLACK

    def test_allowable_squares_when_not_in_check(self) -> None:
        detector = CheckmateDetector()
        assert len(detector.get_allowable_squares(Color.WHITE)) == 64

    def test_legal_moves_of_knight(self) -> None:
        detector = CheckmateDetector()
        knight = detector.board[parse_square("b1")]
        assert knight is not None
        assert detector.legal_moves(knight) == {parse_square("a3"), parse_square("c3")}
