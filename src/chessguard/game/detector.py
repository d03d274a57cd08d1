"""CheckmateDetector — the rules engine as seen by the UI / controller.

The detector answers the questions a board UI asks every turn (is anyone
in check, where may this piece go) and accepts user moves, applying them
only when legal. Listeners subscribe through simple callbacks.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from chessguard.core.board import Board, MoveRecord
from chessguard.core.enums import Color, GameResult
from chessguard.core.fen import board_from_fen, side_from_fen
from chessguard.core.piece import Piece
from chessguard.core.rules import RulesEngine
from chessguard.core.types import Square, square_name

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[MoveRecord], None]
CheckCallback = Callable[[Color], None]  # color now in check
GameOverCallback = Callable[[GameResult], None]
UndoCallback = Callable[[MoveRecord], None]  # the move taken back


@dataclass
class DetectorEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_check: list[CheckCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_undo: list[UndoCallback] = field(default_factory=list)


# ── Detector ─────────────────────────────────────────────────────────────────


class CheckmateDetector:
    """Facade over :class:`RulesEngine` for the UI collaborator.

    Thread-safety: the underlying engine serialises its own queries, but
    move submission and turn tracking are meant for a single (UI) thread.
    """

    __slots__ = ("_engine", "_side_to_move", "_result", "_history", "events")

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
    ) -> None:
        self._engine = RulesEngine(board if board is not None else Board.initial())
        self._side_to_move = side_to_move
        self._history: list[MoveRecord] = []
        self.events = DetectorEvents()
        self._result = self._engine.game_result(side_to_move)

    @classmethod
    def from_fen(cls, fen: str) -> CheckmateDetector:
        return cls(board_from_fen(fen), side_from_fen(fen))

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def board(self) -> Board:
        return self._engine.board

    @property
    def engine(self) -> RulesEngine:
        return self._engine

    @property
    def side_to_move(self) -> Color:
        return self._side_to_move

    @property
    def result(self) -> GameResult:
        return self._result

    @property
    def is_game_over(self) -> bool:
        return self._result != GameResult.IN_PROGRESS

    @property
    def history(self) -> list[MoveRecord]:
        return list(self._history)

    # ── Queries ──────────────────────────────────────────────────────────

    def update(self) -> None:
        """Refresh after board changes the detector did not make itself."""
        self._engine.update()
        self._result = self._engine.game_result(self._side_to_move)

    def is_in_check(self, color: Color) -> bool:
        return self._engine.is_in_check(color)

    def is_checkmated(self, color: Color) -> bool:
        return self._engine.is_checkmated(color)

    def is_stalemate(self, color: Color) -> bool:
        return self._engine.is_stalemate(color)

    def get_allowable_squares(self, color: Color) -> set[Square]:
        """Squares *color* may move some piece to this turn.

        Not piece-specific: intersect with a piece's own moves, or use
        :meth:`legal_moves` which does both steps.
        """
        return self._engine.get_check_escape_moves(color)

    def test_move(self, piece: Piece, sq: Square) -> bool:
        return self._engine.test_move(piece, sq)

    def legal_moves(self, piece: Piece) -> set[Square]:
        return self._engine.legal_moves(piece)

    # ── Moves ────────────────────────────────────────────────────────────

    def submit_move(self, piece: Piece, sq: Square) -> bool:
        """Apply a user move. Returns True if it was legal and applied."""
        if self.is_game_over:
            return False
        if piece.color != self._side_to_move or piece.square is None:
            _LOGGER.debug("Rejected %r: not %s to move", piece, self._side_to_move)
            return False
        if sq not in self._engine.legal_moves(piece):
            _LOGGER.debug("Rejected %r to %s: illegal", piece, square_name(sq))
            return False

        record = self.board.move_piece(piece, sq)
        self._history.append(record)
        self._engine.update()
        self._side_to_move = self._side_to_move.opposite

        for cb in self.events.on_move:
            cb(record)

        to_move = self._side_to_move
        if self._engine.is_in_check(to_move):
            for cb in self.events.on_check:
                cb(to_move)

        self._result = self._engine.game_result(to_move)
        if self.is_game_over:
            _LOGGER.info(
                "Game over: %s (%s)",
                self._result.name,
                "checkmate" if self._result != GameResult.DRAW else "stalemate",
            )
            for cb in self.events.on_game_over:
                cb(self._result)
        return True

    def undo_move(self) -> bool:
        """Take back the last applied move. Returns True on success."""
        if not self._history:
            return False
        record = self._history.pop()
        self.board.undo(record)
        self._engine.update()
        self._side_to_move = self._side_to_move.opposite
        self._result = self._engine.game_result(self._side_to_move)

        for cb in self.events.on_undo:
            cb(record)
        return True
