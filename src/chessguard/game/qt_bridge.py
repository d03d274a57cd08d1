"""Qt bridge exposing the checkmate detector to a PyQt6 board UI."""

from __future__ import annotations

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from chessguard.core.board import MoveRecord
from chessguard.core.enums import Color, GameResult
from chessguard.core.piece import Piece
from chessguard.game.detector import CheckmateDetector


class DetectorBridge(QObject):
    """Thread-affine wrapper that turns detector callbacks into Qt signals.

    Lives on the UI thread. Square arguments are board indices (a1 = 0).
    """

    move_applied = pyqtSignal(object, int, int)  # piece, from_sq, to_sq
    move_rejected = pyqtSignal(object, int)  # piece, to_sq
    move_undone = pyqtSignal(object, int, int)  # piece, from_sq, to_sq
    check_changed = pyqtSignal(int, bool)  # color, in_check
    game_over = pyqtSignal(int)  # GameResult

    def __init__(
        self, detector: CheckmateDetector, parent: QObject | None = None
    ) -> None:
        super().__init__(parent)
        self._detector = detector
        self._in_check = [
            detector.is_in_check(Color.WHITE),
            detector.is_in_check(Color.BLACK),
        ]
        detector.events.on_move.append(self._on_move)
        detector.events.on_game_over.append(self._on_game_over)
        detector.events.on_undo.append(self._on_undo)

    @property
    def detector(self) -> CheckmateDetector:
        return self._detector

    @pyqtSlot(object, int)
    def submit_move(self, piece_obj: object, to_sq: int) -> None:
        """Forward a user move; emits ``move_rejected`` when it is illegal."""
        if not isinstance(piece_obj, Piece) or not 0 <= to_sq < 64:
            self.move_rejected.emit(piece_obj, to_sq)
            return
        if not self._detector.submit_move(piece_obj, to_sq):
            self.move_rejected.emit(piece_obj, to_sq)

    @pyqtSlot()
    def undo_move(self) -> None:
        """Take back the last move; the detector callbacks emit the signals."""
        self._detector.undo_move()

    def allowable_squares(self, piece_obj: object) -> list[int]:
        """Sorted legal destinations of *piece_obj*, for highlighting."""
        if not isinstance(piece_obj, Piece):
            return []
        return sorted(self._detector.legal_moves(piece_obj))

    # ── Detector callbacks ───────────────────────────────────────────────

    def _on_move(self, record: MoveRecord) -> None:
        self.move_applied.emit(record.piece, record.from_sq, record.to_sq)
        self._refresh_check()

    def _on_undo(self, record: MoveRecord) -> None:
        self.move_undone.emit(record.piece, record.from_sq, record.to_sq)
        self._refresh_check()

    def _refresh_check(self) -> None:
        for color in (Color.WHITE, Color.BLACK):
            in_check = self._detector.is_in_check(color)
            if in_check != self._in_check[int(color)]:
                self._in_check[int(color)] = in_check
                self.check_changed.emit(int(color), in_check)

    def _on_game_over(self, result: GameResult) -> None:
        self.game_over.emit(int(result))
