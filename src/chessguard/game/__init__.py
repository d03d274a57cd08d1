"""Game-facing layer — the detector facade the UI / controller talks to.

Quick start::

    from chessguard.core.types import E2, E4
    from chessguard.game import CheckmateDetector

    detector = CheckmateDetector()
    pawn = detector.board[E2]
    detector.submit_move(pawn, E4)

The PyQt6 signal bridge lives in :mod:`chessguard.game.qt_bridge` and is
not imported here, so the detector is usable without Qt.
"""

from chessguard.game.detector import CheckmateDetector, DetectorEvents

__all__ = [
    "CheckmateDetector",
    "DetectorEvents",
]
