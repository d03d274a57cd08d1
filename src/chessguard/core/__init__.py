"""Core domain layer — pure chess legality logic with zero external dependencies.

Quick start::

    from chessguard.core import Board, Color, RulesEngine

    engine = RulesEngine(Board.initial())
    engine.is_in_check(Color.WHITE)
    for piece in engine.board.pieces(Color.WHITE):
        print(piece, engine.legal_moves(piece))
"""

from chessguard.core.board import Board, MoveRecord
from chessguard.core.enums import Color, GameResult, PieceType, Shade
from chessguard.core.fen import STARTING_FEN, board_from_fen, board_to_fen, side_from_fen
from chessguard.core.move_generator import MoveGenerator, pseudo_legal_moves
from chessguard.core.piece import Piece
from chessguard.core.rules import RulesEngine, squares_between
from chessguard.core.threat_map import ThreatMap
from chessguard.core.types import (
    ALL_SQUARES,
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
    square_shade,
)

__all__ = [
    # Enums
    "Color",
    "GameResult",
    "PieceType",
    "Shade",
    # Types / helpers
    "ALL_SQUARES",
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    "square_shade",
    "squares_between",
    # Domain objects
    "Board",
    "MoveGenerator",
    "MoveRecord",
    "Piece",
    "RulesEngine",
    "ThreatMap",
    "pseudo_legal_moves",
    # Notation
    "STARTING_FEN",
    "board_from_fen",
    "board_to_fen",
    "side_from_fen",
]
