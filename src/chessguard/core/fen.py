"""FEN piece-placement parsing and serialization.

Only the placement field matters to the rules engine; any further FEN
fields (side to move, castling, ...) are accepted and ignored.
"""

from __future__ import annotations

from chessguard.core.board import Board
from chessguard.core.enums import Color, PieceType
from chessguard.core.piece import Piece
from chessguard.core.types import make_square

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w - - 0 1"

# Rank a pawn of each color starts on, indexed by int(Color).
_PAWN_HOME_RANK: tuple[int, int] = (1, 6)


def board_from_fen(fen: str) -> Board:
    """Parse the placement field of *fen* into a fresh :class:`Board`.

    Pawns found off their home rank are marked as moved, so they do not
    get a double step.
    """
    parts = fen.split()
    if not parts:
        raise ValueError(f"Invalid FEN (empty): {fen!r}")

    ranks = parts[0].split("/")
    if len(ranks) != 8:
        raise ValueError(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    board = Board()
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise ValueError(f"Invalid FEN digit {ch!r}: {fen!r}")
                file += step
            else:
                if file >= 8:
                    raise ValueError(f"Invalid FEN rank width: {fen!r}")
                piece = Piece.from_char(ch)
                if piece.piece_type == PieceType.PAWN:
                    piece.has_moved = rank != _PAWN_HOME_RANK[int(piece.color)]
                board.place(piece, make_square(file, rank))
                file += 1
            if file > 8:
                raise ValueError(f"Invalid FEN rank width: {fen!r}")
        if file != 8:
            raise ValueError(f"Invalid FEN rank width: {fen!r}")
    return board


def board_to_fen(board: Board) -> str:
    """Serialise the piece placement of *board* (first FEN field only)."""
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = board[make_square(file, rank)]
            if piece is None:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    return "/".join(rows)


def side_from_fen(fen: str) -> Color:
    """Side to move from the second FEN field, White when absent."""
    parts = fen.split()
    if len(parts) < 2 or parts[1] == "w":
        return Color.WHITE
    if parts[1] == "b":
        return Color.BLACK
    raise ValueError(f"Invalid FEN side-to-move field: {parts[1]!r}")
