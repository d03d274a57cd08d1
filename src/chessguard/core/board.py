"""Board - piece placement on an 8x8 board plus the live piece lists."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TypeAlias

from chessguard.core.enums import Color, PieceType
from chessguard.core.piece import Piece
from chessguard.core.types import Square, make_square, square_name

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

# (color, piece_type, has_moved) per occupied square, None when empty.
Occupancy: TypeAlias = tuple[tuple[Color, PieceType, bool] | None, ...]


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """Undo token returned by :meth:`Board.move_piece`."""

    piece: Piece
    from_sq: Square
    to_sq: Square
    had_moved: bool
    captured: Piece | None = None
    captured_index: int = -1


class Board:
    """Mutable 64-slot board.

    The slot array is the single source of truth for occupancy. Each piece
    keeps the index of the slot that references it in ``Piece.square``; the
    board is the only writer of that field. A piece is listed in
    :meth:`pieces` for its color iff it occupies a slot.
    """

    __slots__ = ("_squares", "_pieces", "_kings")

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * 64
        # [color] -> live pieces in placement order.
        self._pieces: tuple[list[Piece], list[Piece]] = ([], [])
        # [color] -> king piece (None if king missing).
        self._kings: list[Piece | None] = [None, None]

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq]

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq] is None

    def occupied(self) -> Iterator[tuple[Square, Piece]]:
        """Yield ``(square, piece)`` for every occupied slot, a1 first."""
        for sq, piece in enumerate(self._squares):
            if piece is not None:
                yield sq, piece

    # -- Query helpers ------------------------------------------------------

    def pieces(self, color: Color) -> list[Piece]:
        """Live piece list for *color*.

        The list itself is returned, not a copy, so the rules engine can
        prune stale entries in place.
        """
        return self._pieces[int(color)]

    def has_king(self, color: Color) -> bool:
        return self._kings[int(color)] is not None

    def king(self, color: Color) -> Piece:
        """Return the king of *color*."""
        king = self._kings[int(color)]
        if king is None:
            raise ValueError(f"No {color.name} king on board")
        return king

    def king_square(self, color: Color) -> Square:
        sq = self.king(color).square
        assert sq is not None
        return sq

    def snapshot(self) -> Occupancy:
        """Hashable description of every slot, used to compare states."""
        return tuple(
            None if p is None else (p.color, p.piece_type, p.has_moved)
            for p in self._squares
        )

    # -- Placement ----------------------------------------------------------

    def place(self, piece: Piece, sq: Square) -> None:
        """Put a piece that is not on the board onto the empty slot *sq*."""
        if piece.square is not None:
            raise ValueError(f"{piece!r} is already on the board")
        if self._squares[sq] is not None:
            raise ValueError(f"Square {square_name(sq)} is occupied")
        if piece.is_king and self._kings[int(piece.color)] is not None:
            raise ValueError(f"{piece.color.name} already has a king")

        self._squares[sq] = piece
        piece.square = sq
        self._pieces[int(piece.color)].append(piece)
        if piece.is_king:
            self._kings[int(piece.color)] = piece

    def remove(self, sq: Square) -> Piece | None:
        """Take the piece on *sq* off the board and return it."""
        piece = self._squares[sq]
        if piece is None:
            return None
        self._detach(piece)
        return piece

    def clear(self) -> None:
        for piece in self._pieces[0] + self._pieces[1]:
            piece.square = None
        self._squares = [None] * 64
        self._pieces = ([], [])
        self._kings = [None, None]

    # -- Raw movement (no legality filtering) -------------------------------

    def move_piece(self, piece: Piece, to_sq: Square) -> MoveRecord:
        """Move *piece* to *to_sq*, capturing whatever enemy piece is there.

        Returns the token :meth:`undo` needs to restore the exact prior
        state, including live list order and the ``has_moved`` flag.
        """
        from_sq = piece.square
        if from_sq is None or self._squares[from_sq] is not piece:
            raise ValueError(f"{piece!r} is not on the board")

        captured = self._squares[to_sq]
        captured_index = -1
        if captured is not None:
            if captured.color == piece.color:
                raise ValueError(
                    f"Cannot capture own piece on {square_name(to_sq)}"
                )
            captured_index = self._detach(captured)

        record = MoveRecord(
            piece=piece,
            from_sq=from_sq,
            to_sq=to_sq,
            had_moved=piece.has_moved,
            captured=captured,
            captured_index=captured_index,
        )

        self._squares[from_sq] = None
        self._squares[to_sq] = piece
        piece.square = to_sq
        piece.has_moved = True
        return record

    def undo(self, record: MoveRecord) -> None:
        """Reverse the move described by *record*."""
        piece = record.piece
        assert self._squares[record.to_sq] is piece, "undo out of order"
        assert self._squares[record.from_sq] is None, "undo out of order"

        self._squares[record.to_sq] = None
        self._squares[record.from_sq] = piece
        piece.square = record.from_sq
        piece.has_moved = record.had_moved

        captured = record.captured
        if captured is not None:
            self._squares[record.to_sq] = captured
            captured.square = record.to_sq
            self._pieces[int(captured.color)].insert(record.captured_index, captured)
            if captured.is_king:
                self._kings[int(captured.color)] = captured

    def _detach(self, piece: Piece) -> int:
        """Clear *piece* from its slot and live list, returning its list index."""
        assert piece.square is not None
        self._squares[piece.square] = None
        piece.square = None
        live = self._pieces[int(piece.color)]
        index = live.index(piece)
        del live[index]
        if self._kings[int(piece.color)] is piece:
            self._kings[int(piece.color)] = None
        return index

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls()
        for f, pt in enumerate(_BACK_RANK):
            b.place(Piece(Color.WHITE, pt), make_square(f, 0))
        for f in range(8):
            b.place(Piece(Color.WHITE, PieceType.PAWN), make_square(f, 1))
        for f in range(8):
            b.place(Piece(Color.BLACK, PieceType.PAWN), make_square(f, 6))
        for f, pt in enumerate(_BACK_RANK):
            b.place(Piece(Color.BLACK, pt), make_square(f, 7))
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.snapshot() == other.snapshot()

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            row = []
            for file in range(8):
                p = self[make_square(file, rank)]
                row.append(str(p) if p else ".")
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
