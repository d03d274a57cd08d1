"""Per-color threat map: which pieces of one side can move onto each square."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from chessguard.core.enums import Color, PieceType
from chessguard.core.move_generator import MoveGenerator
from chessguard.core.types import Square, file_of

if TYPE_CHECKING:
    from chessguard.core.board import Board
    from chessguard.core.piece import Piece

_LOGGER = logging.getLogger(__name__)


class ThreatMap:
    """Mapping square -> pieces of :attr:`color` that pseudo-legally reach it.

    Kings never contribute. The map is only meaningful for the board state
    it was last rebuilt from; every board mutation must be followed by a
    full :meth:`rebuild` before the map is queried again.
    """

    __slots__ = ("color", "_entries")

    def __init__(self, color: Color) -> None:
        self.color = color
        self._entries: list[list[Piece]] = [[] for _ in range(64)]

    def rebuild(self, board: Board) -> None:
        """Recompute every entry from scratch.

        Pieces in the live list without a square are stale references; they
        are dropped from the list here.
        """
        entries: list[list[Piece]] = [[] for _ in range(64)]
        generator = MoveGenerator(board)
        live = board.pieces(self.color)
        stale = [piece for piece in live if piece.square is None]
        for piece in stale:
            _LOGGER.debug("Pruning stale %s from live %s pieces", piece, self.color)
            live.remove(piece)

        for piece in live:
            if piece.is_king:
                continue
            for sq in generator.moves_for(piece):
                entries[sq].append(piece)
        self._entries = entries

    # -- Queries ------------------------------------------------------------

    def threats(self, sq: Square) -> list[Piece]:
        """Pieces that can pseudo-legally move onto *sq*."""
        return list(self._entries[sq])

    def is_threatened(self, sq: Square) -> bool:
        return bool(self._entries[sq])

    def attackers(self, sq: Square) -> list[Piece]:
        """Pieces that would capture a piece standing on *sq*.

        Same as :meth:`threats` except pawns that only reach *sq* with a
        straight push, which never captures.
        """
        return [
            piece
            for piece in self._entries[sq]
            if not (
                piece.piece_type == PieceType.PAWN
                and piece.square is not None
                and file_of(piece.square) == file_of(sq)
            )
        ]

    def snapshot(self) -> tuple[tuple[int, ...], ...]:
        """Per-square piece identities, order-independent, for comparisons."""
        return tuple(
            tuple(sorted(id(piece) for piece in entry)) for entry in self._entries
        )

    def __len__(self) -> int:
        """Number of squares with at least one threat."""
        return sum(1 for entry in self._entries if entry)

    def __repr__(self) -> str:
        return f"ThreatMap({self.color.name}, {len(self)} squares)"
