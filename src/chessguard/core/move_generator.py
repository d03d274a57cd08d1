"""Pseudo-legal destination generation, one rule per piece variant.

Pseudo-legal destinations respect board bounds, blocking and friendly
occupancy, but ignore whether the move leaves the mover's own king in
check. That filtering is the job of :class:`chessguard.core.rules.RulesEngine`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from chessguard.core.enums import Color, PieceType
from chessguard.core.types import Square, make_square, on_board

if TYPE_CHECKING:
    from chessguard.core.board import Board
    from chessguard.core.piece import Piece


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

# Rank step for a pawn of each color, indexed by int(Color).
PAWN_FORWARD: tuple[int, int] = (1, -1)


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        moves: list[Square] = []
        for df, dr in offsets:
            af = file_idx + df
            ar = rank_idx + dr
            if on_board(af, ar):
                moves.append(make_square(af, ar))
        targets.append(tuple(moves))
    return tuple(targets)


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            af = file_idx + df
            ar = rank_idx + dr
            ray: list[Square] = []
            while on_board(af, ar):
                ray.append(make_square(af, ar))
                af += df
                ar += dr
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)

_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)


# -- Per-variant generators --------------------------------------------------


def _pawn_moves(board: Board, sq: Square, color: Color) -> set[Square]:
    moves: set[Square] = set()
    file_idx = sq & 7
    step = PAWN_FORWARD[int(color)]
    ahead = (sq >> 3) + step
    if not 0 <= ahead < 8:
        return moves

    one_step = make_square(file_idx, ahead)
    if board.is_empty(one_step):
        moves.add(one_step)
        pawn = board[sq]
        two_ahead = ahead + step
        if pawn is not None and not pawn.has_moved and 0 <= two_ahead < 8:
            two_step = make_square(file_idx, two_ahead)
            if board.is_empty(two_step):
                moves.add(two_step)

    for df in (-1, 1):
        cap_file = file_idx + df
        if not 0 <= cap_file < 8:
            continue
        cap_sq = make_square(cap_file, ahead)
        target = board[cap_sq]
        if target is not None and target.color != color:
            moves.add(cap_sq)
    return moves


def _stepping_moves(
    board: Board, color: Color, targets: tuple[Square, ...]
) -> set[Square]:
    moves: set[Square] = set()
    for to_sq in targets:
        target = board[to_sq]
        if target is None or target.color != color:
            moves.add(to_sq)
    return moves


def _sliding_moves(
    board: Board, color: Color, rays: tuple[tuple[Square, ...], ...]
) -> set[Square]:
    moves: set[Square] = set()
    for ray in rays:
        for to_sq in ray:
            target = board[to_sq]
            if target is None:
                moves.add(to_sq)
                continue
            if target.color != color:
                moves.add(to_sq)
            break
    return moves


def _knight_moves(board: Board, sq: Square, color: Color) -> set[Square]:
    return _stepping_moves(board, color, _KNIGHT_TARGETS[sq])


def _king_moves(board: Board, sq: Square, color: Color) -> set[Square]:
    return _stepping_moves(board, color, _KING_TARGETS[sq])


def _bishop_moves(board: Board, sq: Square, color: Color) -> set[Square]:
    return _sliding_moves(board, color, _BISHOP_RAYS[sq])


def _rook_moves(board: Board, sq: Square, color: Color) -> set[Square]:
    return _sliding_moves(board, color, _ROOK_RAYS[sq])


def _queen_moves(board: Board, sq: Square, color: Color) -> set[Square]:
    return _sliding_moves(board, color, _QUEEN_RAYS[sq])


_GENERATORS: dict[PieceType, Callable[[Board, Square, Color], set[Square]]] = {
    PieceType.PAWN: _pawn_moves,
    PieceType.KNIGHT: _knight_moves,
    PieceType.BISHOP: _bishop_moves,
    PieceType.ROOK: _rook_moves,
    PieceType.QUEEN: _queen_moves,
    PieceType.KING: _king_moves,
}


def pseudo_legal_moves(board: Board, piece: Piece) -> set[Square]:
    """Destinations *piece* can reach by its movement rule on *board*.

    A piece that is no longer on the board has no destinations.
    """
    if piece.square is None:
        return set()
    return _GENERATORS[piece.piece_type](board, piece.square, piece.color)


class MoveGenerator:
    """Pseudo-legal move generation bound to one :class:`Board`."""

    __slots__ = ("_board",)

    def __init__(self, board: Board) -> None:
        self._board = board

    def moves_for(self, piece: Piece) -> set[Square]:
        return pseudo_legal_moves(self._board, piece)

    def moves_by_piece(self, color: Color) -> dict[Piece, set[Square]]:
        """Pseudo-legal destinations of every live piece of *color*."""
        board = self._board
        return {
            piece: pseudo_legal_moves(board, piece)
            for piece in board.pieces(color)
            if piece.square is not None
        }

    def reaches(self, piece: Piece, sq: Square) -> bool:
        """Whether *piece* can pseudo-legally move to *sq*."""
        return sq in pseudo_legal_moves(self._board, piece)
