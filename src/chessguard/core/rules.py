"""High-level chess rules: check, checkmate, stalemate and move testing."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from chessguard.core.enums import Color, GameResult, PieceType
from chessguard.core.move_generator import MoveGenerator
from chessguard.core.threat_map import ThreatMap
from chessguard.core.types import ALL_SQUARES, Square, file_of, make_square, rank_of

if TYPE_CHECKING:
    from chessguard.core.board import Board
    from chessguard.core.piece import Piece

_LOGGER = logging.getLogger(__name__)

_ORTHOGONAL_ATTACKERS = (PieceType.ROOK, PieceType.QUEEN)
_DIAGONAL_ATTACKERS = (PieceType.BISHOP, PieceType.QUEEN)


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def squares_between(from_sq: Square, to_sq: Square) -> list[Square]:
    """Squares strictly between two squares sharing a file, rank or diagonal.

    Returns an empty list when the squares are not aligned or adjacent.
    """
    df = file_of(to_sq) - file_of(from_sq)
    dr = rank_of(to_sq) - rank_of(from_sq)
    if df and dr and abs(df) != abs(dr):
        return []
    step_f, step_r = _sign(df), _sign(dr)
    f, r = file_of(from_sq) + step_f, rank_of(from_sq) + step_r
    between: list[Square] = []
    while (f, r) != (file_of(to_sq), rank_of(to_sq)):
        between.append(make_square(f, r))
        f += step_f
        r += step_r
    return between


class RulesEngine:
    """Check and checkmate detection over a live :class:`Board`.

    The engine borrows the board: it never owns pieces, and it must not
    outlive the board it was built from. Queries that need to look ahead
    (:meth:`test_move` and everything built on it) mutate the board in
    place and roll it back before returning; a re-entrant lock keeps each
    such simulation atomic with respect to other callers.
    """

    __slots__ = ("_board", "_generator", "_threat_maps", "_lock")

    def __init__(self, board: Board) -> None:
        self._board = board
        self._generator = MoveGenerator(board)
        self._threat_maps = (ThreatMap(Color.WHITE), ThreatMap(Color.BLACK))
        self._lock = threading.RLock()
        self.update()

    @property
    def board(self) -> Board:
        return self._board

    def threat_map(self, color: Color) -> ThreatMap:
        """Threat map of *color* as of the last :meth:`update`."""
        return self._threat_maps[int(color)]

    def update(self) -> None:
        """Rebuild both threat maps from the current board state."""
        with self._lock:
            for threat_map in self._threat_maps:
                threat_map.rebuild(self._board)

    # -- Check ---------------------------------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king on a square the opponent threatens?"""
        with self._lock:
            self.update()
            return self._king_threatened(color)

    def is_checkmated(self, color: Color) -> bool:
        with self._lock:
            if not self.is_in_check(color):
                return False
            return not self.get_check_escape_moves(color)

    def is_stalemate(self, color: Color) -> bool:
        with self._lock:
            if self.is_in_check(color):
                return False
            return not self.has_legal_move(color)

    def game_result(self, side_to_move: Color) -> GameResult:
        """Result of the game with *side_to_move* about to play."""
        with self._lock:
            if self.has_legal_move(side_to_move):
                return GameResult.IN_PROGRESS
            if self.is_in_check(side_to_move):
                return (
                    GameResult.BLACK_WINS
                    if side_to_move == Color.WHITE
                    else GameResult.WHITE_WINS
                )
            return GameResult.DRAW

    # -- Move testing --------------------------------------------------------

    @contextmanager
    def simulate(self, piece: Piece, sq: Square) -> Iterator[None]:
        """Temporarily play *piece* to *sq*, with threat maps rebuilt.

        The move is undone and the maps rebuilt again on exit, whatever
        happens inside the block.
        """
        with self._lock:
            record = self._board.move_piece(piece, sq)
            try:
                self.update()
                yield
            finally:
                self._board.undo(record)
                self.update()

    def test_move(self, piece: Piece, sq: Square) -> bool:
        """Would moving *piece* to *sq* leave its own king safe?

        Only king safety is judged here; callers are expected to offer
        pseudo-legal destinations. A piece off the board, or a square held
        by a friendly piece, is never a valid move.
        """
        with self._lock:
            if piece.square is None:
                return False
            target = self._board[sq]
            if target is not None and target.color == piece.color:
                return False
            with self.simulate(piece, sq):
                safe = not self._king_exposed(piece.color)
            return safe

    def legal_moves(self, piece: Piece) -> set[Square]:
        """Destinations *piece* may actually move to this turn."""
        with self._lock:
            if piece.square is None:
                return set()
            allowed = self.get_check_escape_moves(piece.color)
            candidates = self._generator.moves_for(piece) & allowed
            return {sq for sq in candidates if self.test_move(piece, sq)}

    def has_legal_move(self, color: Color) -> bool:
        with self._lock:
            for piece in list(self._board.pieces(color)):
                if self.legal_moves(piece):
                    return True
            return False

    # -- Escape search -------------------------------------------------------

    def get_check_escape_moves(self, color: Color) -> set[Square]:
        """Squares some piece of *color* may move to given the check state.

        Every square when *color* is not in check. Otherwise the union of
        the squares the king can flee to, the square of a lone attacker
        that can be taken, and the squares where a lone sliding attacker
        can be blocked.
        """
        with self._lock:
            if not self.is_in_check(color):
                return set(ALL_SQUARES)

            king = self._board.king(color)
            king_sq = king.square
            assert king_sq is not None
            attackers = self.threat_map(color.opposite).threats(king_sq)

            evade = self._evade_squares(king)
            capture = self._capture_squares(king, attackers)
            block = self._block_squares(king, attackers)
            _LOGGER.debug(
                "%s in check by %d piece(s): evade=%d capture=%d block=%d",
                color,
                len(attackers),
                len(evade),
                len(capture),
                len(block),
            )
            return evade | capture | block

    def _evade_squares(self, king: Piece) -> set[Square]:
        """King destinations clear of capturing threats and safe after the move.

        Squares an enemy pawn reaches only by a straight push stay open.
        """
        opponent_map = self.threat_map(king.color.opposite)
        squares: set[Square] = set()
        for sq in sorted(self._generator.moves_for(king)):
            if opponent_map.attackers(sq):
                continue
            if self.test_move(king, sq):
                squares.add(sq)
        return squares

    def _capture_squares(self, king: Piece, attackers: list[Piece]) -> set[Square]:
        # Taking one of several attackers still leaves the king in check.
        if len(attackers) != 1:
            return set()
        threat_sq = attackers[0].square
        assert threat_sq is not None

        if threat_sq in self._generator.moves_for(king) and self.test_move(
            king, threat_sq
        ):
            return {threat_sq}

        for defender in self.threat_map(king.color).threats(threat_sq):
            if self.test_move(defender, threat_sq):
                return {threat_sq}
        return set()

    def _block_squares(self, king: Piece, attackers: list[Piece]) -> set[Square]:
        if len(attackers) != 1:
            return set()
        attacker = attackers[0]
        king_sq, threat_sq = king.square, attacker.square
        assert king_sq is not None and threat_sq is not None

        same_line = file_of(king_sq) == file_of(threat_sq) or rank_of(
            king_sq
        ) == rank_of(threat_sq)
        if same_line:
            if attacker.piece_type not in _ORTHOGONAL_ATTACKERS:
                return set()
        elif attacker.piece_type not in _DIAGONAL_ATTACKERS:
            return set()

        line = squares_between(king_sq, threat_sq)
        if not all(self._board.is_empty(sq) for sq in line):
            return set()

        own_map = self.threat_map(king.color)
        squares: set[Square] = set()
        for sq in line:
            for blocker in own_map.threats(sq):
                if self.test_move(blocker, sq):
                    squares.add(sq)
                    break
        return squares

    # -- Internals (threat maps assumed fresh) --------------------------------

    def _king_threatened(self, color: Color) -> bool:
        board = self._board
        if not board.has_king(color):
            return False
        king_sq = board.king_square(color)
        return self.threat_map(color.opposite).is_threatened(king_sq)

    def _king_exposed(self, color: Color) -> bool:
        """Threatened, or touching the enemy king (kings are not in the maps)."""
        if self._king_threatened(color):
            return True
        board = self._board
        opponent = color.opposite
        if not (board.has_king(color) and board.has_king(opponent)):
            return False
        enemy_king = board.king(opponent)
        return self._generator.reaches(enemy_king, board.king_square(color))
