"""Legal move ("safe square") generation."""

from __future__ import annotations

from chesslogic.core.attacks import is_attacked
from chesslogic.core.board import Board
from chesslogic.core.enums import Color, PieceKind
from chesslogic.core.models import LastMove, SafeSquares
from chesslogic.core.piece import Piece
from chesslogic.core.types import Coords, are_coords_valid

_KING_HOME_COL = 4
_KINGSIDE_ROOK_COL = 7
_QUEENSIDE_ROOK_COL = 0


class MoveGenerator:
    """Computes the safe-square map for one side of a :class:`Board`.

    Every candidate is tested by simulating it on the board and scanning for
    an attack on the mover's king.  The board is always restored before a
    result is returned.
    """

    __slots__ = ("_board", "_last_move")

    def __init__(self, board: Board, last_move: LastMove | None = None) -> None:
        self._board = board
        self._last_move = last_move

    # -- Public API ---------------------------------------------------------

    def safe_squares(self, color: Color) -> SafeSquares:
        """Map each of *color*'s pieces to its legal destinations.

        Sources without any legal destination are left out.
        """
        result: SafeSquares = {}
        for coords, piece in list(self._board.pieces(color)):
            destinations = self._template_destinations(coords, piece)

            if piece.kind == PieceKind.KING:
                row = coords[0]
                if self.can_castle(coords, king_side=True):
                    destinations.append((row, _KING_HOME_COL + 2))
                if self.can_castle(coords, king_side=False):
                    destinations.append((row, _KING_HOME_COL - 2))
            elif piece.kind == PieceKind.PAWN:
                ep_target = self.en_passant_target(coords)
                if ep_target is not None:
                    destinations.append(ep_target)

            if destinations:
                result[coords] = destinations
        return result

    def is_position_safe_after_move(
        self,
        from_coords: Coords,
        to_coords: Coords,
        *,
        remove: Coords | None = None,
    ) -> bool:
        """Would the mover's king be safe after *from_coords* → *to_coords*?

        A destination held by a friendly piece is never safe.
        """
        board = self._board
        piece = board[from_coords]
        if piece is None:
            raise ValueError(f"No piece on {from_coords}")
        target = board[to_coords]
        if target is not None and target.color == piece.color:
            return False

        with board.simulate(from_coords, to_coords, remove=remove):
            return not is_attacked(board, piece.color)

    # -- Castling -----------------------------------------------------------

    def can_castle(self, king_coords: Coords, *, king_side: bool) -> bool:
        """Castling eligibility for the king on *king_coords*."""
        board = self._board
        king = board[king_coords]
        if king is None or king.kind != PieceKind.KING or king.has_moved:
            return False

        row = king.color.home_row
        if king_coords != (row, _KING_HOME_COL):
            return False

        rook = board[(row, _KINGSIDE_ROOK_COL if king_side else _QUEENSIDE_ROOK_COL)]
        if (
            rook is None
            or rook.kind != PieceKind.ROOK
            or rook.color != king.color
            or rook.has_moved
        ):
            return False

        if is_attacked(board, king.color):
            return False

        between = range(5, 7) if king_side else range(1, 4)
        if any(not board.is_empty((row, col)) for col in between):
            return False

        step = 1 if king_side else -1
        transit = (row, _KING_HOME_COL + step)
        destination = (row, _KING_HOME_COL + 2 * step)
        return self.is_position_safe_after_move(
            king_coords, transit
        ) and self.is_position_safe_after_move(king_coords, destination)

    # -- En passant ---------------------------------------------------------

    def en_passant_target(self, pawn_coords: Coords) -> Coords | None:
        """Landing square of a legal en-passant capture, if there is one."""
        board = self._board
        last = self._last_move
        pawn = board[pawn_coords]
        if last is None or pawn is None or pawn.kind != PieceKind.PAWN:
            return None
        if not last.is_double_pawn_push or last.piece.color == pawn.color:
            return None
        if board[last.to_coords] is not last.piece:
            return None

        row, col = pawn_coords
        last_row, last_col = last.to_coords
        if row != last_row or abs(col - last_col) != 1:
            return None

        landing = (row + pawn.color.forward, last_col)
        if not board.is_empty(landing):
            return None
        if not self.is_position_safe_after_move(
            pawn_coords, landing, remove=last.to_coords
        ):
            return None
        return landing

    def can_capture_en_passant(self, pawn_coords: Coords) -> bool:
        return self.en_passant_target(pawn_coords) is not None

    # -- Template walk (private) --------------------------------------------

    def _template_destinations(self, coords: Coords, piece: Piece) -> list[Coords]:
        board = self._board
        row, col = coords
        destinations: list[Coords] = []

        for d_row, d_col in piece.directions:
            r, c = row + d_row, col + d_col
            if not are_coords_valid(r, c):
                continue
            target = board[(r, c)]
            if target is not None and target.color == piece.color:
                continue

            if piece.kind == PieceKind.PAWN and not self._pawn_step_allowed(
                coords, piece, d_row, d_col
            ):
                continue

            if not piece.is_sliding:
                if self.is_position_safe_after_move(coords, (r, c)):
                    destinations.append((r, c))
                continue

            while are_coords_valid(r, c):
                target = board[(r, c)]
                if target is not None and target.color == piece.color:
                    break
                if self.is_position_safe_after_move(coords, (r, c)):
                    destinations.append((r, c))
                if target is not None:
                    break
                r += d_row
                c += d_col

        return destinations

    def _pawn_step_allowed(
        self, coords: Coords, pawn: Piece, d_row: int, d_col: int
    ) -> bool:
        board = self._board
        row, col = coords
        target = board[(row + d_row, col + d_col)]

        if d_col != 0:
            # Diagonal: only onto an opposing piece.
            return target is not None and target.color != pawn.color
        if target is not None:
            return False
        if abs(d_row) == 2:
            if pawn.has_moved:
                return False
            return board.is_empty((row + pawn.color.forward, col))
        return True
