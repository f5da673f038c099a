"""Attack detection: is a side's king currently attacked?"""

from __future__ import annotations

from typing import TYPE_CHECKING

from chesslogic.core.enums import Color, PieceKind
from chesslogic.core.models import NOT_IN_CHECK, CheckState
from chesslogic.core.types import Coords, are_coords_valid

if TYPE_CHECKING:
    from chesslogic.core.board import Board


def find_attacked_king(board: Board, color: Color) -> Coords | None:
    """Coordinates of *color*'s king if any opposing piece attacks it.

    Walks every opposing piece's movement template.  Single-step pieces test
    one square per vector (pawns only along their capture diagonals); sliding
    pieces follow each ray until the first occupied square.
    """
    for (row, col), piece in board.pieces(color.opposite):
        for d_row, d_col in piece.directions:
            if piece.kind == PieceKind.PAWN and d_col == 0:
                continue

            r, c = row + d_row, col + d_col
            while are_coords_valid(r, c):
                target = board[(r, c)]
                if target is not None:
                    if target.kind == PieceKind.KING and target.color == color:
                        return (r, c)
                    break
                if not piece.is_sliding:
                    break
                r += d_row
                c += d_col
    return None


def is_attacked(board: Board, color: Color) -> bool:
    """Is *color*'s king attacked by the opponent?"""
    return find_attacked_king(board, color) is not None


def check_state(board: Board, color: Color) -> CheckState:
    """Scan the board and describe *color*'s check status."""
    king = find_attacked_king(board, color)
    if king is None:
        return NOT_IN_CHECK
    return CheckState(is_in_check=True, king_coords=king)
