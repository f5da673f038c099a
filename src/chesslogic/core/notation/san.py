"""SAN (Standard Algebraic Notation) for the move history."""

from __future__ import annotations

from chesslogic.core.board import Board
from chesslogic.core.enums import PieceKind
from chesslogic.core.models import SafeSquares
from chesslogic.core.types import Coords, coords_name

_SAN_PIECE: dict[PieceKind, str] = {
    PieceKind.KNIGHT: "N",
    PieceKind.BISHOP: "B",
    PieceKind.ROOK: "R",
    PieceKind.QUEEN: "Q",
    PieceKind.KING: "K",
}
_FILES = "abcdefgh"


def move_to_san(
    board: Board,
    safe_squares: SafeSquares,
    from_coords: Coords,
    to_coords: Coords,
    promotion: PieceKind | None = None,
) -> str:
    """SAN for a legal move, without the check suffix.

    *board* and *safe_squares* describe the position before the move.
    """
    piece = board[from_coords]
    assert piece is not None

    col_shift = to_coords[1] - from_coords[1]
    if piece.kind == PieceKind.KING and abs(col_shift) == 2:
        return "O-O" if col_shift > 0 else "O-O-O"

    is_capture = board[to_coords] is not None or (
        piece.kind == PieceKind.PAWN and col_shift != 0
    )

    san = ""
    if piece.kind == PieceKind.PAWN:
        if is_capture:
            san += _FILES[from_coords[1]]
    else:
        san += _SAN_PIECE[piece.kind]

        # Disambiguation
        ambiguous = [
            source
            for source, targets in safe_squares.items()
            if source != from_coords
            and to_coords in targets
            and (other := board[source]) is not None
            and other.kind == piece.kind
            and other.color == piece.color
        ]
        if ambiguous:
            same_file = any(source[1] == from_coords[1] for source in ambiguous)
            same_rank = any(source[0] == from_coords[0] for source in ambiguous)
            if not same_file:
                san += _FILES[from_coords[1]]
            elif not same_rank:
                san += str(from_coords[0] + 1)
            else:
                san += coords_name(from_coords)

    if is_capture:
        san += "x"

    san += coords_name(to_coords)

    if promotion is not None:
        san += "=" + _SAN_PIECE[promotion]

    return san


def check_suffix(is_in_check: bool, has_legal_moves: bool) -> str:
    """``#`` for mate, ``+`` for check, empty otherwise."""
    if not is_in_check:
        return ""
    return "+" if has_legal_moves else "#"
