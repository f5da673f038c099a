"""FEN serialization, repetition keys and FEN parsing."""

from __future__ import annotations

from dataclasses import dataclass

from chesslogic.core.board import Board
from chesslogic.core.enums import Color, PieceKind
from chesslogic.core.models import LastMove
from chesslogic.core.piece import Piece
from chesslogic.core.types import BOARD_SIZE, coords_name, parse_coords

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_KEY_FIELDS = 4
_CASTLING_ORDER = "KQkq"


@dataclass(slots=True)
class ParsedFen:
    """Everything a game needs to resume from a FEN string."""

    board: Board
    side_to_move: Color
    last_move: LastMove | None
    halfmove_clock: int
    fullmove_number: int


# ── Serialisation ───────────────────────────────────────────────────────────


def board_to_fen(
    board: Board,
    side_to_move: Color,
    last_move: LastMove | None,
    halfmove_clock: int,
    fullmove_number: int,
) -> str:
    """Serialise a position to FEN.

    *halfmove_clock* counts plies since the last capture or pawn move.
    """
    rows: list[str] = []
    for row in range(BOARD_SIZE - 1, -1, -1):
        empty = 0
        text = ""
        for col in range(BOARD_SIZE):
            piece = board[(row, col)]
            if piece is None:
                empty += 1
                continue
            if empty:
                text += str(empty)
                empty = 0
            text += piece.fen_char
        if empty:
            text += str(empty)
        rows.append(text)

    side = "w" if side_to_move == Color.WHITE else "b"
    return (
        f"{'/'.join(rows)} {side} {castling_availability(board)} "
        f"{en_passant_field(last_move)} {halfmove_clock} {fullmove_number}"
    )


def castling_availability(board: Board) -> str:
    """``KQkq`` subset for unmoved kings with unmoved corner rooks, or ``-``."""
    rights = ""
    for color in (Color.WHITE, Color.BLACK):
        row = color.home_row
        king = board[(row, 4)]
        if not _is_unmoved(king, color, PieceKind.KING):
            continue
        side_rights = ""
        if _is_unmoved(board[(row, 7)], color, PieceKind.ROOK):
            side_rights += "k"
        if _is_unmoved(board[(row, 0)], color, PieceKind.ROOK):
            side_rights += "q"
        rights += side_rights.upper() if color == Color.WHITE else side_rights
    return rights or "-"


def en_passant_field(last_move: LastMove | None) -> str:
    """Square behind a pawn that just advanced two rows, else ``-``."""
    if last_move is None or not last_move.is_double_pawn_push:
        return "-"
    from_row, col = last_move.from_coords
    to_row = last_move.to_coords[0]
    return coords_name(((from_row + to_row) // 2, col))


def position_key(fen: str) -> str:
    """Repetition key: placement, side, castling and en passant (no clocks)."""
    return " ".join(fen.split()[:_KEY_FIELDS])


def _is_unmoved(piece: Piece | None, color: Color, kind: PieceKind) -> bool:
    return (
        piece is not None
        and piece.color == color
        and piece.kind == kind
        and not piece.has_moved
    )


# ── Parsing ─────────────────────────────────────────────────────────────────


def parse_fen(fen: str) -> ParsedFen:
    """Parse a FEN string, rebuilding ``has_moved`` flags and the last move."""
    parts = fen.split()
    if not (4 <= len(parts) <= 6):
        raise ValueError(f"Invalid FEN (need 4-6 fields): {fen!r}")

    placement, side_part, castling_part, ep_part = parts[:4]

    # 1. Piece placement
    ranks = placement.split("/")
    if len(ranks) != BOARD_SIZE:
        raise ValueError(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    board = Board()
    for rank_idx, rank_text in enumerate(ranks):
        row = BOARD_SIZE - 1 - rank_idx
        col = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= BOARD_SIZE):
                    raise ValueError(f"Invalid FEN digit {ch!r}: {fen!r}")
                col += step
            else:
                if col >= BOARD_SIZE:
                    raise ValueError(f"Invalid FEN rank width: {fen!r}")
                board[(row, col)] = Piece.from_char(ch)
                col += 1
            if col > BOARD_SIZE:
                raise ValueError(f"Invalid FEN rank width: {fen!r}")
        if col != BOARD_SIZE:
            raise ValueError(f"Invalid FEN rank width: {fen!r}")

    for color in (Color.WHITE, Color.BLACK):
        kings = [p for _, p in board.pieces(color) if p.kind == PieceKind.KING]
        if len(kings) != 1:
            raise ValueError(
                f"Invalid FEN: need exactly one {color.name.lower()} king: {fen!r}"
            )

    # 2. Side to move
    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise ValueError(f"Invalid FEN side-to-move field: {side_part!r}")

    # 3. Castling
    if castling_part != "-" and (
        any(ch not in _CASTLING_ORDER for ch in castling_part)
        or len(set(castling_part)) != len(castling_part)
    ):
        raise ValueError(f"Invalid FEN castling field: {castling_part!r}")
    rights = set() if castling_part == "-" else set(castling_part)
    _restore_moved_flags(board, rights)

    # 4. En passant
    last_move = None
    if ep_part != "-":
        last_move = _last_move_from_en_passant(board, side, ep_part)

    # 5–6. Clocks (optional)
    halfmove = _parse_counter(parts, 4, default=0, minimum=0, name="halfmove clock")
    fullmove = _parse_counter(parts, 5, default=1, minimum=1, name="fullmove number")

    return ParsedFen(board, side, last_move, halfmove, fullmove)


def _restore_moved_flags(board: Board, rights: set[str]) -> None:
    for color in (Color.WHITE, Color.BLACK):
        home = color.home_row
        pawn_row = home + color.forward
        king_side, queen_side = ("K", "Q") if color == Color.WHITE else ("k", "q")
        unmoved_rooks = set()
        if king_side in rights:
            unmoved_rooks.add((home, 7))
        if queen_side in rights:
            unmoved_rooks.add((home, 0))

        for coords, piece in board.pieces(color):
            if piece.kind == PieceKind.PAWN and coords[0] != pawn_row:
                piece.mark_moved()
            elif piece.kind == PieceKind.KING and (
                coords != (home, 4) or not unmoved_rooks
            ):
                piece.mark_moved()
            elif piece.kind == PieceKind.ROOK and coords not in unmoved_rooks:
                piece.mark_moved()


def _last_move_from_en_passant(board: Board, side: Color, ep_part: str) -> LastMove:
    try:
        ep_row, ep_col = parse_coords(ep_part)
    except ValueError:
        raise ValueError(f"Invalid FEN en-passant square: {ep_part!r}") from None

    mover = side.opposite
    expected_row = mover.home_row + 2 * mover.forward
    if ep_row != expected_row:
        raise ValueError(f"Invalid FEN en-passant square for side-to-move: {ep_part!r}")

    to_coords = (ep_row + mover.forward, ep_col)
    pawn = board[to_coords]
    if pawn is None or pawn.kind != PieceKind.PAWN or pawn.color != mover:
        raise ValueError(f"Invalid FEN en-passant square, no pawn ahead: {ep_part!r}")
    return LastMove((ep_row - mover.forward, ep_col), to_coords, pawn)


def _parse_counter(
    parts: list[str], index: int, *, default: int, minimum: int, name: str
) -> int:
    if len(parts) <= index:
        return default
    try:
        value = int(parts[index])
    except ValueError:
        raise ValueError(f"Invalid FEN {name}: {parts[index]!r}") from None
    if value < minimum:
        raise ValueError(f"Invalid FEN {name}: {parts[index]!r}")
    return value
