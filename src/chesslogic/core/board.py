"""Board - piece placement on an 8x8 grid."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from chesslogic.core.enums import Color, PieceKind
from chesslogic.core.piece import Piece
from chesslogic.core.types import BOARD_SIZE, Coords

_BACK_RANK: tuple[PieceKind, ...] = (
    PieceKind.ROOK,
    PieceKind.KNIGHT,
    PieceKind.BISHOP,
    PieceKind.QUEEN,
    PieceKind.KING,
    PieceKind.BISHOP,
    PieceKind.KNIGHT,
    PieceKind.ROOK,
)


class Board:
    """Mutable 8x8 grid of optional pieces, indexed by ``(row, col)``."""

    __slots__ = ("_grid",)

    def __init__(self) -> None:
        self._grid: list[list[Piece | None]] = [
            [None] * BOARD_SIZE for _ in range(BOARD_SIZE)
        ]

    # -- Element access -----------------------------------------------------

    def __getitem__(self, coords: Coords) -> Piece | None:
        row, col = coords
        return self._grid[row][col]

    def __setitem__(self, coords: Coords, piece: Piece | None) -> None:
        row, col = coords
        self._grid[row][col] = piece

    def is_empty(self, coords: Coords) -> bool:
        return self[coords] is None

    # -- Query helpers ------------------------------------------------------

    def pieces(self, color: Color | None = None) -> Iterator[tuple[Coords, Piece]]:
        """Occupied squares in row-major order, optionally for one colour."""
        for row, rank in enumerate(self._grid):
            for col, piece in enumerate(rank):
                if piece is not None and (color is None or piece.color == color):
                    yield (row, col), piece

    def find_king(self, color: Color) -> Coords:
        """Return the single king square for *color*."""
        for coords, piece in self.pieces(color):
            if piece.kind == PieceKind.KING:
                return coords
        raise ValueError(f"No {color.name} king on board")

    def view(self) -> list[list[str | None]]:
        """Read-only snapshot: FEN character per square, ``None`` when empty."""
        return [
            [piece.fen_char if piece is not None else None for piece in rank]
            for rank in self._grid
        ]

    # -- Speculative mutation ------------------------------------------------

    @contextmanager
    def simulate(
        self,
        from_coords: Coords,
        to_coords: Coords,
        *,
        remove: Coords | None = None,
    ) -> Iterator[None]:
        """Temporarily move the piece on *from_coords* to *to_coords*.

        *remove* optionally clears one more square for the duration (the pawn
        taken en passant).  Every touched square gets its exact prior content
        back on exit, however the block is left.
        """
        piece = self[from_coords]
        displaced = self[to_coords]
        removed = self[remove] if remove is not None else None

        if remove is not None:
            self[remove] = None
        self[from_coords] = None
        self[to_coords] = piece
        try:
            yield
        finally:
            self[to_coords] = displaced
            self[from_coords] = piece
            if remove is not None:
                self[remove] = removed

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls()
        for col, kind in enumerate(_BACK_RANK):
            b[(0, col)] = Piece(Color.WHITE, kind)
            b[(1, col)] = Piece(Color.WHITE, PieceKind.PAWN)
            b[(6, col)] = Piece(Color.BLACK, PieceKind.PAWN)
            b[(7, col)] = Piece(Color.BLACK, kind)
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __repr__(self) -> str:
        rows: list[str] = []
        for row in range(BOARD_SIZE - 1, -1, -1):
            cells = [str(p) if p else "." for p in self._grid[row]]
            rows.append(f"{row + 1} {' '.join(cells)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
