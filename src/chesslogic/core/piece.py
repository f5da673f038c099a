"""Piece model: colour, kind, movement template and notation character."""

from __future__ import annotations

from chesslogic.core.enums import Color, PieceKind
from chesslogic.core.types import Coords

# FEN character ↔ (Color, PieceKind)
_CHAR_MAP: dict[str, tuple[Color, PieceKind]] = {
    "P": (Color.WHITE, PieceKind.PAWN),
    "N": (Color.WHITE, PieceKind.KNIGHT),
    "B": (Color.WHITE, PieceKind.BISHOP),
    "R": (Color.WHITE, PieceKind.ROOK),
    "Q": (Color.WHITE, PieceKind.QUEEN),
    "K": (Color.WHITE, PieceKind.KING),
    "p": (Color.BLACK, PieceKind.PAWN),
    "n": (Color.BLACK, PieceKind.KNIGHT),
    "b": (Color.BLACK, PieceKind.BISHOP),
    "r": (Color.BLACK, PieceKind.ROOK),
    "q": (Color.BLACK, PieceKind.QUEEN),
    "k": (Color.BLACK, PieceKind.KING),
}

_FEN_CHARS: dict[tuple[Color, PieceKind], str] = {v: k for k, v in _CHAR_MAP.items()}

# Direction vectors are (Δrow, Δcol).
KNIGHT_OFFSETS: tuple[Coords, ...] = (
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
)
BISHOP_DIRS: tuple[Coords, ...] = ((1, 1), (1, -1), (-1, 1), (-1, -1))
ROOK_DIRS: tuple[Coords, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))
QUEEN_DIRS: tuple[Coords, ...] = BISHOP_DIRS + ROOK_DIRS
KING_OFFSETS: tuple[Coords, ...] = QUEEN_DIRS

_FIXED_TEMPLATES: dict[PieceKind, tuple[Coords, ...]] = {
    PieceKind.KNIGHT: KNIGHT_OFFSETS,
    PieceKind.BISHOP: BISHOP_DIRS,
    PieceKind.ROOK: ROOK_DIRS,
    PieceKind.QUEEN: QUEEN_DIRS,
    PieceKind.KING: KING_OFFSETS,
}

SLIDING_KINDS = frozenset({PieceKind.BISHOP, PieceKind.ROOK, PieceKind.QUEEN})
MOVE_TRACKED_KINDS = frozenset({PieceKind.KING, PieceKind.PAWN, PieceKind.ROOK})


def pawn_directions(color: Color, has_moved: bool) -> tuple[Coords, ...]:
    """Pawn template: forward step(s) first, then the two capture diagonals."""
    fwd = color.forward
    if has_moved:
        return ((fwd, 0), (fwd, 1), (fwd, -1))
    return ((fwd, 0), (2 * fwd, 0), (fwd, 1), (fwd, -1))


class Piece:
    """A chess piece.

    Colour and kind never change.  King, pawn and rook additionally carry a
    ``has_moved`` flag which can only ever go from ``False`` to ``True``.
    """

    __slots__ = ("color", "kind", "_has_moved")

    def __init__(self, color: Color, kind: PieceKind, has_moved: bool = False) -> None:
        self.color = color
        self.kind = kind
        self._has_moved = False
        if has_moved:
            self.mark_moved()

    # ── Move tracking ────────────────────────────────────────────────────

    @property
    def has_moved(self) -> bool:
        return self._has_moved

    @property
    def tracks_moves(self) -> bool:
        return self.kind in MOVE_TRACKED_KINDS

    def mark_moved(self) -> None:
        """Set ``has_moved``; there is no way back."""
        if not self.tracks_moves:
            raise ValueError(f"{self.kind.name.lower()} does not track moves")
        self._has_moved = True

    # ── Movement ─────────────────────────────────────────────────────────

    @property
    def directions(self) -> tuple[Coords, ...]:
        """Movement template as (Δrow, Δcol) vectors."""
        if self.kind == PieceKind.PAWN:
            return pawn_directions(self.color, self._has_moved)
        return _FIXED_TEMPLATES[self.kind]

    @property
    def is_sliding(self) -> bool:
        """Whether the template vectors repeat until blocked."""
        return self.kind in SLIDING_KINDS

    # ── Serialisation ────────────────────────────────────────────────────

    @property
    def fen_char(self) -> str:
        """FEN character (uppercase = white, lowercase = black)."""
        return _FEN_CHARS[(self.color, self.kind)]

    def __str__(self) -> str:
        return self.fen_char

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Create piece from FEN character, e.g. 'N' → white knight."""
        try:
            color, kind = _CHAR_MAP[char]
        except KeyError:
            raise ValueError(f"Invalid piece character: {char!r}") from None
        return cls(color, kind)

    # ── Dunder helpers ───────────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Piece):
            return NotImplemented
        return (self.color, self.kind, self._has_moved) == (
            other.color,
            other.kind,
            other._has_moved,
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        moved = ", moved" if self._has_moved else ""
        return f"Piece({self.color.name}, {self.kind.name}{moved})"
