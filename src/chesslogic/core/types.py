"""Coordinate type alias and helpers.

Board layout: ``(row, col)`` with row 0 = rank 1 (White's back rank) and
col 0 = file a.  So ``(0, 0)`` is a1 and ``(7, 7)`` is h8.
"""

from __future__ import annotations

from typing import TypeAlias

Coords: TypeAlias = tuple[int, int]

BOARD_SIZE = 8
_FILES = "abcdefgh"


def are_coords_valid(row: int, col: int) -> bool:
    """Whether ``(row, col)`` lies on the board."""
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def is_square_dark(row: int, col: int) -> bool:
    """Square colour for rendering; a1 is dark."""
    return (row + col) % 2 == 0


def coords_name(coords: Coords) -> str:
    """Human-readable name, e.g. (0, 0) → 'a1', (3, 4) → 'e4'."""
    row, col = coords
    return _FILES[col] + str(row + 1)


def parse_coords(name: str) -> Coords:
    """Parse square name, e.g. 'e4' → (3, 4)."""
    if len(name) != 2 or name[0] not in _FILES or name[1] not in "12345678":
        raise ValueError(f"Invalid square name: {name!r}")
    return (int(name[1]) - 1, _FILES.index(name[0]))


# ── Named square constants ──────────────────────────────────────────────────

A1, B1, C1, D1, E1, F1, G1, H1 = ((0, c) for c in range(8))
A2, B2, C2, D2, E2, F2, G2, H2 = ((1, c) for c in range(8))
A3, B3, C3, D3, E3, F3, G3, H3 = ((2, c) for c in range(8))
A4, B4, C4, D4, E4, F4, G4, H4 = ((3, c) for c in range(8))
A5, B5, C5, D5, E5, F5, G5, H5 = ((4, c) for c in range(8))
A6, B6, C6, D6, E6, F6, G6, H6 = ((5, c) for c in range(8))
A7, B7, C7, D7, E7, F7, G7, H7 = ((6, c) for c in range(8))
A8, B8, C8, D8, E8, F8, G8, H8 = ((7, c) for c in range(8))
