"""Shared core-layer data models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from chesslogic.core.enums import GameOverReason, GameResult, PieceKind
from chesslogic.core.piece import Piece
from chesslogic.core.types import Coords

SafeSquares: TypeAlias = dict[Coords, list[Coords]]


@dataclass(frozen=True, slots=True)
class LastMove:
    """The most recent move: where it came from, where it went, what moved."""

    from_coords: Coords
    to_coords: Coords
    piece: Piece

    @property
    def is_double_pawn_push(self) -> bool:
        return (
            self.piece.kind == PieceKind.PAWN
            and abs(self.to_coords[0] - self.from_coords[0]) == 2
        )


@dataclass(frozen=True, slots=True)
class CheckState:
    """Whether the side to move is in check, and where its king stands."""

    is_in_check: bool = False
    king_coords: Coords | None = None


NOT_IN_CHECK = CheckState()


@dataclass(frozen=True, slots=True)
class GameStatus:
    """Termination status: result, reason and a human-readable message."""

    result: GameResult = GameResult.IN_PROGRESS
    reason: GameOverReason | None = None
    message: str = ""

    @property
    def is_over(self) -> bool:
        return self.result != GameResult.IN_PROGRESS


IN_PROGRESS = GameStatus()
