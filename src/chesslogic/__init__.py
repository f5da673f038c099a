"""Rules engine for standard chess."""

from chesslogic.core import Color, GameOverReason, GameResult, PieceKind
from chesslogic.game import (
    GameOverError,
    GameSettings,
    GameState,
    InvalidMoveError,
    MoveRecord,
)

__all__ = [
    "Color",
    "GameOverError",
    "GameOverReason",
    "GameResult",
    "GameSettings",
    "GameState",
    "InvalidMoveError",
    "MoveRecord",
    "PieceKind",
]
