"""Rule thresholds for a game."""

from __future__ import annotations

from dataclasses import dataclass

from chesslogic.core.rules import DEFAULT_FIFTY_MOVE_LIMIT, DEFAULT_REPETITION_LIMIT


@dataclass(frozen=True)
class GameSettings:
    """All configurable rule thresholds; defaults give standard chess."""

    # Full moves without a capture or pawn move before the game is drawn
    fifty_move_limit: int = DEFAULT_FIFTY_MOVE_LIMIT

    # Occurrences of one position before the game is drawn
    repetition_limit: int = DEFAULT_REPETITION_LIMIT

    def __post_init__(self) -> None:
        if self.fifty_move_limit < 1:
            raise ValueError(f"fifty_move_limit must be >= 1: {self.fifty_move_limit}")
        if self.repetition_limit < 2:
            raise ValueError(f"repetition_limit must be >= 2: {self.repetition_limit}")
