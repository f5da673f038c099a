"""Game layer: move execution and history on top of the core.

Quick start::

    from chesslogic.game import GameState

    game = GameState()
    game.move(1, 4, 3, 4)  # e2-e4
    print(game.fen)
"""

from chesslogic.game.errors import ChessError, GameOverError, InvalidMoveError
from chesslogic.game.settings import GameSettings
from chesslogic.game.state import PROMOTION_KINDS, GameState, MoveRecord

__all__ = [
    "PROMOTION_KINDS",
    # Errors
    "ChessError",
    "GameOverError",
    "InvalidMoveError",
    # Concrete
    "GameSettings",
    "GameState",
    "MoveRecord",
]
