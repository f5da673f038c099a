"""Core domain layer: pure chess logic with zero external dependencies.

Quick start::

    from chesslogic.core import Board, Color, MoveGenerator

    board = Board.initial()
    gen = MoveGenerator(board)
    for source, targets in gen.safe_squares(Color.WHITE).items():
        print(source, targets)
"""

from chesslogic.core.attacks import check_state, find_attacked_king, is_attacked
from chesslogic.core.board import Board
from chesslogic.core.enums import Color, GameOverReason, GameResult, PieceKind
from chesslogic.core.models import CheckState, GameStatus, LastMove, SafeSquares
from chesslogic.core.move_generator import MoveGenerator
from chesslogic.core.notation import (
    STARTING_FEN,
    board_to_fen,
    move_to_san,
    parse_fen,
    position_key,
)
from chesslogic.core.piece import Piece
from chesslogic.core.rules import Rules
from chesslogic.core.types import (
    Coords,
    are_coords_valid,
    coords_name,
    is_square_dark,
    parse_coords,
)

__all__ = [
    # Enums
    "Color",
    "GameOverReason",
    "GameResult",
    "PieceKind",
    # Types / helpers
    "Coords",
    "are_coords_valid",
    "coords_name",
    "is_square_dark",
    "parse_coords",
    # Domain objects
    "Board",
    "CheckState",
    "GameStatus",
    "LastMove",
    "MoveGenerator",
    "Piece",
    "Rules",
    "SafeSquares",
    # Attack detection
    "check_state",
    "find_attacked_king",
    "is_attacked",
    # Notation
    "STARTING_FEN",
    "board_to_fen",
    "move_to_san",
    "parse_fen",
    "position_key",
]
