"""High-level chess rules: checkmate, stalemate, draw detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chesslogic.core.enums import Color, GameOverReason, GameResult, PieceKind
from chesslogic.core.models import IN_PROGRESS, CheckState, GameStatus, SafeSquares
from chesslogic.core.types import is_square_dark

if TYPE_CHECKING:
    from chesslogic.core.board import Board

DEFAULT_FIFTY_MOVE_LIMIT = 50
DEFAULT_REPETITION_LIMIT = 3

_MINOR_KINDS = frozenset({PieceKind.KNIGHT, PieceKind.BISHOP})


class Rules:
    """Static rule-checker over the board and the bookkeeping around it."""

    # Every draw here is automatic: nothing is left for a player to claim.

    @staticmethod
    def is_insufficient_material(board: Board) -> bool:
        """K vs K, K+minor vs K, K+NN vs K, and bishops all on one square colour."""
        material: dict[Color, list[tuple[tuple[int, int], PieceKind]]] = {
            Color.WHITE: [],
            Color.BLACK: [],
        }
        for coords, piece in board.pieces():
            if piece.kind == PieceKind.KING:
                continue
            if piece.kind not in _MINOR_KINDS:
                return False
            material[piece.color].append((coords, piece.kind))

        white = material[Color.WHITE]
        black = material[Color.BLACK]
        everything = white + black

        # K vs K, K+minor vs K
        if len(everything) <= 1:
            return True

        # Only bishops left, all on the same square colour
        if all(kind == PieceKind.BISHOP for _, kind in everything):
            shades = {is_square_dark(*coords) for coords, _ in everything}
            return len(shades) == 1

        # K+NN vs K
        for side, other in ((white, black), (black, white)):
            if (
                not other
                and len(side) == 2
                and all(kind == PieceKind.KNIGHT for _, kind in side)
            ):
                return True

        return False

    @staticmethod
    def is_fifty_move_rule(
        halfmove_clock: int, limit: int = DEFAULT_FIFTY_MOVE_LIMIT
    ) -> bool:
        return halfmove_clock >= 2 * limit  # plies

    @staticmethod
    def is_repetition(repetitions: int, limit: int = DEFAULT_REPETITION_LIMIT) -> bool:
        return repetitions >= limit

    @staticmethod
    def game_status(
        board: Board,
        side_to_move: Color,
        safe_squares: SafeSquares,
        check_state: CheckState,
        *,
        repetitions: int = 1,
        halfmove_clock: int = 0,
        fifty_move_limit: int = DEFAULT_FIFTY_MOVE_LIMIT,
        repetition_limit: int = DEFAULT_REPETITION_LIMIT,
    ) -> GameStatus:
        """Classify the position; the first matching rule wins.

        Order: insufficient material, no legal moves (checkmate or
        stalemate), repetition, fifty-move rule.
        """
        if Rules.is_insufficient_material(board):
            return GameStatus(
                GameResult.DRAW,
                GameOverReason.INSUFFICIENT_MATERIAL,
                "Draw due to insufficient material",
            )

        if not safe_squares:
            if check_state.is_in_check:
                winner = side_to_move.opposite
                result = (
                    GameResult.WHITE_WINS
                    if winner == Color.WHITE
                    else GameResult.BLACK_WINS
                )
                return GameStatus(
                    result,
                    GameOverReason.CHECKMATE,
                    f"{winner.name.capitalize()} won by checkmate",
                )
            return GameStatus(GameResult.DRAW, GameOverReason.STALEMATE, "Stalemate")

        if Rules.is_repetition(repetitions, repetition_limit):
            return GameStatus(
                GameResult.DRAW,
                GameOverReason.THREEFOLD_REPETITION,
                "Draw due to threefold repetition",
            )

        if Rules.is_fifty_move_rule(halfmove_clock, fifty_move_limit):
            return GameStatus(
                GameResult.DRAW,
                GameOverReason.FIFTY_MOVE_RULE,
                "Draw due to fifty-move rule",
            )

        return IN_PROGRESS
