"""Game state: the single authority over board, turn and termination."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from chesslogic.core.attacks import check_state
from chesslogic.core.board import Board
from chesslogic.core.enums import Color, GameOverReason, GameResult, PieceKind
from chesslogic.core.models import (
    IN_PROGRESS,
    CheckState,
    GameStatus,
    LastMove,
    SafeSquares,
)
from chesslogic.core.move_generator import MoveGenerator
from chesslogic.core.notation import (
    board_to_fen,
    check_suffix,
    move_to_san,
    parse_fen,
    position_key,
)
from chesslogic.core.piece import Piece
from chesslogic.core.rules import Rules
from chesslogic.core.types import Coords, are_coords_valid, coords_name, is_square_dark
from chesslogic.game.errors import GameOverError, InvalidMoveError
from chesslogic.game.settings import GameSettings

_LOGGER = logging.getLogger(__name__)

PROMOTION_KINDS = frozenset(
    {PieceKind.KNIGHT, PieceKind.BISHOP, PieceKind.ROOK, PieceKind.QUEEN}
)

_PROMOTION_CHARS: dict[str, PieceKind] = {
    "N": PieceKind.KNIGHT,
    "B": PieceKind.BISHOP,
    "R": PieceKind.ROOK,
    "Q": PieceKind.QUEEN,
}

PromotionChoice = PieceKind | str | None


@dataclass
class MoveRecord:
    """A single entry in the move history."""

    last_move: LastMove
    san: str
    fen_after: str
    was_check: bool = False
    was_capture: bool = False
    promotion: PieceKind | None = None


class GameState:
    """One game of chess: board, side to move, clocks and termination.

    All state changes go through :meth:`move`.  Everything else is a
    read-only view recomputed after each successful move.
    """

    def __init__(
        self,
        fen: str | None = None,
        settings: GameSettings | None = None,
    ) -> None:
        self.settings = settings or GameSettings()

        if fen is None:
            self._board = Board.initial()
            self._side_to_move = Color.WHITE
            self._last_move: LastMove | None = None
            self._halfmove_clock = 0
            self._fullmove_number = 1
        else:
            parsed = parse_fen(fen)
            self._board = parsed.board
            self._side_to_move = parsed.side_to_move
            self._last_move = parsed.last_move
            self._halfmove_clock = parsed.halfmove_clock
            self._fullmove_number = parsed.fullmove_number

        self._check_state = CheckState()
        self._safe_squares: SafeSquares = {}
        self._fen = ""
        self._status: GameStatus = IN_PROGRESS
        self._repetitions: dict[str, int] = {}
        self._history: list[MoveRecord] = []
        self._refresh()

    # ── Move application ─────────────────────────────────────────────────

    def move(
        self,
        prev_x: int,
        prev_y: int,
        new_x: int,
        new_y: int,
        promotion: PromotionChoice = None,
    ) -> MoveRecord | None:
        """Apply a move from ``(prev_x, prev_y)`` to ``(new_x, new_y)``.

        Returns ``None`` without touching anything when the coordinates are
        off the board or the source holds no piece of the side to move.

        Raises:
            GameOverError: the game has already ended.
            InvalidMoveError: the destination is not a legal one.
        """
        if self._status.is_over:
            raise GameOverError(f"Game is over: {self._status.message}")

        if not (are_coords_valid(prev_x, prev_y) and are_coords_valid(new_x, new_y)):
            _LOGGER.debug(
                "Ignoring off-board move (%d, %d) -> (%d, %d)",
                prev_x,
                prev_y,
                new_x,
                new_y,
            )
            return None

        board = self._board
        source: Coords = (prev_x, prev_y)
        target: Coords = (new_x, new_y)
        piece = board[source]
        if piece is None or piece.color != self._side_to_move:
            _LOGGER.debug("Ignoring move from %s: no own piece", coords_name(source))
            return None

        if target not in self._safe_squares.get(source, ()):
            raise InvalidMoveError(
                f"Invalid move: {coords_name(source)}{coords_name(target)}"
            )

        promotion_kind: PieceKind | None = None
        if piece.kind == PieceKind.PAWN and target[0] == piece.color.opposite.home_row:
            promotion_kind = self._resolve_promotion(promotion)

        san = move_to_san(board, self._safe_squares, source, target, promotion_kind)
        captured = board[target]
        en_passant_victim = self._en_passant_victim(piece, source, target)
        was_capture = captured is not None or en_passant_victim is not None

        # -- Mutation starts here; every precondition has passed. --
        if piece.tracks_moves:
            piece.mark_moved()

        if was_capture or piece.kind == PieceKind.PAWN:
            self._halfmove_clock = 0
        else:
            self._halfmove_clock += 1

        if piece.kind == PieceKind.KING and abs(target[1] - source[1]) == 2:
            self._relocate_castling_rook(source, target)
        if en_passant_victim is not None:
            board[en_passant_victim] = None

        board[target] = (
            Piece(piece.color, promotion_kind) if promotion_kind is not None else piece
        )
        board[source] = None

        self._last_move = LastMove(source, target, piece)
        if self._side_to_move == Color.BLACK:
            self._fullmove_number += 1
        self._side_to_move = self._side_to_move.opposite
        self._refresh()

        record = MoveRecord(
            last_move=self._last_move,
            san=san
            + check_suffix(self._check_state.is_in_check, bool(self._safe_squares)),
            fen_after=self._fen,
            was_check=self._check_state.is_in_check,
            was_capture=was_capture,
            promotion=promotion_kind,
        )
        self._history.append(record)
        _LOGGER.debug("Played %s -> %s", record.san, record.fen_after)
        if self._status.is_over:
            _LOGGER.info("Game over: %s", self._status.message)
        return record

    # ── Special-move helpers (private) ───────────────────────────────────

    def _relocate_castling_rook(self, king_from: Coords, king_to: Coords) -> None:
        row = king_from[0]
        king_side = king_to[1] > king_from[1]
        rook_from = (row, 7 if king_side else 0)
        rook_to = (row, 5 if king_side else 3)
        rook = self._board[rook_from]
        assert rook is not None and rook.kind == PieceKind.ROOK
        self._board[rook_to] = rook
        self._board[rook_from] = None
        rook.mark_moved()

    def _en_passant_victim(
        self, piece: Piece, source: Coords, target: Coords
    ) -> Coords | None:
        """Square of the pawn taken en passant by this move, if any."""
        last = self._last_move
        if (
            piece.kind != PieceKind.PAWN
            or source[1] == target[1]
            or not self._board.is_empty(target)
            or last is None
            or not last.is_double_pawn_push
        ):
            return None
        if last.to_coords == (source[0], target[1]):
            return last.to_coords
        return None

    @staticmethod
    def _resolve_promotion(choice: PromotionChoice) -> PieceKind:
        kind: PieceKind | None = None
        if isinstance(choice, PieceKind):
            kind = choice
        elif isinstance(choice, str):
            kind = _PROMOTION_CHARS.get(choice.upper())

        if kind in PROMOTION_KINDS:
            return kind  # type: ignore[return-value]
        if choice is not None:
            _LOGGER.warning(
                "Unrecognised promotion choice %r, promoting to queen", choice
            )
        return PieceKind.QUEEN

    # ── Recalculation ────────────────────────────────────────────────────

    def _refresh(self) -> None:
        """Recompute every derived view for the side to move."""
        board = self._board
        side = self._side_to_move

        self._check_state = check_state(board, side)
        self._safe_squares = MoveGenerator(board, self._last_move).safe_squares(side)
        self._fen = board_to_fen(
            board,
            side,
            self._last_move,
            self._halfmove_clock,
            self._fullmove_number,
        )

        key = position_key(self._fen)
        self._repetitions[key] = min(
            self._repetitions.get(key, 0) + 1, self.settings.repetition_limit
        )

        self._status = Rules.game_status(
            board,
            side,
            self._safe_squares,
            self._check_state,
            repetitions=self._repetitions[key],
            halfmove_clock=self._halfmove_clock,
            fifty_move_limit=self.settings.fifty_move_limit,
            repetition_limit=self.settings.repetition_limit,
        )

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def board_view(self) -> list[list[str | None]]:
        """8x8 grid of FEN characters (``None`` for empty), row 0 = rank 1."""
        return self._board.view()

    @property
    def side_to_move(self) -> Color:
        return self._side_to_move

    @property
    def safe_squares(self) -> SafeSquares:
        """Legal destinations per source square for the side to move."""
        return {source: list(targets) for source, targets in self._safe_squares.items()}

    @property
    def check_state(self) -> CheckState:
        return self._check_state

    @property
    def last_move(self) -> LastMove | None:
        return self._last_move

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def is_game_over(self) -> bool:
        return self._status.is_over

    @property
    def game_over_message(self) -> str:
        return self._status.message

    @property
    def result(self) -> GameResult:
        return self._status.result

    @property
    def game_over_reason(self) -> GameOverReason | None:
        return self._status.reason

    @property
    def fen(self) -> str:
        return self._fen

    @property
    def halfmove_clock(self) -> int:
        """Plies since the last capture or pawn move."""
        return self._halfmove_clock

    @property
    def fullmove_number(self) -> int:
        return self._fullmove_number

    @property
    def move_history(self) -> tuple[MoveRecord, ...]:
        return tuple(self._history)

    @property
    def ply_count(self) -> int:
        return len(self._history)

    def repetition_count(self) -> int:
        """How many times the current position has occurred (capped)."""
        return self._repetitions.get(position_key(self._fen), 0)

    @staticmethod
    def is_square_dark(row: int, col: int) -> bool:
        return is_square_dark(row, col)
