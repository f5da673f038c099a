"""Notation package: FEN and SAN."""

from chesslogic.core.notation.fen import (
    STARTING_FEN,
    ParsedFen,
    board_to_fen,
    castling_availability,
    en_passant_field,
    parse_fen,
    position_key,
)
from chesslogic.core.notation.san import check_suffix, move_to_san

__all__ = [
    "STARTING_FEN",
    "ParsedFen",
    "board_to_fen",
    "castling_availability",
    "check_suffix",
    "en_passant_field",
    "move_to_san",
    "parse_fen",
    "position_key",
]
