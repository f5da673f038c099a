"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from chesslogic.core.types import parse_coords
from chesslogic.game.state import GameState, MoveRecord

PlayFn = Callable[..., list[MoveRecord]]


def play_moves(game: GameState, *moves: str) -> list[MoveRecord]:
    """Play long-algebraic moves like ``"e2e4"`` or ``"a7a8n"``."""
    records: list[MoveRecord] = []
    for text in moves:
        source = parse_coords(text[:2])
        target = parse_coords(text[2:4])
        record = game.move(*source, *target, text[4:] or None)
        assert record is not None, f"move {text} was ignored"
        records.append(record)
    return records


@pytest.fixture
def game() -> GameState:
    """A fresh game from the standard starting position."""
    return GameState()


@pytest.fixture
def play() -> PlayFn:
    return play_moves
