"""Exceptions raised by the game layer."""

from __future__ import annotations


class ChessError(Exception):
    """Base class for rejected game commands."""


class InvalidMoveError(ChessError, ValueError):
    """The destination is not among the source piece's legal destinations."""


class GameOverError(ChessError, RuntimeError):
    """A move was requested after the game had ended."""
