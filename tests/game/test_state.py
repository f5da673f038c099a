"""Tests for GameState: move execution, special moves and termination."""

import logging

import pytest

from chesslogic.core.attacks import check_state
from chesslogic.core.enums import Color, GameOverReason, GameResult, PieceKind
from chesslogic.core.notation import STARTING_FEN, parse_fen
from chesslogic.core.types import D5, D6, E1, E2, E3, E4, E5, E8
from chesslogic.game.errors import GameOverError, InvalidMoveError
from chesslogic.game.settings import GameSettings
from chesslogic.game.state import GameState

FOOLS_MATE = ("f2f3", "e7e5", "g2g4", "d8h4")
KNIGHT_SHUFFLE = ("g1f3", "g8f6", "f3g1", "f6g8")


def _snapshot(game: GameState) -> tuple[object, ...]:
    return (
        game.fen,
        game.board_view,
        game.side_to_move,
        game.safe_squares,
        game.last_move,
        game.check_state,
        game.ply_count,
    )


class TestGameStateSetup:
    def test_defaults(self, game: GameState) -> None:
        assert game.side_to_move == Color.WHITE
        assert game.fen == STARTING_FEN
        assert game.last_move is None
        assert not game.check_state.is_in_check
        assert not game.is_game_over
        assert game.game_over_message == ""
        assert game.result == GameResult.IN_PROGRESS
        assert game.ply_count == 0

    def test_board_view(self, game: GameState) -> None:
        view = game.board_view
        assert view[0][4] == "K"
        assert view[7][4] == "k"
        assert view[3][3] is None

    def test_legal_moves_ready(self, game: GameState) -> None:
        safe = game.safe_squares
        assert sum(len(targets) for targets in safe.values()) == 20
        assert E4 in safe[E2]

    def test_from_fen(self) -> None:
        fen = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
        game = GameState(fen)
        assert game.side_to_move == Color.BLACK
        assert game.fen == fen
        assert game.last_move is not None
        assert game.last_move.to_coords == E4

    def test_from_finished_position(self) -> None:
        game = GameState(
            "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
        )
        assert game.is_game_over
        assert game.result == GameResult.BLACK_WINS

    def test_square_colour(self) -> None:
        assert GameState.is_square_dark(0, 0)
        assert not GameState.is_square_dark(0, 1)
        assert GameState.is_square_dark(7, 7)

    def test_accessors_are_copies(self, game: GameState) -> None:
        game.safe_squares[E2].clear()
        game.board_view[1][4] = None
        assert game.safe_squares[E2] == [E3, E4]
        assert game.board_view[1][4] == "P"


class TestGameStateMoves:
    def test_apply_move_records(self, game: GameState, play) -> None:
        (record,) = play(game, "e2e4")
        assert record.san == "e4"
        assert record.fen_after == game.fen
        assert not record.was_capture
        assert game.side_to_move == Color.BLACK
        assert game.ply_count == 1

    def test_last_move(self, game: GameState, play) -> None:
        play(game, "e2e4")
        last = game.last_move
        assert last is not None
        assert last.from_coords == E2
        assert last.to_coords == E4
        assert last.piece.kind == PieceKind.PAWN
        assert last.piece.has_moved

    def test_fen_after_moves(self, game: GameState, play) -> None:
        play(game, "e2e4")
        assert game.fen == (
            "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
        )
        play(game, "e7e5", "g1f3")
        assert game.fen == (
            "rnbqkbnr/pppp1ppp/8/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R b KQkq - 1 2"
        )

    def test_fullmove_after_black(self, game: GameState, play) -> None:
        play(game, "e2e4")
        assert game.fullmove_number == 1
        play(game, "e7e5")
        assert game.fullmove_number == 2

    def test_halfmove_clock(self, game: GameState, play) -> None:
        play(game, "g1f3", "g8f6")
        assert game.halfmove_clock == 2
        play(game, "e2e4")
        assert game.halfmove_clock == 0
        play(game, "f6e4")
        assert game.halfmove_clock == 0

    def test_promotion_choice_ignored_off_last_rank(self, game: GameState) -> None:
        record = game.move(1, 4, 3, 4, "N")
        assert record is not None
        assert record.promotion is None
        assert game.board_view[3][4] == "P"

    def test_move_history(self, game: GameState, play) -> None:
        play(game, "e2e4", "e7e5")
        assert [r.san for r in game.move_history] == ["e4", "e5"]


class TestSilentNoOps:
    @pytest.mark.parametrize(
        "coords",
        [(-1, 0, 1, 0), (1, 4, 8, 4), (1, 4, 3, -1), (9, 9, 9, 9)],
    )
    def test_off_board(
        self, game: GameState, coords: tuple[int, int, int, int]
    ) -> None:
        before = _snapshot(game)
        assert game.move(*coords) is None
        assert _snapshot(game) == before

    def test_empty_square(self, game: GameState) -> None:
        before = _snapshot(game)
        assert game.move(3, 3, 4, 3) is None
        assert _snapshot(game) == before

    def test_opponent_piece(self, game: GameState) -> None:
        before = _snapshot(game)
        assert game.move(6, 4, 4, 4) is None
        assert _snapshot(game) == before

    def test_logged_at_debug(
        self, game: GameState, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="chesslogic.game.state"):
            game.move(3, 3, 4, 3)
        assert "no own piece" in caplog.text


class TestRejectedMoves:
    def test_invalid_destination(self, game: GameState) -> None:
        before = _snapshot(game)
        with pytest.raises(InvalidMoveError, match="e2e5"):
            game.move(1, 4, 4, 4)
        assert _snapshot(game) == before

    def test_invalid_is_value_error(self, game: GameState) -> None:
        with pytest.raises(ValueError):
            game.move(0, 1, 2, 1)

    def test_pinned_piece_cannot_move(self) -> None:
        game = GameState("4k3/4r3/8/8/8/8/4B3/4K3 w - - 0 1")
        with pytest.raises(InvalidMoveError):
            game.move(1, 4, 2, 3)

    def test_move_after_game_over(self, game: GameState, play) -> None:
        play(game, *FOOLS_MATE)
        before = _snapshot(game)
        with pytest.raises(GameOverError, match="Black won by checkmate"):
            game.move(0, 4, 1, 5)
        assert _snapshot(game) == before

    def test_game_over_checked_before_bounds(self, game: GameState, play) -> None:
        play(game, *FOOLS_MATE)
        with pytest.raises(GameOverError):
            game.move(-1, -1, -1, -1)


class TestCheck:
    def test_check_state_after_check(self, game: GameState, play) -> None:
        (*_, record) = play(game, "e2e4", "f7f6", "d1h5")
        assert record.san == "Qh5+"
        assert record.was_check
        assert game.check_state.is_in_check
        assert game.check_state.king_coords == E8

    def test_check_state_matches_rescan(self, game: GameState, play) -> None:
        for move in ("e2e4", "f7f6", "d1h5", "g7g6", "h5g6"):
            play(game, move)
            board = parse_fen(game.fen).board
            assert game.check_state == check_state(board, game.side_to_move)

    def test_check_clears(self, game: GameState, play) -> None:
        play(game, "e2e4", "f7f6", "d1h5", "g7g6")
        assert not game.check_state.is_in_check
        assert game.check_state.king_coords is None

    def test_only_evasions_offered(self, game: GameState, play) -> None:
        play(game, "e2e4", "f7f6", "d1h5")
        assert game.safe_squares == {(6, 6): [(5, 6)]}


class TestCheckmate:
    def test_fools_mate(self, game: GameState, play) -> None:
        records = play(game, *FOOLS_MATE)
        assert game.is_game_over
        assert game.result == GameResult.BLACK_WINS
        assert game.game_over_reason == GameOverReason.CHECKMATE
        assert game.game_over_message == "Black won by checkmate"
        assert game.safe_squares == {}
        assert game.check_state.king_coords == E1
        assert records[-1].san == "Qh4#"

    def test_scholars_mate(self, game: GameState, play) -> None:
        play(game, "e2e4", "e7e5", "f1c4", "b8c6", "d1h5", "g8f6", "h5f7")
        assert game.result == GameResult.WHITE_WINS
        assert game.game_over_message == "White won by checkmate"

    def test_game_over_logged(
        self, game: GameState, play, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="chesslogic.game.state"):
            play(game, *FOOLS_MATE)
        assert "Game over: Black won by checkmate" in caplog.text


class TestCastling:
    def test_kingside(self, game: GameState, play) -> None:
        records = play(
            game, "e2e4", "e7e5", "g1f3", "b8c6", "f1c4", "g8f6", "e1g1"
        )
        view = game.board_view
        assert view[0][6] == "K"
        assert view[0][5] == "R"
        assert view[0][7] is None
        assert view[0][4] is None
        assert records[-1].san == "O-O"
        assert game.fen.split()[2] == "kq"

    def test_queenside_white(self) -> None:
        game = GameState("r3k3/8/8/8/8/8/8/R3K3 w Qq - 0 1")
        record = game.move(0, 4, 0, 2)
        view = game.board_view
        assert view[0][2] == "K"
        assert view[0][3] == "R"
        assert view[0][0] is None
        assert record is not None and record.san == "O-O-O"
        assert game.fen.split()[2] == "q"

    def test_queenside_black(self) -> None:
        game = GameState("r3k3/8/8/8/8/8/8/R3K3 b Qq - 0 1")
        game.move(7, 4, 7, 2)
        view = game.board_view
        assert view[7][2] == "k"
        assert view[7][3] == "r"
        assert game.fen.split()[2] == "Q"

    def test_transit_square_under_attack(self) -> None:
        game = GameState("r3k3/8/8/8/8/8/8/3RK3 b q - 0 1")
        assert (7, 2) not in game.safe_squares[E8]

    def test_rook_move_loses_that_side(self, game: GameState, play) -> None:
        play(game, "h2h4", "a7a5", "h1h3", "a8a6", "h3h1", "a6a8")
        assert game.fen.split()[2] == "Qk"
        assert (0, 6) not in game.safe_squares.get(E1, [])

    def test_king_move_loses_both(self, game: GameState, play) -> None:
        play(game, "e2e4", "e7e5", "e1e2", "e8e7", "e2e1", "e7e8")
        assert game.fen.split()[2] == "-"


class TestEnPassant:
    def test_double_step_is_legal(self, game: GameState) -> None:
        assert E4 in game.safe_squares[E2]

    def test_no_option_without_adjacent_pawn(self, game: GameState, play) -> None:
        play(game, "e2e4")
        for targets in game.safe_squares.values():
            assert E3 not in targets

    def test_capture(self, game: GameState, play) -> None:
        play(game, "e2e4", "a7a6", "e4e5", "d7d5")
        assert D6 in game.safe_squares[E5]
        (record,) = play(game, "e5d6")
        view = game.board_view
        assert view[4][3] is None
        assert view[5][3] == "P"
        assert record.was_capture
        assert record.san == "exd6"
        assert game.halfmove_clock == 0

    def test_black_capture(self, game: GameState, play) -> None:
        play(game, "a2a3", "d7d5", "a3a4", "d5d4", "e2e4")
        assert E3 in game.safe_squares[(3, 3)]
        play(game, "d4e3")
        assert game.board_view[3][4] is None
        assert game.board_view[2][4] == "p"

    def test_only_immediately(self, game: GameState, play) -> None:
        play(game, "e2e4", "a7a6", "e4e5", "d7d5", "h2h3", "h7h6")
        assert D6 not in game.safe_squares[E5]

    def test_single_steps_do_not_count(self, game: GameState, play) -> None:
        play(game, "e2e4", "d7d6", "e4e5", "d6d5")
        assert game.safe_squares[E5] == [(5, 4)]
        assert game.board_view[D5[0]][D5[1]] == "p"


class TestPromotion:
    FEN = "8/P6k/7p/8/8/8/8/4K3 w - - 0 1"

    @pytest.mark.parametrize(
        ("choice", "char", "kind"),
        [
            ("N", "N", PieceKind.KNIGHT),
            ("b", "B", PieceKind.BISHOP),
            (PieceKind.ROOK, "R", PieceKind.ROOK),
            ("Q", "Q", PieceKind.QUEEN),
        ],
    )
    def test_legal_choice(self, choice: object, char: str, kind: PieceKind) -> None:
        game = GameState(self.FEN)
        record = game.move(6, 0, 7, 0, choice)  # type: ignore[arg-type]
        assert record is not None
        assert record.promotion == kind
        assert game.board_view[7][0] == char

    @pytest.mark.parametrize("choice", ["x", "K", "p", PieceKind.KING, None])
    def test_defaults_to_queen(self, choice: object) -> None:
        game = GameState(self.FEN)
        game.move(6, 0, 7, 0, choice)  # type: ignore[arg-type]
        assert game.board_view[7][0] == "Q"

    def test_unrecognised_choice_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        game = GameState(self.FEN)
        with caplog.at_level(logging.WARNING, logger="chesslogic.game.state"):
            game.move(6, 0, 7, 0, "x")
        assert "promoting to queen" in caplog.text

    def test_knight_moves_like_a_knight(self) -> None:
        game = GameState(self.FEN)
        game.move(6, 0, 7, 0, "N")
        game.move(5, 7, 4, 7)
        assert game.safe_squares[(7, 0)] == [(6, 2), (5, 1)]

    def test_rook_moves_like_a_rook(self) -> None:
        game = GameState(self.FEN)
        game.move(6, 0, 7, 0, PieceKind.ROOK)
        game.move(5, 7, 4, 7)
        targets = game.safe_squares[(7, 0)]
        assert (0, 0) in targets
        assert (7, 7) in targets
        assert (6, 1) not in targets

    def test_san_and_check(self) -> None:
        game = GameState("8/P7/8/8/8/8/7p/k3K3 w - - 0 1")
        record = game.move(6, 0, 7, 0, "Q")
        assert record is not None
        assert record.san == "a8=Q+"

    def test_black_promotion(self) -> None:
        game = GameState("4k3/8/8/8/8/8/p6P/4K3 b - - 0 1")
        game.move(1, 0, 0, 0, "n")
        assert game.board_view[0][0] == "n"


class TestStalemate:
    def test_stalemate(self) -> None:
        game = GameState("7k/8/5K2/6Q1/8/8/8/8 w - - 0 1")
        game.move(4, 6, 5, 6)
        assert game.is_game_over
        assert game.result == GameResult.DRAW
        assert game.game_over_reason == GameOverReason.STALEMATE
        assert game.game_over_message == "Stalemate"
        assert game.safe_squares == {}
        assert not game.check_state.is_in_check


class TestInsufficientMaterial:
    def test_capture_leaves_bare_kings(self) -> None:
        game = GameState("4k3/8/8/8/8/8/3r4/4K3 w - - 0 1")
        game.move(0, 4, 1, 3)
        assert game.is_game_over
        assert game.game_over_reason == GameOverReason.INSUFFICIENT_MATERIAL
        assert game.game_over_message == "Draw due to insufficient material"

    def test_king_and_light_bishop(self) -> None:
        game = GameState("4k3/8/8/8/8/8/8/4KB2 w - - 0 1")
        assert game.game_over_reason == GameOverReason.INSUFFICIENT_MATERIAL

    def test_same_coloured_bishops(self) -> None:
        game = GameState("5b2/8/4k3/8/8/4K3/8/2B5 w - - 0 1")
        assert game.game_over_reason == GameOverReason.INSUFFICIENT_MATERIAL

    def test_opposite_coloured_bishops_play_on(self) -> None:
        game = GameState("5b2/8/4k3/8/8/4K3/8/5B2 w - - 0 1")
        assert not game.is_game_over


class TestRepetition:
    def test_threefold(self, game: GameState, play) -> None:
        play(game, *KNIGHT_SHUFFLE)
        assert game.repetition_count() == 2
        play(game, *KNIGHT_SHUFFLE[:3])
        assert not game.is_game_over
        play(game, KNIGHT_SHUFFLE[3])
        assert game.is_game_over
        assert game.game_over_reason == GameOverReason.THREEFOLD_REPETITION
        assert game.game_over_message == "Draw due to threefold repetition"
        assert game.repetition_count() == 3

    def test_clocks_ignored(self, game: GameState, play) -> None:
        play(game, *KNIGHT_SHUFFLE)
        assert game.halfmove_clock == 4
        assert game.fen != STARTING_FEN
        assert game.fen.split()[:4] == STARTING_FEN.split()[:4]

    def test_custom_limit(self, play) -> None:
        game = GameState(settings=GameSettings(repetition_limit=2))
        play(game, *KNIGHT_SHUFFLE)
        assert game.game_over_reason == GameOverReason.THREEFOLD_REPETITION


class TestFiftyMoveRule:
    def test_triggers_at_hundred_plies(self) -> None:
        game = GameState("4k3/8/8/8/8/8/8/R3K3 w - - 98 60")
        game.move(0, 0, 1, 0)
        assert game.halfmove_clock == 99
        assert not game.is_game_over
        game.move(7, 4, 6, 4)
        assert game.is_game_over
        assert game.game_over_reason == GameOverReason.FIFTY_MOVE_RULE
        assert game.game_over_message == "Draw due to fifty-move rule"
        assert game.fen.split()[4] == "100"

    def test_pawn_move_resets(self) -> None:
        game = GameState("4k3/8/8/8/8/8/4P3/R3K3 w - - 98 60")
        game.move(1, 4, 2, 4)
        game.move(7, 4, 6, 4)
        assert game.halfmove_clock == 1
        assert not game.is_game_over

    def test_capture_resets(self) -> None:
        game = GameState("4k3/8/8/8/8/8/r7/R3K3 w - - 98 60")
        game.move(0, 0, 1, 0)
        assert game.halfmove_clock == 0
        assert not game.is_game_over

    @pytest.mark.slow
    def test_fifty_full_moves_of_rook_shuffling(self) -> None:
        # Rooks wander along their own rows on a schedule that never
        # produces the same position three times.
        game = GameState("k7/8/1r6/8/8/1R6/8/K7 w - - 0 1")

        def white_col(k: int) -> int:
            return k % 7 + 1

        def black_col(k: int) -> int:
            return (k + k // 7) % 7 + 1

        for k in range(1, 51):
            assert not game.is_game_over
            game.move(2, white_col(k - 1), 2, white_col(k))
            assert not game.is_game_over
            game.move(5, black_col(k - 1), 5, black_col(k))

        assert game.halfmove_clock == 100
        assert game.game_over_reason == GameOverReason.FIFTY_MOVE_RULE

    def test_custom_limit(self) -> None:
        game = GameState(
            "4k3/8/8/8/8/8/8/R3K3 w - - 0 1",
            settings=GameSettings(fifty_move_limit=1),
        )
        game.move(0, 0, 1, 0)
        game.move(7, 4, 6, 4)
        assert game.game_over_reason == GameOverReason.FIFTY_MOVE_RULE
