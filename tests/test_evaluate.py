import chess

from masterbot.constants import KNIGHT_TABLE, PAWN_TABLE
from masterbot.evaluate import captured_value, evaluate


def test_start_position_is_mobility_only() -> None:
    board = chess.Board()
    assert evaluate(board, chess.WHITE) == 200
    assert evaluate(board, chess.BLACK) == -200


def test_extra_queen_counts_for_owner() -> None:
    board = chess.Board("4k3/8/8/8/8/8/8/3QK3 w - - 0 1")
    white = evaluate(board, chess.WHITE)
    black = evaluate(board, chess.BLACK)
    assert white > 900
    assert black < -900
    assert white == -black


def test_pawn_table_mirrored_for_black() -> None:
    # Kings only plus a pawn each on mirrored squares: placement cancels.
    board = chess.Board("4k3/3p4/8/8/8/8/3P4/4K3 w - - 0 1")
    mobility = board.legal_moves.count() * 10
    assert evaluate(board, chess.WHITE) == mobility

    # A white pawn on the seventh rank picks up the 50 bonus.
    lone = chess.Board("4k3/P7/8/8/8/8/8/4K3 b - - 0 1")
    mobility = lone.legal_moves.count() * 10
    assert evaluate(lone, chess.WHITE) == 100 + PAWN_TABLE[chess.A7 ^ 56] + -mobility
    assert PAWN_TABLE[chess.A7 ^ 56] == 50


def test_knight_table_centre_beats_rim() -> None:
    assert KNIGHT_TABLE[chess.E4 ^ 56] > KNIGHT_TABLE[chess.A1 ^ 56]
    centre = chess.Board("4k3/8/8/8/4N3/8/8/4K3 b - - 0 1")
    rim = chess.Board("4k3/8/8/8/8/8/8/N3K3 b - - 0 1")
    assert evaluate(centre, chess.WHITE) > evaluate(rim, chess.WHITE)


def test_evaluate_does_not_modify_board() -> None:
    board = chess.Board("r1bqkbnr/pppp1ppp/2n5/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R w KQkq - 2 3")
    fen = board.fen()
    evaluate(board, chess.WHITE)
    assert board.fen() == fen


def test_captured_value() -> None:
    board = chess.Board("4k3/8/8/3q4/4P3/8/8/4K3 w - - 0 1")
    assert captured_value(board, chess.Move.from_uci("e4d5")) == 900
    assert captured_value(board, chess.Move.from_uci("e4e5")) == 0

    ep = chess.Board("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1")
    assert captured_value(ep, chess.Move.from_uci("e5d6")) == 100
