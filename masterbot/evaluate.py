"""
Static evaluation: material, pawn/knight placement and mobility.

The search needs a number for every leaf it reaches, and the same number for
positions where it ran out of time. This module provides that number.

Unlike a negamax evaluator, the score here is always reported from a fixed
side (the engine's colour) rather than the side to move. The minimax search
alternates maximizing and minimizing plies on top of this fixed perspective,
so it never negates the evaluation itself.

Terms:
    material : PIECE_VALUES summed over every occupied square, positive for
               the engine's pieces and negative for the opponent's.
    placement: PAWN_TABLE / KNIGHT_TABLE bonus, mirrored for Black.
    mobility : MOBILITY_WEIGHT per legal move of the side to move; added when
               the engine is to move and subtracted otherwise.
"""

import chess

from masterbot.constants import MOBILITY_WEIGHT, PIECE_VALUES, PST


def evaluate(board: chess.Board, color: chess.Color) -> int:
    """
    Centipawn score of ``board`` from ``color``'s perspective.

    Pure function of the position: no cache, configuration or history is
    consulted, and the board is not modified.

    Args:
        board: Position to score.
        color: The engine's side. Positive scores favour this side.

    Returns:
        Integer score. Positive = ``color`` is ahead.

    Example:
        >>> import chess
        >>> evaluate(chess.Board(), chess.WHITE)  # 20 legal moves for White
        200
    """
    score = 0

    for sq, piece in board.piece_map().items():
        value = PIECE_VALUES[piece.piece_type]

        table = PST.get(piece.piece_type)
        if table is not None:
            idx = sq ^ 56 if piece.color == chess.WHITE else sq
            value += table[idx]

        score += value if piece.color == color else -value

    mobility = board.legal_moves.count() * MOBILITY_WEIGHT
    score += mobility if board.turn == color else -mobility

    return score


def captured_value(board: chess.Board, move: chess.Move) -> int:
    """Material value of the piece ``move`` captures, or 0 for a quiet move."""
    if board.is_en_passant(move):
        return PIECE_VALUES[chess.PAWN]
    victim = board.piece_at(move.to_square)
    if victim is None or victim.color == board.turn:
        return 0
    return PIECE_VALUES[victim.piece_type]
