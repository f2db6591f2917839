"""
Engine constants: piece values, positional tables, cache and timing limits.

Every tunable of Master Bot lives in this one module: evaluation weights,
the power-to-difficulty curve, timing caps and the adaptive and progression
rules. Durations are in milliseconds unless a name says otherwise.

Piece values follow the standard centipawn convention (1 pawn = 100 cp).
"""

import chess

# ---------------------------------------------------------------------------
# Piece values (centipawns)
# ---------------------------------------------------------------------------

PAWN_VALUE: int = 100
KNIGHT_VALUE: int = 320
BISHOP_VALUE: int = 330
ROOK_VALUE: int = 500
QUEEN_VALUE: int = 900
KING_VALUE: int = 20_000  # Counted for both sides, so it cancels out

PIECE_VALUES: dict[int, int] = {
    chess.PAWN:   PAWN_VALUE,
    chess.KNIGHT: KNIGHT_VALUE,
    chess.BISHOP: BISHOP_VALUE,
    chess.ROOK:   ROOK_VALUE,
    chess.QUEEN:  QUEEN_VALUE,
    chess.KING:   KING_VALUE,
}

# ---------------------------------------------------------------------------
# Piece-square tables
# ---------------------------------------------------------------------------
# Written from White's point of view with index 0 = a8 (visual top-left).
# python-chess numbers a1 = 0, so a White piece on square sq reads index
# sq ^ 56 and a Black piece reads index sq (the vertical mirror).

PAWN_TABLE: list[int] = [
     0,  0,  0,  0,  0,  0,  0,  0,
    50, 50, 50, 50, 50, 50, 50, 50,
    10, 10, 20, 30, 30, 20, 10, 10,
     5,  5, 10, 25, 25, 10,  5,  5,
     0,  0,  0, 20, 20,  0,  0,  0,
     5, -5,-10,  0,  0,-10, -5,  5,
     5, 10, 10,-20,-20, 10, 10,  5,
     0,  0,  0,  0,  0,  0,  0,  0,
]

KNIGHT_TABLE: list[int] = [
    -50,-40,-30,-30,-30,-30,-40,-50,
    -40,-20,  0,  0,  0,  0,-20,-40,
    -30,  0, 10, 15, 15, 10,  0,-30,
    -30,  5, 15, 20, 20, 15,  5,-30,
    -30,  0, 15, 20, 20, 15,  0,-30,
    -30,  5, 10, 15, 15, 10,  5,-30,
    -40,-20,  0,  5,  5,  0,-20,-40,
    -50,-40,-30,-30,-30,-30,-40,-50,
]

# Only pawns and knights carry a positional bonus.
PST: dict[int, list[int]] = {
    chess.PAWN:   PAWN_TABLE,
    chess.KNIGHT: KNIGHT_TABLE,
}

# Mobility: centipawns per legal move available to the side to move.
MOBILITY_WEIGHT: int = 10

# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------
# Window bounds are integers so the tree walk never touches floats.

INF: int = 1_000_000_000

# Hard ceiling on a single search call, whatever the think-time range says.
SEARCH_HARD_LIMIT_MS: int = 3_000

# ---------------------------------------------------------------------------
# Lightweight selector
# ---------------------------------------------------------------------------

LIGHTWEIGHT_POWER_THRESHOLD: int = 40   # power below this skips the search
LIGHTWEIGHT_NOISE: float = 10.0         # uniform noise added to every move
CENTER_BONUS: int = 20
CENTER_SQUARES: frozenset[int] = frozenset({chess.E4, chess.E5, chess.D4, chess.D5})

# ---------------------------------------------------------------------------
# Move cache
# ---------------------------------------------------------------------------

CACHE_TTL_MS: int = 300_000  # 5 minutes
CACHE_MAX_SIZE: int = 20

# ---------------------------------------------------------------------------
# Difficulty model
# ---------------------------------------------------------------------------

MIN_POWER: int = 0
MAX_POWER: int = 100

BASE_MIN_DEPTH: int = 2
BASE_MAX_DEPTH: int = 24
ADJUSTED_MIN_DEPTH: int = 1
ABSOLUTE_MAX_DEPTH: int = 28
EXPLOIT_DEPTH_BONUS: int = 4

POWER_EXPONENT: float = 1.5
MAX_RANDOMNESS: float = 0.6
MAX_BLUNDER_CHANCE: float = 0.45
BLUNDER_POWER_CEILING: int = 50

BASE_MIN_THINK_MS: int = 100
MIN_THINK_SPAN_MS: int = 1_400
BASE_MAX_THINK_MS: int = 250
MAX_THINK_SPAN_MS: int = 2_750
VARIANCE_REDUCTION_PER_LEVEL: float = 0.02
MAX_VARIANCE_REDUCTION: float = 0.7

# Speed boosts may not pull the think-time range below these.
MIN_THINK_FLOOR_MS: int = 300
MAX_THINK_FLOOR_MS: int = 500

# ---------------------------------------------------------------------------
# Orchestration policy
# ---------------------------------------------------------------------------

HESITATION_CHANCE: float = 0.1   # probability of doubling the pacing delay
BLUNDER_POOL_START: float = 0.4  # blunders come from the worst 60% of moves
ANTI_LAG_THRESHOLD_MS: int = 3_000
FALLBACK_CANDIDATES: int = 2

# ---------------------------------------------------------------------------
# Telemetry
# ---------------------------------------------------------------------------

PERFORMANCE_LOG_SIZE: int = 50
POWER_HISTORY_SIZE: int = 20
AVG_THINK_WINDOW: int = 20

# ---------------------------------------------------------------------------
# Adaptive state and progression
# ---------------------------------------------------------------------------

RECENT_GAMES_KEPT: int = 10
STREAK_THRESHOLD: int = 2
QUICK_WIN_MOVES: int = 25
OPENING_SIGNATURE_PLIES: int = 6
EARLY_QUEEN_PLIES: int = 8
REPEATED_OPENING_COUNT: int = 2
SCHOLARS_MATE_SEQUENCE: str = "e4e5Qh5Bc4Qxf7"

MAX_DEPTH_ADJUST: int = 4
MAX_RANDOMNESS_ADJUST: float = 0.15
MAX_BLUNDER_ADJUST: float = 0.1
MAX_THINK_TIME_ADJUST_MS: int = 300

LEVEL_XP_FACTOR: float = 75.0   # 50 * 1.5 per level
XP_PER_POWER: float = 0.8
MIN_XP_REWARD: int = 5
MAX_XP_REWARD: int = 100
LEVELS_PER_DEPTH_BOOST: int = 4
BLUNDER_REDUCTION_PER_LEVEL: float = 0.003
MAX_BLUNDER_REDUCTION: float = 0.44
SPEED_BOOST_PER_LEVEL: float = 0.02
MAX_SPEED_BOOST: float = 2.0
