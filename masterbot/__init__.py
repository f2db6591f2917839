"""
Adaptive solo-opponent chess engine.

Given a position and a power level (0-100), the engine picks a legal move
within a bounded time budget, playing loosely at low power and close to its
best at high power. Long-lived player state (win streaks, known tricks,
progression level) nudges the difficulty further.

Modules:
    constants    : piece values, tables, cache and timing limits
    evaluate     : static position score from the engine's side
    search       : time-boxed minimax with alpha-beta and capture ordering
    cache        : fingerprint -> best move memo with TTL and size bound
    difficulty   : power/level/feedback -> DifficultyConfiguration
    lightweight  : cheap noisy move picker used below power 40
    adaptive     : streak, trick and progression state providers
    telemetry    : per-session performance log and metrics
    orchestrator : EngineSession, the public entry point
"""

from masterbot.orchestrator import EngineSession, choose_move_sync

__all__ = ["EngineSession", "choose_move_sync"]
