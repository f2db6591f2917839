"""
Web application package for the adaptive chess engine.

Provides a FastAPI REST API over per-game EngineSession objects.
"""
