"""
FastAPI web application for the adaptive chess engine.

Each game gets its own EngineSession, so cached moves and telemetry never
leak between games. Clients create a session, then post positions with a
power level and receive the engine's reply move.

Routes:
    POST   /api/sessions                 create a session
    POST   /api/sessions/{id}/move       engine move for a FEN at a power
    GET    /api/sessions/{id}/metrics    performance metrics
    POST   /api/sessions/{id}/reset      clear cache and telemetry
    POST   /api/sessions/{id}/outcome    record a finished game
    DELETE /api/sessions/{id}            drop the session

Architecture notes:
- Sync move endpoint (not async): the search is CPU-bound and blocking, so
  FastAPI runs the handler in its thread pool and the event loop stays free
  for other sessions. The engine's async pacing runs on a private loop in
  that worker thread via ``choose_move_sync``.
- Sessions live in process memory and are lost on restart. Adaptive and
  progression state belong to the session here; a deployment with accounts
  would load them per player and pass them in.
- At most MAX_SESSIONS sessions are kept. Creating one more drops the oldest,
  so clients that never DELETE their session cannot grow memory without bound.
"""

import logging
import uuid

import chess
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field, field_validator

from masterbot.adaptive import san_history
from masterbot.constants import MAX_POWER, MIN_POWER
from masterbot.difficulty import power_tier
from masterbot.orchestrator import EngineSession, choose_move_sync

# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

logging.basicConfig(level=logging.INFO)
_log = logging.getLogger(__name__)

app = FastAPI(title="Master Bot", version="1.0.0")

MAX_SESSIONS = 256

_sessions: dict[str, EngineSession] = {}


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------


class SessionResponse(BaseModel):
    session_id: str


class MoveRequest(BaseModel):
    """
    Client request for an engine move.

    Fields:
        fen:   Full FEN of the position, engine to move.
        moves: Optional UCI moves played from ``fen``; lets the engine see
               the game history for trick detection.
        power: Difficulty dial, clamped to [0, 100].
    """

    fen: str = chess.STARTING_FEN
    moves: list[str] = Field(default_factory=list)
    power: int = 50

    @field_validator("power")
    @classmethod
    def clamp_power(cls, v: int) -> int:
        """Clamp power to the supported dial range."""
        return max(MIN_POWER, min(v, MAX_POWER))


class MoveResponse(BaseModel):
    """
    Engine reply.

    Fields:
        move:      Chosen move in UCI notation.
        fen:       Board FEN after the move is applied.
        power:     Power actually used (after clamping).
        tier:      'easy', 'medium' or 'hard'.
        game_over: True if the engine's move ended the game.
    """

    move: str
    fen: str
    power: int
    tier: str
    game_over: bool


class OutcomeRequest(BaseModel):
    result: str
    fen: str = chess.STARTING_FEN
    moves: list[str] = Field(default_factory=list)
    power: int = 50

    @field_validator("result")
    @classmethod
    def check_result(cls, v: str) -> str:
        if v not in ("win", "loss", "draw"):
            raise ValueError("result must be 'win', 'loss' or 'draw'")
        return v


class OutcomeResponse(BaseModel):
    level: int
    xp: int
    leveled_up: bool
    win_streak: int
    loss_streak: int


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_session(session_id: str) -> EngineSession:
    session = _sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")
    return session


def _build_board(fen: str, moves: list[str]) -> chess.Board:
    """Parse a FEN and replay UCI moves on it, rejecting anything illegal."""
    try:
        board = chess.Board(fen)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid FEN: {exc}") from exc

    for uci in moves:
        try:
            move = chess.Move.from_uci(uci)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=f"Invalid move: {uci}") from exc
        if move not in board.legal_moves:
            raise HTTPException(status_code=400, detail=f"Illegal move: {uci}")
        board.push(move)
    return board


# ---------------------------------------------------------------------------
# API routes
# ---------------------------------------------------------------------------


@app.post("/api/sessions", response_model=SessionResponse)
def create_session() -> SessionResponse:
    session_id = uuid.uuid4().hex
    _sessions[session_id] = EngineSession()
    while len(_sessions) > MAX_SESSIONS:
        oldest = next(iter(_sessions))
        del _sessions[oldest]
        _log.info("Dropped oldest session %s", oldest)
    _log.info("Created session %s", session_id)
    return SessionResponse(session_id=session_id)


@app.post("/api/sessions/{session_id}/move", response_model=MoveResponse)
def api_move(session_id: str, request: MoveRequest) -> MoveResponse:
    """
    Compute the engine's move for the given position.

    Raises:
        HTTPException 404: Unknown session.
        HTTPException 400: Malformed FEN, illegal move list or game already over.
        HTTPException 500: Engine failure or no move returned.
    """
    session = _get_session(session_id)
    board = _build_board(request.fen, request.moves)

    if board.is_game_over():
        raise HTTPException(status_code=400, detail=f"Game is already over: {board.result()}")

    try:
        move = choose_move_sync(session, board, request.power)
    except Exception as exc:
        _log.exception("Engine failed for session=%s FEN=%s", session_id, board.fen())
        raise HTTPException(status_code=500, detail=f"Engine error: {exc}") from exc

    if move is None:
        raise HTTPException(status_code=500, detail="Engine returned no move")

    board.push(move)
    _log.info("Session=%s power=%d move=%s", session_id, request.power, move.uci())
    return MoveResponse(
        move=move.uci(),
        fen=board.fen(),
        power=request.power,
        tier=power_tier(request.power).name,
        game_over=board.is_game_over(),
    )


@app.get("/api/sessions/{session_id}/metrics")
def api_metrics(session_id: str) -> dict:
    return _get_session(session_id).metrics().to_dict()


@app.post("/api/sessions/{session_id}/reset")
def api_reset(session_id: str) -> dict:
    _get_session(session_id).reset()
    return {"status": "reset"}


@app.post("/api/sessions/{session_id}/outcome", response_model=OutcomeResponse)
def api_outcome(session_id: str, request: OutcomeRequest) -> OutcomeResponse:
    """Feed a finished game into the session's adaptive and progression state."""
    session = _get_session(session_id)
    board = _build_board(request.fen, request.moves)

    session.adaptive.record_outcome(
        request.result,
        board.fullmove_number,
        opening_moves=san_history(board),
    )
    leveled_up = session.progression.award(request.power, won=request.result == "win")

    return OutcomeResponse(
        level=session.progression.level,
        xp=session.progression.xp,
        leveled_up=leveled_up,
        win_streak=session.adaptive.win_streak,
        loss_streak=session.adaptive.loss_streak,
    )


@app.delete("/api/sessions/{session_id}")
def api_delete(session_id: str) -> dict:
    _get_session(session_id)
    del _sessions[session_id]
    return {"status": "deleted"}
