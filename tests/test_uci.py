import io
import random

import chess
import pytest

from interface.uci import UciHandler, run_uci_loop
from masterbot.orchestrator import EngineSession


async def _no_sleep(seconds: float) -> None:
    return None


@pytest.fixture
def handler() -> UciHandler:
    return UciHandler(EngineSession(rng=random.Random(5), sleep=_no_sleep))


def test_handle_uci_advertises_power(handler, capsys: pytest.CaptureFixture[str]) -> None:
    handler.handle_uci()
    output = capsys.readouterr().out.strip().splitlines()
    assert output[0] == "id name MasterBot"
    assert "option name Power type spin default 50 min 0 max 100" in output
    assert output[-1] == "uciok"


def test_setoption_power(handler) -> None:
    handler.handle_setoption("name Power value 12".split())
    assert handler.power == 12
    handler.handle_setoption("name Power value 400".split())
    assert handler.power == 100
    handler.handle_setoption("name Power value lots".split())
    assert handler.power == 100
    handler.handle_setoption("name Hash value 16".split())
    assert handler.power == 100


def test_position_keeps_move_history(handler) -> None:
    handler.handle_position("startpos moves e2e4 e7e5".split())
    assert [m.uci() for m in handler.board.move_stack] == ["e2e4", "e7e5"]

    handler.handle_position("fen 6k1/5ppp/8/8/8/5Q2/5PPP/6K1 w - - 0 1 moves g2g4".split())
    assert handler.board.turn is chess.BLACK


def test_position_invalid_fen_keeps_board(handler, capsys) -> None:
    handler.handle_position("startpos moves e2e4".split())
    handler.handle_position("fen invalid".split())
    assert handler.board.move_stack[-1].uci() == "e2e4"
    assert "invalid FEN" in capsys.readouterr().err


def test_go_emits_legal_move(handler, capsys) -> None:
    handler.handle_setoption("name Power value 5".split())
    handler.handle_go([])
    output = capsys.readouterr().out.strip()
    assert output.startswith("bestmove ")
    assert chess.Move.from_uci(output.split()[1]) in handler.board.legal_moves


def test_go_on_finished_game(handler, capsys) -> None:
    handler.handle_position("fen 7k/5Q2/6K1/8/8/8/8/8 b - - 0 1".split())
    handler.handle_go([])
    assert capsys.readouterr().out.strip() == "bestmove (none)"


def test_ucinewgame_resets_session(handler) -> None:
    handler.handle_setoption("name Power value 60".split())
    handler.session.cache.put(chess.Board().fen(), chess.Move.from_uci("e2e4"), 0)
    handler.handle_ucinewgame()
    assert len(handler.session.cache) == 0


def test_loop_stops_on_quit(capsys) -> None:
    run_uci_loop(io.StringIO("uci\nisready\nquit\nisready\n"))
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines.count("readyok") == 1
