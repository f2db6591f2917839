"""
UCI (Universal Chess Interface) protocol handler.

Lets chess GUIs and testing tools (cutechess-cli and friends) play against the
adaptive engine. The engine reads commands from stdin and writes responses to
stdout, flushing every line.

Protocol overview:
    GUI -> Engine: uci, isready, ucinewgame, setoption, position, go, stop, quit
    Engine -> GUI: id name, id author, option, uciok, readyok, bestmove

Strength is set with the ``Power`` spin option (0-100). Time controls sent
with "go" are ignored: the engine paces itself from the power level and never
thinks for longer than its own hard limit.

"go" is answered synchronously. choose_move always returns within its
bounded budget, so the loop does not need a search thread and "stop" has
nothing to interrupt.

Critical rule: NEVER print to stdout except for valid UCI responses.
Debug output must go to stderr.

Run with: python -m interface.uci
"""

import sys

import chess

from masterbot.constants import MAX_POWER, MIN_POWER
from masterbot.orchestrator import EngineSession, choose_move_sync

DEFAULT_POWER = 50


def _send(line: str) -> None:
    """Write a UCI response line to stdout and flush immediately."""
    print(line, flush=True)


def _log(message: str) -> None:
    """Write a diagnostic line to stderr; stdout is reserved for the protocol."""
    print(message, file=sys.stderr, flush=True)


class UciHandler:
    """
    Stateful handler for the UCI protocol.

    Attributes:
        board:   The current board position, updated by "position" commands.
        power:   Current Power option value.
        session: EngineSession for the current game; reset on "ucinewgame".
    """

    def __init__(self, session: EngineSession | None = None) -> None:
        self.board: chess.Board = chess.Board()
        self.power: int = DEFAULT_POWER
        self.session: EngineSession = session or EngineSession()

    # -----------------------------------------------------------------------
    # Command handlers
    # -----------------------------------------------------------------------

    def handle_uci(self) -> None:
        """Identify the engine and advertise the Power option."""
        _send("id name MasterBot")
        _send("id author MasterBot Project")
        _send(f"option name Power type spin default {DEFAULT_POWER} min {MIN_POWER} max {MAX_POWER}")
        _send("uciok")

    def handle_isready(self) -> None:
        _send("readyok")

    def handle_ucinewgame(self) -> None:
        """Start a new game: fresh board, empty cache and telemetry."""
        self.board = chess.Board()
        self.session.reset()

    def handle_setoption(self, tokens: list[str]) -> None:
        """
        Parse "setoption name <id> value <x>".

        Only Power is recognised; other options are logged and ignored.
        """
        if "name" not in tokens or "value" not in tokens:
            _log(f"uci: malformed setoption: {' '.join(tokens)}")
            return

        name = " ".join(tokens[tokens.index("name") + 1:tokens.index("value")])
        value = " ".join(tokens[tokens.index("value") + 1:])

        if name.lower() != "power":
            _log(f"uci: ignoring unknown option {name!r}")
            return

        try:
            self.power = max(MIN_POWER, min(MAX_POWER, int(value)))
        except ValueError:
            _log(f"uci: invalid Power value {value!r}")

    def handle_position(self, tokens: list[str]) -> None:
        """
        Parse and apply a "position" command.

        Command formats:
            position startpos [moves e2e4 e7e5 ...]
            position fen <FEN> [moves e2e4 e7e5 ...]

        Moves are pushed onto the board (not baked into a FEN) so the engine
        can see the game history when looking for repeated tricks.
        """
        if not tokens:
            return

        try:
            if tokens[0] == "startpos":
                board = chess.Board()
                move_tokens = tokens[2:] if len(tokens) > 1 and tokens[1] == "moves" else []
            elif tokens[0] == "fen":
                if "moves" in tokens:
                    moves_idx = tokens.index("moves")
                    fen = " ".join(tokens[1:moves_idx])
                    move_tokens = tokens[moves_idx + 1:]
                else:
                    fen = " ".join(tokens[1:])
                    move_tokens = []
                board = chess.Board(fen)
            else:
                _log(f"uci: unknown position type: {tokens[0]}")
                return
        except ValueError as e:
            _log(f"uci: invalid FEN: {e}")
            return

        for uci_move in move_tokens:
            try:
                move = chess.Move.from_uci(uci_move)
            except ValueError:
                _log(f"uci: malformed move in position command: {uci_move}")
                break
            if move not in board.legal_moves:
                _log(f"uci: illegal move in position command: {uci_move}")
                break
            board.push(move)

        self.board = board

    def handle_go(self, tokens: list[str]) -> None:
        """Choose a move at the current power and reply with "bestmove"."""
        move = choose_move_sync(self.session, self.board, self.power)
        if move is None:
            # No legal moves: UCI still requires a bestmove reply.
            _send("bestmove (none)")
        else:
            _send(f"bestmove {move.uci()}")


def run_uci_loop(stream=None) -> None:
    """
    Main UCI protocol loop.

    Reads lines from ``stream`` (stdin by default) and dispatches each command
    to a UciHandler until "quit" or end of input. Each command is wrapped in
    try/except so a bug in one handler does not crash the engine mid-game.
    """
    handler = UciHandler()

    for raw_line in stream or sys.stdin:
        line = raw_line.strip()
        if not line:
            continue

        tokens = line.split()
        command = tokens[0]
        args = tokens[1:]

        if command == "quit":
            break

        try:
            if command == "uci":
                handler.handle_uci()
            elif command == "isready":
                handler.handle_isready()
            elif command == "ucinewgame":
                handler.handle_ucinewgame()
            elif command == "setoption":
                handler.handle_setoption(args)
            elif command == "position":
                handler.handle_position(args)
            elif command == "go":
                handler.handle_go(args)
            elif command == "stop":
                pass
            else:
                _log(f"uci: ignoring unknown command: {command!r}")

        except Exception as e:
            _log(f"uci: unhandled error for command {command!r}: {e}")


if __name__ == "__main__":
    run_uci_loop()
