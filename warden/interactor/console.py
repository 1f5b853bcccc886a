from __future__ import annotations

import sys
from typing import Callable, Optional, TextIO

from warden.core.errors import WardenError
from warden.core.session_state import SessionState
from warden.trace.trace_emitter import TraceEmitter

from .command_registry import CommandRegistry
from .commands import ConsoleSignal


class Interactor:
    """
    Line-oriented console host around a CommandRegistry.

    Commands run one at a time; a command that blocks (e.g. a long runner call)
    blocks the prompt. Errors from a command are reported and the prompt continues.
    """

    def __init__(
        self,
        commands: CommandRegistry,
        state: SessionState,
        *,
        input_func: Optional[Callable[[str], str]] = None,
        output: Optional[TextIO] = None,
        trace: Optional[TraceEmitter] = None,
    ) -> None:
        self._commands = commands
        self._state = state
        self._input = input_func or input
        self._output = output
        self._trace = trace
        self._line_no = 0

    @property
    def output(self) -> TextIO:
        return self._output if self._output is not None else sys.stdout

    def prompt(self) -> str:
        scope = self._state.scope
        label = f"{scope.title()} " if not scope.is_empty() else ""
        mode = "pause" if self._state.paused else "main"
        return f"[{self._line_no}] {label}warden({mode})> "

    def handle_line(self, line: str) -> Optional[ConsoleSignal]:
        line = line.strip()
        if not line:
            return None
        if self._trace is not None:
            self._trace.emit("command_received", command=line.split()[0], data={"line": line})
        try:
            out = self._commands.dispatch(line)
        except WardenError as e:
            if self._trace is not None:
                self._trace.emit("error", message=str(e), data=e.data)
            if e.code == "command.unknown" and isinstance(e.data, dict):
                print("Unknown command: {}".format(e.data.get("command")), file=self.output)
            else:
                print(str(e), file=self.output)
            return None
        except Exception as e:  # noqa: BLE001
            if self._trace is not None:
                self._trace.emit("error", message="Command failed", data={"error": repr(e)})
            print(f"Error: {e!r}", file=self.output)
            return None
        if out is not None and out[1] is ConsoleSignal.EXIT:
            return ConsoleSignal.EXIT
        return None

    def run(self) -> int:
        while True:
            self._line_no += 1
            try:
                line = self._input(self.prompt())
            except EOFError:
                print("", file=self.output)
                break
            except KeyboardInterrupt:
                print("", file=self.output)
                continue
            try:
                if self.handle_line(line) is ConsoleSignal.EXIT:
                    break
            except KeyboardInterrupt:
                # A Ctrl-C during a runner call lands back at the prompt.
                print("", file=self.output)
        return 0
