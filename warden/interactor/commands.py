from __future__ import annotations

import sys
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional, Sequence, TextIO

from warden.core.runner import Runner
from warden.core.session_state import SessionState
from warden.registry.plugin_registry import PluginRegistry
from warden.trace.trace_emitter import TraceEmitter

from .scope_converter import convert_scope

if TYPE_CHECKING:
    from .command_registry import CommandRegistry


class ScopeOutcome(Enum):
    USAGE_SHOWN = "usage_shown"
    UNKNOWN_REPORTED = "unknown_reported"
    SCOPE_REPLACED = "scope_replaced"


class ConsoleSignal(Enum):
    EXIT = "exit"


def _unknown_scopes_line(unknown: Sequence[str]) -> str:
    return "Unknown scopes: {}".format(", ".join(unknown))


class Command:
    """
    Console command with access to the session collaborators.

    Output goes to `output` when given, else to the current sys.stdout.
    """

    name = ""
    description = ""
    banner = ""

    def __init__(
        self,
        *,
        registry: PluginRegistry,
        state: SessionState,
        runner: Optional[Runner] = None,
        output: Optional[TextIO] = None,
        trace: Optional[TraceEmitter] = None,
    ) -> None:
        self._registry = registry
        self._state = state
        self._runner = runner
        self._output = output
        self._trace = trace

    @property
    def output(self) -> TextIO:
        return self._output if self._output is not None else sys.stdout

    def puts(self, text: str) -> None:
        print(text, file=self.output)

    def _emit(self, event_type: str, **kwargs: Any) -> None:
        if self._trace is not None:
            self._trace.emit(event_type, command=self.name, **kwargs)

    def definition(self) -> Dict[str, Any]:
        return {"name": self.name, "group": "Warden", "description": self.description, "banner": self.banner}

    def process(self, entries: Sequence[str]) -> Any:
        raise NotImplementedError

    def __call__(self, entries: Sequence[str]) -> Any:
        return self.process(list(entries))


class ChangeCommand(Command):
    name = "change"
    description = "Trigger a file change."
    banner = (
        "Usage: change <scope>\n\n"
        "Runs the plugins' run_on_changes action.\n\n"
        "You may want to specify an optional scope to the action,\n"
        "either the name of a plugin or a plugin group.\n"
        "Anything that is not a plugin or group is passed on as a modified path."
    )

    def process(self, entries: Sequence[str]) -> Any:
        if self._runner is None:
            raise RuntimeError("change command requires a runner")
        runner = self._runner
        converted = convert_scope(entries, self._registry)
        self._emit("change_requested", scope=converted.scope.to_dict(), data={"paths": list(converted.unknown)})
        return self._state.within_preserved_state(
            lambda: runner.run_on_changes(converted.unknown, [], [], scope=converted.scope)
        )


class ScopeCommand(Command):
    name = "scope"
    description = "Scope plugin actions to groups and plugins."
    banner = (
        "Usage: scope <scope>\n\n"
        "Set the global plugin scope.\n\n"
        "Each scope entry is the name of a plugin or a group."
    )

    def process(self, entries: Sequence[str]) -> ScopeOutcome:
        if not entries:
            self.puts("Usage: scope <scope>")
            return ScopeOutcome.USAGE_SHOWN

        converted = convert_scope(entries, self._registry)
        if not converted.complete:
            self.puts(_unknown_scopes_line(converted.unknown))
            self._emit("scope_unknown", data={"unknown": list(converted.unknown)})
            return ScopeOutcome.UNKNOWN_REPORTED

        self._state.set_scope(converted.scope)
        self._emit("scope_changed", scope=converted.scope.to_dict())
        return ScopeOutcome.SCOPE_REPLACED


class AllCommand(Command):
    name = "all"
    description = "Run all plugins."
    banner = (
        "Usage: all <scope>\n\n"
        "Runs the plugins' run_all action.\n\n"
        "You may want to specify an optional scope to the action,\n"
        "either the name of a plugin or a plugin group."
    )

    def process(self, entries: Sequence[str]) -> Any:
        if self._runner is None:
            raise RuntimeError("all command requires a runner")
        runner = self._runner
        converted = convert_scope(entries, self._registry)
        if not converted.complete:
            self.puts(_unknown_scopes_line(converted.unknown))
            self._emit("scope_unknown", data={"unknown": list(converted.unknown)})
            return None
        self._emit("run_all_requested", scope=converted.scope.to_dict())
        return self._state.within_preserved_state(lambda: runner.run_all(scope=converted.scope))


class ShowCommand(Command):
    name = "show"
    description = "Show all groups, plugins and the current scope."
    banner = "Usage: show"

    def process(self, entries: Sequence[str]) -> None:
        for group in self._registry.groups():
            names = [p.name for p in self._registry.plugins(group.name)]
            self.puts("{}: {}".format(group.name, ", ".join(names) if names else "(no plugins)"))
        scope = self._state.scope
        self.puts("Scope: {}".format(scope.title() if not scope.is_empty() else "(all)"))
        self.puts("Paused: {}".format("yes" if self._state.paused else "no"))


class PauseCommand(Command):
    name = "pause"
    description = "Toggles the pause flag of the session."
    banner = "Usage: pause"

    def process(self, entries: Sequence[str]) -> bool:
        if self._state.paused:
            self._state.unpause()
            self.puts("Unpaused")
        else:
            self._state.pause()
            self.puts("Paused")
        self._emit("pause_toggled", data={"paused": self._state.paused})
        return self._state.paused


class ExitCommand(Command):
    name = "exit"
    description = "Leave the console."
    banner = "Usage: exit"

    def process(self, entries: Sequence[str]) -> ConsoleSignal:
        return ConsoleSignal.EXIT


class HelpCommand(Command):
    name = "help"
    description = "Show the list of commands, or the usage of one command."
    banner = "Usage: help [command]"

    def __init__(self, *, commands: "CommandRegistry", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._commands = commands

    def process(self, entries: Sequence[str]) -> None:
        if entries:
            d = self._commands.get(entries[0])
            if d is None:
                self.puts(f"Unknown command: {entries[0]}")
                return
            self.puts(d.get("banner") or d.get("description") or d["name"])
            return
        for d in self._commands.list_commands():
            self.puts("{name:<8} {description}".format(**d))
