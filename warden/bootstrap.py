from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, TextIO

from warden.config import load_config
from warden.core.errors import ValidationError
from warden.core.runner import Runner
from warden.core.runtime_context import RuntimeContext
from warden.core.scope import Scope
from warden.core.session_state import SessionState
from warden.interactor.command_registry import CommandRegistry
from warden.interactor.commands import (
    AllCommand,
    ChangeCommand,
    Command,
    ExitCommand,
    HelpCommand,
    PauseCommand,
    ScopeCommand,
    ShowCommand,
)
from warden.registry.plugin_registry import PluginRegistry
from warden.trace.trace_emitter import TraceEmitter
from warden.trace.trace_store_jsonl import TraceStoreJSONL


@dataclass(frozen=True)
class Warden:
    """
    Collaborators of one console session, wired once at startup.
    """

    ctx: RuntimeContext
    registry: PluginRegistry
    state: SessionState
    runner: Runner
    trace: TraceEmitter
    watchdir: Path


def resolve_base_scope(registry: PluginRegistry, *, groups: Iterable[str] = (), plugins: Iterable[str] = ()) -> Scope:
    """
    Build the startup scope from explicit group and plugin names (no guessing: a
    --group must name a group, a --plugin must name a plugin).
    """
    found_groups = []
    found_plugins = []
    unknown: List[str] = []
    for name in groups:
        g = registry.find_group(name)
        if g is None:
            unknown.append(name)
        else:
            found_groups.append(g)
    for name in plugins:
        p = registry.find_plugin(name)
        if p is None:
            unknown.append(name)
        else:
            found_plugins.append(p)
    if unknown:
        raise ValidationError(
            code="scope.unknown",
            message="Unknown scopes: {}".format(", ".join(unknown)),
            data={"unknown": unknown},
        )
    return Scope.of(plugins=found_plugins, groups=found_groups)


def bootstrap(ctx: RuntimeContext, *, groups: Iterable[str] = (), plugins: Iterable[str] = ()) -> Warden:
    loaded = load_config(ctx.config_path)
    base_scope = resolve_base_scope(loaded.registry, groups=groups, plugins=plugins)
    trace = TraceEmitter(store=TraceStoreJSONL(ctx.trace_path), run_id=ctx.run_id)
    state = SessionState(loaded.registry, base_scope=base_scope, trace=trace)
    watchdir = ctx.watchdir or loaded.watchdir or Path.cwd()
    runner = Runner(state, watchdir=watchdir, trace=trace)
    trace.emit(
        "session_started",
        scope=base_scope.to_dict(),
        data={"config_path": str(ctx.config_path), "watchdir": str(watchdir)},
    )
    return Warden(ctx=ctx, registry=loaded.registry, state=state, runner=runner, trace=trace, watchdir=watchdir)


def build_command_registry(
    *,
    registry: PluginRegistry,
    state: SessionState,
    runner: Optional[Runner] = None,
    output: Optional[TextIO] = None,
    trace: Optional[TraceEmitter] = None,
) -> CommandRegistry:
    """
    Register the console commands shipped with the framework.
    """
    commands = CommandRegistry()
    shared = dict(registry=registry, state=state, runner=runner, output=output, trace=trace)

    def reg(command: Command) -> None:
        commands.register(command.definition(), command)

    reg(ChangeCommand(**shared))
    reg(ScopeCommand(**shared))
    reg(AllCommand(**shared))
    reg(ShowCommand(**shared))
    reg(PauseCommand(**shared))
    reg(ExitCommand(**shared))
    reg(HelpCommand(commands=commands, **shared))
    commands.alias("quit", "exit")
    return commands


def build_session_commands(warden: Warden, output: Optional[TextIO] = None) -> CommandRegistry:
    return build_command_registry(
        registry=warden.registry,
        state=warden.state,
        runner=warden.runner,
        output=output,
        trace=warden.trace,
    )
