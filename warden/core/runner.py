from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Tuple

from warden.plugin import Plugin
from warden.trace.trace_emitter import TraceEmitter

from .errors import PluginExecutionError
from .paths import relative_to_watchdir
from .scope import Scope
from .session_state import SessionState

_CHANGE_HOOKS: Tuple[Tuple[str, str], ...] = (
    ("modified", "run_on_modifications"),
    ("added", "run_on_additions"),
    ("removed", "run_on_removals"),
)


class Runner:
    """
    Calls plugin hooks for the plugins a scope selects.

    Plugin failures are traced and re-raised as PluginExecutionError; this class
    never retries and never swallows them.
    """

    def __init__(self, state: SessionState, *, watchdir: Path = Path("."), trace: Optional[TraceEmitter] = None):
        self._state = state
        self._watchdir = watchdir
        self._trace = trace

    def _emit(self, event_type: str, **kwargs: Any) -> None:
        if self._trace is not None:
            self._trace.emit(event_type, **kwargs)

    def run_on_changes(
        self,
        modified: Sequence[str],
        added: Sequence[str],
        removed: Sequence[str],
        *,
        scope: Optional[Scope] = None,
    ) -> List[dict[str, Any]]:
        changes = {
            "modified": [relative_to_watchdir(p, self._watchdir) for p in modified],
            "added": [relative_to_watchdir(p, self._watchdir) for p in added],
            "removed": [relative_to_watchdir(p, self._watchdir) for p in removed],
        }
        if not any(changes.values()):
            return []

        results: List[dict[str, Any]] = []
        for group, plugins in self._state.grouped_plugins(scope):
            for plugin in plugins:
                halted = False
                for kind, hook in _CHANGE_HOOKS:
                    matches = plugin.match(changes[kind])
                    if not matches:
                        continue
                    out = self._supervise(plugin, hook, lambda: getattr(plugin, hook)(matches), data={"paths": matches})
                    results.append({"plugin": plugin.name, "hook": hook, "paths": matches, "output": out})
                    if out is False and group.halt_on_fail:
                        halted = True
                        break
                if halted:
                    self._emit("group_halted", plugin=plugin.name, message="Group halted on failure", data={"group": group.name})
                    break
        return results

    def run_all(self, *, scope: Optional[Scope] = None) -> List[dict[str, Any]]:
        results: List[dict[str, Any]] = []
        for group, plugins in self._state.grouped_plugins(scope):
            for plugin in plugins:
                out = self._supervise(plugin, "run_all", plugin.run_all)
                results.append({"plugin": plugin.name, "hook": "run_all", "output": out})
                if out is False and group.halt_on_fail:
                    self._emit("group_halted", plugin=plugin.name, message="Group halted on failure", data={"group": group.name})
                    break
        return results

    def _supervise(self, plugin: Plugin, hook: str, call: Callable[[], Any], data: Optional[dict[str, Any]] = None) -> Any:
        self._emit("plugin_started", plugin=plugin.name, message=hook, data=data)
        try:
            out = call()
        except Exception as e:  # noqa: BLE001
            self._emit(
                "error",
                plugin=plugin.name,
                message="Plugin hook failed",
                data={"hook": hook, "error": repr(e)},
            )
            raise PluginExecutionError(
                code="plugin.error",
                message=f"{plugin.name}.{hook} failed: {e}",
                data={"plugin": plugin.name, "hook": hook},
            ) from e
        self._emit("plugin_finished", plugin=plugin.name, message=hook, data={"ok": out is not False})
        return out
