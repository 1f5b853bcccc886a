from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, TypeVar

from warden.plugin import Plugin
from warden.registry.plugin_registry import Group, PluginRegistry
from warden.trace.trace_emitter import TraceEmitter

from .scope import Scope

T = TypeVar("T")


@dataclass(frozen=True)
class _Snapshot:
    scope: Scope
    paused: bool


class SessionState:
    """
    Single authoritative holder of the console session invariants.

    Invariants protected by within_preserved_state():
    - the interactor scope (set by the `scope` command)
    - the pause flag

    All reads and writes go through one re-entrant lock; scopes are immutable
    and replaced in a single assignment. The lock is never held while an
    action runs.
    """

    def __init__(
        self,
        registry: PluginRegistry,
        base_scope: Optional[Scope] = None,
        *,
        trace: Optional[TraceEmitter] = None,
    ) -> None:
        self._registry = registry
        self._trace = trace
        self._lock = threading.RLock()
        self._base_scope = base_scope or Scope()
        self._scope = Scope()
        self._paused = False
        self._busy = 0
    @property
    def registry(self) -> PluginRegistry:
        return self._registry

    @property
    def base_scope(self) -> Scope:
        return self._base_scope

    @property
    def scope(self) -> Scope:
        with self._lock:
            return self._scope

    def set_scope(self, scope: Scope) -> None:
        if not isinstance(scope, Scope):
            raise TypeError("scope must be a Scope")
        with self._lock:
            self._scope = scope

    @property
    def paused(self) -> bool:
        with self._lock:
            return self._paused

    def pause(self) -> None:
        with self._lock:
            self._paused = True

    def unpause(self) -> None:
        with self._lock:
            self._paused = False

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._busy > 0

    def within_preserved_state(self, action: Callable[[], T]) -> T:
        """
        Run `action`, restoring the session state if it raises.

        The snapshot is taken under the lock; the action itself runs without it,
        so other threads may read the state meanwhile.

        On any exception (KeyboardInterrupt included) the scope and pause flag are
        put back to their values from before the call, then the exception propagates.
        On success, changes made by `action` are kept.
        """
        with self._lock:
            snapshot = _Snapshot(scope=self._scope, paused=self._paused)
            self._busy += 1
        try:
            return action()
        except BaseException as e:
            with self._lock:
                self._scope = snapshot.scope
                self._paused = snapshot.paused
            if self._trace is not None:
                self._trace.emit("state_restored", scope=snapshot.scope.to_dict(), data={"error": repr(e)})
            raise
        finally:
            with self._lock:
                self._busy -= 1

    def grouped_plugins(self, scope: Optional[Scope] = None) -> List[Tuple[Group, List[Plugin]]]:
        """
        Resolve which plugins an action applies to, as (group, plugins) pairs.

        Layers are checked in order: the call scope, the interactor scope, the base
        scope. The first layer with plugins wins; failing that, the first layer with
        groups; failing that, every group.
        """
        with self._lock:
            layers = [scope or Scope(), self._scope, self._base_scope]

        for layer in layers:
            if layer.plugins:
                out: List[Tuple[Group, List[Plugin]]] = []
                for p in self._registry.plugins():
                    if p in layer.plugins and p.group is not None:
                        out.append((p.group, [p]))
                return out

        groups: List[Group] = self._registry.groups()
        for layer in layers:
            if layer.groups:
                groups = [g for g in groups if g in layer.groups]
                break
        return [(g, self._registry.plugins(g.name)) for g in groups]
