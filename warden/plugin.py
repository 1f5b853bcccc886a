from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from warden.core.errors import ValidationError

if TYPE_CHECKING:
    from warden.registry.plugin_registry import Group


class Watcher:
    """
    Regular expression searched against change paths (relative to the watch directory).
    """

    def __init__(self, pattern: str):
        try:
            self._regex = re.compile(pattern)
        except re.error as e:
            raise ValidationError(
                code="config.invalid",
                message=f"Invalid watch pattern: {pattern}",
                data={"pattern": pattern, "error": str(e)},
            ) from e
        self.pattern = pattern

    def matches(self, path: str) -> bool:
        return self._regex.search(path) is not None

    def __repr__(self) -> str:
        return f"Watcher({self.pattern!r})"


class Plugin:
    """
    Base class for automation plugins.

    Subclasses override the hooks they care about. The typed change hooks
    (modifications/additions/removals) fall back to run_on_changes().

    A hook may return False to report a failed task; groups with
    `halt_on_fail` stop running further plugins in that case.
    """

    def __init__(
        self,
        name: str,
        *,
        group: Optional["Group"] = None,
        watchers: Iterable[Watcher] = (),
        options: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.name = name
        self.group = group
        self.watchers: List[Watcher] = list(watchers)
        self.options: Dict[str, Any] = dict(options or {})

    @property
    def title(self) -> str:
        return self.name.capitalize()

    def match(self, paths: Iterable[str]) -> List[str]:
        if not self.watchers:
            return []
        return [p for p in paths if any(w.matches(p) for w in self.watchers)]

    def run_all(self) -> Any:
        return None

    def run_on_changes(self, paths: List[str]) -> Any:
        return None

    def run_on_modifications(self, paths: List[str]) -> Any:
        return self.run_on_changes(paths)

    def run_on_additions(self, paths: List[str]) -> Any:
        return self.run_on_changes(paths)

    def run_on_removals(self, paths: List[str]) -> Any:
        return self.run_on_changes(paths)

    def __repr__(self) -> str:
        group = self.group.name if self.group is not None else None
        return f"{type(self).__name__}(name={self.name!r}, group={group!r})"
