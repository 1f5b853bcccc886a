from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, FrozenSet, Iterable, List

if TYPE_CHECKING:
    from warden.plugin import Plugin
    from warden.registry.plugin_registry import Group


@dataclass(frozen=True)
class Scope:
    """
    Immutable selection of plugins and groups.

    Instances are swapped whole into SessionState, so a reader always sees
    references from a single assignment.
    """

    plugins: FrozenSet["Plugin"] = frozenset()
    groups: FrozenSet["Group"] = frozenset()

    @classmethod
    def of(cls, plugins: Iterable["Plugin"] = (), groups: Iterable["Group"] = ()) -> "Scope":
        return cls(plugins=frozenset(plugins), groups=frozenset(groups))

    def is_empty(self) -> bool:
        return not self.plugins and not self.groups

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "plugins": sorted(p.name for p in self.plugins),
            "groups": sorted(g.name for g in self.groups),
        }

    def title(self) -> str:
        names = self.to_dict()
        parts = names["groups"] + names["plugins"]
        return ",".join(parts)
