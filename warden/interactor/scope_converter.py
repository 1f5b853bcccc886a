from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from warden.core.scope import Scope
from warden.registry.plugin_registry import PluginRegistry


@dataclass(frozen=True)
class ConvertedScope:
    """
    Outcome of classifying console tokens.

    - scope: plugins and groups the tokens named
    - unknown: tokens that named neither, in input order (duplicates kept)
    """

    scope: Scope = field(default_factory=Scope)
    unknown: List[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.unknown


def convert_scope(entries: Iterable[str], registry: PluginRegistry) -> ConvertedScope:
    """
    Classify each token as a plugin, else a group, else unknown.

    Plugins are looked up before groups, so a name used for both resolves to the plugin.
    Pure: the registry is only read.
    """
    plugins = []
    groups = []
    unknown: List[str] = []
    for entry in entries:
        plugin = registry.find_plugin(entry)
        if plugin is not None:
            plugins.append(plugin)
            continue
        group = registry.find_group(entry)
        if group is not None:
            groups.append(group)
            continue
        unknown.append(entry)
    return ConvertedScope(scope=Scope.of(plugins=plugins, groups=groups), unknown=unknown)
