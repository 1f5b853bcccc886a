from __future__ import annotations

from typing import Any, Dict, List, Optional

from warden.core.errors import ValidationError
from warden.plugin import Plugin

DEFAULT_GROUP = "default"


class Group:
    """
    Named collection of plugins. Hashes by identity, like Plugin.
    """

    def __init__(self, name: str, options: Optional[Dict[str, Any]] = None) -> None:
        self.name = name
        self.options: Dict[str, Any] = dict(options or {})

    @property
    def title(self) -> str:
        return self.name.capitalize()

    @property
    def halt_on_fail(self) -> bool:
        return bool(self.options.get("halt_on_fail", False))

    def __repr__(self) -> str:
        return f"Group(name={self.name!r})"


class PluginRegistry:
    """
    Catalog of groups and plugins for one session.

    - names are exact and case-sensitive
    - duplicates are denied (plugin names are unique across groups)
    - declaration order is kept for groups and plugins
    """

    def __init__(self) -> None:
        self._groups_by_name: Dict[str, Group] = {DEFAULT_GROUP: Group(DEFAULT_GROUP)}
        self._plugins_by_name: Dict[str, Plugin] = {}

    def add_group(self, name: str, options: Optional[Dict[str, Any]] = None) -> Group:
        if not isinstance(name, str) or not name:
            raise ValidationError(code="group.invalid", message="group name must be non-empty")
        existing = self._groups_by_name.get(name)
        if existing is not None:
            # The implicit default group may be declared explicitly to give it options.
            if name == DEFAULT_GROUP:
                existing.options.update(options or {})
                return existing
            raise ValidationError(code="group.duplicate", message=f"Duplicate group: {name}", data={"group": name})
        group = Group(name, options)
        self._groups_by_name[name] = group
        return group

    def add_plugin(self, plugin: Plugin) -> Plugin:
        if not plugin.name:
            raise ValidationError(code="plugin.invalid", message="plugin name must be non-empty")
        if plugin.name in self._plugins_by_name:
            raise ValidationError(
                code="plugin.duplicate",
                message=f"Duplicate plugin: {plugin.name}",
                data={"plugin": plugin.name},
            )
        if plugin.group is None:
            plugin.group = self.default_group
        elif self._groups_by_name.get(plugin.group.name) is not plugin.group:
            raise ValidationError(
                code="group.unknown",
                message=f"Plugin {plugin.name} belongs to an unregistered group: {plugin.group.name}",
            )
        self._plugins_by_name[plugin.name] = plugin
        return plugin

    def find_plugin(self, name: str) -> Optional[Plugin]:
        return self._plugins_by_name.get(name)

    @property
    def default_group(self) -> Group:
        return self._groups_by_name[DEFAULT_GROUP]

    def find_group(self, name: str) -> Optional[Group]:
        return self._groups_by_name.get(name)

    def groups(self) -> List[Group]:
        return list(self._groups_by_name.values())

    def plugins(self, group: Optional[str] = None) -> List[Plugin]:
        if group is None:
            return list(self._plugins_by_name.values())
        return [p for p in self._plugins_by_name.values() if p.group is not None and p.group.name == group]

    def list_plugins(self) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        for p in self._plugins_by_name.values():
            out.append(
                {
                    "name": p.name,
                    "group": p.group.name if p.group is not None else DEFAULT_GROUP,
                    "kind": type(p).__name__,
                    "watch": [w.pattern for w in p.watchers],
                    "options": dict(p.options),
                }
            )
        return out
