from __future__ import annotations

import importlib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

import yaml

from warden.contract_store import default_contracts
from warden.core.errors import ValidationError
from warden.plugin import Plugin, Watcher
from warden.plugins import BUILTIN_PLUGINS
from warden.registry.plugin_registry import Group, PluginRegistry

DEFAULT_PLUGIN_KIND = "builtin.echo"


@dataclass(frozen=True)
class LoadedConfig:
    path: Path
    raw: Dict[str, Any]
    registry: PluginRegistry
    watchdir: Optional[Path] = None


def read_config(path: Path) -> Dict[str, Any]:
    """
    Parse and validate a warden.yml file; returns the raw mapping.
    """
    p = path.expanduser()
    if not p.exists() or not p.is_file():
        raise ValidationError(code="config.not_found", message=f"Config not found: {p}", data={"path": str(p)})
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValidationError(code="config.invalid", message=f"Config is not valid YAML: {p}", data={"error": str(e)}) from e
    if raw is None:
        raw = {}
    errors = validate_config(raw)
    if errors:
        raise ValidationError(
            code="config.invalid",
            message=f"Config validation failed: {p}",
            data={"errors": errors},
        )
    return raw


def validate_config(raw: Any) -> List[str]:
    return default_contracts().validate("config.schema.json", raw)


def _import_object(spec: str) -> Any:
    """
    Import by "module:attr" spec.
    """
    mod_name, _, attr = spec.partition(":")
    if not mod_name or not attr:
        raise ValidationError(code="plugin.kind_unknown", message=f"Unknown plugin kind: {spec}", data={"kind": spec})
    try:
        mod = importlib.import_module(mod_name)
    except ImportError as e:
        raise ValidationError(
            code="plugin.kind_unknown",
            message="Failed to import plugin module",
            data={"kind": spec, "module": mod_name},
        ) from e
    if not hasattr(mod, attr):
        raise ValidationError(
            code="plugin.kind_unknown",
            message="Plugin class not found in module",
            data={"kind": spec, "module": mod_name, "attr": attr},
        )
    return getattr(mod, attr)


def resolve_plugin_class(kind: str) -> Type[Plugin]:
    cls = BUILTIN_PLUGINS.get(kind)
    if cls is None:
        cls = _import_object(kind)
    if not isinstance(cls, type) or not issubclass(cls, Plugin):
        raise ValidationError(code="plugin.kind_invalid", message=f"Plugin kind is not a Plugin subclass: {kind}", data={"kind": kind})
    return cls


def _build_plugin(registry: PluginRegistry, group: Group, spec: Dict[str, Any]) -> Plugin:
    kind = spec.get("kind") or DEFAULT_PLUGIN_KIND
    cls = resolve_plugin_class(kind)
    watchers = [Watcher(p) for p in spec.get("watch") or []]
    plugin = cls(spec["name"], group=group, watchers=watchers, options=spec.get("options") or {})
    return registry.add_plugin(plugin)


def build_registry(raw: Dict[str, Any]) -> PluginRegistry:
    """
    Populate a registry from a validated config mapping.

    Top-level `plugins` land in the default group; groups and plugins keep file order.
    """
    registry = PluginRegistry()
    for spec in raw.get("plugins") or []:
        _build_plugin(registry, registry.default_group, spec)
    for group_spec in raw.get("groups") or []:
        group = registry.add_group(group_spec["name"], group_spec.get("options") or {})
        for spec in group_spec.get("plugins") or []:
            _build_plugin(registry, group, spec)
    return registry


def load_config(path: Path) -> LoadedConfig:
    raw = read_config(path)
    registry = build_registry(raw)
    watchdir = None
    if isinstance(raw.get("watchdir"), str):
        wd = Path(raw["watchdir"]).expanduser()
        watchdir = wd if wd.is_absolute() else path.expanduser().parent / wd
    return LoadedConfig(path=path, raw=raw, registry=registry, watchdir=watchdir)
