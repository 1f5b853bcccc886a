from .plugin_registry import DEFAULT_GROUP, Group, PluginRegistry

__all__ = ["DEFAULT_GROUP", "Group", "PluginRegistry"]
