from .errors import CommandNotFound, PluginExecutionError, ValidationError, WardenError
from .runtime_context import RuntimeContext
from .scope import Scope

__all__ = [
  "CommandNotFound",
  "PluginExecutionError",
  "ValidationError",
  "WardenError",
  "RuntimeContext",
  "Scope",
]
