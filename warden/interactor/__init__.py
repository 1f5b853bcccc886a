from .scope_converter import ConvertedScope, convert_scope
from .command_registry import CommandRegistry
from .commands import (
    AllCommand,
    ChangeCommand,
    ConsoleSignal,
    ExitCommand,
    HelpCommand,
    PauseCommand,
    ScopeCommand,
    ScopeOutcome,
    ShowCommand,
)
from .console import Interactor

__all__ = [
  "ConvertedScope",
  "convert_scope",
  "CommandRegistry",
  "AllCommand",
  "ChangeCommand",
  "ConsoleSignal",
  "ExitCommand",
  "HelpCommand",
  "PauseCommand",
  "ScopeCommand",
  "ScopeOutcome",
  "ShowCommand",
  "Interactor",
]
