from __future__ import annotations

import shlex
from typing import Any, Callable, List, Optional, Sequence, Tuple

from warden.core.errors import CommandNotFound, ValidationError

CommandFunc = Callable[[Sequence[str]], Any]


class CommandRegistry:
    """
    Dispatch table: command name -> handler, independent of any console library.
    """

    def __init__(self) -> None:
        self._defs: dict[str, dict[str, Any]] = {}
        self._impls: dict[str, CommandFunc] = {}

    def register(self, command_def: dict[str, Any], impl: CommandFunc) -> None:
        name = command_def["name"]
        self._defs[name] = command_def
        self._impls[name] = impl

    def alias(self, alias: str, name: str) -> None:
        d = self._defs.get(name)
        if d is None:
            raise KeyError(name)
        self._defs[alias] = dict(d, name=alias, alias_of=name)
        self._impls[alias] = self._impls[name]

    def get(self, name: str) -> dict[str, Any] | None:
        return self._defs.get(name)

    def call(self, name: str, args: Sequence[str]) -> Any:
        impl = self._impls.get(name)
        if impl is None:
            raise CommandNotFound(code="command.unknown", message=f"Unknown command: {name}", data={"command": name})
        return impl(list(args))

    def list_commands(self) -> list[dict[str, Any]]:
        return [self._defs[k] for k in sorted(self._defs.keys())]

    def names(self) -> List[str]:
        return sorted(self._defs.keys())

    def dispatch(self, line: str) -> Optional[Tuple[str, Any]]:
        """
        Split a console line into a command name and tokens and run it.

        Returns None for blank lines, else (name, handler result).
        """
        try:
            parts = shlex.split(line)
        except ValueError as e:
            raise ValidationError(code="command.parse_error", message=str(e), data={"line": line}) from e
        if not parts:
            return None
        name, args = parts[0], parts[1:]
        return name, self.call(name, args)
