from __future__ import annotations

import sys
from typing import Any, Dict, List

from warden.plugin import Plugin


class EchoPlugin(Plugin):
    """
    Reports matched paths on stderr (keeps stdout free for console output).

    options:
      - prefix: string prepended to each line (default: plugin name)
    """

    def _say(self, action: str, paths: List[str]) -> Dict[str, Any]:
        prefix = self.options.get("prefix") or self.name
        for p in paths:
            print(f"{prefix}: {action} {p}", file=sys.stderr)
        return {"action": action, "paths": list(paths)}

    def run_all(self) -> Dict[str, Any]:
        prefix = self.options.get("prefix") or self.name
        print(f"{prefix}: run_all", file=sys.stderr)
        return {"action": "run_all", "paths": []}

    def run_on_modifications(self, paths: List[str]) -> Dict[str, Any]:
        return self._say("modified", paths)

    def run_on_additions(self, paths: List[str]) -> Dict[str, Any]:
        return self._say("added", paths)

    def run_on_removals(self, paths: List[str]) -> Dict[str, Any]:
        return self._say("removed", paths)
