from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class RuntimeContext:
    """
    Runtime configuration for one console session.

    - config_path: YAML file declaring groups and plugins.
    - watchdir: change paths are matched relative to this directory
      (None: the config `watchdir`, else the current directory).
    - trace_path: JSONL event stream for the session.
    """

    run_id: str
    config_path: Path = Path("warden.yml")
    watchdir: Optional[Path] = None
    trace_path: Path = Path("trace.jsonl")
