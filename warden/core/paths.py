from __future__ import annotations

import os
from pathlib import Path


def normalize_path(p: str | Path) -> Path:
    # Deterministic normalization: expand env + ~ then resolve to absolute path.
    return Path(os.path.expandvars(os.path.expanduser(str(p)))).resolve()


def relative_to_watchdir(path_str: str, watchdir: Path) -> str:
    """
    Express a change path relative to the watch directory (posix separators).

    Paths outside the watch directory are returned normalized but absolute.
    """
    root = normalize_path(watchdir)
    p = Path(path_str)
    if not p.is_absolute():
        p = root / p
    p = normalize_path(p)
    if str(p) == str(root):
        return "."
    if str(p).startswith(str(root) + os.sep):
        return p.relative_to(root).as_posix()
    return p.as_posix()
