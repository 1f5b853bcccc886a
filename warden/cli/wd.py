from __future__ import annotations

import argparse
import json
import os
import re
import sys
from pathlib import Path

from warden import __version__
from warden.bootstrap import bootstrap, build_session_commands
from warden.config import build_registry, load_config, read_config
from warden.core.errors import WardenError
from warden.core.runtime_context import RuntimeContext
from warden.interactor.console import Interactor
from warden.trace.replay import Replay

_ENV_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _load_dotenv_from_file(path: Path) -> None:
    """
    Minimal dotenv loader (no dependencies).

    - Supports lines like KEY=VALUE (optionally prefixed with 'export ')
    - Ignores empty lines and comments (# ...)
    - Strips single/double quotes around values
    - Does not override already-present environment variables
    """
    p = path
    if not p.exists() or not p.is_file():
        return
    try:
        txt = p.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return
    for raw_line in txt.splitlines():
        s = raw_line.strip()
        if not s or s.startswith("#"):
            continue
        if s.startswith("export "):
            s = s[len("export ") :].lstrip()
        if "=" not in s:
            continue
        k, v = s.split("=", 1)
        k = k.strip()
        v = v.strip()
        if not k or not _ENV_KEY_RE.match(k):
            continue
        if k in os.environ:
            continue
        if len(v) >= 2 and ((v[0] == v[-1] == '"') or (v[0] == v[-1] == "'")):
            v = v[1:-1]
        os.environ[k] = v


def _maybe_load_dotenv() -> None:
    cwd = Path.cwd()
    for name in (".env", "env"):
        _load_dotenv_from_file(cwd / name)


def _default_config_path() -> str:
    v = os.environ.get("WARDEN_CONFIG")
    if isinstance(v, str) and v.strip():
        return v.strip()
    return "warden.yml"


def _format_cli_error(e: Exception) -> str:
    """
    Print-friendly error formatting for CLI commands.
    - Always includes code/message (via __str__) when it's a WardenError
    - Includes structured `data` payload when present
    """
    if isinstance(e, WardenError) and isinstance(e.data, dict) and e.data:
        return str(e) + "\n" + json.dumps(e.data, ensure_ascii=False, indent=2, default=str)
    return str(e)


def cmd_start(args: argparse.Namespace) -> int:
    ctx = RuntimeContext(
        run_id=args.run_id,
        config_path=Path(args.config),
        watchdir=Path(args.watchdir) if args.watchdir else None,
        trace_path=Path(args.trace),
    )
    warden = bootstrap(ctx, groups=args.group or [], plugins=args.plugin or [])
    commands = build_session_commands(warden)
    print(f"Warden is now watching at '{warden.watchdir}'", file=sys.stderr)
    return Interactor(commands, warden.state, trace=warden.trace).run()


def cmd_list(args: argparse.Namespace) -> int:
    loaded = load_config(Path(args.config))
    plugins = loaded.registry.list_plugins()
    if args.json:
        print(json.dumps(plugins, ensure_ascii=False, indent=2))
    else:
        for p in plugins:
            print("{name} ({group})".format(**p))
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    loaded = load_config(Path(args.config))
    registry = loaded.registry
    for group in registry.groups():
        plugins = registry.plugins(group.name)
        if not plugins and not group.options:
            continue
        print(f"Group {group.name}:" + (f" {json.dumps(group.options, sort_keys=True)}" if group.options else ""))
        for p in plugins:
            print(f"  {p.name} [{type(p).__name__}]")
            for w in p.watchers:
                print(f"    watch: {w.pattern}")
            for k in sorted(p.options):
                print(f"    {k}: {json.dumps(p.options[k], ensure_ascii=False)}")
    return 0


def cmd_check_config(args: argparse.Namespace) -> int:
    raw = read_config(Path(args.config))
    # Plugin kinds and watch patterns are only checked by building the registry.
    build_registry(raw)
    print("Config OK")
    return 0


def cmd_show_trace(args: argparse.Namespace) -> int:
    events = Replay(Path(args.trace)).select(event_type=args.event_type, tail=args.tail)
    for e in events:
        if args.pretty:
            print(json.dumps(e, ensure_ascii=False, indent=2))
        else:
            print(json.dumps(e, ensure_ascii=False))
    return 0


def cmd_version(_args: argparse.Namespace) -> int:
    print(f"Warden version {__version__}")
    return 0


def main(argv=None) -> int:
    if str(os.environ.get("WARDEN_DISABLE_DOTENV", "")).strip().lower() not in ("1", "true", "yes"):
        _maybe_load_dotenv()
    default_config = _default_config_path()
    parser = argparse.ArgumentParser(prog="wd", description="Warden CLI")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_start = sub.add_parser("start", help="Load the config and start the interactive console")
    p_start.add_argument("--config", default=default_config, help="Config path (default: $WARDEN_CONFIG or warden.yml)")
    p_start.add_argument("--group", "-g", action="append", default=[], help="Only run plugins of this group (repeatable)")
    p_start.add_argument("--plugin", "-P", action="append", default=[], help="Only run this plugin (repeatable)")
    p_start.add_argument("--watchdir", "-w", help="Directory change paths are relative to (default: config watchdir or cwd)")
    p_start.add_argument("--trace", default="trace.jsonl", help="Trace output path (jsonl)")
    p_start.add_argument("--run-id", default="run_cli", help="Run ID for trace correlation")
    p_start.set_defaults(func=cmd_start)

    p_list = sub.add_parser("list", help="List configured plugins")
    p_list.add_argument("--config", default=default_config, help="Config path")
    p_list.add_argument("--json", action="store_true", help="Output JSON")
    p_list.set_defaults(func=cmd_list)

    p_show = sub.add_parser("show", help="Show groups and plugins with their options")
    p_show.add_argument("--config", default=default_config, help="Config path")
    p_show.set_defaults(func=cmd_show)

    p_check = sub.add_parser("check-config", help="Validate the config file")
    p_check.add_argument("--config", default=default_config, help="Config path")
    p_check.set_defaults(func=cmd_check_config)

    p_show_trace = sub.add_parser("show-trace", help="Show trace events from a JSONL file")
    p_show_trace.add_argument("--trace", required=True, help="Trace path (jsonl)")
    p_show_trace.add_argument("--event-type", help="Filter by event_type")
    p_show_trace.add_argument("--tail", type=int, help="Show only last N events")
    p_show_trace.add_argument("--pretty", action="store_true", help="Pretty-print each event as JSON")
    p_show_trace.set_defaults(func=cmd_show_trace)

    p_version = sub.add_parser("version", help="Show the version")
    p_version.set_defaults(func=cmd_version)

    ns = parser.parse_args(argv)
    try:
        return int(ns.func(ns))
    except Exception as e:  # noqa: BLE001
        print(_format_cli_error(e))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
