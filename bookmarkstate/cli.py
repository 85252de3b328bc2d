from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List, Mapping

from . import __version__
from .bookmarks_state import (
    StructuralContractError,
    get_bookmarks,
    get_bookmarks_by_parent_id,
    get_bookmarks_with_folders,
    update_favicon,
    validate_state,
)
from .cache import find_stale_keys
from .config import load_settings
from .log import LogConfig, get_logger, setup_logging

log = get_logger(__name__)


def main(argv: List[str] | None = None) -> int:
    p = argparse.ArgumentParser(
        prog="bookmarkstate",
        description="Inspect a JSON snapshot of a bookmark state tree (read-only).",
    )
    p.add_argument("-V", "--version", action="version", version=f"bookmarkstate {__version__}")
    p.add_argument("--config", default=None, help="YAML config file (optional). Env vars override defaults.")
    p.add_argument("--log-level", default=None, help="DEBUG/INFO/WARN/ERROR (overrides env/config).")
    p.add_argument("--state-log-level", default=None, help="Log level for the state layers only (e.g. DEBUG).")
    p.add_argument("--no-color", action="store_true", help="Disable colored logging.")
    sub = p.add_subparsers(dest="cmd", required=True)

    ls = sub.add_parser("list", help="Print the records of one folder in display order.")
    ls.add_argument("--state", required=True, help="JSON state snapshot.")
    ls.add_argument("--parent", type=int, default=None, help="Parent folder id (default from config).")
    ls.add_argument("--with-folders", action="store_true", help="Include folder records.")

    fav = sub.add_parser("favicon", help="Show which bookmarks a favicon update would touch.")
    fav.add_argument("--state", required=True, help="JSON state snapshot.")
    fav.add_argument("--location", required=True, help="Page URL.")
    fav.add_argument("--favicon", required=True, help="Favicon URL.")

    chk = sub.add_parser("check", help="Report index keys that no longer match the records.")
    chk.add_argument("--state", required=True, help="JSON state snapshot.")

    args = p.parse_args(argv)
    cfg = load_settings(args.config)
    if args.log_level:
        cfg.log_level = args.log_level
    if args.state_log_level:
        cfg.state_log_level = args.state_log_level
    if args.no_color:
        cfg.no_color = True
    setup_logging(LogConfig(level=cfg.log_level, no_color=cfg.no_color, state_level=cfg.state_log_level or None))

    state = _load_state(Path(args.state))
    if state is None:
        return 2

    try:
        if args.cmd == "list":
            parent = args.parent if args.parent is not None else cfg.default_parent_folder_id
            return _cmd_list(state, parent, with_folders=args.with_folders)
        if args.cmd == "favicon":
            return _cmd_favicon(state, args.location, args.favicon, schemes=cfg.url_schemes)
        if args.cmd == "check":
            return _cmd_check(state)
    except StructuralContractError as e:
        log.error("Invalid state in %s: %s", args.state, e)
        return 2
    return 2


def _load_state(path: Path) -> Mapping[str, Any] | None:
    if not path.exists():
        log.error("State file not found: %s", path)
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        log.error("Failed to read state JSON %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        log.error("State JSON must be an object: %s", path)
        return None
    return data


def _cmd_list(state: Mapping[str, Any], parent: int, *, with_folders: bool) -> int:
    if with_folders:
        records = get_bookmarks_with_folders(state, parent)
    else:
        records = get_bookmarks_by_parent_id(state, parent)
    for r in records:
        sys.stdout.write(json.dumps(r, ensure_ascii=False, sort_keys=True) + "\n")
    log.info("Listed %d record(s) under parent %s.", len(records), parent)
    return 0


def _cmd_favicon(state: Mapping[str, Any], location: str, favicon: str, *, schemes) -> int:
    before = get_bookmarks(state)
    after = get_bookmarks(update_favicon(state, location, favicon, schemes=schemes))
    changed = sorted(k for k, v in after.items() if v is not before.get(k))
    sys.stdout.write(json.dumps({"location": location, "favicon": favicon, "keys": changed}) + "\n")
    if not changed:
        log.info("No bookmarks matched %s.", location)
    return 0


def _cmd_check(state: Mapping[str, Any]) -> int:
    report = find_stale_keys(validate_state(state))
    sys.stdout.write(json.dumps(report, indent=2, sort_keys=True) + "\n")
    problems = sum(len(v) for v in report.values())
    if problems:
        log.warning("Found %d index key(s) out of sync with the records.", problems)
        return 1
    log.info("Indices are consistent with the records.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
