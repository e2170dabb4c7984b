"""Timestamped output, debug traces + GitHub Actions formatting."""

import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime

DEBUG_ENV = "PGRUN_DEBUG"

_forced_debug: ContextVar[bool] = ContextVar("pgrun_forced_debug", default=False)


def _timestamp() -> str:
    return datetime.now().strftime("%H:%M:%S")


def _is_github_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS") == "true"


def debug_enabled() -> bool:
    if _forced_debug.get():
        return True
    return os.environ.get(DEBUG_ENV, "").lower() in ("1", "true", "yes")


@contextmanager
def debug_traces():
    """Turn debug output on for the enclosed block only."""
    token = _forced_debug.set(True)
    try:
        yield
    finally:
        _forced_debug.reset(token)


def info(msg: str) -> None:
    print(f"[{_timestamp()}] {msg}", flush=True)


def debug(msg: str) -> None:
    # stderr so traces never mix with a command's captured stdout
    if debug_enabled():
        print(f"[{_timestamp()}] DEBUG: {msg}", file=sys.stderr, flush=True)


def error(msg: str) -> None:
    if _is_github_actions():
        print(f"::error::{msg}", flush=True)
    print(f"[{_timestamp()}] ERROR: {msg}", file=sys.stderr, flush=True)
