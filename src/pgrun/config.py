"""Run defaults from .pgrun.yml and the environment."""

import os
from dataclasses import dataclass

import yaml

CONFIG_FILE = ".pgrun.yml"
CONFIG_ENV = "PGRUN_CONFIG"

_TRUE = ("1", "true", "yes", "on")


@dataclass
class RunConfig:
    cwd: str | None = None
    check: bool = False
    debug: bool = False


def _config_path(path: str | None = None) -> str:
    return path or os.environ.get(CONFIG_ENV) or CONFIG_FILE


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE
    return bool(value)


def parse_config(data: dict | None) -> RunConfig:
    """Build a RunConfig from a parsed YAML mapping.

    Missing keys fall back to defaults; unknown keys are ignored.
    """
    data = data or {}
    if not isinstance(data, dict):
        raise ValueError(f"config must be a mapping, got {type(data).__name__}")

    cwd = data.get("cwd")
    return RunConfig(
        cwd=str(cwd) if cwd is not None else None,
        check=_as_bool(data.get("check", False)),
        debug=_as_bool(data.get("debug", False)),
    )


def load_config(path: str | None = None) -> RunConfig:
    """Read the config file, or return defaults if there is none."""
    try:
        with open(_config_path(path)) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        return RunConfig()
    return parse_config(data)


def validate(config: RunConfig) -> list[str]:
    """Return a list of problems with the config (empty when usable)."""
    problems = []
    if config.cwd is not None and not os.path.isdir(config.cwd):
        problems.append(f"cwd is not a directory: {config.cwd}")
    return problems
