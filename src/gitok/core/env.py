"""Runtime environment helpers.

gitok reads two variables, GITOK_CONFIG and GITOK_DISABLE_PTY. Besides the
process environment they may come from a dotenv-style file; values already
present in the environment always win.
"""

from __future__ import annotations

import os
from pathlib import Path

ENV_KEYS = ("GITOK_CONFIG", "GITOK_DISABLE_PTY")

_TRUTHY = {"1", "true", "yes", "on"}
_loaded = False


def env_flag(name: str) -> bool | None:
    """Read a boolean env var; None when unset or blank."""
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return None
    return raw in _TRUTHY


def env_files() -> list[Path]:
    """$GITOK_ENV_FILE if set, else ~/.config/gitok/env."""
    override = os.environ.get("GITOK_ENV_FILE", "").strip()
    if override:
        return [Path(override).expanduser()]
    return [Path.home() / ".config" / "gitok" / "env"]


def read_env_file(path: Path) -> dict[str, str]:
    """Parse ``KEY=value`` lines, keeping only gitok's own keys."""
    values: dict[str, str] = {}
    for raw_line in path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.removeprefix("export ").partition("=")
        key = key.strip()
        if not sep or key not in ENV_KEYS:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        values[key] = value
    return values


def load_user_env(files: list[Path] | None = None) -> dict[str, str]:
    """Apply env file values that are not already set; return what was applied.

    Without *files* the default locations are read, once per process.
    """
    global _loaded
    if files is None:
        if _loaded:
            return {}
        _loaded = True
        files = env_files()

    applied: dict[str, str] = {}
    for path in files:
        if not path.is_file():
            continue
        for key, value in read_env_file(path).items():
            if key in os.environ or key in applied:
                continue
            os.environ[key] = value
            applied[key] = value
    return applied
