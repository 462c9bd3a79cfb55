"""Path constants and output-directory resolution."""

from __future__ import annotations

import os
from pathlib import Path, PurePosixPath

from gitok.core.models import RepoRef

CONFIG_DIR = Path(".config") / "gitok"
CONFIG_TOML = "config.toml"
TEMP_INFIX = "_temp_"


def config_path() -> Path:
    """Return $GITOK_CONFIG if set, else ~/.config/gitok/config.toml."""
    override = os.environ.get("GITOK_CONFIG", "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / CONFIG_DIR / CONFIG_TOML


def output_dir(ref: RepoRef, explicit: str | os.PathLike | None = None) -> Path:
    """Pick the destination: explicit name > subdirectory basename > repo name."""
    if explicit:
        return Path(explicit)
    if ref.subpath:
        return Path(PurePosixPath(ref.subpath).name)
    return Path(ref.repo_name)


def temp_dir(output: Path, stamp_ms: int) -> Path:
    return output.with_name(f"{output.name}{TEMP_INFIX}{stamp_ms}")
