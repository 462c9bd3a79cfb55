"""Repository for config.toml read/write."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import tomlkit

from gitok.core import paths
from gitok.core.env import env_flag
from gitok.core.models import CloneOptions, GitokConfig, TerminalOptions


def create_default() -> GitokConfig:
    """Factory for the built-in defaults."""
    return GitokConfig()


# ── Serialization ───────────────────────────────────────────────────


def dump(cfg: GitokConfig) -> str:
    """Serialize a GitokConfig to a TOML string."""
    doc = tomlkit.document()
    doc.add(tomlkit.comment("gitok configuration"))
    doc.add(tomlkit.nl())

    clone = tomlkit.table()
    clone.add("depth", cfg.clone.depth)
    clone.add("filter", cfg.clone.filter)
    clone.add("single_branch", cfg.clone.single_branch)
    clone.add("no_tags", cfg.clone.no_tags)
    doc.add("clone", clone)

    terminal = tomlkit.table()
    terminal.add("pty", cfg.terminal.pty)
    terminal.add("show_remote", cfg.terminal.show_remote)
    doc.add("terminal", terminal)

    return tomlkit.dumps(doc)


def parse(text: str) -> GitokConfig:
    """Deserialize TOML text into a GitokConfig, filling gaps with defaults."""
    raw = tomlkit.loads(text)
    clone_raw = _table(raw, "clone")
    term_raw = _table(raw, "terminal")
    defaults = create_default()

    depth = clone_raw.get("depth", defaults.clone.depth)
    if not isinstance(depth, int) or isinstance(depth, bool) or depth < 1:
        raise ValueError(f"[clone] depth must be a positive integer, got {depth!r}")

    filter_spec = clone_raw.get("filter", defaults.clone.filter)
    if not isinstance(filter_spec, str) or not filter_spec:
        raise ValueError(f"[clone] filter must be a non-empty string, got {filter_spec!r}")

    return GitokConfig(
        clone=CloneOptions(
            depth=int(depth),
            filter=str(filter_spec),
            single_branch=_flag(clone_raw, "clone", "single_branch", defaults.clone.single_branch),
            no_tags=_flag(clone_raw, "clone", "no_tags", defaults.clone.no_tags),
        ),
        terminal=TerminalOptions(
            pty=_flag(term_raw, "terminal", "pty", defaults.terminal.pty),
            show_remote=_flag(term_raw, "terminal", "show_remote", defaults.terminal.show_remote),
        ),
    )


def _table(raw: Mapping, name: str) -> Mapping:
    section = raw.get(name, {})
    if not isinstance(section, Mapping):
        raise ValueError(f"[{name}] must be a table, got {section!r}")
    return section


def _flag(section: Mapping, name: str, key: str, default: bool) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"[{name}] {key} must be true or false, got {value!r}")
    return value


def load(path: Path | None = None) -> GitokConfig:
    """Read config from *path* (default location when None).

    A missing file yields defaults. GITOK_DISABLE_PTY overrides [terminal] pty.
    """
    path = path or paths.config_path()
    cfg = parse(path.read_text()) if path.is_file() else create_default()

    disable_pty = env_flag("GITOK_DISABLE_PTY")
    if disable_pty is not None:
        cfg.terminal.pty = not disable_pty
    return cfg


def save(cfg: GitokConfig, path: Path | None = None) -> Path:
    """Write config to disk, creating parent directories."""
    path = path or paths.config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump(cfg))
    return path
