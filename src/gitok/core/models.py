"""Data shapes for parsed repository references and clone runs."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Literal


# ── Reference layer ─────────────────────────────────────────────────


@dataclass(frozen=True)
class RepoRef:
    """A GitHub/GitLab location: repository, optional branch and subdirectory."""

    platform: Literal["github", "gitlab"]
    host: str
    owner: str
    repo: str
    branch: str | None = None
    subpath: str = ""

    @property
    def repo_name(self) -> str:
        return self.repo

    @property
    def git_url(self) -> str:
        return f"https://{self.host}/{self.owner}/{self.repo}.git"

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    def with_branch(self, branch: str | None) -> RepoRef:
        """Return a copy pinned to *branch* (no-op when *branch* is empty)."""
        if not branch:
            return self
        return replace(self, branch=branch)


# ── Config layer ────────────────────────────────────────────────────


@dataclass
class CloneOptions:
    """Mirrors the [clone] table — flags passed to `git clone`."""

    depth: int = 1
    filter: str = "blob:none"
    single_branch: bool = True
    no_tags: bool = True


@dataclass
class TerminalOptions:
    """Mirrors the [terminal] table — how git output reaches the user."""

    pty: bool = True
    show_remote: bool = False


@dataclass
class GitokConfig:
    """Root configuration object for config.toml."""

    clone: CloneOptions = field(default_factory=CloneOptions)
    terminal: TerminalOptions = field(default_factory=TerminalOptions)


# ── Run layer ───────────────────────────────────────────────────────


@dataclass
class CloneEvent:
    """Progress report emitted while a clone runs."""

    action: str  # "resolved" | "cloning" | "configuring" | "extracting" | "done"
    ref: RepoRef
    output: Path
    elapsed: float = 0.0


@dataclass
class CloneResult:
    """Summary of a finished clone."""

    ref: RepoRef
    output: Path
    elapsed: float = 0.0
