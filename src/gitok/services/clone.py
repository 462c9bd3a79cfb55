"""Clone service — resolve, fetch, extract and clean up."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable
from pathlib import Path
from typing import TextIO

from gitok import fetchers
from gitok.core import paths
from gitok.core.models import CloneEvent, CloneResult, GitokConfig
from gitok.core.urls import parse_git_url
from gitok.fetchers.git import remove_directory
from gitok.repo import config

logger = logging.getLogger(__name__)


def gitok(
    url: str,
    *,
    output: str | os.PathLike | None = None,
    branch: str | None = None,
    verbose: bool = False,
    cfg: GitokConfig | None = None,
    on_event: Callable[[CloneEvent], None] | None = None,
    stream: TextIO | None = None,
) -> CloneResult:
    """Download *url* (a repo root or a tree URL) into a fresh directory.

    The destination must not exist. On any failure the partially created
    directory is removed before the error propagates.
    """
    emit = on_event or (lambda _ev: None)
    t0 = time.monotonic()
    cfg = cfg or config.load()

    ref = parse_git_url(url).with_branch(branch)
    dest = paths.output_dir(ref, output)
    emit(CloneEvent("resolved", ref, dest))

    if dest.exists():
        raise FileExistsError(
            f"Directory '{dest}' already exists. Please choose a different "
            "output directory or remove the existing one."
        )

    temp: Path | None = None
    try:
        emit(CloneEvent("cloning", ref, dest))
        fetchers.clone_sparse(
            ref,
            dest,
            options=cfg.clone,
            show_remote=verbose or cfg.terminal.show_remote,
            use_pty=cfg.terminal.pty,
            stream=stream,
            on_configure=lambda: emit(CloneEvent("configuring", ref, dest)),
        )

        if ref.subpath:
            emit(CloneEvent("extracting", ref, dest))
            temp = _extract_subdir(ref.subpath, dest, ref.slug)
            remove_directory(temp)
            temp = None

        git_dir = dest / ".git"
        if git_dir.is_dir():
            remove_directory(git_dir)
    except BaseException:
        _cleanup(dest, temp)
        raise

    elapsed = time.monotonic() - t0
    emit(CloneEvent("done", ref, dest, elapsed))
    return CloneResult(ref=ref, output=dest.resolve(), elapsed=elapsed)


def _extract_subdir(subpath: str, dest: Path, slug: str) -> Path:
    """Make ``dest/subpath`` the new *dest*; return the leftover temp tree."""
    source = dest / subpath
    if not source.is_dir():
        raise FileNotFoundError(f"Path '{subpath}' not found in {slug}")

    temp = paths.temp_dir(dest, int(time.time() * 1000))
    logger.debug("extract %s via %s", source, temp)
    os.rename(dest, temp)
    try:
        os.rename(temp / subpath, dest)
    except OSError:
        # Put the checkout back so cleanup sees a single tree.
        os.rename(temp, dest)
        raise
    return temp


def _cleanup(dest: Path, temp: Path | None) -> None:
    for path in (dest, temp):
        if path is not None and path.exists():
            logger.debug("cleanup %s", path)
            remove_directory(path)
