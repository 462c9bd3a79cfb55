"""I/O layer — drive git's sparse checkout for a RepoRef.

Clones with a blob filter and depth 1 so only the tree for the tip of one
branch is transferred; file contents arrive lazily for whatever the sparse
cone selects.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TextIO

from gitok.core.models import CloneOptions, RepoRef
from gitok.fetchers.git import RemoteLineFilter, run_command


def clone_args(ref: RepoRef, dest: Path, options: CloneOptions | None = None) -> list[str]:
    """Build the `git clone` argv for *ref* into *dest*."""
    options = options or CloneOptions()
    args = [
        "git", "clone",
        f"--depth={options.depth}",
        f"--filter={options.filter}",
        "--sparse",
    ]
    if options.single_branch:
        args.append("--single-branch")
    if options.no_tags:
        args.append("--no-tags")
    if ref.branch:
        args += ["-b", ref.branch]
    args += [ref.git_url, str(dest)]
    return args


def clone_sparse(
    ref: RepoRef,
    dest: Path,
    *,
    options: CloneOptions | None = None,
    show_remote: bool = False,
    use_pty: bool | None = None,
    stream: TextIO | None = None,
    on_configure: Callable[[], None] | None = None,
) -> None:
    """Clone *ref* into *dest* and narrow the checkout to ``ref.subpath``.

    With no subpath sparse checkout is disabled, giving the full tree.
    """
    def _filter() -> RemoteLineFilter | None:
        return None if show_remote else RemoteLineFilter()

    run_command(
        clone_args(ref, dest, options),
        output_transform=_filter(), use_pty=use_pty, stream=stream,
    )

    if not ref.subpath:
        run_command(
            ["git", "sparse-checkout", "disable"],
            cwd=dest, use_pty=use_pty, stream=stream,
        )
        return

    if on_configure:
        on_configure()
    run_command(
        ["git", "sparse-checkout", "init", "--cone"],
        cwd=dest, use_pty=use_pty, stream=stream,
    )
    run_command(
        ["git", "sparse-checkout", "set", ref.subpath],
        cwd=dest, output_transform=_filter(), use_pty=use_pty, stream=stream,
    )
