"""CLI entry point — a single Click command."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from gitok import __version__
from gitok.core import paths
from gitok.core.env import load_user_env
from gitok.core.models import CloneEvent

load_user_env()


def _examples(root_name: str) -> str:
    lines = [
        "Examples:",
        "  # Clone the entire repository",
        f"  $ {root_name} https://github.com/user/repo",
        "",
        "  # Clone only a subdirectory from GitHub",
        f"  $ {root_name} https://github.com/user/repo/tree/main/path/to/subdir",
        "",
        "  # Clone only a subdirectory from GitLab",
        f"  $ {root_name} https://gitlab.com/group/project/-/tree/master/path/to/subdir",
    ]
    return "\n".join(lines)


class GitokCommand(click.Command):
    """Click command that appends usage examples to help output."""

    def get_help(self, ctx: click.Context) -> str:
        base = super().get_help(ctx)
        root_name = ctx.find_root().info_name or "gitok"
        return f"{base}\n\n{_examples(root_name)}"


def _describe(ev: CloneEvent) -> str:
    ref = ev.ref
    info = click.style("repo:", dim=True) + click.style(ref.slug, fg="blue")
    if ref.branch:
        info += " " + click.style("branch:", dim=True) + click.style(ref.branch, fg="yellow")
    if ref.subpath:
        info += " " + click.style("path:", dim=True) + click.style(ref.subpath, fg="green")
    info += " -> " + click.style(f"./{ev.output}", fg="cyan")
    return info


def _on_event(ev: CloneEvent) -> None:
    match ev.action:
        case "resolved":
            click.echo(_describe(ev))
        case "configuring":
            click.echo("Configuring sparse-checkout...")
        case "done":
            click.echo(f"Done: {ev.output.resolve()} ({ev.elapsed:.2f}s)")


@click.command(cls=GitokCommand)
@click.argument("url", required=False)
@click.argument("output_arg", metavar="[OUTPUT]", required=False)
@click.option("-o", "--output", default=None, help="Output directory name (default: subdirectory or repository name).")
@click.option("-b", "--branch", default=None, help="Branch to clone from (overrides the URL).")
@click.option("-v", "--verbose", is_flag=True, help="Show detailed output logs.")
@click.option(
    "--config", "config_path", default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file (default: ~/.config/gitok/config.toml).",
)
@click.option("--write-config", is_flag=True, help="Write a default config file and exit (takes no URL).")
@click.version_option(__version__, prog_name="gitok")
@click.pass_context
def cli(
    ctx: click.Context,
    url: str | None,
    output_arg: str | None,
    output: str | None,
    branch: str | None,
    verbose: bool,
    config_path: Path | None,
    write_config: bool,
) -> None:
    """Quickly clone specific parts of git repositories.

    URL is a GitHub or GitLab repository URL, either the repository root
    or a tree URL pointing at a subdirectory. OUTPUT optionally names the
    destination directory.
    """
    from gitok.fetchers.git import CommandError
    from gitok.repo import config
    from gitok.services.clone import gitok

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if write_config:
        if url is not None:
            raise click.UsageError("--write-config does not take a URL.")
        target = config_path or paths.config_path()
        if target.exists():
            raise click.ClickException(f"Config file '{target}' already exists.")
        written = config.save(config.create_default(), target)
        click.echo(f"✔ Wrote {written}")
        return

    if url is None:
        click.echo(ctx.get_help())
        ctx.exit(0)

    try:
        cfg = config.load(config_path)
        gitok(
            url,
            output=output_arg or output,
            branch=branch,
            verbose=verbose,
            cfg=cfg,
            on_event=_on_event,
        )
    except (ValueError, FileExistsError, FileNotFoundError, CommandError) as exc:
        raise click.ClickException(str(exc)) from exc


def main() -> None:
    cli(prog_name="gitok")


def main_gitik() -> None:
    cli(prog_name="gitik")
