import shlex
from pathlib import Path

import pytest
from click.testing import CliRunner

from gitok.fetchers.git import CommandError


@pytest.fixture
def runner():
    """Click CLI runner fixture."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch):
    """Run every test from an empty work dir with no user config."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    monkeypatch.setenv("GITOK_CONFIG", str(tmp_path / "cfg" / "config.toml"))
    monkeypatch.delenv("GITOK_DISABLE_PTY", raising=False)
    return work


class FakeGit:
    """Stand-in for run_command that mimics the filesystem effects of git."""

    def __init__(self, tree: dict[str, str]):
        self.tree = tree
        self.calls: list[dict] = []
        self.fail_on: str | None = None

    def __call__(self, args, *, cwd=None, output_transform=None, use_pty=None, stream=None):
        args = [str(a) for a in args]
        self.calls.append({"args": args, "cwd": cwd, "transform": output_transform})

        if args[:2] == ["git", "clone"]:
            dest = Path(args[-1])
            dest.mkdir()
            (dest / ".git").mkdir()
            (dest / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
            for rel, content in self.tree.items():
                path = dest / rel
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(content)

        if self.fail_on and self.fail_on in args:
            raise CommandError(shlex.join(args), 128)
        return ""

    @property
    def argv(self) -> list[list[str]]:
        return [c["args"] for c in self.calls]


@pytest.fixture
def fake_git(monkeypatch):
    """Patch git invocations with a FakeGit holding a small repository tree."""
    fake = FakeGit({
        "README.md": "# repo\n",
        "media/logo.svg": "<svg/>",
        "media/icons/a.png": "png",
        "docs/guide.md": "guide",
    })
    monkeypatch.setattr("gitok.fetchers.run_command", fake)
    return fake
