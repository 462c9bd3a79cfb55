"""Run git subprocesses with their output mirrored to the user's terminal.

On POSIX the child writes to a pseudo-terminal so git renders its
progress meters exactly as it would in an interactive shell. stdin is
inherited, so credential and host-key prompts still reach the user.
"""

from __future__ import annotations

import codecs
import logging
import os
import shlex
import shutil
import subprocess
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TextIO

from gitok.core.env import env_flag

logger = logging.getLogger(__name__)

OutputTransform = Callable[[str], str]

_READ_SIZE = 1024


class CommandError(RuntimeError):
    """Raised when a subprocess exits non-zero or cannot be started."""

    def __init__(self, command: str, returncode: int, signal: int | None = None):
        self.command = command
        self.returncode = returncode
        self.signal = signal
        super().__init__(
            f"Command failed: {command}\nExit code: {returncode}\nSignal: {signal}"
        )


class RemoteLineFilter:
    """Drop lines that start with ``remote: `` from a chunked output stream.

    Chunks may split a line anywhere, so a partial prefix at the start of a
    line is held back until it can be decided. Both ``\\n`` and ``\\r`` end a
    line; git redraws progress with ``\\r`` and a pty emits ``\\r\\n``.
    """

    prefix = "remote: "

    def __init__(self) -> None:
        self._pending: str | None = ""
        self._suppress = False
        self._swallow_lf = False

    def __call__(self, data: str) -> str:
        out: list[str] = []
        for ch in data:
            if self._swallow_lf:
                self._swallow_lf = False
                if ch == "\n":
                    continue

            if self._suppress:
                if ch in "\r\n":
                    self._suppress = False
                    self._pending = ""
                    self._swallow_lf = ch == "\r"
                continue

            if self._pending is not None:
                candidate = self._pending + ch
                if self.prefix.startswith(candidate):
                    if candidate == self.prefix:
                        self._suppress = True
                        self._pending = None
                    else:
                        self._pending = candidate
                    continue
                out.append(candidate)
                self._pending = None
            else:
                out.append(ch)

            if ch in "\r\n":
                self._pending = ""
        return "".join(out)

    def flush(self) -> str:
        """Release a held partial prefix at end of stream."""
        held = self._pending or ""
        self._pending = ""
        return held


def pty_supported() -> bool:
    return os.name == "posix"


def resolve_pty(use_pty: bool | None) -> bool:
    """GITOK_DISABLE_PTY and platform support veto; otherwise the flag decides."""
    if not pty_supported() or env_flag("GITOK_DISABLE_PTY"):
        return False
    return True if use_pty is None else use_pty


def run_command(
    args: Sequence[str],
    *,
    cwd: str | os.PathLike | None = None,
    output_transform: OutputTransform | None = None,
    use_pty: bool | None = None,
    stream: TextIO | None = None,
) -> str:
    """Run *args*, echoing (transformed) output to *stream*. Returns all output.

    Raises CommandError on non-zero exit.
    """
    argv = [str(a) for a in args]
    command = shlex.join(argv)
    out = stream if stream is not None else sys.stdout
    logger.debug("run: %s (cwd=%s)", command, cwd or os.getcwd())

    if shutil.which(argv[0]) is None:
        raise CommandError(command, 127)

    runner = _run_pty if resolve_pty(use_pty) else _run_piped
    returncode, output = runner(argv, cwd, output_transform, out)

    if returncode != 0:
        signal = -returncode if returncode < 0 else None
        raise CommandError(command, returncode, signal)
    return output


def _emit(
    text: str,
    transform: OutputTransform | None,
    out: TextIO,
) -> None:
    processed = transform(text) if transform else text
    if processed:
        out.write(processed)
        out.flush()


def _finish(transform: OutputTransform | None, out: TextIO) -> None:
    flush = getattr(transform, "flush", None)
    if flush is not None:
        tail = flush()
        if tail:
            out.write(tail)
            out.flush()


def _child_env() -> dict[str, str]:
    env = dict(os.environ)
    env["TERM"] = "xterm-256color"
    env["FORCE_COLOR"] = "1"
    return env


def _set_winsize(fd: int) -> None:
    import fcntl
    import struct
    import termios

    size = shutil.get_terminal_size((80, 24))
    fcntl.ioctl(fd, termios.TIOCSWINSZ, struct.pack("HHHH", size.lines, size.columns, 0, 0))


def _run_pty(
    argv: list[str],
    cwd: str | os.PathLike | None,
    transform: OutputTransform | None,
    out: TextIO,
) -> tuple[int, str]:
    import pty

    master, slave = pty.openpty()
    try:
        _set_winsize(slave)
        proc = subprocess.Popen(
            argv,
            cwd=cwd,
            stdout=slave,
            stderr=slave,
            env=_child_env(),
            close_fds=True,
        )
    except BaseException:
        os.close(master)
        os.close(slave)
        raise
    os.close(slave)

    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    captured: list[str] = []
    try:
        while True:
            try:
                chunk = os.read(master, _READ_SIZE)
            except OSError:
                # EIO once the child side of the pty is closed (Linux).
                break
            if not chunk:
                break
            text = decoder.decode(chunk)
            if text:
                captured.append(text)
                _emit(text, transform, out)
        tail = decoder.decode(b"", final=True)
        if tail:
            captured.append(tail)
            _emit(tail, transform, out)
        _finish(transform, out)
    finally:
        os.close(master)
        returncode = proc.wait()
    return returncode, "".join(captured)


def _run_piped(
    argv: list[str],
    cwd: str | os.PathLike | None,
    transform: OutputTransform | None,
    out: TextIO,
) -> tuple[int, str]:
    captured: list[str] = []
    with subprocess.Popen(
        argv,
        cwd=cwd,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        errors="replace",
    ) as proc:
        for line in proc.stdout:
            captured.append(line)
            _emit(line, transform, out)
        _finish(transform, out)
    return proc.returncode, "".join(captured)


def remove_directory(path: Path) -> bool:
    """Best-effort recursive delete; logs and returns False on failure."""
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        return True
    except OSError as exc:
        logger.warning("Could not remove directory %s: %s", path, exc)
        return False
    return True
