"""Git operations used while scaffolding: ``git init`` and framework clones."""

from __future__ import annotations

import re
from pathlib import Path

from cppforge.utils import run_command


class VcsError(Exception):
    """Raised when a git command fails or git is not installed."""

    def __init__(self, message: str, command: str = "", stderr: str = ""):
        self.command = command
        self.stderr = stderr
        super().__init__(message)


async def _run_git(
    *args: str,
    cwd: str | Path | None = None,
    git_binary: str = "git",
    timeout: float = 300.0,
) -> str:
    """Run a git command and return its stdout.

    Raises VcsError if git is missing or exits with a non-zero code.
    """
    cmd = [git_binary, *args]
    cmd_str = " ".join(cmd)

    try:
        returncode, stdout, stderr = await run_command(cmd, cwd=cwd, timeout=timeout)
    except (FileNotFoundError, PermissionError) as exc:
        raise VcsError(
            f"Cannot execute '{git_binary}': {exc}. Is git installed and in PATH?",
            command=cmd_str,
        ) from exc

    if returncode != 0:
        raise VcsError(
            f"Git command failed (exit {returncode}): {cmd_str}\n{stderr}",
            command=cmd_str,
            stderr=stderr,
        )
    return stdout


def repo_name_from_url(url: str) -> str:
    """``https://github.com/juce-framework/JUCE.git`` -> ``JUCE``."""
    tail = re.split(r"[/:\\]", url.rstrip("/"))[-1]
    name = tail[: -len(".git")] if tail.endswith(".git") else tail
    if not name:
        raise VcsError(f"Cannot derive a directory name from repository URL: {url!r}")
    return name


async def init_repository(path: Path, git_binary: str = "git") -> None:
    await _run_git("init", cwd=path, git_binary=git_binary)


async def clone_framework(
    url: str,
    destination: Path,
    ref: str | None = None,
    git_binary: str = "git",
) -> Path:
    """Shallow-clone *url* into *destination*, optionally at branch/tag *ref*."""
    args = ["clone", "--depth", "1"]
    if ref:
        args += ["--branch", ref]
    args += [url, str(destination)]
    await _run_git(*args, git_binary=git_binary)
    return destination
