"""
vcs.py

Responsibility: Answer the read-only git questions a recipe needs.

`VersionControl` is the seam the rest of the package depends on; `GitClient`
is the subprocess-backed implementation. Tests substitute an in-memory fake.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Protocol

from loguru import logger


class GitError(RuntimeError):
    pass


class VersionControl(Protocol):
    def current_remote_url(self) -> str: ...

    def current_branch(self) -> str: ...

    def current_revision(self) -> str: ...


class GitClient:
    def __init__(self, cwd: str | Path, git: str = "git") -> None:
        self._cwd = Path(cwd)
        self._git = git

    def _run(self, args: list[str]) -> str:
        """
        Run a git command and return its output without the trailing newline.

        stderr is folded into stdout so a failure message carries both.
        """
        cmd = [self._git, *args]
        logger.debug("Running {}", " ".join(cmd))
        try:
            proc = subprocess.run(cmd, cwd=str(self._cwd), stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True)
        except OSError as e:
            raise GitError(f"Command \"{' '.join(cmd)}\" failed with reason: {e}") from e
        if proc.returncode != 0:
            raise GitError(f"Command \"{' '.join(cmd)}\" failed with reason: {proc.stdout}")
        return proc.stdout.rstrip("\n")

    def current_remote_url(self) -> str:
        return self._run(["config", "--get", "remote.origin.url"])

    def current_branch(self) -> str:
        return self._run(["rev-parse", "--abbrev-ref", "HEAD"])

    def current_revision(self) -> str:
        return self._run(["rev-parse", "HEAD"])
