"""Subprocess-backed git collaborator."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from ggo.exceptions import CheckoutFailedError, GgoError, NotARepositoryError

logger = logging.getLogger(__name__)


class SubprocessGit:
    """GitBackend implementation that shells out to the ``git`` binary.

    Args:
        cwd: Directory commands run in. Defaults to the process cwd.
        git_binary: Executable to invoke.
    """

    def __init__(self, cwd: str | os.PathLike[str] | None = None, *, git_binary: str = "git") -> None:
        self._cwd = Path(cwd) if cwd is not None else None
        self._git = git_binary

    def _run(
        self, args: list[str], *, cwd: Path | None = None
    ) -> subprocess.CompletedProcess[str]:
        command = [self._git, *args]
        logger.debug("Running %s", " ".join(command))
        try:
            return subprocess.run(
                command,
                cwd=cwd or self._cwd,
                text=True,
                capture_output=True,
            )
        except OSError as exc:
            raise GgoError(f"Failed to execute {' '.join(command)}: {exc}") from exc

    def list_local_branches(self) -> list[str]:
        proc = self._run(["for-each-ref", "--format=%(refname:short)", "refs/heads/"])
        if proc.returncode != 0:
            raise NotARepositoryError(proc.stderr.strip())
        return [line.strip() for line in proc.stdout.splitlines() if line.strip()]

    def current_branch(self) -> str:
        proc = self._run(["branch", "--show-current"])
        if proc.returncode != 0:
            raise NotARepositoryError(proc.stderr.strip())
        branch = proc.stdout.strip()
        if not branch:
            raise GgoError("Not on a branch (detached HEAD)")
        return branch

    def checkout(self, branch_name: str) -> None:
        proc = self._run(["checkout", branch_name])
        if proc.returncode != 0:
            detail = proc.stderr.strip() or proc.stdout.strip() or "git checkout failed"
            raise CheckoutFailedError(branch_name, detail)

    def repository_root(self) -> str:
        proc = self._run(["rev-parse", "--show-toplevel"])
        if proc.returncode != 0:
            raise NotARepositoryError(proc.stderr.strip())
        return str(Path(proc.stdout.strip()).resolve())

    def repository_exists(self, repo_path: str) -> bool:
        repo = Path(repo_path)
        if not repo.is_dir():
            return False
        return self._run(["rev-parse", "--git-dir"], cwd=repo).returncode == 0

    def branch_exists(self, repo_path: str, branch_name: str) -> bool:
        repo = Path(repo_path)
        if not repo.is_dir():
            return False
        proc = self._run(
            ["show-ref", "--verify", "--quiet", f"refs/heads/{branch_name}"],
            cwd=repo,
        )
        return proc.returncode == 0
