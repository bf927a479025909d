"""Template repository provisioning.

Clones the application template into the (empty) project directory and
drops its git history so the new project starts fresh.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from connectivity_generator.utils import remove_tree, run_command

from .errors import RepositoryCloneError


class RepositoryProvisioner:
    """Clones ``repo_url`` into a project directory with ``git``."""

    def __init__(self, repo_url: str, timeout: int = 300) -> None:
        self.repo_url = repo_url
        self.timeout = timeout

    async def clone(self, project_dir: Path) -> Path:
        """Clone the template into *project_dir* and remove its ``.git``.

        Returns:
            The project directory.

        Raises:
            RepositoryCloneError: If ``git clone`` exits non-zero or times out.
        """
        try:
            returncode, stdout, stderr = await run_command(
                ["git", "clone", self.repo_url, "."],
                cwd=project_dir,
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:
            raise RepositoryCloneError("git executable not found", project_dir) from exc
        if returncode != 0:
            raise RepositoryCloneError(
                f"Failed to clone repository (exit code {returncode})",
                project_dir,
                output=stderr or stdout,
            )

        git_dir = project_dir / ".git"
        if git_dir.is_dir():
            await asyncio.to_thread(remove_tree, git_dir)
        return project_dir
