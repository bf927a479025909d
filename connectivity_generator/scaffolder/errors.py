"""Exceptions raised by the scaffolder.

Every error is fatal for the current run and names the path it failed on so
the CLI can report it to the operator.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class ScaffoldError(Exception):
    """Raised when a scaffolding step fails irrecoverably."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        self.path = path
        super().__init__(f"{message}: {path}" if path is not None else message)


class FragmentNotFoundError(ScaffoldError):
    """The mandatory ``app`` fragment is missing."""


class EnvTemplateNotFoundError(ScaffoldError):
    """The project has no ``.env.example`` to derive ``.env`` from."""


class RepositoryCloneError(ScaffoldError):
    """``git clone`` of the template repository failed."""

    def __init__(self, message: str, path: Optional[Path] = None, output: str = "") -> None:
        self.output = output
        super().__init__(message, path)
