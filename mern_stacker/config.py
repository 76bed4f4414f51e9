"""mern-stacker runtime configuration.

Where a project is created and which template store is used are explicit
settings threaded into :class:`~mern_stacker.scaffolder.ProjectGenerator`.
The engine never reads the process working directory or the environment
itself; :meth:`Config.from_env` is the one place that does, and only the
command-line entry point calls it.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field

# Set by npm/pnpm/bun to the directory the user invoked the runner from.
ENV_INIT_CWD = "INIT_CWD"
ENV_CWD = "MERN_STACKER_CWD"
ENV_TEMPLATES = "MERN_STACKER_TEMPLATES"


class Config(BaseModel):
    """Settings for one scaffolding run.

    Attributes:
        cwd: Directory in which ``<project name>/`` is created.
        templates_dir: Explicit template store location.  When ``None`` the
            store bundled with the package is used.
    """

    cwd: Path = Field(default_factory=Path.cwd)
    templates_dir: Path | None = Field(default=None)

    def project_path(self, project_name: str) -> Path:
        """Absolute path of the project directory for *project_name*."""
        return (self.cwd / project_name).resolve()

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            INIT_CWD, MERN_STACKER_CWD (first non-empty wins, falling back to
            the process working directory), MERN_STACKER_TEMPLATES.
        """
        cwd = os.environ.get(ENV_INIT_CWD) or os.environ.get(ENV_CWD)
        templates = os.environ.get(ENV_TEMPLATES)
        return cls(
            cwd=Path(cwd) if cwd else Path.cwd(),
            templates_dir=Path(templates) if templates else None,
        )
