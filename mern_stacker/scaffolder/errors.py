"""Exceptions raised by the template composition engine.

Every error is fatal to a scaffolding run.  Each carries enough context
(paths, feature name) for the caller to report what went wrong and for the
user to clean up and re-run.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for all scaffolding failures."""


class TargetExistsError(ScaffoldError):
    """Raised when the target project directory already exists."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f'Directory "{path}" already exists')


class TemplateStoreNotFoundError(ScaffoldError):
    """Raised when no template store (or a required template tree) can be found."""

    def __init__(self, candidates: list[Path], message: str | None = None) -> None:
        self.candidates = list(candidates)
        if message is None:
            tried = ", ".join(str(c) for c in self.candidates) or "(none)"
            message = f"Templates directory not found (tried: {tried})"
        super().__init__(message)


class StructureLanguageConflictError(ScaffoldError):
    """Raised when the project structure does not support the chosen language."""

    def __init__(self, structure: str, language: str) -> None:
        self.structure = structure
        self.language = language
        super().__init__(
            f"Project structure '{structure}' does not support language '{language}'"
        )


class InvalidPatchError(ScaffoldError):
    """Raised when a JSON patch or its destination is not a JSON object."""

    def __init__(
        self,
        path: str | Path,
        feature: str | None = None,
        reason: str = "must contain a JSON object",
    ) -> None:
        self.path = str(path)
        self.feature = feature
        self.reason = reason
        where = f' (feature "{feature}")' if feature else ""
        super().__init__(f'Patch file "{self.path}"{where} {reason}')
