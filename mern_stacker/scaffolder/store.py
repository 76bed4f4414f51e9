"""Template store discovery.

The template store is a read-only directory holding two categories::

    base/<language>/...                 one tree per supported language
    features/<name>/files/<language>/   optional file overlay
    features/<name>/patches/            optional JSON fragments

It is resolved once per scaffolding run and never written to.
"""

from __future__ import annotations

from pathlib import Path

from .errors import TemplateStoreNotFoundError

_PACKAGE_DIR = Path(__file__).resolve().parent.parent


def candidate_locations(override: str | Path | None = None) -> list[Path]:
    """Return the locations searched for a template store, in priority order."""
    candidates: list[Path] = []
    if override is not None:
        candidates.append(Path(override).expanduser().resolve())
    candidates.append(_PACKAGE_DIR / "templates")
    candidates.append(_PACKAGE_DIR.parent / "templates")
    return candidates


def resolve_template_store(override: str | Path | None = None) -> TemplateStore:
    """Locate the template store.

    An explicit *override* is tried first, then the ``templates/`` directory
    bundled with the package, then a ``templates/`` directory beside the
    package (source checkouts).

    Raises:
        TemplateStoreNotFoundError: If none of the candidates is a directory.
    """
    candidates = candidate_locations(override)
    for candidate in candidates:
        if candidate.is_dir():
            return TemplateStore(candidate)
    raise TemplateStoreNotFoundError(candidates)


class TemplateStore:
    """Read-only view over a resolved template store directory."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"TemplateStore({str(self.root)!r})"

    # -- Base templates ----------------------------------------------------

    def base_dir(self, language: str) -> Path:
        return self.root / "base" / language

    def require_base(self, language: str, *parts: str) -> Path:
        """Return ``base/<language>/<parts>`` or raise if it is missing."""
        path = self.base_dir(language).joinpath(*parts)
        if not path.is_dir():
            raise TemplateStoreNotFoundError(
                [path], f"Base template not found: {path}"
            )
        return path

    # -- Features ----------------------------------------------------------

    def feature_dir(self, name: str) -> Path:
        return self.root / "features" / name

    def feature_files_dir(self, name: str, language: str) -> Path:
        return self.feature_dir(name) / "files" / language

    def feature_patches_dir(self, name: str) -> Path:
        return self.feature_dir(name) / "patches"

    def has_feature(self, name: str) -> bool:
        return self.feature_dir(name).is_dir()

