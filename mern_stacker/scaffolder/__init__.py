"""mern-stacker template composition engine.

Composes a React + Vite + Express project from a template store: a base
tree per language plus optional feature overlays (files and JSON patches),
in either the standard ``client/`` + ``server/`` layout or an
``apps/`` + ``packages/`` monorepo.

Quick usage::

    from pathlib import Path

    from mern_stacker.config import Config
    from mern_stacker.scaffolder import ProjectConfig, ProjectGenerator

    config = ProjectConfig(
        name="my-app",
        language="ts",
        structure="standard",
        features=["tailwind", "db-postgres"],
    )
    result = await ProjectGenerator(config, Config(cwd=Path("/tmp"))).generate()
"""

from mern_stacker.scaffolder.errors import (
    InvalidPatchError,
    ScaffoldError,
    StructureLanguageConflictError,
    TargetExistsError,
    TemplateStoreNotFoundError,
)
from mern_stacker.scaffolder.generator import (
    ProjectConfig,
    ProjectGenerator,
    ScaffoldResult,
    ScaffoldState,
)
from mern_stacker.scaffolder.merge import deep_merge
from mern_stacker.scaffolder.paths import ProjectStructure, map_path
from mern_stacker.scaffolder.store import TemplateStore, resolve_template_store
from mern_stacker.scaffolder.templates import TemplateRenderer

__all__ = [
    "InvalidPatchError",
    "ProjectConfig",
    "ProjectGenerator",
    "ProjectStructure",
    "ScaffoldError",
    "ScaffoldResult",
    "ScaffoldState",
    "StructureLanguageConflictError",
    "TargetExistsError",
    "TemplateRenderer",
    "TemplateStore",
    "TemplateStoreNotFoundError",
    "deep_merge",
    "map_path",
    "resolve_template_store",
]
