"""Main scaffolding orchestrator.

Takes a ``ProjectConfig`` and composes the final project tree from the
template store: the base template for the chosen language (or the monorepo
skeleton), then every selected feature overlay in selection order, then
structure-specific finalisation.

The run is a linear state machine::

    INIT -> STRUCTURE_VALIDATED -> BASE_MATERIALIZED -> FEATURES_APPLIED
         -> FINALIZED -> DONE

with ``FAILED`` reachable from any step.  Nothing is rolled back on failure.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from ..config import Config
from .adjusters import ensure_alias, ensure_extends
from .errors import StructureLanguageConflictError, TargetExistsError
from .materializer import copy_tree
from .monorepo import BASE_CONFIG_NAME, SHARED_ALIAS, TYPED_LANGUAGE, MonorepoBuilder
from .overlay import FeatureOverlay, OverlayResult
from .paths import (
    API_APP_DIR,
    SHARED_PACKAGE_DIR,
    WEB_APP_DIR,
    ProjectStructure,
    client_root,
    server_root,
)
from .store import TemplateStore, resolve_template_store
from .templates import TemplateRenderer

Language = Literal["ts", "js"]
PackageManager = Literal["pnpm", "npm", "bun"]

# Features that ship their own application shell, replacing the default App.
SHELL_FEATURES: frozenset[str] = frozenset({"router-tanstack"})

APP_SHELL_FILES: dict[str, str] = {"ts": "App.tsx", "js": "App.jsx"}
BUNDLER_CONFIG_FILES: tuple[str, ...] = ("vite.config.ts", "vite.config.js")

DOCKER_FEATURE_PREFIX = "docker-"
ORM_FEATURE_PREFIXES: tuple[str, ...] = ("drizzle-", "prisma-")


# ---------------------------------------------------------------------------
# Configuration model
# ---------------------------------------------------------------------------


class ProjectConfig(BaseModel):
    """Pydantic model describing the project to scaffold."""

    name: str = Field(..., min_length=1, description="Project directory name")
    language: Language = Field(default="ts")
    structure: ProjectStructure = Field(default=ProjectStructure.STANDARD)
    features: list[str] = Field(
        default_factory=list,
        description="Feature identifiers, applied in this order",
    )
    package_manager: PackageManager = Field(default="pnpm")
    install: bool = Field(
        default=False,
        description="Whether the caller will install dependencies (reported only)",
    )

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Project name must not be empty")
        return value

    @field_validator("features")
    @classmethod
    def _normalise_features(cls, value: list[str]) -> list[str]:
        # Selection order is application order; a repeated feature applies again.
        return [feature for feature in value if feature != "none"]


# ---------------------------------------------------------------------------
# Run state & result
# ---------------------------------------------------------------------------


class ScaffoldState(str, Enum):
    INIT = "init"
    STRUCTURE_VALIDATED = "structure_validated"
    BASE_MATERIALIZED = "base_materialized"
    FEATURES_APPLIED = "features_applied"
    FINALIZED = "finalized"
    DONE = "done"
    FAILED = "failed"


class ScaffoldResult(BaseModel):
    """Summary of a completed scaffolding run."""

    project_name: str
    project_path: Path
    language: Language
    structure: ProjectStructure
    package_manager: PackageManager
    install: bool = False
    features: list[str] = Field(default_factory=list)
    applied_features: list[str] = Field(default_factory=list)
    skipped_features: list[str] = Field(default_factory=list)
    files_written: int = 0

    @property
    def has_docker(self) -> bool:
        return any(f.startswith(DOCKER_FEATURE_PREFIX) for f in self.features)

    @property
    def has_orm(self) -> bool:
        return any(f.startswith(ORM_FEATURE_PREFIXES) for f in self.features)

    def run_command(self, script: str) -> str:
        """How to run a package script with the chosen package manager."""
        if self.package_manager in ("npm", "bun"):
            return f"{self.package_manager} run {script}"
        return f"{self.package_manager} {script}"

    def next_steps(self) -> list[str]:
        """Shell commands the user should run after scaffolding."""
        pm = self.package_manager
        monorepo = self.structure is ProjectStructure.MONOREPO
        steps = [f"cd {self.project_name}"]

        if self.has_docker:
            steps.append("docker compose up -d")

        if not self.install:
            if monorepo:
                steps.append(f"{pm} install")
            else:
                steps.append(f"cd client && {pm} install")
                steps.append(f"cd server && {pm} install")

        if self.has_orm:
            steps.append(f"cd {server_root(self.structure)} && {pm} run db:push")

        dev = self.run_command("dev")
        if monorepo:
            steps.append(dev)
        else:
            steps.append(f"cd client && {dev}")
            steps.append(f"cd server && {dev}")
        return steps


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Composes a project from a base template and feature overlays.

    Given a ``ProjectConfig`` and runtime ``Config``, ``generate`` produces:
    - the base template for the language (standard) or the monorepo skeleton
    - every feature's files and JSON patches, later features winning
    - finalisation: superseded app shell removed, monorepo configs wired to
      the shared base config and ``@shared`` alias
    """

    def __init__(
        self,
        config: ProjectConfig,
        settings: Config | None = None,
        *,
        store: TemplateStore | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config
        self.settings = settings or Config()
        self.store = store
        self.renderer = renderer or TemplateRenderer()
        self.state = ScaffoldState.INIT
        self.history: list[ScaffoldState] = [ScaffoldState.INIT]

    @property
    def project_path(self) -> Path:
        return self.settings.project_path(self.config.name)

    # -- Public API --------------------------------------------------------

    async def generate(self) -> ScaffoldResult:
        """Generate the complete project tree.

        Returns:
            A ``ScaffoldResult`` describing what was written.

        Raises:
            StructureLanguageConflictError: Monorepo requested for an
                unsupported language.  Nothing is written.
            TargetExistsError: The project directory already exists.
                Nothing is written.
            TemplateStoreNotFoundError: No template store or base template.
            InvalidPatchError: A feature patch could not be merged.
        """
        try:
            target = await self._validate()
            self._advance(ScaffoldState.STRUCTURE_VALIDATED)

            store = self.store or resolve_template_store(self.settings.templates_dir)
            self.store = store
            written = await self._materialize_base(store, target)
            self._advance(ScaffoldState.BASE_MATERIALIZED)

            overlays = await self._apply_features(store, target)
            self._advance(ScaffoldState.FEATURES_APPLIED)

            await self._finalize(target)
            self._advance(ScaffoldState.FINALIZED)
        except Exception:
            self._advance(ScaffoldState.FAILED)
            raise

        self._advance(ScaffoldState.DONE)
        return ScaffoldResult(
            project_name=self.config.name,
            project_path=target,
            language=self.config.language,
            structure=self.config.structure,
            package_manager=self.config.package_manager,
            install=self.config.install,
            features=list(self.config.features),
            applied_features=[o.feature for o in overlays if o.found],
            skipped_features=[o.feature for o in overlays if not o.found],
            files_written=written + sum(len(o.files) + len(o.patched) for o in overlays),
        )

    # -- Steps -------------------------------------------------------------

    async def _validate(self) -> Path:
        """Reject incompatible structure/language pairs and existing targets."""
        if (
            self.config.structure is ProjectStructure.MONOREPO
            and self.config.language != TYPED_LANGUAGE
        ):
            raise StructureLanguageConflictError(
                self.config.structure.value, self.config.language
            )
        target = self.project_path
        if await asyncio.to_thread(target.exists):
            raise TargetExistsError(target)
        return target

    async def _materialize_base(self, store: TemplateStore, target: Path) -> int:
        if self.config.structure is ProjectStructure.MONOREPO:
            builder = MonorepoBuilder(store, self.renderer)
            await builder.build(target, self.config.name, self.config.package_manager)
            return 0
        base = store.require_base(self.config.language)
        return len(await copy_tree(base, target))

    async def _apply_features(
        self, store: TemplateStore, target: Path
    ) -> list[OverlayResult]:
        overlay = FeatureOverlay(
            store, target, self.config.language, self.config.structure
        )
        results: list[OverlayResult] = []
        # Strictly sequential: a later feature must see the earlier one's output.
        for feature in self.config.features:
            results.append(await overlay.apply(feature))
        return results

    async def _finalize(self, target: Path) -> None:
        structure = self.config.structure

        if SHELL_FEATURES.intersection(self.config.features):
            app_file = APP_SHELL_FILES[self.config.language]
            shell = target / client_root(structure) / "src" / app_file
            await asyncio.to_thread(shell.unlink, missing_ok=True)

        if structure is ProjectStructure.MONOREPO:
            await asyncio.to_thread(self._adjust_monorepo, target)

    def _adjust_monorepo(self, target: Path) -> None:
        base_config = f"../../{BASE_CONFIG_NAME}"
        for app_dir in (WEB_APP_DIR, API_APP_DIR):
            ensure_extends(target / app_dir / "tsconfig.json", base_config)

        alias_target = f'path.resolve(__dirname, "../../{SHARED_PACKAGE_DIR}/src")'
        for name in BUNDLER_CONFIG_FILES:
            ensure_alias(target / WEB_APP_DIR / name, SHARED_ALIAS, alias_target)

    def _advance(self, state: ScaffoldState) -> None:
        self.state = state
        self.history.append(state)
