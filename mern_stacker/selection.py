"""Mapping from user choices to the ordered feature list.

The interactive prompts are outside this package; whatever collects the
answers fills in a :class:`ProjectChoices` and calls
:func:`resolve_features` to get the feature identifiers the engine applies,
in application order.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from mern_stacker.scaffolder.generator import Language, PackageManager, ProjectConfig
from mern_stacker.scaffolder.paths import ProjectStructure

Router = Literal["none", "router-react", "router-tanstack"]
FrontendFeature = Literal["tailwind", "query-tanstack", "zustand", "zod"]
Database = Literal["none", "db-mongo", "db-postgres", "db-mysql"]
Orm = Literal["none", "drizzle", "prisma"]
Auth = Literal["none", "jwt", "better-auth"]

TYPED_ONLY_FEATURES: frozenset[str] = frozenset({"zod"})
ORM_DATABASES: frozenset[str] = frozenset({"db-postgres", "db-mysql"})


class ProjectChoices(BaseModel):
    """Answers collected from the user, validated against each other."""

    name: str = Field(..., min_length=1)
    language: Language = Field(default="ts")
    structure: ProjectStructure = Field(default=ProjectStructure.STANDARD)
    router: Router = Field(default="none")
    frontend_features: list[FrontendFeature] = Field(default_factory=list)
    shadcn: bool = Field(default=False)
    database: Database = Field(default="none")
    orm: Orm = Field(default="none")
    auth: Auth = Field(default="none")
    docker: bool = Field(default=False)
    package_manager: PackageManager = Field(default="pnpm")
    install: bool = Field(default=False)

    @model_validator(mode="after")
    def _check_combinations(self) -> "ProjectChoices":
        if self.structure is ProjectStructure.MONOREPO and self.language != "ts":
            raise ValueError("Monorepo mode requires TypeScript")
        if self.language != "ts":
            typed_only = TYPED_ONLY_FEATURES.intersection(self.frontend_features)
            if typed_only:
                raise ValueError(f"{', '.join(sorted(typed_only))} requires TypeScript")
            if self.auth == "better-auth":
                raise ValueError("Better Auth requires TypeScript")
            if self.orm != "none":
                raise ValueError("Drizzle and Prisma require TypeScript")
        if self.shadcn and "tailwind" not in self.frontend_features:
            raise ValueError("shadcn/ui requires Tailwind CSS")
        if self.orm != "none" and self.database not in ORM_DATABASES:
            raise ValueError("An ORM can only be used with Postgres or MySQL")
        if self.database == "none":
            if self.auth != "none":
                raise ValueError("Authentication requires a database")
            if self.docker:
                raise ValueError("Docker Compose requires a database")
        return self

    @property
    def database_kind(self) -> str:
        """``db-postgres`` -> ``postgres``."""
        return self.database.removeprefix("db-")

    def to_project_config(self) -> ProjectConfig:
        """Build the engine's ``ProjectConfig`` from these choices."""
        return ProjectConfig(
            name=self.name,
            language=self.language,
            structure=self.structure,
            features=resolve_features(self),
            package_manager=self.package_manager,
            install=self.install,
        )


def resolve_features(choices: ProjectChoices) -> list[str]:
    """Return the feature identifiers for *choices* in application order.

    Order: frontend features, ``shadcn``, router, database, ORM
    (``<orm>-<db>``), ``auth-better``, the auth composite, the docker
    feature, and ``router-tanstack-tailwind`` last when TanStack Router and
    Tailwind are both selected.
    """
    features: list[str] = [*dict.fromkeys(choices.frontend_features)]
    if choices.shadcn:
        features.append("shadcn")
    features.append(choices.router)
    features.append(choices.database)

    has_db = choices.database != "none"
    has_orm = has_db and choices.orm != "none"
    if has_orm:
        features.append(f"{choices.orm}-{choices.database_kind}")

    if has_db and choices.auth != "none":
        kind = "better" if choices.auth == "better-auth" else "jwt"
        if kind == "better":
            features.append("auth-better")
        if has_orm:
            features.append(f"auth-{kind}-{choices.orm}-{choices.database_kind}")
        else:
            features.append(f"auth-{kind}-{choices.database}")

    if has_db and choices.docker:
        features.append(f"docker-{choices.database_kind}")

    if choices.router == "router-tanstack" and "tailwind" in choices.frontend_features:
        features.append("router-tanstack-tailwind")

    return [f for f in features if f != "none"]
