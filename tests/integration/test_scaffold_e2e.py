"""Integration tests for choices -> features -> generated project.

These tests resolve features from realistic user choices and run the real
generator against the template store bundled with the package, then check
that the generated configuration files are well-formed.

No network, package manager or database is required.
"""

from __future__ import annotations

import itertools
import json
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from mern_stacker.config import Config
from mern_stacker.scaffolder import ProjectGenerator, ScaffoldResult
from mern_stacker.selection import ProjectChoices


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _scaffold(tmp_path: Path, **choices) -> ScaffoldResult:
    project_choices = ProjectChoices(name="shop", **choices)
    generator = ProjectGenerator(
        project_choices.to_project_config(), Config(cwd=tmp_path)
    )
    return await generator.generate()


def _load_all_json(root: Path) -> dict[Path, object]:
    """Parse every ``*.json`` file that is strict JSON (tsconfig may be JSONC)."""
    parsed: dict[Path, object] = {}
    for path in root.rglob("*.json"):
        if path.name.startswith("tsconfig"):
            continue
        parsed[path] = json.loads(path.read_text(encoding="utf-8"))
    return parsed


def _accepted_backend_choices() -> list[dict]:
    """Every language/database/ORM/auth/docker mix that ProjectChoices accepts."""
    accepted = []
    for language, database, orm, auth, docker in itertools.product(
        ["ts", "js"],
        ["none", "db-mongo", "db-postgres", "db-mysql"],
        ["none", "drizzle", "prisma"],
        ["none", "jwt", "better-auth"],
        [False, True],
    ):
        choices = dict(language=language, database=database, orm=orm, auth=auth, docker=docker)
        try:
            ProjectChoices(name="shop", **choices)
        except ValidationError:
            continue
        accepted.append(choices)
    return accepted


BACKEND_CHOICES = _accepted_backend_choices()


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


@pytest.mark.integration
class TestStandardProjects:
    async def test_full_stack_typed(self, tmp_path: Path) -> None:
        result = await _scaffold(
            tmp_path,
            frontend_features=["tailwind", "query-tanstack"],
            router="router-tanstack",
            database="db-postgres",
            orm="drizzle",
            auth="jwt",
            docker=True,
        )

        project = result.project_path
        assert result.skipped_features == []
        assert (project / "client" / "src" / "routes").is_dir()
        assert not (project / "client" / "src" / "App.tsx").exists()
        assert (project / "server" / "drizzle.config.ts").exists()
        compose = yaml.safe_load((project / "docker-compose.yml").read_text())
        assert "services" in compose

        manifests = _load_all_json(project)
        server = manifests[project / "server" / "package.json"]
        assert "db:push" in server["scripts"]
        assert "pg" in server["dependencies"]
        client = manifests[project / "client" / "package.json"]
        assert "@tanstack/react-router" in client["dependencies"]
        assert "@tanstack/react-query" in client["dependencies"]

        steps = result.next_steps()
        assert "docker compose up -d" in steps
        assert "cd server && pnpm run db:push" in steps

    async def test_plain_untyped(self, tmp_path: Path) -> None:
        result = await _scaffold(tmp_path, language="js", package_manager="npm")

        project = result.project_path
        assert (project / "client" / "src" / "App.jsx").exists()
        assert (project / "server" / "src" / "server.js").exists()
        assert result.applied_features == []
        assert result.next_steps()[-1] == "cd server && npm run dev"


@pytest.mark.integration
class TestMonorepoProjects:
    async def test_pnpm_monorepo(self, tmp_path: Path) -> None:
        result = await _scaffold(
            tmp_path,
            structure="monorepo",
            frontend_features=["tailwind", "zod"],
            shadcn=True,
            database="db-mongo",
        )

        project = result.project_path
        workspace = yaml.safe_load((project / "pnpm-workspace.yaml").read_text())
        assert workspace["packages"] == ["apps/*", "packages/*"]

        manifests = _load_all_json(project)
        assert manifests[project / "package.json"]["name"] == "shop"
        assert manifests[project / "apps" / "web" / "package.json"]["name"] == "web"
        api = manifests[project / "apps" / "api" / "package.json"]
        assert api["name"] == "api"
        assert api["scripts"]["dev"] == "tsx watch src/server.ts"
        shared = manifests[project / "packages" / "shared" / "package.json"]
        assert "zod" in shared["dependencies"]

        assert (project / "packages" / "shared" / "src" / "schemas" / "user.ts").exists()
        assert (project / "apps" / "api" / "src" / "db" / "index.ts").exists()

        web_tsconfig = (project / "apps" / "web" / "tsconfig.json").read_text()
        assert '"extends": "../../tsconfig.base.json"' in web_tsconfig
        vite = (project / "apps" / "web" / "vite.config.ts").read_text()
        assert '"@shared"' in vite
        assert vite.count('import path from "path"') == 1

        assert result.next_steps() == ["cd shop", "pnpm install", "pnpm dev"]

    async def test_npm_monorepo_has_no_workspace_file(self, tmp_path: Path) -> None:
        result = await _scaffold(tmp_path, structure="monorepo", package_manager="npm")

        project = result.project_path
        assert not (project / "pnpm-workspace.yaml").exists()
        root = json.loads((project / "package.json").read_text())
        assert root["workspaces"] == ["apps/*", "packages/*"]


@pytest.mark.integration
class TestBackendCombinations:
    @pytest.mark.parametrize(
        "choices",
        BACKEND_CHOICES,
        ids=["-".join(str(v) for v in c.values()) for c in BACKEND_CHOICES],
    )
    async def test_every_feature_is_bundled(self, tmp_path: Path, choices: dict) -> None:
        result = await _scaffold(tmp_path, **choices)

        assert result.skipped_features == []
        server = json.loads((result.project_path / "server" / "package.json").read_text())
        if choices["auth"] == "jwt":
            assert "jsonwebtoken" in server["dependencies"]
            app = "app.ts" if choices["language"] == "ts" else "app.js"
            assert "/signup" in (result.project_path / "server" / "src" / app).read_text()
        if choices["auth"] == "better-auth":
            assert (result.project_path / "server" / "src" / "auth-db.ts").exists()

    async def test_prisma_on_mysql(self, tmp_path: Path) -> None:
        result = await _scaffold(tmp_path, database="db-mysql", orm="prisma", auth="jwt")

        server = result.project_path / "server"
        assert result.applied_features == [
            "db-mysql",
            "prisma-mysql",
            "auth-jwt-prisma-mysql",
        ]
        assert (server / "prisma.config.ts").exists()
        schema = (server / "prisma" / "schema.prisma").read_text()
        assert 'provider = "mysql"' in schema
        manifest = json.loads((server / "package.json").read_text())
        assert manifest["scripts"]["db:push"] == "prisma db push"
        assert "mysql2" in manifest["dependencies"]
        assert '"P2002"' in (server / "src" / "app.ts").read_text()

    def test_combination_grid_is_populated(self) -> None:
        assert len(BACKEND_CHOICES) > 40
        assert {"language": "js", "database": "db-mysql", "orm": "none", "auth": "jwt", "docker": True} in BACKEND_CHOICES
