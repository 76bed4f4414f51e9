"""Monorepo workspace skeleton.

Builds the ``apps/`` + ``packages/`` layout used when the monorepo project
structure is selected::

    <project>/
      package.json            workspace root, scripts per package manager
      pnpm-workspace.yaml     pnpm only
      tsconfig.base.json      shared compiler options + @shared alias
      apps/web/               typed base template ``client/``
      apps/api/               typed base template ``server/``
      packages/shared/        shared types and schemas
      packages/config/        placeholder for shared tooling config

Only the typed language has a monorepo layout.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from ..utils import read_json, write_json
from .materializer import copy_tree
from .merge import is_object
from .paths import API_APP_DIR, CONFIG_PACKAGE_DIR, SHARED_PACKAGE_DIR, WEB_APP_DIR
from .store import TemplateStore
from .templates import TemplateRenderer, slugify

TYPED_LANGUAGE = "ts"

SHARED_ALIAS = "@shared"
BASE_CONFIG_NAME = "tsconfig.base.json"
WORKSPACE_GLOBS: list[str] = ["apps/*", "packages/*"]

# Package manager -> scripts that run a script in every workspace.
WORKSPACE_SCRIPTS: dict[str, dict[str, str]] = {
    "pnpm": {
        "dev": "pnpm -r --parallel dev",
        "build": "pnpm -r build",
    },
    "npm": {
        "dev": "npm run dev --workspaces --if-present",
        "build": "npm run build --workspaces --if-present",
    },
    "bun": {
        "dev": "bun run --filter '*' dev",
        "build": "bun run --filter '*' build",
    },
}

# Package managers that read membership from a separate workspace file
# instead of the ``workspaces`` field of the root manifest.
WORKSPACE_FILE_MANAGERS: frozenset[str] = frozenset({"pnpm"})

WEB_PACKAGE_NAME = "web"
API_PACKAGE_NAME = "api"

API_SCRIPTS: dict[str, str] = {
    "dev": "tsx watch src/server.ts",
    "build": "tsc -p tsconfig.json",
    "start": "node dist/server.js",
}
API_DEV_DEPENDENCIES: dict[str, str] = {"tsx": "^4.19.2"}
# Only meaningful for the standalone server layout.
API_DROPPED_DEV_DEPENDENCIES: tuple[str, ...] = ("nodemon",)


class MonorepoBuilder:
    """Materialises the monorepo workspace skeleton into a project root."""

    def __init__(
        self,
        store: TemplateStore,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.store = store
        self.renderer = renderer or TemplateRenderer()

    async def build(
        self,
        project_root: str | Path,
        project_name: str,
        package_manager: str = "pnpm",
    ) -> Path:
        """Create the full skeleton under *project_root* and return it.

        Raises:
            TemplateStoreNotFoundError: If the typed base template lacks a
                ``client`` or ``server`` tree.
            KeyError: If *package_manager* is not one of ``WORKSPACE_SCRIPTS``.
        """
        root = Path(project_root)
        scripts = WORKSPACE_SCRIPTS[package_manager]

        client_src = self.store.require_base(TYPED_LANGUAGE, "client")
        server_src = self.store.require_base(TYPED_LANGUAGE, "server")

        await asyncio.to_thread(_make_dirs, root, ["apps", "packages"])
        await copy_tree(client_src, root / WEB_APP_DIR)
        await copy_tree(server_src, root / API_APP_DIR)

        context = self.build_context(project_name, package_manager, scripts)
        skip = [] if package_manager in WORKSPACE_FILE_MANAGERS else ["pnpm-workspace.yaml"]
        await self.renderer.render_tree("monorepo", root, context, skip_patterns=skip)

        await asyncio.to_thread(self._rewrite_app_manifests, root)
        return root

    def build_context(
        self,
        project_name: str,
        package_manager: str,
        scripts: dict[str, str],
    ) -> dict[str, Any]:
        """Return the Jinja2 context for the ``monorepo/`` templates."""
        uses_workspace_file = package_manager in WORKSPACE_FILE_MANAGERS
        return {
            "project_name": project_name,
            "project_slug": slugify(project_name) or "app",
            "package_manager": package_manager,
            "scripts": scripts,
            "workspaces": None if uses_workspace_file else list(WORKSPACE_GLOBS),
            "workspace_globs": list(WORKSPACE_GLOBS),
            "shared_alias": SHARED_ALIAS,
            "shared_dir": SHARED_PACKAGE_DIR,
            "config_dir": CONFIG_PACKAGE_DIR,
            "base_config_from_package": f"../../{BASE_CONFIG_NAME}",
        }

    # -- App manifests -----------------------------------------------------

    def _rewrite_app_manifests(self, root: Path) -> None:
        web_manifest = root / WEB_APP_DIR / "package.json"
        if web_manifest.exists():
            data = read_json(web_manifest)
            if is_object(data):
                data["name"] = WEB_PACKAGE_NAME
                write_json(data, web_manifest)

        api_manifest = root / API_APP_DIR / "package.json"
        if api_manifest.exists():
            data = read_json(api_manifest)
            if is_object(data):
                write_json(rewrite_api_manifest(data), api_manifest)


def rewrite_api_manifest(manifest: dict[str, Any]) -> dict[str, Any]:
    """Adapt the standalone server manifest to the monorepo dev-server convention.

    Renames the package, replaces the ``dev``/``build``/``start`` scripts,
    adds ``tsx`` and drops dev-dependencies that only the standalone layout
    uses.  Other keys keep their order.  Mutates and returns *manifest*.
    """
    manifest["name"] = API_PACKAGE_NAME

    scripts = manifest.get("scripts")
    if not isinstance(scripts, dict):
        scripts = {}
    scripts.update(API_SCRIPTS)
    manifest["scripts"] = scripts

    dev_deps = manifest.get("devDependencies")
    if not isinstance(dev_deps, dict):
        dev_deps = {}
    for name in API_DROPPED_DEV_DEPENDENCIES:
        dev_deps.pop(name, None)
    for name, version in API_DEV_DEPENDENCIES.items():
        dev_deps.setdefault(name, version)
    manifest["devDependencies"] = dev_deps
    return manifest


def _make_dirs(root: Path, names: list[str]) -> None:
    for name in names:
        (root / name).mkdir(parents=True, exist_ok=True)
