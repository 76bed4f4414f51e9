"""Shared pytest fixtures for the mern-stacker test suite.

Provides reusable fixtures for:
- Writing small file trees from ``{relative path: content}`` mappings
- A miniature template store (base trees + a handful of features)
- Runtime ``Config`` pointed at a temporary working directory
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from mern_stacker.config import Config
from mern_stacker.scaffolder.store import TemplateStore

TreeSpec = dict[str, Any]


def write_tree(root: Path, files: TreeSpec) -> Path:
    """Write *files* under *root*.

    ``str`` and ``bytes`` values are written verbatim; anything else is
    dumped as JSON.
    """
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        elif isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_text(json.dumps(content, indent=2) + "\n", encoding="utf-8")
    return root



# ---------------------------------------------------------------------------
# Template store
# ---------------------------------------------------------------------------

CLIENT_TSCONFIG = """{
  // Vite client
  "compilerOptions": {
    "jsx": "react-jsx",
    "strict": true,
  },
  "include": ["src"]
}
"""

SERVER_TSCONFIG = """{
  "compilerOptions": {
    "outDir": "dist"
  }
}
"""

VITE_CONFIG = """import { defineConfig } from "vite";
import react from "@vitejs/plugin-react";

export default defineConfig({
  plugins: [react()],
});
"""

STORE_FILES: TreeSpec = {
    # Typed base
    "base/ts/client/package.json": {
        "name": "client",
        "scripts": {"dev": "vite"},
        "dependencies": {"react": "^19.0.0"},
    },
    "base/ts/client/tsconfig.json": CLIENT_TSCONFIG,
    "base/ts/client/vite.config.ts": VITE_CONFIG,
    "base/ts/client/src/App.tsx": "export default function App() { return 'base'; }\n",
    "base/ts/client/src/main.tsx": "import App from './App';\n",
    "base/ts/client/node_modules/left-pad/index.js": "module.exports = 1;\n",
    "base/ts/server/package.json": {
        "name": "server",
        "scripts": {"dev": "nodemon src/server.ts", "lint": "eslint ."},
        "dependencies": {"express": "^4.21.2"},
        "devDependencies": {"nodemon": "^3.1.9", "typescript": "^5.6.3"},
    },
    "base/ts/server/tsconfig.json": SERVER_TSCONFIG,
    "base/ts/server/src/server.ts": "console.log('server');\n",
    # Untyped base
    "base/js/client/package.json": {"name": "client", "dependencies": {"react": "^19.0.0"}},
    "base/js/client/src/App.jsx": "export default function App() { return 'base'; }\n",
    "base/js/server/package.json": {"name": "server"},
    "base/js/server/src/server.js": "console.log('server');\n",
    # tailwind: overwrites App, adds css, patches client manifest
    "features/tailwind/files/ts/client/src/App.tsx": "export default function App() { return 'tailwind'; }\n",
    "features/tailwind/files/ts/client/src/index.css": '@import "tailwindcss";\n',
    "features/tailwind/patches/client/package.json": {
        "devDependencies": {"tailwindcss": "^4.0.0"},
    },
    # db-postgres: connection pool + server manifest patch
    "features/db-postgres/files/ts/server/src/db/index.ts": "export const pool = new Pool();\n",
    "features/db-postgres/files/js/server/src/db/index.js": "export const pool = new Pool();\n",
    "features/db-postgres/patches/server/package.json": {
        "dependencies": {"pg": "^8.13.1"},
    },
    # router-tanstack: supplies its own shell
    "features/router-tanstack/files/ts/client/src/routes/__root.tsx": "export const Route = {};\n",
    "features/router-tanstack/files/js/client/src/routes/__root.jsx": "export const Route = {};\n",
    # zod: shared-code feature
    "features/zod/files/ts/client/src/schemas/user.ts": "export const userSchema = {};\n",
    "features/zod/patches/client/package.json": {"dependencies": {"zod": "^3.24.1"}},
    # docker: root-level file
    "features/docker-postgres/files/ts/docker-compose.yml": "services:\n  db:\n    image: postgres:16\n",
    # Two features patching the same config file
    "features/first/patches/config/settings.json": {
        "a": 1,
        "nested": {"x": 1, "list": [1, 2]},
    },
    "features/second/patches/config/settings.json": {
        "b": 2,
        "nested": {"y": 2, "list": [3]},
    },
    # Invalid patches
    "features/array-patch/patches/client/package.json": [1, 2, 3],
    "features/broken-patch/patches/client/package.json": "{ not json",
    "features/broken-bytes/patches/client/package.json": b"\xff\xfe{\"a\": 1}",
    # Feature that overwrites the same file as tailwind
    "features/plain/files/ts/client/src/App.tsx": "export default function App() { return 'plain'; }\n",
}


@pytest.fixture
def tree_writer() -> Callable[[Path, TreeSpec], Path]:
    """The :func:`write_tree` helper, for tests that build their own trees."""
    return write_tree


@pytest.fixture
def store_root(tmp_path: Path) -> Path:
    """A miniature template store on disk."""
    return write_tree(tmp_path / "templates", STORE_FILES)


@pytest.fixture
def store(store_root: Path) -> TemplateStore:
    return TemplateStore(store_root)


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """Directory in which projects get created."""
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def settings(workdir: Path, store_root: Path) -> Config:
    """Runtime configuration pointing at ``workdir`` and the miniature store."""
    return Config(cwd=workdir, templates_dir=store_root)
