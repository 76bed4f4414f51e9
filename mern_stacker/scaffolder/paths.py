"""Destination path mapping for feature files and patches.

Feature templates are authored against the standard ``client/`` +
``server/`` layout.  When a monorepo is generated the same templates are
redirected into ``apps/`` and ``packages/`` so that a file copy and a JSON
patch aimed at the same logical file always land on the same physical
path.
"""

from __future__ import annotations

from enum import Enum
from pathlib import PurePath


class ProjectStructure(str, Enum):
    """High-level directory convention of the generated project."""

    STANDARD = "standard"
    MONOREPO = "monorepo"


# Features whose client/server files are shared type/schema definitions.
SHARED_CODE_FEATURES: frozenset[str] = frozenset({"zod"})

CLIENT_PREFIX = "client/"
SERVER_PREFIX = "server/"

WEB_APP_DIR = "apps/web"
API_APP_DIR = "apps/api"
SHARED_PACKAGE_DIR = "packages/shared"
CONFIG_PACKAGE_DIR = "packages/config"


def normalize(relative_path: str | PurePath) -> str:
    """Return *relative_path* with forward slashes and no leading ``./``."""
    text = str(relative_path).replace("\\", "/")
    while text.startswith("./"):
        text = text[2:]
    return text


def map_path(
    relative_path: str | PurePath,
    structure: ProjectStructure | str,
    feature_name: str | None = None,
) -> str:
    """Translate a feature-relative path into its destination path.

    Under ``standard`` this is the identity.  Under ``monorepo``:

    * shared-code features send ``client/x`` and ``server/x`` to
      ``packages/shared/x``
    * ``client/x`` goes to ``apps/web/x``
    * ``server/x`` goes to ``apps/api/x``
    * anything else lands at the project root unchanged

    Examples::

        map_path("client/src/App.tsx", "monorepo")   -> "apps/web/src/App.tsx"
        map_path("client/types.ts", "monorepo", "zod") -> "packages/shared/types.ts"
    """
    text = normalize(relative_path)
    if ProjectStructure(structure) is ProjectStructure.STANDARD:
        return text

    for prefix in (CLIENT_PREFIX, SERVER_PREFIX):
        if text.startswith(prefix):
            rest = text[len(prefix):]
            if feature_name in SHARED_CODE_FEATURES:
                return f"{SHARED_PACKAGE_DIR}/{rest}"
            app_dir = WEB_APP_DIR if prefix == CLIENT_PREFIX else API_APP_DIR
            return f"{app_dir}/{rest}"

    return text


def client_root(structure: ProjectStructure | str) -> str:
    """Directory holding the client application for *structure*."""
    if ProjectStructure(structure) is ProjectStructure.MONOREPO:
        return WEB_APP_DIR
    return "client"


def server_root(structure: ProjectStructure | str) -> str:
    """Directory holding the server application for *structure*."""
    if ProjectStructure(structure) is ProjectStructure.MONOREPO:
        return API_APP_DIR
    return "server"
