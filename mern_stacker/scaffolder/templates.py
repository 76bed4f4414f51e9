"""Jinja2 template rendering for engine-owned skeleton files.

The template store (``base/`` and ``features/``) is copied verbatim.  The
files the engine itself authors -- the monorepo workspace manifests and
shared packages -- live as ``.j2`` templates under
``mern_stacker/scaffolder/templates/`` and are rendered by
:class:`TemplateRenderer` with a small project context.
"""

from __future__ import annotations

import asyncio
import json
import re
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for project scaffolding.

    The renderer discovers ``.j2`` template files under a configurable
    template directory.  Undefined variables are an error so a missing
    context key never silently produces an empty manifest field.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([], default_for_string=False),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["slugify"] = slugify
        self.env.filters["json"] = _json_filter

    # -- Single template rendering -----------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"monorepo/package.json.j2"``).
            context: Dictionary of variables available inside the template.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    # -- File-based rendering (async) --------------------------------------

    async def render_to_file(
        self,
        template_path: str,
        output_path: str | Path,
        context: dict[str, Any],
    ) -> Path:
        """Render a template and write the result to *output_path*.

        Parent directories are created automatically.
        """
        content = self.render(template_path, context)
        out = Path(output_path)
        await asyncio.to_thread(_write_file, out, content)
        return out

    async def render_tree(
        self,
        template_prefix: str,
        output_dir: str | Path,
        context: dict[str, Any],
        *,
        skip_patterns: list[str] | None = None,
    ) -> list[Path]:
        """Render every ``*.j2`` file under *template_prefix* to *output_dir*.

        The directory structure is preserved: a template at
        ``monorepo/packages/shared/package.json.j2`` rendered with
        ``template_prefix="monorepo"`` writes to
        ``<output_dir>/packages/shared/package.json``.

        Args:
            template_prefix: Subdirectory inside the template root to scan.
            output_dir: Target directory where rendered files are written.
            context: Template context variables.
            skip_patterns: Optional list of relative-path substrings to skip.

        Returns:
            List of written file paths.
        """
        skip_patterns = skip_patterns or []
        prefix_path = self.template_dir / template_prefix
        if not prefix_path.is_dir():
            return []

        written: list[Path] = []
        out_base = Path(output_dir)

        for template_file in sorted(prefix_path.rglob("*.j2")):
            rel_str = template_file.relative_to(prefix_path).as_posix()

            if any(pat in rel_str for pat in skip_patterns):
                continue

            output_file = out_base / rel_str[: -len(".j2")]
            template_key = f"{template_prefix}/{rel_str}"
            path = await self.render_to_file(template_key, output_file, context)
            written.append(path)

        return written


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def slugify(value: str) -> str:
    """Convert a string to an npm-package-safe slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower().strip())
    return slug.strip("-")


def _json_filter(value: Any) -> str:
    """Serialise a value as a JSON literal (no HTML escaping)."""
    return json.dumps(value, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
