"""Idempotent text edits applied to generated config files.

These run after every feature has been applied to a monorepo and wire the
apps to the shared base config and the ``@shared`` import alias.  They work
on raw text rather than a parsed tree because the files are often JSONC
(comments, trailing commas) or JavaScript.  Each function returns ``True``
only when it changed the text; an already-adjusted file or a file whose
shape is not recognised is left untouched.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from pathlib import Path

_EXTENDS_RE = re.compile(r'"extends"\s*:')
_ALIAS_BLOCK_RE = re.compile(r"\balias\s*:\s*\{")
_DEFINE_CONFIG_RE = re.compile(r"\bdefineConfig\(\s*\{")
_PATH_IMPORT_RE = re.compile(
    r"""^\s*import\s+(?:\*\s+as\s+)?path\s+from\s+["'](?:node:)?path["']""",
    re.MULTILINE,
)


def inject_extends(text: str, base_config: str) -> str:
    """Insert ``"extends": <base_config>`` right after the first ``{``.

    Returns *text* unchanged when an ``"extends"`` key is already present or
    when there is no opening brace.
    """
    if _EXTENDS_RE.search(text):
        return text
    brace = text.find("{")
    if brace == -1:
        return text

    after = text[brace + 1:]
    entry = f'\n  "extends": "{base_config}"'
    if after.lstrip().startswith("}"):
        # Empty object: no trailing comma.
        return f"{text[:brace + 1]}{entry}\n{after.lstrip()}"
    return f"{text[:brace + 1]}{entry},{after}"


def inject_alias(text: str, alias: str, target_expr: str) -> str:
    """Add ``alias: target_expr`` to a bundler config's ``resolve.alias``.

    If an ``alias: {`` block exists the entry is prepended to it; otherwise
    a ``resolve: { alias: { ... } }`` block is inserted right inside
    ``defineConfig({``.  A ``path`` import is added when missing.  Returns
    *text* unchanged if *alias* is already referenced or neither anchor is
    found.
    """
    if f'"{alias}"' in text or f"'{alias}'" in text:
        return text

    entry = f'"{alias}": {target_expr},'
    alias_match = _ALIAS_BLOCK_RE.search(text)
    if alias_match:
        pos = alias_match.end()
        updated = f"{text[:pos]}\n      {entry}{text[pos:]}"
    else:
        config_match = _DEFINE_CONFIG_RE.search(text)
        if not config_match:
            return text
        pos = config_match.end()
        block = f"\n  resolve: {{\n    alias: {{\n      {entry}\n    }},\n  }},"
        updated = f"{text[:pos]}{block}{text[pos:]}"

    if not _PATH_IMPORT_RE.search(updated):
        updated = f'import path from "path";\n{updated}'
    return updated


def ensure_extends(path: str | Path, base_config: str) -> bool:
    """Apply :func:`inject_extends` to a file on disk. Missing files are skipped."""
    return _rewrite(Path(path), lambda text: inject_extends(text, base_config))


def ensure_alias(path: str | Path, alias: str, target_expr: str) -> bool:
    """Apply :func:`inject_alias` to a file on disk. Missing files are skipped."""
    return _rewrite(Path(path), lambda text: inject_alias(text, alias, target_expr))


def _rewrite(path: Path, edit: Callable[[str], str]) -> bool:
    if not path.is_file():
        return False
    original = path.read_text(encoding="utf-8")
    updated = edit(original)
    if updated == original:
        return False
    path.write_text(updated, encoding="utf-8")
    return True
