"""Copy template trees onto disk.

Used for the base template, for the monorepo ``apps/`` sub-trees and for
feature file overlays.  Individual file copies run concurrently in worker
threads, but :func:`copy_tree` only returns once every copy has finished,
so callers that await one tree after another never interleave writes.
"""

from __future__ import annotations

import asyncio
import shutil
from collections.abc import Callable
from pathlib import Path

SKIP_DIRS: frozenset[str] = frozenset({"node_modules"})


def list_files(root: str | Path, *, suffix: str | None = None) -> list[Path]:
    """Return every file below *root*, sorted, as paths relative to *root*.

    Directories listed in ``SKIP_DIRS`` are not descended into.  Returns an
    empty list when *root* does not exist.
    """
    base = Path(root)
    if not base.is_dir():
        return []
    found: list[Path] = []
    for path in sorted(base.rglob("*")):
        rel = path.relative_to(base)
        if any(part in SKIP_DIRS for part in rel.parts):
            continue
        if not path.is_file():
            continue
        if suffix is not None and path.suffix != suffix:
            continue
        found.append(rel)
    return found


def plan_copies(
    src: str | Path,
    dest: str | Path,
    map_path: Callable[[str], str] | None = None,
) -> dict[Path, Path]:
    """Build a ``{destination: source}`` plan for copying *src* into *dest*.

    Each relative path (in forward-slash form) is passed through *map_path*
    when given.  If two sources map to the same destination the one that
    sorts later wins.
    """
    src_root = Path(src)
    dest_root = Path(dest)
    plan: dict[Path, Path] = {}
    for rel in list_files(src_root):
        rel_str = rel.as_posix()
        mapped = map_path(rel_str) if map_path else rel_str
        plan[dest_root / mapped] = src_root / rel
    return plan


async def copy_tree(
    src: str | Path,
    dest: str | Path,
    *,
    map_path: Callable[[str], str] | None = None,
) -> list[Path]:
    """Copy every file under *src* into *dest*, overwriting existing files.

    Args:
        src: Source directory.
        dest: Destination directory (created if missing).
        map_path: Optional translation applied to each forward-slash
            relative path before it is joined onto *dest*.

    Returns:
        Sorted list of written destination paths.
    """
    plan = plan_copies(src, dest, map_path)
    await asyncio.to_thread(Path(dest).mkdir, parents=True, exist_ok=True)
    await asyncio.gather(
        *(asyncio.to_thread(_copy_file, source, target) for target, source in plan.items())
    )
    return sorted(plan)


def _copy_file(source: Path, target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, target)
