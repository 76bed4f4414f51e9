"""Feature overlay application.

A feature contributes up to two things on top of the project tree:

1. ``features/<name>/files/<language>/`` -- files copied over the target,
   replacing anything already at the same destination.
2. ``features/<name>/patches/`` -- JSON fragments deep-merged into the
   matching configuration file under the target.

Both kinds of path go through :func:`~.paths.map_path` so that copies and
patches aimed at the same logical file converge on one physical file in
every project structure.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path

from ..utils import read_json, write_json
from .errors import InvalidPatchError
from .materializer import copy_tree, list_files
from .merge import deep_merge, is_object
from .paths import ProjectStructure, map_path
from .store import TemplateStore


@dataclass
class OverlayResult:
    """What one feature wrote into the target tree."""

    feature: str
    found: bool = True
    files: list[Path] = field(default_factory=list)
    patched: list[Path] = field(default_factory=list)


class FeatureOverlay:
    """Applies feature overlays from a template store onto a target tree."""

    def __init__(
        self,
        store: TemplateStore,
        target: str | Path,
        language: str,
        structure: ProjectStructure | str = ProjectStructure.STANDARD,
    ) -> None:
        self.store = store
        self.target = Path(target)
        self.language = language
        self.structure = ProjectStructure(structure)

    async def apply(self, feature: str) -> OverlayResult:
        """Copy the feature's files, then merge its patches.

        A feature that does not exist in the store is a no-op; the returned
        result has ``found=False``.

        Raises:
            InvalidPatchError: If a patch fragment or the file it targets is
                not a JSON object.
        """
        if not self.store.has_feature(feature):
            return OverlayResult(feature=feature, found=False)

        result = OverlayResult(feature=feature)
        mapper = partial(map_path, structure=self.structure, feature_name=feature)

        files_dir = self.store.feature_files_dir(feature, self.language)
        if files_dir.is_dir():
            result.files = await copy_tree(files_dir, self.target, map_path=mapper)

        patches_dir = self.store.feature_patches_dir(feature)
        if patches_dir.is_dir():
            for rel in list_files(patches_dir, suffix=".json"):
                destination = self.target / mapper(rel.as_posix())
                await asyncio.to_thread(
                    _apply_patch, patches_dir / rel, destination, rel.as_posix(), feature
                )
                result.patched.append(destination)

        return result


async def apply_feature(
    store: TemplateStore,
    target: str | Path,
    language: str,
    feature: str,
    structure: ProjectStructure | str = ProjectStructure.STANDARD,
) -> OverlayResult:
    """Apply a single feature overlay. Convenience wrapper over :class:`FeatureOverlay`."""
    return await FeatureOverlay(store, target, language, structure).apply(feature)


def _apply_patch(patch_file: Path, destination: Path, rel: str, feature: str) -> None:
    patch_data = _load_object(patch_file, rel, feature, "patch")
    if destination.exists():
        target_data = _load_object(destination, rel, feature, "destination")
    else:
        target_data = {}
    deep_merge(target_data, patch_data)
    write_json(target_data, destination)


def _load_object(path: Path, rel: str, feature: str, side: str) -> dict:
    try:
        data = read_json(path)
    except json.JSONDecodeError as exc:
        raise InvalidPatchError(
            rel, feature, f"could not be applied: {side} {path} is not valid JSON ({exc.msg})"
        ) from exc
    except UnicodeDecodeError as exc:
        raise InvalidPatchError(
            rel, feature, f"could not be applied: {side} {path} is not UTF-8 ({exc.reason})"
        ) from exc
    if not is_object(data):
        raise InvalidPatchError(rel, feature, "must contain a JSON object")
    return data
