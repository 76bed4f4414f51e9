"""Structural deep merge over JSON configuration values.

A ``ConfigValue`` is one of the variants produced by ``json.loads``: an
object (``dict`` with string keys, insertion ordered), an array (``list``),
a string, a number, a boolean or ``null`` (``None``).  Merging is defined
on that shape only:

* object + object at the same key -> merged key by key, recursively
* anything else -> the source value replaces the target value

Arrays are never concatenated.  The last writer wins.
"""

from __future__ import annotations

import copy
from typing import Any, Union

from .errors import InvalidPatchError

ConfigValue = Union[
    dict[str, "ConfigValue"],
    list["ConfigValue"],
    str,
    int,
    float,
    bool,
    None,
]
ConfigObject = dict[str, ConfigValue]


def is_object(value: Any) -> bool:
    """Return ``True`` for a plain JSON object (not an array, scalar or null)."""
    return isinstance(value, dict)


def deep_merge(target: ConfigObject, source: ConfigObject) -> ConfigObject:
    """Merge *source* into *target* in place and return *target*.

    Keys already present in *target* keep their position; keys introduced
    by *source* are appended in *source* order.  Values taken from *source*
    are deep-copied so the result never shares structure with the patch.

    Raises:
        InvalidPatchError: If either argument is not a JSON object.
    """
    if not is_object(target):
        raise InvalidPatchError("<target>", reason="merge target must be a JSON object")
    if not is_object(source):
        raise InvalidPatchError("<source>", reason="merge source must be a JSON object")
    _merge_into(target, source)
    return target


def _merge_into(target: ConfigObject, source: ConfigObject) -> None:
    for key, value in source.items():
        existing = target.get(key)
        if is_object(value) and is_object(existing):
            _merge_into(existing, value)  # type: ignore[arg-type]
            continue
        target[key] = copy.deepcopy(value)
