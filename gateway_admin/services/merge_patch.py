"""Partial-update engine: whole-document merge and single-path patch."""
import copy
from typing import Any, List

import jsonpatch
from jsonpointer import JsonPointer, JsonPointerException

from gateway_admin.exceptions import InvalidPatchPath

_MISSING = object()


def deep_merge(base: dict, fragment: dict) -> dict:
    """
    Merge ``fragment`` into a copy of ``base``.

    Nested mappings merge key by key; any other value, lists included,
    replaces what was there. ``None`` in the fragment sets the key to
    ``None``, it does not remove it. ``base`` is left untouched.
    """
    return _merge_into(copy.deepcopy(base), fragment)


def _merge_into(target: dict, fragment: dict) -> dict:
    for key, value in fragment.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _merge_into(target[key], value)
        else:
            target[key] = copy.deepcopy(value)
    return target


def split_sub_path(sub_path: str) -> List[str]:
    """
    Split a sub-path into segments.

    ``plugins/limit-count`` and ``plugins.limit-count`` address the same
    location. Slashes win when both are present, so keys may contain dots.
    """
    path = sub_path.strip("/")
    if not path:
        return []
    if "/" in path:
        return path.split("/")
    return path.split(".")


def _child(node: Any, part: str) -> Any:
    if isinstance(node, dict):
        return node.get(part, _MISSING)
    if isinstance(node, list):
        if not part.isdigit():
            return _MISSING
        index = int(part)
        return node[index] if index < len(node) else _MISSING
    return _MISSING


def patch_at_path(document: dict, sub_path: str, fragment: Any) -> dict:
    """
    Apply ``fragment`` at ``sub_path`` inside a copy of ``document``.

    Every segment but the last must resolve to an existing mapping or list.
    When the target exists and both it and the fragment are mappings, the
    fragment is deep-merged into it. Otherwise the target is replaced, or
    added when missing.

    Raises:
        InvalidPatchPath: If the path does not resolve (status 400).
    """
    parts = split_sub_path(sub_path)
    if not parts:
        return copy.deepcopy(fragment)

    display = "/" + "/".join(parts)
    parent = document
    for part in parts[:-1]:
        parent = _child(parent, part)
        if not isinstance(parent, (dict, list)):
            raise InvalidPatchPath(f"invalid sub-path: {display}")

    current = _child(parent, parts[-1])
    if isinstance(parent, list) and current is _MISSING:
        # only appending right after the last element is addressable
        if not (parts[-1].isdigit() and int(parts[-1]) == len(parent)):
            raise InvalidPatchPath(f"invalid sub-path: {display}")

    if current is _MISSING:
        op, value = "add", copy.deepcopy(fragment)
    elif isinstance(current, dict) and isinstance(fragment, dict):
        op, value = "replace", deep_merge(current, fragment)
    else:
        op, value = "replace", copy.deepcopy(fragment)

    pointer = JsonPointer.from_parts(parts)
    try:
        return jsonpatch.apply_patch(
            document, [{"op": op, "path": pointer.path, "value": value}]
        )
    except (jsonpatch.JsonPatchException, JsonPointerException) as e:
        raise InvalidPatchPath(f"invalid sub-path: {display}") from e
