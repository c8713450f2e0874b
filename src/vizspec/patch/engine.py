# vizspec:decision_protocol_module
"""Deep merge of partial updates onto specification documents.

An update is shaped like the document it patches. Mappings merge per key,
lists merge per index, and anything else is replaced by the update's value.
Leaves holding `DELETE` remove the addressed field or element from both the
document and the update before the merge runs, so the merge itself only ever
sees plain JSON.
"""

from __future__ import annotations

import copy
from typing import Iterator

from vizspec.invariants import never, pure
from vizspec.json_types import (
    DELETE,
    Deletion,
    JSONPath,
    JSONValue,
    PatchValue,
)


@pure
def apply_update(base: JSONValue, update: PatchValue) -> JSONValue:
    """Return `base` with `update` merged in; neither input is mutated."""
    paths = deletion_paths(update)
    working_base = copy.deepcopy(base)
    working_update = copy.deepcopy(update)
    # Later paths first: removing a list element shifts its successors, and
    # collection order guarantees later siblings sit at higher indices.
    for path in reversed(paths):
        working_base = remove_path(working_base, path)
        working_update = remove_path(working_update, path)
    if working_update is DELETE:
        # The root has no parent to be removed from.
        return working_base
    return deep_merge(working_base, working_update)


@pure
def deletion_paths(update: PatchValue) -> list[JSONPath]:
    """Paths of every `DELETE` leaf, in depth-first insertion order.

    Containers are walked but never reported, even when all of their
    children are deletions.
    """
    return list(_iter_deletion_paths(update, ()))


def _iter_deletion_paths(value: PatchValue, prefix: JSONPath) -> Iterator[JSONPath]:
    match value:
        case Deletion():
            yield prefix
        case dict() as mapping:
            for key, item in mapping.items():
                yield from _iter_deletion_paths(item, prefix + (key,))
        case list() as sequence:
            for index, item in enumerate(sequence):
                yield from _iter_deletion_paths(item, prefix + (index,))
        case None | str() | int() | float() | bool():
            return
        case _:
            never(
                "partial update holds a non-JSON value",
                value_type=type(value).__name__,
                path=list(prefix),
            )


def remove_path(target: PatchValue, path: JSONPath) -> PatchValue:
    """Remove the element at `path` from `target` in place and return `target`.

    A path whose intermediate or terminal segment is absent leaves `target`
    untouched; the field may legitimately already be gone. An empty path
    addresses the root itself, which cannot be removed from its parent, so
    it is a no-op as well.
    """
    if not path:
        return target
    parent = _resolve(target, path[:-1])
    if parent is None:
        return target
    terminal = path[-1]
    match parent:
        case list() as sequence:
            index = _as_index(terminal)
            if index is not None and index < len(sequence):
                del sequence[index]
        case dict() as mapping:
            mapping.pop(str(terminal), None)
        case _:
            pass
    return target


def _resolve(
    target: PatchValue, path: JSONPath
) -> list[PatchValue] | dict[str, PatchValue] | None:
    node: PatchValue = target
    for segment in path:
        match node:
            case list() as sequence:
                index = _as_index(segment)
                if index is None or index >= len(sequence):
                    return None
                node = sequence[index]
            case dict() as mapping:
                key = str(segment)
                if key not in mapping:
                    return None
                node = mapping[key]
            case _:
                return None
    if isinstance(node, (list, dict)):
        return node
    return None


def _as_index(segment: object) -> int | None:
    if isinstance(segment, bool):
        return None
    if isinstance(segment, int):
        return segment if segment >= 0 else None
    if isinstance(segment, str) and segment.isdigit():
        return int(segment)
    return None


@pure
def deep_merge(base: JSONValue, update: PatchValue) -> JSONValue:
    """Merge `update` onto `base` and return a new value.

    Mapping onto mapping merges per key; list onto list merges per index and
    keeps the longer tail; any other pairing takes the update's value.
    """
    match (base, update):
        case (dict() as base_mapping, dict() as update_mapping):
            merged: dict[str, JSONValue] = {
                key: copy.deepcopy(value) for key, value in base_mapping.items()
            }
            for key, value in update_mapping.items():
                if key in merged:
                    merged[key] = deep_merge(merged[key], value)
                else:
                    merged[key] = _plain(value)
            return merged
        case (list() as base_sequence, list() as update_sequence):
            result: list[JSONValue] = []
            for index in range(max(len(base_sequence), len(update_sequence))):
                if index >= len(update_sequence):
                    result.append(copy.deepcopy(base_sequence[index]))
                elif index >= len(base_sequence):
                    result.append(_plain(update_sequence[index]))
                else:
                    result.append(
                        deep_merge(base_sequence[index], update_sequence[index])
                    )
            return result
        case _:
            return _plain(update)


def _plain(value: PatchValue) -> JSONValue:
    if value is DELETE:
        never("deletion marker reached the merge step")
    return copy.deepcopy(value)
