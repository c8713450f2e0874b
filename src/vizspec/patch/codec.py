"""Wire form for partial updates.

JSON has no spelling for "remove this field", so on the wire a deletion is
the single-key object `{"$delete": true}`. Decoding turns those objects back
into the `DELETE` marker; encoding does the reverse, which makes an update
safe to log, store in a fixture, or pass on the command line.
"""

from __future__ import annotations

from vizspec.invariants import never
from vizspec.json_types import DELETE, Deletion, JSONValue, PatchValue

DELETE_MARKER_KEY = "$delete"


def encode_update(update: PatchValue) -> JSONValue:
    match update:
        case Deletion():
            return {DELETE_MARKER_KEY: True}
        case dict() as mapping:
            return {key: encode_update(value) for key, value in mapping.items()}
        case list() as sequence:
            return [encode_update(item) for item in sequence]
        case None | str() | int() | float() | bool():
            return update
        case _:
            never("cannot encode non-JSON update value", value_type=type(update).__name__)


def decode_update(payload: JSONValue) -> PatchValue:
    match payload:
        case dict() as mapping if _is_delete_marker(mapping):
            return DELETE
        case dict() as mapping:
            return {key: decode_update(value) for key, value in mapping.items()}
        case list() as sequence:
            return [decode_update(item) for item in sequence]
        case _:
            return payload


def _is_delete_marker(mapping: dict[str, JSONValue]) -> bool:
    return len(mapping) == 1 and mapping.get(DELETE_MARKER_KEY) is True
