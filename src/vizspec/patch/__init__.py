"""Partial-update engine for specification documents."""

from vizspec.patch.change import changed, json_equal
from vizspec.patch.codec import DELETE_MARKER_KEY, decode_update, encode_update
from vizspec.patch.engine import apply_update, deep_merge, deletion_paths, remove_path

__all__ = [
    "DELETE_MARKER_KEY",
    "apply_update",
    "changed",
    "decode_update",
    "deep_merge",
    "deletion_paths",
    "encode_update",
    "json_equal",
    "remove_path",
]
