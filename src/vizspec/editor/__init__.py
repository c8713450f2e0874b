"""Editing surface model for a single embedded specification."""

from vizspec.editor.session import (
    DEFAULT_SPEC,
    GRAPH_TYPE_PRESETS,
    EditSession,
    parse_spec_string,
    spec_from_attributes,
    stringify_spec,
)
from vizspec.editor.validation import RawTextValidator, can_apply, is_valid_spec_text

__all__ = [
    "DEFAULT_SPEC",
    "GRAPH_TYPE_PRESETS",
    "EditSession",
    "RawTextValidator",
    "can_apply",
    "is_valid_spec_text",
    "parse_spec_string",
    "spec_from_attributes",
    "stringify_spec",
]
