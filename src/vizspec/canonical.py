# vizspec:decision_protocol_module
from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping

from vizspec.invariants import never
from vizspec.json_types import JSONValue


def canon(value: object) -> JSONValue:
    """Normalize carriers to plain JSON while keeping mapping key order.

    Key order is part of a document's identity: two documents with the same
    keys in a different order are different content.
    """
    match value:
        case None | str() | int() | float() | bool():
            return value
        case Mapping() as value_mapping:
            return {str(key): canon(item) for key, item in value_mapping.items()}
        case tuple() | list() as sequence_value:
            return [canon(item) for item in sequence_value]
        case _:
            never(
                "canon() received non-JSON value",
                value_type=type(value).__name__,
            )


def encode_canon(value: object) -> str:
    return json.dumps(
        canon(value),
        sort_keys=False,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def content_hash(value: object) -> str:
    """SHA-1 hex digest of the compact encoding of a specification."""
    encoded = encode_canon(value).encode("utf-8")
    return hashlib.sha1(encoded).hexdigest()
