# vizspec:decision_protocol_module
"""Turn raw occurrence text into a hashed specification with a generation.

Only one family of client rendering libraries can be active on a page, so a
forced generation 2 is written back into the document (`version: 2`) where
the document did not declare one. The hash is computed afterwards: forcing a
version is a content change.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Literal

from vizspec.canonical import content_hash
from vizspec.config import HostConfig
from vizspec.json_types import JSONValue
from vizspec.runtime.json_io import load_tolerant_json

logger = logging.getLogger(__name__)

INTERACTIVE_MODE = "interactive"
VERSION_KEY = "version"

Generation = Literal[1, 2]

# Plain decimal notation with an optional exponent; no `inf`, `nan` or `_`.
_NUMERIC_TEXT_RE = re.compile(
    r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*", re.ASCII
)


@dataclass(frozen=True)
class IngestResult:
    document: JSONValue
    content_hash: str
    generation: Generation


def is_interactive_mode(requested_mode: str | None) -> bool:
    return requested_mode == INTERACTIVE_MODE


def declared_version(document: JSONValue) -> float | None:
    """The document's `version` as a number, or None when it has none.

    A `version` field that is present but not numeric counts as 0 so that it
    is never overwritten by a forced generation.
    """
    if not isinstance(document, dict) or VERSION_KEY not in document:
        return None
    value = document[VERSION_KEY]
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        if _NUMERIC_TEXT_RE.fullmatch(value):
            return float(value)
        return 0
    return 0


def resolve_generation(
    document: JSONValue,
    *,
    interactive: bool,
    default_generation: int,
) -> Generation:
    """Pick the generation for one occurrence, stamping `version` if forced.

    Mutates `document` when generation 2 is forced and no version was
    declared.
    """
    version = declared_version(document)
    if default_generation > 1 or interactive:
        if version is None and isinstance(document, dict):
            document[VERSION_KEY] = 2
            logger.debug("stamped version 2 onto specification without a version")
        return 2
    if version is not None:
        return 2 if version > 1 else 1
    return 1


def ingest(
    raw_text: str,
    requested_mode: str | None,
    config: HostConfig,
) -> IngestResult:
    """Parse, resolve the generation and hash one occurrence.

    Raises SpecParseError when the text is not coercible to JSON.
    """
    document = load_tolerant_json(raw_text)
    generation = resolve_generation(
        document,
        interactive=is_interactive_mode(requested_mode),
        default_generation=config.default_generation,
    )
    return IngestResult(
        document=document,
        content_hash=content_hash(document),
        generation=generation,
    )
