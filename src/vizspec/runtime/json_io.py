# vizspec:boundary_normalization_module
from __future__ import annotations

import json
import logging
import re
from typing import Mapping

import commentjson

from vizspec.exceptions import SpecParseError
from vizspec.json_types import JSONObject, JSONValue

logger = logging.getLogger(__name__)

UNREADABLE_MESSAGE = "the text is not valid JSON"

# A double-quoted JSON string, a line comment, or a block comment. Strings and
# line comments are matched first so a `/*` inside either survives.
_BLOCK_COMMENT_RE = re.compile(
    r'("(?:[^"\\]|\\.)*")|((?://|#)[^\n]*)|/\*.*?\*/', re.DOTALL
)


def strip_block_comments(text: str) -> str:
    """Replace every `/* ... */` outside a string with a single space.

    Line comments and trailing commas are left to the commentjson grammar.
    """

    def _replace(match: re.Match[str]) -> str:
        if match.group(1) is not None:
            return match.group(1)
        if match.group(2) is not None:
            return match.group(2)
        return " "

    return _BLOCK_COMMENT_RE.sub(_replace, text)


def load_tolerant_json(text: str) -> JSONValue:
    """Parse JSON that may carry comments and trailing commas.

    Raises SpecParseError when the text still cannot be read as a JSON value.
    """
    if not isinstance(text, str):
        raise SpecParseError(
            f"expected specification text, got {type(text).__name__}",
            text="",
        )
    if not text.strip():
        raise SpecParseError("the specification is empty", text=text)
    try:
        return commentjson.loads(strip_block_comments(text))
    except Exception as exc:
        # commentjson surfaces lark and json errors without a common base class.
        logger.debug("tolerant JSON parse failed: %s", exc)
        raise SpecParseError(_parse_error_message(exc), text=text) from exc


def _parse_error_message(exc: BaseException) -> str:
    """Position of the failure, never the text itself.

    commentjson wraps some lark errors in a ValueError whose arguments carry
    the whole input, so the position is read from the chained lark error.
    """
    for error in (exc, exc.__cause__, exc.__context__):
        if isinstance(error, json.JSONDecodeError):
            return f"{error.msg} at line {error.lineno}, column {error.colno}"
        line = getattr(error, "line", None)
        column = getattr(error, "column", None)
        if isinstance(line, int) and isinstance(column, int) and line > 0:
            return f"unexpected input at line {line}, column {column}"
    return UNREADABLE_MESSAGE


def load_json_object_text(text: str) -> JSONObject:
    """Strict parse that only accepts a JSON object; anything else is `{}`."""
    try:
        payload = json.loads(text)
    except (TypeError, ValueError):
        return {}
    if not isinstance(payload, Mapping):
        return {}
    return dict(payload)


def dump_json_compact(payload: object) -> str:
    """Whitespace-free encoding; key order is preserved as given."""
    return json.dumps(
        payload,
        separators=(",", ":"),
        sort_keys=False,
        ensure_ascii=False,
    )


def dump_json_pretty(payload: object, *, indent: str | int = "\t") -> str:
    return json.dumps(payload, indent=indent, sort_keys=False, ensure_ascii=False)
