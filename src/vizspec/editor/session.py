from __future__ import annotations

import copy
import logging
from typing import Callable, Mapping

from vizspec.json_types import DELETE, JSONObject, JSONValue, PatchObject, PatchValue
from vizspec.patch.change import changed as spec_changed
from vizspec.patch.engine import apply_update
from vizspec.runtime.json_io import dump_json_pretty, load_json_object_text

logger = logging.getLogger(__name__)

SpecListener = Callable[[JSONObject], None]

SOURCE_BODY_KEY = "body"
SOURCE_TEXT_KEY = "extsrc"

UNKNOWN_GRAPH_TYPE = "unknown"

DEFAULT_SPEC: JSONObject = {
    "width": 400,
    "height": 200,
    "data": [
        {
            "name": "table",
            "values": [
                {"x": 0, "y": 1},
                {"x": 1, "y": 3},
                {"x": 2, "y": 2},
                {"x": 3, "y": 4},
            ],
        }
    ],
    "scales": [
        {
            "name": "x",
            "type": "linear",
            "range": "width",
            "zero": False,
            "domain": {"data": "table", "field": "data.x"},
        },
        {
            "name": "y",
            "type": "linear",
            "range": "height",
            "nice": True,
            "domain": {"data": "table", "field": "data.y"},
        },
    ],
    "axes": [
        {"type": "x", "scale": "x"},
        {"type": "y", "scale": "y"},
    ],
    "marks": [
        {
            "type": "area",
            "from": {"data": "table"},
            "properties": {
                "enter": {
                    "x": {"scale": "x", "field": "data.x"},
                    "y": {"scale": "y", "field": "data.y"},
                    "y2": {"scale": "y", "value": 0},
                    "fill": {"value": "steelblue"},
                    "interpolate": {"value": "monotone"},
                }
            },
        }
    ],
}

# Each preset replaces the first scale and first mark. Properties a preset
# does not use are deleted so switching types leaves nothing stale behind.
GRAPH_TYPE_PRESETS: dict[str, dict[str, PatchObject]] = {
    "area": {
        "mark": {
            "type": "area",
            "properties": {
                "enter": {
                    "fill": {"value": "steelblue"},
                    "interpolate": {"value": "monotone"},
                    "stroke": DELETE,
                    "strokeWidth": DELETE,
                    "width": DELETE,
                }
            },
        },
        "scale": {"name": "x", "type": "linear"},
    },
    "bar": {
        "mark": {
            "type": "rect",
            "properties": {
                "enter": {
                    "fill": {"value": "steelblue"},
                    "interpolate": DELETE,
                    "stroke": DELETE,
                    "strokeWidth": DELETE,
                    "width": {"scale": "x", "band": True, "offset": -1},
                }
            },
        },
        "scale": {"name": "x", "type": "ordinal"},
    },
    "line": {
        "mark": {
            "type": "line",
            "properties": {
                "enter": {
                    "fill": DELETE,
                    "interpolate": {"value": "monotone"},
                    "stroke": {"value": "steelblue"},
                    "strokeWidth": {"value": 3},
                    "width": DELETE,
                }
            },
        },
        "scale": {"name": "x", "type": "linear"},
    },
}

_MARK_TYPE_TO_GRAPH_TYPE = {"area": "area", "rect": "bar", "line": "line"}


def parse_spec_string(text: str | None) -> JSONObject:
    """Strict parse for editor input; anything but a JSON object yields `{}`."""
    if text is None:
        return {}
    return load_json_object_text(text)


def stringify_spec(spec: JSONValue) -> str:
    return dump_json_pretty(spec, indent="\t")


def spec_from_attributes(attributes: Mapping[str, object] | None) -> JSONObject:
    """The specification held by a host node's attribute payload.

    Nodes without source text start from `DEFAULT_SPEC`.
    """
    body = (attributes or {}).get(SOURCE_BODY_KEY)
    text = body.get(SOURCE_TEXT_KEY) if isinstance(body, Mapping) else None
    if isinstance(text, str) and text:
        return parse_spec_string(text)
    return copy.deepcopy(DEFAULT_SPEC)


class EditSession:
    """Working copy of one specification while an editor is open.

    Every mutation produces a new document through the patch engine or a
    copy; listeners are told synchronously, in edit order, and only when the
    document actually changed.
    """

    def __init__(self, spec: JSONObject | None = None) -> None:
        self._spec: JSONObject = copy.deepcopy(spec) if spec else {}
        self._baseline: JSONObject = copy.deepcopy(self._spec)
        self._listeners: list[SpecListener] = []

    @property
    def spec(self) -> JSONObject:
        return self._spec

    @property
    def baseline(self) -> JSONObject:
        return self._baseline

    def subscribe(self, listener: SpecListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: SpecListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def close(self) -> None:
        self._listeners.clear()

    def changed(self) -> bool:
        return spec_changed(self._spec, self._baseline)

    def spec_string(self) -> str:
        return stringify_spec(self._spec)

    def original_spec_string(self) -> str:
        return stringify_spec(self._baseline)

    def update_spec(self, update: PatchValue) -> bool:
        updated = apply_update(self._spec, update)
        if not isinstance(updated, dict):
            raise TypeError("a specification update must produce a JSON object")
        return self._commit(updated)

    def set_spec_from_string(self, text: str) -> bool:
        return self._commit(parse_spec_string(text))

    def switch_graph_type(self, graph_type: str) -> bool:
        preset = GRAPH_TYPE_PRESETS.get(graph_type)
        if preset is None:
            raise ValueError(f"unknown graph type {graph_type!r}")
        return self.update_spec(
            {
                "scales": [copy.deepcopy(preset["scale"])],
                "marks": [copy.deepcopy(preset["mark"])],
            }
        )

    def graph_type(self) -> str:
        marks = self._spec.get("marks")
        if not isinstance(marks, list) or not marks or not isinstance(marks[0], dict):
            return UNKNOWN_GRAPH_TYPE
        return _MARK_TYPE_TO_GRAPH_TYPE.get(marks[0].get("type"), UNKNOWN_GRAPH_TYPE)

    def pipeline(self, pipeline_id: int) -> JSONObject:
        return self._spec["data"][pipeline_id]

    def pipeline_fields(self, pipeline_id: int) -> list[str]:
        return list(self.pipeline(pipeline_id)["values"][0].keys())

    def set_entry_field(
        self, entry: int, field: str, value: JSONValue, *, pipeline_id: int = 0
    ) -> bool:
        updated = copy.deepcopy(self._spec)
        values = updated["data"][pipeline_id]["values"]
        if entry == len(values):
            values.append(self._new_entry(pipeline_id))
        elif entry > len(values):
            raise IndexError(f"entry {entry} is past the end of pipeline {pipeline_id}")
        values[entry][field] = value
        return self._commit(updated)

    def remove_entry(self, index: int, *, pipeline_id: int = 0) -> bool:
        updated = copy.deepcopy(self._spec)
        del updated["data"][pipeline_id]["values"][index]
        return self._commit(updated)

    def apply_changes(self, attributes: Mapping[str, object]) -> dict[str, object]:
        """Replacement attribute payload carrying the edited source text.

        The host performs the transaction; `attributes` itself is untouched.
        """
        payload = copy.deepcopy(dict(attributes))
        body = payload.get(SOURCE_BODY_KEY)
        body = dict(body) if isinstance(body, Mapping) else {}
        body[SOURCE_TEXT_KEY] = self.spec_string()
        payload[SOURCE_BODY_KEY] = body
        return payload

    def _new_entry(self, pipeline_id: int) -> JSONObject:
        return {name: "" for name in self.pipeline_fields(pipeline_id)}

    def _commit(self, updated: JSONObject) -> bool:
        if not spec_changed(self._spec, updated):
            return False
        self._spec = updated
        logger.debug("specification changed; notifying %d listener(s)", len(self._listeners))
        for listener in list(self._listeners):
            listener(self._spec)
        return True
