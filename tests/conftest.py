from __future__ import annotations

import copy
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))


import pytest

from vizspec.render.context import RenderContext

IMG_TEMPLATE = "https://graphoid.test/%s/%s/%s/%s.png"

AREA_GRAPH: dict[str, object] = {
    "width": 500,
    "height": 200,
    "padding": {"top": 10, "left": 30, "bottom": 30, "right": 10},
    "data": [
        {
            "name": "table",
            "values": [
                {"x": 0, "y": 28},
                {"x": 1, "y": 43},
                {"x": 2, "y": 81},
                {"x": 3, "y": 19},
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
    "axes": [{"type": "x", "scale": "x"}, {"type": "y", "scale": "y"}],
    "marks": [
        {
            "type": "area",
            "from": {"data": "table"},
            "properties": {
                "enter": {
                    "interpolate": {"value": "monotone"},
                    "x": {"scale": "x", "field": "data.x"},
                    "y": {"scale": "y", "field": "data.y"},
                    "y2": {"scale": "y", "value": 0},
                    "fill": {"value": "steelblue"},
                }
            },
        }
    ],
}

STACKED_BAR_GRAPH: dict[str, object] = {
    "width": 300,
    "height": 100,
    "data": [
        {
            "name": "table",
            "values": [
                {"x": 0, "y": 28, "c": 0},
                {"x": 0, "y": 55, "c": 1},
                {"x": 1, "y": 43, "c": 0},
                {"x": 1, "y": 91, "c": 1},
            ],
        }
    ],
    "scales": [{"name": "x", "type": "ordinal", "range": "width"}],
    "marks": [{"type": "rect", "from": {"data": "table"}}],
}


@pytest.fixture
def area_graph() -> dict[str, object]:
    return copy.deepcopy(AREA_GRAPH)


@pytest.fixture
def stacked_bar_graph() -> dict[str, object]:
    return copy.deepcopy(STACKED_BAR_GRAPH)


@pytest.fixture
def render_context() -> RenderContext:
    return RenderContext()


@pytest.fixture
def img_template() -> str:
    return IMG_TEMPLATE
