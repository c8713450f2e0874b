from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor

from vizspec.config import HostConfig
from vizspec.render.context import RenderContext
from vizspec.render.finalize import (
    BROKEN_MARKER,
    HAS_GRAPHS_MARKER,
    LOADER_MODULE,
    SPECS_PROPERTY,
    SPECS_VAR,
)
from vizspec.render.pipeline import (
    OccurrenceInput,
    render_document,
    render_occurrence,
    render_spec_page,
    transclusion_text,
)


def test_broken_occurrence_renders_error_and_others_continue() -> None:
    result = render_document(
        [OccurrenceInput("invalid JSON string"), OccurrenceInput('{"width": 1}')],
        HostConfig(),
    )

    assert result.markup[0].startswith('<strong class="error">')
    assert 'class="graph-live"' in result.markup[1]
    assert BROKEN_MARKER in result.metadata.markers
    assert HAS_GRAPHS_MARKER in result.metadata.markers


def test_zero_occurrences_produce_nothing() -> None:
    result = render_document([], HostConfig())

    assert result.markup == []
    assert result.metadata.is_empty


def test_whitespace_variants_collapse_to_one_spec() -> None:
    result = render_document(
        [
            OccurrenceInput('{"width": 1, "height": 2}'),
            OccurrenceInput('{\n  "width":1,\n  "height":2,\n}'),
        ],
        HostConfig(),
    )

    stored = json.loads(result.metadata.properties[SPECS_PROPERTY])
    assert list(stored.values()) == [{"width": 1, "height": 2}]
    assert 'data-graph-id="' in result.markup[0]
    assert result.markup[0] == result.markup[1]


def test_comment_variants_collapse_to_one_spec() -> None:
    result = render_document(
        [
            OccurrenceInput('{"width": 1, "height": 2}'),
            OccurrenceInput('{/* size */ "width": 1, "height": 2, // px\n}'),
        ],
        HostConfig(),
    )

    stored = json.loads(result.metadata.properties[SPECS_PROPERTY])
    assert list(stored.values()) == [{"width": 1, "height": 2}]
    assert BROKEN_MARKER not in result.metadata.markers


def test_positional_image_template_renders_static_images() -> None:
    config = HostConfig(
        img_service_url="https://img.test/%1$s/v1/png/%2$s/%3$s/%4$s.png",
        img_service_always=True,
    )
    result = render_document([OccurrenceInput('{"width": 1}')], config)

    assert 'src="https://img.test//v1/png//0/' in result.markup[0]


def test_interactive_occurrence_promotes_the_document_to_generation_two() -> None:
    context = RenderContext()
    config = HostConfig(default_generation=1)

    render_occurrence('{"width": 1}', {"mode": "interactive"}, config, context)
    render_occurrence('{"version": 1, "width": 2}', None, config, context)

    assert context.has_generation2 is True
    assert {"width": 1, "version": 2} in context.all_specs.values()
    assert {"version": 1, "width": 2} in context.all_specs.values()


def test_document_generation_follows_promotion() -> None:
    result = render_document(
        [
            OccurrenceInput('{"width": 1}', {"mode": "interactive"}),
            OccurrenceInput('{"version": 1}'),
        ],
        HostConfig(),
    )

    assert result.metadata.modules == ["graph.vega2"]
    assert {"version": 1} in result.metadata.client_config[SPECS_VAR].values()


def test_always_static_click_to_load_document_uses_lazy_loader(img_template: str) -> None:
    config = HostConfig(img_service_url=img_template, img_service_always=True)

    result = render_document(
        [OccurrenceInput('{"width": 1}', {"mode": "interactive"})],
        config,
    )

    assert "graph-switch-button" in result.markup[0]
    assert config.switch_button_label in result.markup[0]
    assert result.metadata.modules == [LOADER_MODULE]


def test_concurrent_occurrences_share_one_context() -> None:
    context = RenderContext()
    config = HostConfig()

    def _render(index: int) -> str:
        return render_occurrence(f'{{"index": {index}}}', None, config, context)

    with ThreadPoolExecutor(max_workers=4) as pool:
        markup = list(pool.map(_render, range(40)))

    assert len(markup) == 40
    assert len(context.all_specs) == 40
    assert context.live_specs.keys() == context.all_specs.keys()


def test_spec_page_renders_and_finalizes() -> None:
    result = render_spec_page('{"width": 1}', HostConfig(), is_preview=True)

    assert len(result.markup) == 1
    assert HAS_GRAPHS_MARKER in result.metadata.markers


def test_spec_page_without_html_skips_markup() -> None:
    result = render_spec_page('{"width": 1}', HostConfig(), generate_html=False)

    assert result.markup == []
    assert result.metadata.is_empty


def test_transclusion_text_wraps_the_content() -> None:
    assert transclusion_text('{"a": 1}') == '<graph>{"a": 1}</graph>'
