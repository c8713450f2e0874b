"""Render pass drivers: one occurrence, one document, one specification page."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from vizspec.config import HostConfig
from vizspec.exceptions import SpecParseError
from vizspec.render.context import RenderContext
from vizspec.render.decision import (
    MODE_OPTION,
    Occurrence,
    PageRef,
    decide,
    render_error_html,
    render_plan_html,
)
from vizspec.render.finalize import HostMetadata, finalize
from vizspec.render.ingest import ingest

logger = logging.getLogger(__name__)

TAG_NAME = "graph"


@dataclass(frozen=True)
class OccurrenceInput:
    text: str
    options: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DocumentRender:
    markup: list[str]
    metadata: HostMetadata


def render_occurrence(
    raw_text: str,
    options: Mapping[str, str] | None,
    config: HostConfig,
    context: RenderContext,
    *,
    is_preview: bool = False,
    page: PageRef | None = None,
) -> str:
    """Render one embedded specification and record it in `context`.

    A parse failure renders an inline error and marks the document broken;
    it never stops the pass.
    """
    occurrence = Occurrence.from_options(options)
    try:
        result = ingest(raw_text, (options or {}).get(MODE_OPTION), config)
    except SpecParseError as exc:
        logger.info("broken graph specification: %s", exc.message)
        context.mark_broken()
        return render_error_html(exc.display_text)
    if result.generation == 2:
        context.mark_generation2()
    plan = decide(
        occurrence,
        config,
        result.document,
        result.content_hash,
        context,
        is_preview=is_preview,
        page=page,
    )
    return render_plan_html(plan)


def render_document(
    occurrences: Iterable[OccurrenceInput],
    config: HostConfig,
    *,
    is_preview: bool = False,
    page: PageRef | None = None,
) -> DocumentRender:
    context = RenderContext()
    markup = [
        render_occurrence(
            occurrence.text,
            occurrence.options,
            config,
            context,
            is_preview=is_preview,
            page=page,
        )
        for occurrence in occurrences
    ]
    return DocumentRender(markup=markup, metadata=finalize(context, config))


def render_spec_page(
    text: str,
    config: HostConfig,
    *,
    is_preview: bool = False,
    page: PageRef | None = None,
    generate_html: bool = True,
) -> DocumentRender:
    """Render a page whose entire content is one specification.

    Finalize runs even when `generate_html` is false.
    """
    context = RenderContext()
    markup: list[str] = []
    if generate_html:
        markup.append(
            render_occurrence(
                text, None, config, context, is_preview=is_preview, page=page
            )
        )
    return DocumentRender(markup=markup, metadata=finalize(context, config))


def transclusion_text(text: str) -> str:
    """Wrap specification page content so it can be embedded elsewhere."""
    return f"<{TAG_NAME}>{text}</{TAG_NAME}>"
