"""Server-side render pass for embedded specifications."""

from vizspec.render.context import RenderContext, RenderContextSnapshot
from vizspec.render.decision import (
    Occurrence,
    PageRef,
    RenderPlan,
    decide,
    render_plan_html,
)
from vizspec.render.finalize import HostMetadata, finalize
from vizspec.render.ingest import IngestResult, ingest, resolve_generation
from vizspec.render.pipeline import (
    DocumentRender,
    OccurrenceInput,
    render_document,
    render_occurrence,
    render_spec_page,
    transclusion_text,
)

__all__ = [
    "DocumentRender",
    "HostMetadata",
    "IngestResult",
    "Occurrence",
    "OccurrenceInput",
    "PageRef",
    "RenderContext",
    "RenderContextSnapshot",
    "RenderPlan",
    "decide",
    "finalize",
    "ingest",
    "render_document",
    "render_occurrence",
    "render_plan_html",
    "render_spec_page",
    "resolve_generation",
    "transclusion_text",
]
