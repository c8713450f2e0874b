# vizspec:decision_protocol_module
from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Mapping
from urllib.parse import quote

from vizspec.config import HostConfig, expand_image_template
from vizspec.json_types import JSONValue
from vizspec.render.context import RenderContext
from vizspec.render.ingest import is_interactive_mode

CONTAINER_CLASS = "graph-container"
INTERACTABLE_CLASS = "graph-interactable"
IMG_CLASS = "graph-img"
LIVE_CLASS = "graph-live"
SWITCH_BUTTON_CLASS = "graph-switch-button"
GRAPH_ID_ATTRIBUTE = "data-graph-id"
MODE_OPTION = "mode"


@dataclass(frozen=True)
class PageRef:
    """Identifies the document being rendered, for static image URLs."""

    host: str = ""
    title: str | None = None
    revision: int | str | None = None


@dataclass(frozen=True)
class Occurrence:
    is_interactive_requested: bool = False

    @classmethod
    def from_options(cls, options: Mapping[str, str] | None) -> Occurrence:
        mode = (options or {}).get(MODE_OPTION)
        return cls(is_interactive_requested=is_interactive_mode(mode))


@dataclass(frozen=True)
class RenderFlags:
    use_static_image: bool
    load_live: bool
    load_on_click: bool


@dataclass(frozen=True)
class RenderPlan:
    static_image_url: str | None = None
    live_placeholder: bool = False
    interactive_affordance: bool = False
    graph_id: str | None = None
    switch_button_label: str = ""

    @property
    def mode(self) -> str:
        if self.interactive_affordance:
            return "load-on-click"
        if self.live_placeholder:
            return "live"
        return "static"


def render_flags(
    occurrence: Occurrence, config: HostConfig, *, is_preview: bool
) -> RenderFlags:
    use_static_image = not is_preview and bool(config.img_service_url)
    load_live = is_preview or not config.img_service_always
    load_on_click = (
        not load_live and use_static_image and occurrence.is_interactive_requested
    )
    return RenderFlags(
        use_static_image=use_static_image,
        load_live=load_live,
        load_on_click=load_on_click,
    )


def static_image_url(template: str, page: PageRef, content_hash: str) -> str:
    revision = quote(str(page.revision), safe="") if page.revision is not None else ""
    return expand_image_template(
        template,
        (
            quote(page.host, safe=""),
            quote(page.title, safe="") if page.title else "",
            revision or "0",
            content_hash,
        ),
    )


def decide(
    occurrence: Occurrence,
    config: HostConfig,
    document: JSONValue,
    content_hash: str,
    context: RenderContext,
    *,
    is_preview: bool,
    page: PageRef | None = None,
) -> RenderPlan:
    """Choose how one occurrence renders and record it in `context`.

    Load-on-click wins over live loading, which wins over a plain static
    image. Every specification lands in the context's full map; only live
    ones land in the live map.
    """
    flags = render_flags(occurrence, config, is_preview=is_preview)
    image_url = None
    if flags.use_static_image and config.img_service_url:
        image_url = static_image_url(
            config.img_service_url, page or PageRef(), content_hash
        )

    if flags.load_on_click:
        context.register_spec(content_hash, document)
        context.mark_interactive()
        return RenderPlan(
            static_image_url=image_url,
            interactive_affordance=True,
            graph_id=content_hash,
            switch_button_label=config.switch_button_label,
        )
    if flags.load_live:
        context.register_live_spec(content_hash, document)
        return RenderPlan(
            static_image_url=image_url,
            live_placeholder=True,
            graph_id=content_hash,
        )
    context.register_spec(content_hash, document)
    return RenderPlan(static_image_url=image_url)


def render_plan_html(plan: RenderPlan) -> str:
    image_tag = ""
    if plan.static_image_url is not None:
        image_tag = _element("img", {"class": IMG_CLASS, "src": plan.static_image_url})

    live_tag = ""
    container_class = CONTAINER_CLASS
    if plan.interactive_affordance:
        container_class += " " + INTERACTABLE_CLASS
        live_tag = _element(
            "div",
            {"class": SWITCH_BUTTON_CLASS},
            html.escape(plan.switch_button_label, quote=False),
        )
    elif plan.live_placeholder:
        live_tag = _element("div", {"class": LIVE_CLASS}, "")

    attributes = {"class": container_class}
    if plan.graph_id is not None:
        attributes[GRAPH_ID_ATTRIBUTE] = plan.graph_id
    container = _element("div", attributes, image_tag + live_tag)
    return _element("div", {}, container)


def render_error_html(message: str) -> str:
    return _element("strong", {"class": "error"}, html.escape(message, quote=False))


def _element(tag: str, attributes: dict[str, str], content: str | None = None) -> str:
    rendered = "".join(
        f' {name}="{html.escape(value, quote=True)}"'
        for name, value in attributes.items()
    )
    if content is None:
        return f"<{tag}{rendered}>"
    return f"<{tag}{rendered}>{content}</{tag}>"
