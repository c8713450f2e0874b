# vizspec:decision_protocol_module
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from vizspec.config import HostConfig
from vizspec.json_types import JSONObject, JSONValue
from vizspec.render.context import RenderContext
from vizspec.runtime.json_io import dump_json_compact

logger = logging.getLogger(__name__)

SPECS_PROPERTY = "graph_specs"
BROKEN_MARKER = "graph-broken-category"
HAS_GRAPHS_MARKER = "graph-tracking-category"

HTTP_DOMAINS_VAR = "graphHttpDomains"
HTTPS_DOMAINS_VAR = "graphHttpsDomains"
IS_TRUSTED_VAR = "graphIsTrusted"
SPECS_VAR = "graphSpecs"

LOADER_MODULE = "graph.loader"


def generation_module(generation: int) -> str:
    return f"graph.vega{generation}"


@dataclass
class HostMetadata:
    """What the host attaches to the document after a render pass."""

    properties: dict[str, str] = field(default_factory=dict)
    markers: list[str] = field(default_factory=list)
    client_config: dict[str, JSONValue] = field(default_factory=dict)
    modules: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.properties or self.markers or self.client_config or self.modules)

    def to_json(self) -> JSONObject:
        return {
            "properties": dict(self.properties),
            "markers": list(self.markers),
            "client_config": dict(self.client_config),
            "modules": list(self.modules),
        }


def finalize(context: RenderContext, config: HostConfig) -> HostMetadata:
    """Project a finished render context into host metadata.

    Runs once per document, strictly after the last occurrence.
    """
    snapshot = context.snapshot()
    metadata = HostMetadata()
    if snapshot.has_broken_spec:
        metadata.markers.append(BROKEN_MARKER)
    if not snapshot.all_specs:
        return metadata

    metadata.properties[SPECS_PROPERTY] = dump_json_compact(snapshot.all_specs)
    metadata.markers.append(HAS_GRAPHS_MARKER)

    if snapshot.live_specs or snapshot.has_interactive:
        metadata.client_config[HTTP_DOMAINS_VAR] = list(config.http_domains)
        metadata.client_config[HTTPS_DOMAINS_VAR] = list(config.https_domains)
        metadata.client_config[IS_TRUSTED_VAR] = config.is_trusted
        if snapshot.live_specs:
            # One generation per document: any generation-2 spec promotes all.
            generation = 2 if snapshot.has_generation2 else 1
            metadata.modules.append(generation_module(generation))
            metadata.client_config[SPECS_VAR] = dict(snapshot.live_specs)
        else:
            metadata.modules.append(LOADER_MODULE)
    logger.debug(
        "finalized %d specification(s), %d live, modules=%s",
        len(snapshot.all_specs),
        len(snapshot.live_specs),
        metadata.modules,
    )
    return metadata
