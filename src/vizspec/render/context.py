from __future__ import annotations

import threading
from dataclasses import dataclass, field

from vizspec.json_types import JSONValue


@dataclass(frozen=True)
class RenderContextSnapshot:
    all_specs: dict[str, JSONValue]
    live_specs: dict[str, JSONValue]
    has_broken_spec: bool
    has_interactive: bool
    has_generation2: bool


@dataclass
class RenderContext:
    """Per-document aggregate of every specification seen in one render pass.

    Writers go through the methods below, which serialize on an internal lock
    so occurrences of one document may be processed concurrently. Different
    documents never share a context.
    """

    all_specs: dict[str, JSONValue] = field(default_factory=dict)
    live_specs: dict[str, JSONValue] = field(default_factory=dict)
    has_broken_spec: bool = False
    has_interactive: bool = False
    has_generation2: bool = False
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def register_spec(self, content_hash: str, document: JSONValue) -> None:
        with self._lock:
            self.all_specs[content_hash] = document

    def register_live_spec(self, content_hash: str, document: JSONValue) -> None:
        # Live specs are a subset of all specs.
        with self._lock:
            self.all_specs[content_hash] = document
            self.live_specs[content_hash] = document

    def mark_broken(self) -> None:
        with self._lock:
            self.has_broken_spec = True

    def mark_interactive(self) -> None:
        with self._lock:
            self.has_interactive = True

    def mark_generation2(self) -> None:
        with self._lock:
            self.has_generation2 = True

    def snapshot(self) -> RenderContextSnapshot:
        with self._lock:
            return RenderContextSnapshot(
                all_specs=dict(self.all_specs),
                live_specs=dict(self.live_specs),
                has_broken_spec=self.has_broken_spec,
                has_interactive=self.has_interactive,
                has_generation2=self.has_generation2,
            )
