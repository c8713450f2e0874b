"""Validity tracking for raw specification text typed into the editor.

Validation may finish out of order. Each submitted text gets a sequence
token and only the newest token's verdict is kept, so a slow check of stale
input never overwrites the state for newer input.
"""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Callable

from vizspec.editor.session import EditSession, parse_spec_string

logger = logging.getLogger(__name__)


def is_valid_spec_text(text: str) -> bool:
    return bool(parse_spec_string(text))


class RawTextValidator:
    def __init__(self, validate: Callable[[str], bool] = is_valid_spec_text) -> None:
        self._validate = validate
        self._tokens = itertools.count(1)
        self._latest = 0
        self._is_valid: bool | None = None
        self._lock = threading.Lock()

    @property
    def latest_token(self) -> int:
        return self._latest

    @property
    def is_valid(self) -> bool | None:
        """Verdict for the newest resolved submission; None while pending."""
        return self._is_valid

    def submit(self) -> int:
        with self._lock:
            self._latest = next(self._tokens)
            self._is_valid = None
            return self._latest

    def resolve(self, token: int, valid: bool) -> bool:
        """Record a verdict; returns False when `token` has been superseded."""
        with self._lock:
            if token != self._latest:
                logger.debug("discarding stale validation %d (latest %d)", token, self._latest)
                return False
            self._is_valid = bool(valid)
            return True

    def run(self, token: int, text: str) -> bool:
        """Validate `text` for `token`; safe to call from a worker thread."""
        return self.resolve(token, self._validate(text))

    def check(self, text: str) -> bool:
        self.run(self.submit(), text)
        return bool(self._is_valid)


def can_apply(session: EditSession, validator: RawTextValidator) -> bool:
    return session.changed() and validator.is_valid is True
