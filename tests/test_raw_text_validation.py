from __future__ import annotations

import threading

from vizspec.editor.session import EditSession
from vizspec.editor.validation import RawTextValidator, can_apply, is_valid_spec_text


def test_is_valid_spec_text_requires_a_non_empty_object() -> None:
    assert is_valid_spec_text('{"width": 1}') is True
    assert is_valid_spec_text("{}") is False
    assert is_valid_spec_text("[1]") is False
    assert is_valid_spec_text("nope") is False


def test_stale_results_are_discarded() -> None:
    validator = RawTextValidator()
    first = validator.submit()
    second = validator.submit()

    assert validator.resolve(first, True) is False
    assert validator.is_valid is None
    assert validator.resolve(second, False) is True
    assert validator.is_valid is False
    assert validator.resolve(first, True) is False
    assert validator.is_valid is False


def test_slow_validation_of_old_text_cannot_overwrite_newer_state() -> None:
    release = threading.Event()

    def _validate(text: str) -> bool:
        if text == "old":
            release.wait(timeout=5)
        return text == "old"

    validator = RawTextValidator(validate=_validate)
    old_token = validator.submit()
    worker = threading.Thread(target=validator.run, args=(old_token, "old"))
    worker.start()

    new_token = validator.submit()
    assert validator.run(new_token, "new") is True
    release.set()
    worker.join(timeout=5)

    assert validator.latest_token == new_token
    assert validator.is_valid is False


def test_check_validates_synchronously() -> None:
    validator = RawTextValidator()
    assert validator.check('{"a": 1}') is True
    assert validator.check("{}") is False


def test_can_apply_needs_changes_and_valid_text() -> None:
    session = EditSession({"a": 1})
    validator = RawTextValidator()
    validator.check(session.spec_string())
    assert can_apply(session, validator) is False

    session.set_spec_from_string('{"a": 2}')
    assert can_apply(session, validator) is True

    validator.check("not json")
    assert can_apply(session, validator) is False
