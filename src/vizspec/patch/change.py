# vizspec:decision_protocol_module
from __future__ import annotations

from vizspec.json_types import JSONValue


def json_equal(left: object, right: object) -> bool:
    """Deep structural equality over JSON values.

    Mapping key order is ignored; list order is not. Booleans only equal
    booleans, while ints and floats compare numerically.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    match (left, right):
        case (dict() as left_mapping, dict() as right_mapping):
            if left_mapping.keys() != right_mapping.keys():
                return False
            return all(
                json_equal(left_mapping[key], right_mapping[key])
                for key in left_mapping
            )
        case (list() as left_sequence, list() as right_sequence):
            if len(left_sequence) != len(right_sequence):
                return False
            return all(
                json_equal(left_item, right_item)
                for left_item, right_item in zip(left_sequence, right_sequence)
            )
        case (dict() | list(), _) | (_, dict() | list()):
            return False
        case _:
            return left == right


def changed(current: JSONValue, baseline: JSONValue) -> bool:
    return not json_equal(current, baseline)
