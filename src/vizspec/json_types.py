from __future__ import annotations

"""JSON-like value types for specification documents and partial updates.

A specification is plain JSON. A partial update is JSON in which any leaf may
instead hold the `DELETE` marker; the marker is a distinct type so an update
can tell "field not mentioned" apart from "field must be removed".
"""

from typing import Final, TypeAlias


JSONScalar: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]
JSONObject: TypeAlias = dict[str, JSONValue]
JSONArray: TypeAlias = list[JSONValue]


class Deletion:
    """Marker type for a field or element that an update removes."""

    __slots__ = ()
    _instance: "Deletion | None" = None

    def __new__(cls) -> "Deletion":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DELETE"

    def __copy__(self) -> "Deletion":
        return self

    def __deepcopy__(self, memo: dict[int, object]) -> "Deletion":
        return self

    def __reduce__(self) -> str:
        return "DELETE"


DELETE: Final[Deletion] = Deletion()

PatchValue: TypeAlias = (
    JSONScalar | Deletion | list["PatchValue"] | dict[str, "PatchValue"]
)
PatchObject: TypeAlias = dict[str, PatchValue]

PathSegment: TypeAlias = str | int
JSONPath: TypeAlias = tuple[PathSegment, ...]
