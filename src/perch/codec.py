"""JSON codec for response envelopes and handler return values.

Each server holds its own codec and hands it to the dispatcher.

Encoding rules:
    - ``None`` values are emitted as ``null``, never dropped.
    - No HTML or ASCII escaping: ``<``, ``&`` and non-ASCII text pass
      through unchanged.
    - Compact separators, matching what clients see on the wire.
    - ``NaN`` and infinities are rejected with ``ValueError``.
"""

import dataclasses
import json
import math
from collections.abc import Mapping
from enum import Enum
from typing import Any, Protocol


class Codec(Protocol):
    """What the dispatcher needs from a serializer."""

    def to_tree(self, value: Any) -> Any: ...

    def encode(self, obj: Any) -> bytes: ...


class JSONCodec:
    """Default codec built on the stdlib ``json`` module.

    ``to_tree`` converts a handler's return value into plain JSON types
    up front, so serialization failures surface while the handler's
    exchange can still report them. Supported inputs: JSON scalars,
    mappings, lists/tuples/sets, dataclass instances, enums, and plain
    objects (their public ``__dict__`` attributes).
    """

    __slots__ = ("_sort_keys",)

    def __init__(self, *, sort_keys: bool = False) -> None:
        self._sort_keys = sort_keys

    def to_tree(self, value: Any) -> Any:
        if isinstance(value, float) and not math.isfinite(value):
            msg = f"Out of range float value {value!r} is not JSON compliant"
            raise ValueError(msg)
        if value is None or isinstance(value, (bool, int, float, str)):
            return value
        if isinstance(value, Enum):
            return self.to_tree(value.value)
        if isinstance(value, Mapping):
            return {str(key): self.to_tree(item) for key, item in value.items()}
        if isinstance(value, (list, tuple)):
            return [self.to_tree(item) for item in value]
        if isinstance(value, (set, frozenset)):
            return [self.to_tree(item) for item in value]
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return {
                field.name: self.to_tree(getattr(value, field.name))
                for field in dataclasses.fields(value)
            }
        attrs = getattr(value, "__dict__", None)
        if attrs is not None and not isinstance(value, type):
            return {
                name: self.to_tree(item) for name, item in attrs.items() if not name.startswith("_")
            }
        msg = f"Object of type {type(value).__name__} is not JSON serializable"
        raise TypeError(msg)

    def encode(self, obj: Any) -> bytes:
        text = json.dumps(
            obj,
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
            sort_keys=self._sort_keys,
            default=self.to_tree,
        )
        return text.encode("utf-8")
