"""The uniform JSON response envelope.

Every exchange answers with one of three shapes::

    {"success": true, "value": ...}
    {"success": false, "error": "..."}
    {}

A field that was never set is omitted; a field set to ``None`` is kept
and encodes as ``null``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final


class _Unset:
    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = _Unset()


@dataclass(frozen=True, slots=True)
class Envelope:
    """An immutable response envelope."""

    success: bool | _Unset = UNSET
    value: Any = UNSET
    error: str | None | _Unset = UNSET

    @classmethod
    def ok(cls, value: Any) -> Envelope:
        return cls(success=True, value=value)

    @classmethod
    def failure(cls, message: str | None) -> Envelope:
        return cls(success=False, error=message)

    @classmethod
    def empty(cls) -> Envelope:
        return cls()

    @property
    def is_empty(self) -> bool:
        return self.success is UNSET and self.value is UNSET and self.error is UNSET

    def to_dict(self) -> dict[str, Any]:
        """Return only the fields that were set, in wire order."""
        result: dict[str, Any] = {}
        if self.success is not UNSET:
            result["success"] = self.success
        if self.value is not UNSET:
            result["value"] = self.value
        if self.error is not UNSET:
            result["error"] = self.error
        return result
