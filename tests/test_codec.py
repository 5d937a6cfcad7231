"""Tests for perch.codec: JSONCodec tree conversion and encoding."""

import enum
from dataclasses import dataclass

import pytest

from perch.codec import JSONCodec


@dataclass(frozen=True, slots=True)
class User:
    name: str
    age: int


class Color(enum.Enum):
    RED = "red"


class Plain:
    def __init__(self) -> None:
        self.visible = 1
        self._hidden = 2


class TestToTree:
    def setup_method(self) -> None:
        self.codec = JSONCodec()

    def test_scalars_pass_through(self) -> None:
        for value in (None, True, 3, 2.5, "x"):
            assert self.codec.to_tree(value) == value

    def test_dataclass_in_field_order(self) -> None:
        tree = self.codec.to_tree(User("Des", 32))
        assert tree == {"name": "Des", "age": 32}
        assert list(tree) == ["name", "age"]

    def test_nested(self) -> None:
        tree = self.codec.to_tree({"users": (User("A", 1),), "color": Color.RED})
        assert tree == {"users": [{"name": "A", "age": 1}], "color": "red"}

    def test_set_becomes_list(self) -> None:
        assert sorted(self.codec.to_tree({3, 1, 2})) == [1, 2, 3]

    def test_plain_object_public_attrs(self) -> None:
        assert self.codec.to_tree(Plain()) == {"visible": 1}

    def test_mapping_keys_stringified(self) -> None:
        assert self.codec.to_tree({1: "a"}) == {"1": "a"}

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_floats_rejected(self, value: float) -> None:
        with pytest.raises(ValueError, match="not JSON compliant"):
            self.codec.to_tree({"ratio": [value]})

    def test_unserializable_raises(self) -> None:
        with pytest.raises(TypeError, match="not JSON serializable"):
            self.codec.to_tree(object())


class TestEncode:
    def test_compact_with_nulls(self) -> None:
        codec = JSONCodec()
        assert codec.encode({"success": True, "value": None}) == b'{"success":true,"value":null}'

    def test_no_html_or_ascii_escaping(self) -> None:
        codec = JSONCodec()
        assert codec.encode({"v": "<b>&é"}) == '{"v":"<b>&é"}'.encode()

    def test_default_hook_uses_to_tree(self) -> None:
        codec = JSONCodec()
        assert codec.encode({"user": User("Des", 32)}) == b'{"user":{"name":"Des","age":32}}'

    def test_non_finite_floats_never_encoded(self) -> None:
        with pytest.raises(ValueError):
            JSONCodec().encode({"value": float("nan")})

    def test_sort_keys(self) -> None:
        codec = JSONCodec(sort_keys=True)
        assert codec.encode({"b": 1, "a": 2}) == b'{"a":2,"b":1}'
