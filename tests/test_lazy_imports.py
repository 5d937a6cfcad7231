"""Tests for the lazy top-level perch API."""

import pytest

import perch


class TestLazyImports:
    @pytest.mark.parametrize("name", perch.__all__)
    def test_every_export_resolves(self, name: str) -> None:
        assert getattr(perch, name) is not None

    def test_server_identity(self) -> None:
        from perch.app import Server

        assert perch.Server is Server

    def test_unknown_name(self) -> None:
        with pytest.raises(AttributeError, match="no attribute 'Nope'"):
            perch.Nope  # noqa: B018

    def test_version(self) -> None:
        assert perch.__version__ == "0.1.0.dev0"
