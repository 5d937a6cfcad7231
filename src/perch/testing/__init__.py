"""Test utilities for perch servers.

    from perch.testing import TestClient, assert_envelope_ok
"""

from perch.testing.assertions import (
    assert_empty_envelope,
    assert_envelope_error,
    assert_envelope_ok,
)
from perch.testing.client import TestClient, TestResponse

__all__ = [
    "TestClient",
    "TestResponse",
    "assert_empty_envelope",
    "assert_envelope_error",
    "assert_envelope_ok",
]
