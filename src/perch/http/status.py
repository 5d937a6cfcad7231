"""HTTP status code registry.

A fixed catalogue of ``StatusCode`` constants plus range-based
classification. Status codes compare by number only, so an ad-hoc
``StatusCode(404, "...")`` equals ``NOT_FOUND``.
"""

from __future__ import annotations

from enum import Enum
from http import HTTPStatus


class StatusClass(Enum):
    """Range classification of a status code by its hundreds digit."""

    INFORMATIONAL = "informational"
    SUCCESS = "success"
    REDIRECT = "redirect"
    CLIENT_ERROR = "clientError"
    SERVER_ERROR = "serverError"
    UNKNOWN = "unknown"


_CLASSES: dict[int, StatusClass] = {
    1: StatusClass.INFORMATIONAL,
    2: StatusClass.SUCCESS,
    3: StatusClass.REDIRECT,
    4: StatusClass.CLIENT_ERROR,
    5: StatusClass.SERVER_ERROR,
}


class StatusCode:
    """An immutable ``(code, description)`` pair.

    ``code`` is always within ``[100, 599]``; anything else raises
    ``ValueError`` at construction.
    """

    __slots__ = ("_code", "_description")

    _code: int
    _description: str

    def __init__(self, code: int, description: str) -> None:
        if not isinstance(code, int) or isinstance(code, bool):
            msg = f"status code must be an int, got {type(code).__name__}"
            raise TypeError(msg)
        if not 100 <= code <= 599:
            msg = f"status code {code} is outside 100-599"
            raise ValueError(msg)
        object.__setattr__(self, "_code", code)
        object.__setattr__(self, "_description", description)

    def __setattr__(self, name: str, value: object) -> None:
        msg = "StatusCode is immutable"
        raise AttributeError(msg)

    @property
    def code(self) -> int:
        return self._code

    @property
    def description(self) -> str:
        return self._description

    def __eq__(self, other: object) -> bool:
        if isinstance(other, StatusCode):
            return self._code == other._code
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._code)

    def __int__(self) -> int:
        return self._code

    def __repr__(self) -> str:
        return f"StatusCode({self._code}, {self._description!r})"

    def __str__(self) -> str:
        return f"{self._code} {self._description}"

    # -- Classification --

    @property
    def category(self) -> StatusClass:
        return _CLASSES[self._code // 100]

    def is_informational(self) -> bool:
        return self.category is StatusClass.INFORMATIONAL

    def is_successful(self) -> bool:
        return self.category is StatusClass.SUCCESS

    def is_redirect(self) -> bool:
        return self.category is StatusClass.REDIRECT

    def is_client_error(self) -> bool:
        return self.category is StatusClass.CLIENT_ERROR

    def is_server_error(self) -> bool:
        return self.category is StatusClass.SERVER_ERROR

    # -- Lookup --

    @classmethod
    def lookup(cls, code: int) -> StatusCode:
        """Return the catalogue entry for *code*, or an ad-hoc one.

        Codes missing from the catalogue are described by the stdlib
        ``HTTPStatus`` phrase when one exists.
        """
        known = CATALOGUE.get(code)
        if known is not None:
            return known
        try:
            phrase = HTTPStatus(code).phrase
        except ValueError:
            phrase = "Unknown"
        return cls(code, phrase)


def classify(code: int | StatusCode) -> StatusClass:
    """Classify *code* by range, independent of catalogue membership.

    ``classify(510)`` is ``SERVER_ERROR`` even though 510 has no constant.
    Values outside ``[100, 599]`` are ``UNKNOWN``.
    """
    value = code.code if isinstance(code, StatusCode) else code
    if not 100 <= value <= 599:
        return StatusClass.UNKNOWN
    return _CLASSES[value // 100]


# Successful
OK = StatusCode(200, "Request was successful")
CREATED = StatusCode(201, "Request was successful and a new resource has been created")

# Client error
BAD_REQUEST = StatusCode(400, "The server could not understand the request due to invalid syntax")
UNAUTHORIZED = StatusCode(401, "The client must authenticate to get the requested response")
FORBIDDEN = StatusCode(403, "The client does not have access rights")
NOT_FOUND = StatusCode(404, "The server could not find the requested resource")
METHOD_NOT_ALLOWED = StatusCode(
    405, "The request method is known by the server but is not supported by the target resource"
)
GONE = StatusCode(410, "The requested content has been permanently deleted from the server")
IM_A_TEAPOT = StatusCode(418, "The server refuses the attempt to brew coffee with a teapot")
TOO_MANY_REQUESTS = StatusCode(429, "The client has sent too many requests")
UNAVAILABLE_FOR_LEGAL_REASONS = StatusCode(
    451, "The client has requested a resource that cannot legally be provided"
)

# Server error
INTERNAL_SERVER_ERROR = StatusCode(
    500, "The server has encountered a situation it doesn't know how to handle"
)
SERVICE_UNAVAILABLE = StatusCode(503, "The server is not ready to handle the request")
INSUFFICIENT_STORAGE = StatusCode(
    507,
    "The server is unable to store the representation needed to successfully complete the request",
)
LOOP_DETECTED = StatusCode(
    508, "The server detected an infinite loop whilst processing the request"
)

CATALOGUE: dict[int, StatusCode] = {
    status.code: status
    for status in (
        OK,
        CREATED,
        BAD_REQUEST,
        UNAUTHORIZED,
        FORBIDDEN,
        NOT_FOUND,
        METHOD_NOT_ALLOWED,
        GONE,
        IM_A_TEAPOT,
        TOO_MANY_REQUESTS,
        UNAVAILABLE_FOR_LEGAL_REASONS,
        INTERNAL_SERVER_ERROR,
        SERVICE_UNAVAILABLE,
        INSUFFICIENT_STORAGE,
        LOOP_DETECTED,
    )
}
