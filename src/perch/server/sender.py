"""ASGI response sending: translates an encoded envelope to ASGI messages."""

import logging
from collections.abc import Iterable

from perch._internal.asgi import Send

logger = logging.getLogger("perch.server")

JSON_CONTENT_TYPE = b"application/json"


async def send_json(
    send: Send,
    status: int,
    body: bytes,
    headers: Iterable[tuple[str, str]] = (),
) -> None:
    """Send one complete JSON response.

    Once the start message is out the status line is committed, so a
    failure while sending the body is logged and dropped instead of
    propagating out of the exchange.
    """
    raw_headers: list[tuple[bytes, bytes]] = [(b"content-type", JSON_CONTENT_TYPE)]
    for name, value in headers:
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": status,
            "headers": raw_headers,
        }
    )
    try:
        await send(
            {
                "type": "http.response.body",
                "body": body,
            }
        )
    except Exception:
        logger.exception("Error while writing response body (status %d)", status)
