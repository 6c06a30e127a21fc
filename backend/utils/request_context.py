"""Request-scoped identifier shared by the middleware and the error handlers.

Callers may send their own ``X-Request-ID``; it is echoed back when it looks
like a plain token, otherwise a fresh one is minted.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

__all__ = [
    "REQUEST_ID_HEADER",
    "get_request_id",
    "new_request_id",
    "request_id_scope",
]

REQUEST_ID_HEADER = "X-Request-ID"
MAX_INCOMING_REQUEST_ID_LENGTH = 128

_REQUEST_ID: ContextVar[str | None] = ContextVar("request_id", default=None)


def new_request_id(incoming: str | None = None) -> str:
    candidate = (incoming or "").strip()
    if (
        candidate
        and len(candidate) <= MAX_INCOMING_REQUEST_ID_LENGTH
        and candidate.isprintable()
        and " " not in candidate
    ):
        return candidate
    return uuid.uuid4().hex


@contextmanager
def request_id_scope(request_id: str) -> Iterator[str]:
    """Make ``request_id`` current for the enclosed block."""
    token = _REQUEST_ID.set(request_id)
    try:
        yield request_id
    finally:
        _REQUEST_ID.reset(token)


def get_request_id() -> str | None:
    return _REQUEST_ID.get()
