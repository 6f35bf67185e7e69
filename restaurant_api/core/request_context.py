"""Per-request identifiers shared with the log formatter."""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, replace


@dataclass(frozen=True)
class RequestContext:
    request_id: str | None = None
    user_id: str | None = None


_EMPTY = RequestContext()
_CONTEXT: ContextVar[RequestContext] = ContextVar("catalog_request_context", default=_EMPTY)


def set_request_context(*, request_id: str | None = None, user_id: str | None = None) -> None:
    changes = {key: value for key, value in (("request_id", request_id), ("user_id", user_id)) if value is not None}
    if changes:
        _CONTEXT.set(replace(_CONTEXT.get(), **changes))


def current_context() -> RequestContext:
    return _CONTEXT.get()


def get_request_id() -> str | None:
    return _CONTEXT.get().request_id


def get_user_id() -> str | None:
    return _CONTEXT.get().user_id


def clear_request_context() -> None:
    _CONTEXT.set(_EMPTY)
