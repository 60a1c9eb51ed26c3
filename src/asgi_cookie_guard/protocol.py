"""Type-safe ASGI protocol definitions.

Only the parts of the ASGI protocol the cookie guard reads are described
here: the HTTP scope and the response start message. Everything else is
passed through untouched and is typed loosely.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any, Literal, NotRequired, Required, TypeAlias, TypedDict

HTTPVersion: TypeAlias = Literal["1.0", "1.1", "2", "3"]
HTTPScheme: TypeAlias = Literal["http", "https"]


class HTTPRequestScope(TypedDict):
    type: Literal["http"]
    asgi: Required[dict[str, str]]
    http_version: Required[HTTPVersion]
    method: Required[str]
    scheme: NotRequired[HTTPScheme]
    path: Required[str]
    raw_path: NotRequired[bytes | None]
    query_string: Required[bytes]
    root_path: NotRequired[str]
    headers: Required[list[tuple[bytes, bytes]]]
    client: NotRequired[tuple[str, int] | None]
    server: NotRequired[tuple[str, int | None] | None]
    state: NotRequired[dict[str, object]]


class HTTPResponseStartMessage(TypedDict):
    type: Literal["http.response.start"]
    status: Required[int]
    headers: NotRequired[list[tuple[bytes, bytes]]]
    trailers: NotRequired[bool]


Scope = HTTPRequestScope | MutableMapping[str, Any]
Message = HTTPResponseStartMessage | MutableMapping[str, Any]
Receive = Callable[[], Awaitable[Message]]
Send = Callable[[Message], Awaitable[None]]
ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]

__all__: tuple[str, ...] = (
    "Scope",
    "Message",
    "Receive",
    "Send",
    "ASGIApp",
    "HTTPVersion",
    "HTTPScheme",
    "HTTPRequestScope",
    "HTTPResponseStartMessage",
)
