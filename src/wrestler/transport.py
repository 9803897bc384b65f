"""HTTP transports -- the collaborators that actually put requests on the wire.

A transport exposes one operation per supported HTTP method. Each takes a
fully formed URL (query string included) plus an optional body and content
type, and returns a :class:`~wrestler.models.ResponseEnvelope`::

    envelope = transport.post("https://api.example.com/items?x=1",
                              '{"name": "a"}', "application/json")

:class:`HttpxTransport` and :class:`AsyncHttpxTransport` wrap
:class:`httpx.Client` and :class:`httpx.AsyncClient`. Network, TLS and
timeout failures are httpx's own exceptions and propagate unchanged; there
is no retry layer. Connection pooling is whatever httpx provides.

Any object with matching ``get``/``post``/``put``/``delete`` methods can be
used instead (see :class:`Transport`), which is how tests and alternative
HTTP stacks plug in.
"""

from __future__ import annotations

from typing import Optional, Protocol

import httpx

from wrestler.models import RequestConfig, ResponseEnvelope


class Transport(Protocol):
    """Blocking transport interface used by :class:`~wrestler.client.RestClient`."""

    def get(
        self, url: str, body: Optional[str] = None, content_type: Optional[str] = None
    ) -> ResponseEnvelope: ...

    def post(
        self, url: str, body: Optional[str] = None, content_type: Optional[str] = None
    ) -> ResponseEnvelope: ...

    def put(
        self, url: str, body: Optional[str] = None, content_type: Optional[str] = None
    ) -> ResponseEnvelope: ...

    def delete(
        self, url: str, body: Optional[str] = None, content_type: Optional[str] = None
    ) -> ResponseEnvelope: ...


class AsyncTransport(Protocol):
    """Awaitable transport interface used by :class:`~wrestler.client.AsyncRestClient`."""

    async def get(
        self, url: str, body: Optional[str] = None, content_type: Optional[str] = None
    ) -> ResponseEnvelope: ...

    async def post(
        self, url: str, body: Optional[str] = None, content_type: Optional[str] = None
    ) -> ResponseEnvelope: ...

    async def put(
        self, url: str, body: Optional[str] = None, content_type: Optional[str] = None
    ) -> ResponseEnvelope: ...

    async def delete(
        self, url: str, body: Optional[str] = None, content_type: Optional[str] = None
    ) -> ResponseEnvelope: ...


def envelope_from_httpx(response: httpx.Response) -> ResponseEnvelope:
    """Convert an :class:`httpx.Response` into a :class:`~wrestler.models.ResponseEnvelope`.

    A response without content gets ``body=None``; otherwise the body is
    the decoded text. *response* must be bound to its request.
    """
    return ResponseEnvelope(
        status_code=response.status_code,
        headers=dict(response.headers),
        body=response.text if response.content else None,
        url=str(response.request.url),
    )


def _request_kwargs(body: Optional[str], content_type: Optional[str]) -> dict:
    kwargs: dict = {}
    if body is not None:
        kwargs["content"] = body.encode("utf-8")
        if content_type is not None:
            kwargs["headers"] = {"Content-Type": content_type}
    return kwargs


def _client_kwargs(config: RequestConfig) -> dict:
    return {
        "timeout": config.timeout,
        "verify": config.verify_ssl,
        "follow_redirects": config.follow_redirects,
        "headers": dict(config.headers),
    }


class HttpxTransport:
    """Blocking transport backed by :class:`httpx.Client`.

    Can be used as a context manager; :meth:`close` releases the pooled
    connections. When *client* is given, it is used as-is and this
    transport does not own it.

    Args:
        config: Timeout, TLS verification, redirect and header settings.
        client: Optional pre-built :class:`httpx.Client`.

    Example::

        with HttpxTransport(RequestConfig(timeout=5)) as transport:
            envelope = transport.get("https://api.example.com/status")
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._config = config or RequestConfig()
        self._owns_client = client is None
        self._client = client or httpx.Client(**_client_kwargs(self._config))

    def __enter__(self) -> HttpxTransport:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _send(
        self, method: str, url: str, body: Optional[str], content_type: Optional[str]
    ) -> ResponseEnvelope:
        response = self._client.request(method, url, **_request_kwargs(body, content_type))
        return envelope_from_httpx(response)

    def get(
        self, url: str, body: Optional[str] = None, content_type: Optional[str] = None
    ) -> ResponseEnvelope:
        return self._send("GET", url, body, content_type)

    def post(
        self, url: str, body: Optional[str] = None, content_type: Optional[str] = None
    ) -> ResponseEnvelope:
        return self._send("POST", url, body, content_type)

    def put(
        self, url: str, body: Optional[str] = None, content_type: Optional[str] = None
    ) -> ResponseEnvelope:
        return self._send("PUT", url, body, content_type)

    def delete(
        self, url: str, body: Optional[str] = None, content_type: Optional[str] = None
    ) -> ResponseEnvelope:
        return self._send("DELETE", url, body, content_type)


class AsyncHttpxTransport:
    """Non-blocking counterpart of :class:`HttpxTransport` backed by :class:`httpx.AsyncClient`."""

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._config = config or RequestConfig()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(**_client_kwargs(self._config))

    async def __aenter__(self) -> AsyncHttpxTransport:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _send(
        self, method: str, url: str, body: Optional[str], content_type: Optional[str]
    ) -> ResponseEnvelope:
        response = await self._client.request(
            method, url, **_request_kwargs(body, content_type)
        )
        return envelope_from_httpx(response)

    async def get(
        self, url: str, body: Optional[str] = None, content_type: Optional[str] = None
    ) -> ResponseEnvelope:
        return await self._send("GET", url, body, content_type)

    async def post(
        self, url: str, body: Optional[str] = None, content_type: Optional[str] = None
    ) -> ResponseEnvelope:
        return await self._send("POST", url, body, content_type)

    async def put(
        self, url: str, body: Optional[str] = None, content_type: Optional[str] = None
    ) -> ResponseEnvelope:
        return await self._send("PUT", url, body, content_type)

    async def delete(
        self, url: str, body: Optional[str] = None, content_type: Optional[str] = None
    ) -> ResponseEnvelope:
        return await self._send("DELETE", url, body, content_type)
