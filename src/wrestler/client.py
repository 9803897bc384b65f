"""Endpoint factory -- declare REST endpoints once, call them like functions.

Defining a client wrapper consists of three steps:

1. Create a client with a base URL and (optionally) a response handler::

       api = define_client("http://example.com/rest/")

2. Declare endpoints. Each one gets a name, a docstring, an HTTP method and
   a URL template that is appended to the base URL. ``$``-prefixed tokens
   are positional parameters::

       create_database = api.endpoint(
           "create_database",
           "Create a database.\\n\\n(url param) name: Name of the new database",
           "post",
           "create_database/$name",
       )

3. Call them. URL values come first, in template order, followed by query
   parameters as key/value pairs (or keyword arguments) and an optional
   ``json`` payload::

       create_database("all-my-data", "initial-size", 42, "cache", 1)
       # POST http://example.com/rest/create_database/all-my-data?initial-size=42&cache=1

       api.enter_data("my-folder", method="make fancy",
                      json={"data": [{"name": "Earth"}], "user": "Ford"})

Every call reads the client's *current* base URL and response handler, so
an application can repoint a shipped client at another server, or change
how responses are interpreted, at any time::

    api.set_base_url("http://localhost:8080/rest/")
    api.set_response_handler(handlers.raw)

:class:`AsyncRestClient` offers the same declaration API and produces
coroutine functions.
"""

from __future__ import annotations

import inspect
import keyword
import re
import threading
from typing import Any, Awaitable, Callable, Optional, Union

from wrestler.classifier import classify
from wrestler.exceptions import InvalidUsageError
from wrestler.handlers import ResponseHandler, get_handler, to_value
from wrestler.models import (
    CallArguments,
    EndpointSpec,
    HTTPMethod,
    Profile,
    RequestConfig,
    RequestPlan,
)
from wrestler.request import MISSING, adispatch, build_request, dispatch
from wrestler.template import TemplateLike, parse
from wrestler.transport import (
    AsyncHttpxTransport,
    AsyncTransport,
    HttpxTransport,
    Transport,
)


# ---------------------------------------------------------------------------
# Shared client state
# ---------------------------------------------------------------------------


class ClientState:
    """The base URL and response handler shared by all endpoints of one client.

    Both references can be reassigned at any time, from any thread.
    :meth:`snapshot` reads them together under a lock so a call never sees
    a half-applied update; there is no ordering guarantee between a
    reassignment and calls that start concurrently with it.
    """

    def __init__(self, base_url: str, response_handler: ResponseHandler = to_value) -> None:
        self._lock = threading.Lock()
        self._base_url = base_url
        self._response_handler: ResponseHandler = to_value
        self.response_handler = response_handler

    @property
    def base_url(self) -> str:
        with self._lock:
            return self._base_url

    @base_url.setter
    def base_url(self, value: str) -> None:
        with self._lock:
            self._base_url = value

    @property
    def response_handler(self) -> ResponseHandler:
        with self._lock:
            return self._response_handler

    @response_handler.setter
    def response_handler(self, value: ResponseHandler) -> None:
        if not callable(value):
            raise InvalidUsageError(f"Response handler must be callable, got {value!r}")
        with self._lock:
            self._response_handler = value

    def update(
        self,
        base_url: Optional[str] = None,
        response_handler: Optional[ResponseHandler] = None,
    ) -> None:
        """Reassign either or both references in one step.

        A concurrent :meth:`snapshot` sees the old pair or the new pair,
        never one of each.
        """
        if response_handler is not None and not callable(response_handler):
            raise InvalidUsageError(
                f"Response handler must be callable, got {response_handler!r}"
            )
        with self._lock:
            if base_url is not None:
                self._base_url = base_url
            if response_handler is not None:
                self._response_handler = response_handler

    def snapshot(self) -> tuple[str, ResponseHandler]:
        """Return ``(base_url, response_handler)`` as one consistent pair."""
        with self._lock:
            return self._base_url, self._response_handler


# ---------------------------------------------------------------------------
# Parameter names
# ---------------------------------------------------------------------------

_INVALID_IDENT_RE = re.compile(r"[^a-zA-Z0-9_]")


def sanitize_param_name(name: str) -> str:
    """Convert a placeholder name to a valid Python identifier.

    Used only for the generated endpoint's ``__signature__`` (what
    :func:`help` and IDEs show); values are always passed positionally.

    1. CamelCase boundaries are split with underscores.
    2. The string is lowercased.
    3. Hyphens are replaced with underscores, as is any other character
       not allowed in an identifier.
    4. Repeated and surrounding underscores are collapsed.
    5. An empty result becomes ``"param"``, a leading digit gets an
       underscore prefix, and Python keywords get a trailing underscore.

    Example::

        >>> sanitize_param_name("itemId")
        'item_id'
        >>> sanitize_param_name("class")
        'class_'
        >>> sanitize_param_name("2fa-code")
        '_2fa_code'
    """
    result = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    result = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", result)
    result = result.lower().replace("-", "_")
    result = _INVALID_IDENT_RE.sub("_", result)
    result = re.sub(r"_+", "_", result).strip("_")
    if not result:
        result = "param"
    if result[0].isdigit():
        result = f"_{result}"
    if keyword.iskeyword(result):
        result = f"{result}_"
    return result


def _build_signature(placeholders: list[str]) -> inspect.Signature:
    """Signature ``(p1, ..., pn, /, *params, **query)`` for a generated endpoint."""
    seen: dict[str, int] = {}
    parameters: list[inspect.Parameter] = []
    for placeholder in placeholders:
        base = sanitize_param_name(placeholder)
        if base in ("params", "query"):
            base = f"{base}_"
        count = seen.get(base, 0) + 1
        seen[base] = count
        py_name = base if count == 1 else f"{base}_{count}"
        parameters.append(
            inspect.Parameter(py_name, inspect.Parameter.POSITIONAL_ONLY, annotation=Any)
        )
    parameters.append(inspect.Parameter("params", inspect.Parameter.VAR_POSITIONAL))
    parameters.append(inspect.Parameter("query", inspect.Parameter.VAR_KEYWORD))
    return inspect.Signature(parameters)


def _resolve_handler(handler: Union[ResponseHandler, str]) -> ResponseHandler:
    """Look up built-in handler names; anything else must be callable.

    Raises:
        ConfigError: If *handler* names no built-in handler.
        InvalidUsageError: If *handler* is neither a name nor callable.
    """
    if isinstance(handler, str):
        return get_handler(handler)
    if not callable(handler):
        raise InvalidUsageError(f"Response handler must be callable, got {handler!r}")
    return handler


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------


class _ClientBase:
    """Declaration machinery shared by :class:`RestClient` and :class:`AsyncRestClient`."""

    def __init__(
        self,
        base_url: str,
        response_handler: Union[ResponseHandler, str] = to_value,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        self._state = ClientState(base_url, _resolve_handler(response_handler))
        self._request_config = request_config or RequestConfig()
        self._endpoints: dict[str, Callable[..., Any]] = {}

    # ------------------------------------------------------------------ #
    # Shared references
    # ------------------------------------------------------------------ #

    @property
    def state(self) -> ClientState:
        return self._state

    @property
    def base_url(self) -> str:
        return self._state.base_url

    @base_url.setter
    def base_url(self, value: str) -> None:
        self._state.base_url = value

    @property
    def response_handler(self) -> ResponseHandler:
        return self._state.response_handler

    @response_handler.setter
    def response_handler(self, value: Union[ResponseHandler, str]) -> None:
        self._state.response_handler = _resolve_handler(value)

    def set_base_url(self, base_url: str) -> None:
        """Point every endpoint of this client at *base_url* from the next call on."""
        self._state.base_url = base_url

    def set_response_handler(self, handler: Union[ResponseHandler, str]) -> None:
        """Install *handler*, a callable or the name of a built-in handler."""
        self._state.response_handler = _resolve_handler(handler)

    # ------------------------------------------------------------------ #
    # Declaration
    # ------------------------------------------------------------------ #

    @property
    def endpoints(self) -> dict[str, Callable[..., Any]]:
        """Declared endpoints by name."""
        return dict(self._endpoints)

    def endpoint(
        self,
        name: str,
        doc: str,
        method: Union[HTTPMethod, str],
        template: TemplateLike,
    ) -> Callable[..., Any]:
        """Declare an endpoint and return its generated callable.

        The template is parsed once, here. The callable is also registered
        on the client under *name* (a later declaration with the same name
        replaces it) and is reachable as ``client.<name>``.

        Args:
            name: Name of the generated function.
            doc: Its docstring; list the query and JSON parameters the
                endpoint understands here, nothing else documents them.
            method: ``get``, ``post``, ``put`` or ``delete`` (``del`` is
                accepted too), case-insensitive.
            template: URL template appended to the base URL, e.g.
                ``"enter_data/$location/"``.

        Raises:
            TemplateError: If the template has a malformed placeholder.
            InvalidUsageError: If *method* is not supported or *name* is
                empty.
        """
        if not name:
            raise InvalidUsageError("Endpoint name must not be empty")
        try:
            http_method = HTTPMethod(method)
        except ValueError:
            supported = ", ".join(m.value for m in HTTPMethod)
            raise InvalidUsageError(
                f"Unsupported HTTP method {method!r} for endpoint '{name}' "
                f"(supported: {supported})"
            ) from None

        parsed = template if not isinstance(template, str) else parse(template)
        spec = EndpointSpec(name=name, doc=doc or "", method=http_method, template=parsed)

        fn = self._make_endpoint(spec)
        fn.__name__ = name
        fn.__qualname__ = name
        fn.__doc__ = spec.doc
        fn.__signature__ = _build_signature(parsed.params)  # type: ignore[attr-defined]
        fn.endpoint_spec = spec  # type: ignore[attr-defined]

        self._endpoints[name] = fn
        return fn

    __call__ = endpoint

    def __getattr__(self, name: str) -> Callable[..., Any]:
        endpoints = self.__dict__.get("_endpoints", {})
        try:
            return endpoints[name]
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__!s} has no endpoint or attribute '{name}'"
            ) from None

    def _plan(self, spec: EndpointSpec, args: tuple, kwargs: dict) -> tuple[RequestPlan, ResponseHandler]:
        call: CallArguments = classify(args, len(spec.template.params), kwargs)
        base_url, handler = self._state.snapshot()
        plan = build_request(
            spec.method,
            base_url,
            spec.template,
            call.url_values,
            call.query_pairs,
            call.json_payload if call.has_payload else MISSING,
        )
        return plan, handler

    def _make_endpoint(self, spec: EndpointSpec) -> Callable[..., Any]:
        raise NotImplementedError


class RestClient(_ClientBase):
    """A blocking REST client whose endpoints are declared at runtime.

    Args:
        base_url: Common URL prefix of every endpoint; glued verbatim in
            front of the interpolated template.
        response_handler: Converts each response envelope into the value an
            endpoint call returns. Defaults to
            :func:`~wrestler.handlers.to_value`.
        transport: Optional transport. When omitted, an
            :class:`~wrestler.transport.HttpxTransport` is created on first
            use and closed by :meth:`close`.
        request_config: Settings for the default transport.

    Example::

        with RestClient("https://api.example.com/") as api:
            get_item = api.endpoint("get_item", "Fetch one item.", "get", "items/$id")
            get_item("42", "verbose", "true")
    """

    def __init__(
        self,
        base_url: str,
        response_handler: Union[ResponseHandler, str] = to_value,
        transport: Optional[Transport] = None,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        super().__init__(base_url, response_handler, request_config)
        self._transport = transport
        self._owned_transport: Optional[HttpxTransport] = None
        self._transport_lock = threading.Lock()

    @classmethod
    def from_profile(cls, profile: Profile, transport: Optional[Transport] = None) -> RestClient:
        """Build a client from a saved :class:`~wrestler.models.Profile`."""
        return cls(
            profile.base_url,
            get_handler(profile.handler),
            transport=transport,
            request_config=profile.request,
        )

    def __enter__(self) -> RestClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the transport this client created, if any."""
        with self._transport_lock:
            if self._owned_transport is not None:
                self._owned_transport.close()
                self._owned_transport = None

    @property
    def transport(self) -> Transport:
        if self._transport is not None:
            return self._transport
        with self._transport_lock:
            if self._owned_transport is None:
                self._owned_transport = HttpxTransport(self._request_config)
            return self._owned_transport

    def _make_endpoint(self, spec: EndpointSpec) -> Callable[..., Any]:
        def endpoint(*args: Any, **kwargs: Any) -> Any:
            plan, handler = self._plan(spec, args, kwargs)
            envelope = dispatch(self.transport, plan)
            return handler(envelope)

        return endpoint


class AsyncRestClient(_ClientBase):
    """Non-blocking counterpart of :class:`RestClient`.

    Endpoints are coroutine functions dispatching through an
    :class:`~wrestler.transport.AsyncTransport`. The response handler may
    be a plain function or a coroutine function.

    Example::

        async with AsyncRestClient("https://api.example.com/") as api:
            get_item = api.endpoint("get_item", "Fetch one item.", "get", "items/$id")
            item = await get_item("42")
    """

    def __init__(
        self,
        base_url: str,
        response_handler: Union[ResponseHandler, str] = to_value,
        transport: Optional[AsyncTransport] = None,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        super().__init__(base_url, response_handler, request_config)
        self._transport = transport
        self._owned_transport: Optional[AsyncHttpxTransport] = None

    @classmethod
    def from_profile(
        cls, profile: Profile, transport: Optional[AsyncTransport] = None
    ) -> AsyncRestClient:
        """Build an async client from a saved :class:`~wrestler.models.Profile`."""
        return cls(
            profile.base_url,
            get_handler(profile.handler),
            transport=transport,
            request_config=profile.request,
        )

    async def __aenter__(self) -> AsyncRestClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the transport this client created, if any."""
        if self._owned_transport is not None:
            await self._owned_transport.aclose()
            self._owned_transport = None

    @property
    def transport(self) -> AsyncTransport:
        if self._transport is not None:
            return self._transport
        if self._owned_transport is None:
            self._owned_transport = AsyncHttpxTransport(self._request_config)
        return self._owned_transport

    def _make_endpoint(self, spec: EndpointSpec) -> Callable[..., Awaitable[Any]]:
        async def endpoint(*args: Any, **kwargs: Any) -> Any:
            plan, handler = self._plan(spec, args, kwargs)
            envelope = await adispatch(self.transport, plan)
            result = handler(envelope)
            if inspect.isawaitable(result):
                result = await result
            return result

        return endpoint


def define_client(
    base_url: str,
    response_handler: Union[ResponseHandler, str] = to_value,
    transport: Optional[Transport] = None,
    request_config: Optional[RequestConfig] = None,
) -> RestClient:
    """Create a :class:`RestClient`; the client itself is the endpoint builder.

    Example::

        api = define_client("http://example.com/rest/")
        get_size = api("get_size", "Size of the database.", "get", "size")
    """
    return RestClient(
        base_url,
        response_handler,
        transport=transport,
        request_config=request_config,
    )


def define_async_client(
    base_url: str,
    response_handler: Union[ResponseHandler, str] = to_value,
    transport: Optional[AsyncTransport] = None,
    request_config: Optional[RequestConfig] = None,
) -> AsyncRestClient:
    """Create an :class:`AsyncRestClient`."""
    return AsyncRestClient(
        base_url,
        response_handler,
        transport=transport,
        request_config=request_config,
    )
