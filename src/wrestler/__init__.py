"""wrestler -- declare REST client endpoints from URL templates.

An endpoint is declared once with a name, a docstring, an HTTP method and a
URL template whose ``$``-prefixed tokens are positional parameters. The
result is an ordinary callable::

    from wrestler import define_client

    api = define_client("http://example.com/rest/")
    get_item = api.endpoint("get_item", "Fetch one item.", "get", "items/$id.json")

    get_item("42", "verbose", "true")
    # GET http://example.com/rest/items/42.json?verbose=true

Extra arguments after the URL values are query parameters (key/value pairs
or keyword arguments); the reserved key ``json`` carries a request payload.
Responses go through the client's replaceable response handler.

Modules:
    client: Endpoint factory and the sync/async clients.
    template: URL template parsing and interpolation.
    classifier: Splitting call arguments into URL values, query and payload.
    codec: Query strings and JSON bodies.
    request: Request assembly and dispatch.
    transport: httpx-backed transports.
    handlers: Built-in response handlers.
    models: Pydantic models shared across the package.
    config: Profiles and base-URL resolution.
    app: The ``wrestler`` command line.
"""

__version__ = "2.0.0"

from wrestler.classifier import JSON_KEY, classify
from wrestler.client import (
    AsyncRestClient,
    ClientState,
    RestClient,
    define_async_client,
    define_client,
)
from wrestler.codec import RawBody, build_query_string, decode_json, encode_json
from wrestler.exceptions import (
    ArityError,
    ConfigError,
    DecodeError,
    EncodeError,
    InvalidUsageError,
    TemplateError,
    TransportError,
    WrestlerError,
)
from wrestler.handlers import HTTP_CODES, NO_CONTENT, raw, simple, to_value
from wrestler.models import HTTPMethod, RequestConfig, ResponseEnvelope
from wrestler.template import extract_params, interpolate, parse

__all__ = [
    "__version__",
    "ArityError",
    "AsyncRestClient",
    "ClientState",
    "ConfigError",
    "DecodeError",
    "EncodeError",
    "HTTP_CODES",
    "HTTPMethod",
    "InvalidUsageError",
    "JSON_KEY",
    "NO_CONTENT",
    "RawBody",
    "RequestConfig",
    "ResponseEnvelope",
    "RestClient",
    "TemplateError",
    "TransportError",
    "WrestlerError",
    "build_query_string",
    "classify",
    "decode_json",
    "define_async_client",
    "define_client",
    "encode_json",
    "extract_params",
    "interpolate",
    "parse",
    "raw",
    "simple",
    "to_value",
]
