"""Response handlers -- turn a :class:`~wrestler.models.ResponseEnvelope` into an application value.

Every client holds exactly one handler and calls it once per completed
request. The handler can be swapped at any time with
:meth:`~wrestler.client.RestClient.set_response_handler`; any callable
taking an envelope works. Three are built in:

* :func:`to_value` (the default) -- decode JSON bodies, pass other bodies
  through as text, and map empty responses to a status name from
  :data:`HTTP_CODES`.
* :func:`simple` -- only 200 and 204 count as success; everything else is
  reported and returned as the envelope.
* :func:`raw` -- return the envelope untouched.

Non-success status codes never raise. They are reported on stderr and the
handler still returns a value, so a 404 does not unwind the caller's stack.
Only malformed JSON (:class:`~wrestler.exceptions.DecodeError`) does.
"""

from __future__ import annotations

from typing import Any, Callable

from wrestler.codec import JSON_CONTENT_TYPE, decode_json
from wrestler.exceptions import ConfigError
from wrestler.models import ResponseEnvelope
from wrestler.output import error

ResponseHandler = Callable[[ResponseEnvelope], Any]

HTTP_CODES: dict[int, str] = {
    100: "continue",
    101: "switching_protocols",
    102: "processing",
    200: "ok",
    201: "created",
    202: "accepted",
    203: "non_authoritative_information",
    204: "no_content",
    205: "reset_content",
    206: "partial_content",
    207: "multi_status",
    208: "already_reported",
    226: "im_used",
    300: "multiple_choices",
    301: "moved_permanently",
    302: "found",
    303: "see_other",
    304: "not_modified",
    305: "use_proxy",
    306: "switch_proxy",
    307: "temporary_redirect",
    308: "permanent_redirect",
    400: "bad_request",
    401: "unauthorized",
    402: "payment_required",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    406: "not_acceptable",
    407: "proxy_authentication_required",
    408: "request_timeout",
    409: "conflict",
    410: "gone",
    411: "length_required",
    412: "precondition_failed",
    413: "request_entity_too_large",
    414: "request_uri_too_long",
    415: "unsupported_media_type",
    416: "requested_range_not_satisfiable",
    417: "expectation_failed",
    418: "im_a_teapot",
    419: "authentication_timeout",
    422: "unprocessable_entity",
    423: "locked",
    424: "failed_dependency",
    426: "upgrade_required",
    428: "precondition_required",
    429: "too_many_requests",
    431: "request_header_fields_too_large",
    440: "login_timeout",
    444: "no_response",
    449: "retry_with",
    450: "blocked_by_windows_parental_controls",
    451: "unavailable_for_legal_reasons",
    494: "request_header_too_large",
    495: "ssl_certificate_error",
    496: "ssl_certificate_required",
    497: "http_request_sent_to_https_port",
    498: "invalid_token",
    499: "token_required",
    500: "internal_server_error",
    501: "not_implemented",
    502: "bad_gateway",
    503: "service_unavailable",
    504: "gateway_timeout",
    505: "http_version_not_supported",
    506: "variant_also_negotiates",
    507: "insufficient_storage",
    508: "loop_detected",
    509: "bandwidth_limit_exceeded",
    510: "not_extended",
    511: "network_authentication_required",
    520: "origin_error",
    521: "web_server_is_down",
    522: "connection_timed_out",
    523: "origin_is_unreachable",
    524: "a_timeout_occurred",
    598: "network_read_timeout_error",
    599: "network_connect_timeout_error",
}
"""Status codes mapped to the symbolic names returned for empty responses."""


class _NoContent:
    """Sentinel returned by :func:`simple` for ``204 No Content``."""

    _instance = None

    def __new__(cls) -> _NoContent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_CONTENT"

    def __bool__(self) -> bool:
        return False


NO_CONTENT = _NoContent()


def _report_status(envelope: ResponseEnvelope) -> None:
    error(f"[ERROR] Received a {envelope.status_code} HTTP status code response")


def _decode_body(envelope: ResponseEnvelope) -> Any:
    # A missing Content-Type header means "not JSON".
    content_type = (envelope.header("Content-Type") or "").lower()
    if JSON_CONTENT_TYPE in content_type:
        return decode_json(envelope.body)
    return envelope.body


def to_value(envelope: ResponseEnvelope) -> Any:
    """Default handler: convert a response into plain Python data.

    * A status outside ``200..299`` is reported on stderr; processing
      continues.
    * Without a body, the symbolic name from :data:`HTTP_CODES` is
      returned (``"no_content"`` for 204), or the envelope itself for codes
      not in the table.
    * With a body, a ``Content-Type`` containing ``application/json``
      (compared case-insensitively) yields the decoded JSON; any other
      body is returned as a string.

    Raises:
        DecodeError: If a body declared as JSON is malformed.
    """
    if not envelope.is_success:
        _report_status(envelope)

    if envelope.body is None:
        return HTTP_CODES.get(envelope.status_code, envelope)
    return _decode_body(envelope)


def simple(envelope: ResponseEnvelope) -> Any:
    """Strict handler: 200 is data, 204 is :data:`NO_CONTENT`, everything else is an error signal.

    For 200 the body is decoded like :func:`to_value` does (``None`` when
    empty). Any other status is reported on stderr and the envelope is
    returned so the caller can inspect it.
    """
    if envelope.status_code == 200:
        if envelope.body is None:
            return None
        return _decode_body(envelope)
    if envelope.status_code == 204:
        return NO_CONTENT
    _report_status(envelope)
    return envelope


def raw(envelope: ResponseEnvelope) -> ResponseEnvelope:
    """Return *envelope* unchanged."""
    return envelope


HANDLERS: dict[str, ResponseHandler] = {
    "default": to_value,
    "simple": simple,
    "raw": raw,
}


def get_handler(name: str) -> ResponseHandler:
    """Look up a built-in handler by name (``default``, ``simple`` or ``raw``).

    Raises:
        ConfigError: If *name* is not a built-in handler.
    """
    try:
        return HANDLERS[name]
    except KeyError:
        known = ", ".join(sorted(HANDLERS))
        raise ConfigError(f"Unknown response handler '{name}' (known: {known})") from None
