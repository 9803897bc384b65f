"""Request assembly and dispatch.

:func:`build_request` turns the classified pieces of one endpoint call into
an immutable :class:`~wrestler.models.RequestPlan`:

1. ``path = interpolate(template, url_values)``
2. ``url = base_url + path``
3. ``query_string = build_query_string(query_pairs)``
4. a JSON payload becomes the body with ``Content-Type: application/json``;
   a :class:`~wrestler.codec.RawBody` is sent verbatim with its own type.

:func:`dispatch` (or :func:`adispatch` for async transports) then hands the
plan to the transport operation matching its method. Transport failures are
not caught here.
"""

from __future__ import annotations

from typing import Any, Sequence

from wrestler.codec import JSON_CONTENT_TYPE, RawBody, build_query_string, encode_json
from wrestler.models import HTTPMethod, RequestPlan, ResponseEnvelope
from wrestler.output import debug
from wrestler.template import TemplateLike, interpolate
from wrestler.transport import AsyncTransport, Transport


class _Missing:
    """Marker for "no payload"; ``None`` is a valid payload (JSON ``null``)."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def build_request(
    method: HTTPMethod | str,
    base_url: str,
    template: TemplateLike,
    url_values: Sequence[Any],
    query_pairs: Sequence[tuple[str, Any]] = (),
    payload: Any = MISSING,
) -> RequestPlan:
    """Assemble the request for one endpoint call.

    Args:
        method: HTTP method; strings are looked up case-insensitively.
        base_url: Prefix glued in front of the interpolated path, as-is.
        template: The endpoint's URL template (string or parsed).
        url_values: Values for the template placeholders, in order.
        query_pairs: ``(key, value)`` query parameters, in order.
        payload: JSON-serialisable payload, a :class:`RawBody`, or
            :data:`MISSING` for no body.

    Returns:
        The assembled :class:`~wrestler.models.RequestPlan`.

    Raises:
        ArityError: If *url_values* does not cover every placeholder.
        EncodeError: If *payload* cannot be serialised.

    Example::

        >>> plan = build_request("GET", "http://x/", "items/$id", ["42"],
        ...                      [("verbose", "true")])
        >>> plan.full_url
        'http://x/items/42?verbose=true'
    """
    path = interpolate(template, url_values)

    body = None
    content_type = None
    if isinstance(payload, RawBody):
        body, content_type = payload.content, payload.content_type
    elif payload is not MISSING:
        body, content_type = encode_json(payload), JSON_CONTENT_TYPE

    return RequestPlan(
        method=HTTPMethod(method),
        url=f"{base_url}{path}",
        query_string=build_query_string(query_pairs),
        body=body,
        content_type=content_type,
    )


def _trace(plan: RequestPlan) -> None:
    suffix = f" ({plan.content_type}, {len(plan.body)} chars)" if plan.body is not None else ""
    debug(f"{plan.method.value.upper()} {plan.full_url}{suffix}")


def dispatch(transport: Transport, plan: RequestPlan) -> ResponseEnvelope:
    """Send *plan* through the matching operation of *transport*."""
    _trace(plan)
    operation = getattr(transport, plan.method.value)
    return operation(plan.full_url, plan.body, plan.content_type)


async def adispatch(transport: AsyncTransport, plan: RequestPlan) -> ResponseEnvelope:
    """Awaitable counterpart of :func:`dispatch` for async transports."""
    _trace(plan)
    operation = getattr(transport, plan.method.value)
    return await operation(plan.full_url, plan.body, plan.content_type)
