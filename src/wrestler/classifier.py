"""Split an endpoint's call arguments into URL values, query pairs and a payload.

Generated endpoints take their URL values positionally, followed by a flat
list of alternating keys and values::

    enter_data("my-folder", "method", "fancy", "json", {"user": "ford"})

The first ``param_count`` arguments fill the template's placeholders. The
rest are read two at a time: the reserved key ``json`` (:data:`JSON_KEY`)
marks the request payload, every other pair becomes a query parameter.
Keyword arguments are accepted too and are appended after the positional
pairs, so the call above can also be written as::

    enter_data("my-folder", method="fancy", json={"user": "ford"})

No schema is consulted: any key and any value is accepted. Repeated query
keys are all kept, in order. If ``json`` appears more than once the last
occurrence wins.
"""

from __future__ import annotations

import enum
from typing import Any, Iterable, Mapping, Optional, Sequence

from wrestler.exceptions import ArityError, InvalidUsageError
from wrestler.models import CallArguments

JSON_KEY = "json"


def normalize_key(key: Any) -> str:
    """Render a trailing-argument key as the text used in the query string.

    Strings are used as-is, :class:`enum.Enum` members by their value, and
    anything else through :func:`str`.

    Raises:
        InvalidUsageError: If the key renders as an empty string.
    """
    if isinstance(key, enum.Enum):
        key = key.value
    text = key if isinstance(key, str) else str(key)
    if not text:
        raise InvalidUsageError("Query parameter keys must not be empty")
    return text


def _pairwise(flat: Sequence[Any]) -> Iterable[tuple[Any, Any]]:
    if len(flat) % 2:
        raise ArityError(
            f"Trailing arguments must be key/value pairs; "
            f"key {flat[-1]!r} has no value"
        )
    return zip(flat[0::2], flat[1::2])


def classify(
    args: Sequence[Any],
    param_count: int,
    kwargs: Optional[Mapping[str, Any]] = None,
) -> CallArguments:
    """Classify the arguments of one endpoint call.

    Args:
        args: All positional arguments of the call.
        param_count: Number of placeholders in the endpoint's template.
        kwargs: Keyword arguments of the call, treated as extra key/value
            pairs after the positional ones.

    Returns:
        A :class:`~wrestler.models.CallArguments` holding the URL values,
        the query pairs in encounter order and the optional JSON payload.

    Raises:
        ArityError: If fewer than *param_count* positional arguments are
            given, or the trailing list has a key without a value.

    Example::

        >>> parts = classify(["loc1", "method", "x", "json", {"k": 1}], 1)
        >>> parts.url_values, parts.query_pairs, parts.json_payload
        (('loc1',), (('method', 'x'),), {'k': 1})
    """
    if len(args) < param_count:
        raise ArityError(
            f"Expected at least {param_count} URL value(s), got {len(args)}"
        )

    pairs = list(_pairwise(args[param_count:]))
    if kwargs:
        pairs.extend(kwargs.items())

    query_pairs: list[tuple[str, Any]] = []
    payload: Any = None
    has_payload = False
    for raw_key, value in pairs:
        key = normalize_key(raw_key)
        if key == JSON_KEY:
            payload = value
            has_payload = True
        else:
            query_pairs.append((key, value))

    return CallArguments(
        url_values=tuple(args[:param_count]),
        query_pairs=tuple(query_pairs),
        json_payload=payload,
        has_payload=has_payload,
    )
