"""Query-string and JSON body codec.

Three small pieces of wire formatting live here:

* :func:`build_query_string` -- ``[("a", 1), ("b", 2)]`` -> ``"?a=1&b=2"``.
  Pairs keep their order and duplicates are all emitted. Keys and values
  are percent-encoded, so ``("q", "a b&c")`` becomes ``q=a%20b%26c``.
* :func:`encode_json` / :func:`decode_json` -- thin wrappers around
  :mod:`json` that never escape forward slashes (payloads often embed URLs)
  and translate failures into :class:`~wrestler.exceptions.EncodeError` /
  :class:`~wrestler.exceptions.DecodeError`.
* :class:`RawBody` -- passed in place of a JSON payload to send a body
  verbatim with its own content type.
"""

from __future__ import annotations

import json
from typing import Any, Iterable
from urllib.parse import quote

from wrestler.exceptions import DecodeError, EncodeError

JSON_CONTENT_TYPE = "application/json"


class RawBody:
    """A request body sent as-is instead of being JSON-encoded.

    Example::

        client_fn("doc-1", "json", RawBody("<doc/>", content_type="application/xml"))

    Args:
        content: The body text.
        content_type: Value of the ``Content-Type`` request header.
    """

    __slots__ = ("content", "content_type")

    def __init__(self, content: str, content_type: str = "text/plain") -> None:
        self.content = content
        self.content_type = content_type

    def __repr__(self) -> str:
        return f"RawBody({self.content!r}, content_type={self.content_type!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RawBody):
            return NotImplemented
        return (self.content, self.content_type) == (other.content, other.content_type)


def to_text(value: Any) -> str:
    """Render a URL or query value as text.

    Booleans become ``true``/``false`` and ``None`` becomes the empty
    string; everything else goes through :func:`str`.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_query_string(pairs: Iterable[tuple[str, Any]]) -> str:
    """Join *pairs* into a ``?key=value&...`` query string.

    Args:
        pairs: ``(key, value)`` tuples in the order they should appear.

    Returns:
        ``""`` when *pairs* is empty, otherwise ``"?"`` followed by the
        percent-encoded ``key=value`` pairs joined with ``&``.

    Example::

        >>> build_query_string([("a", "1"), ("b", "2")])
        '?a=1&b=2'
        >>> build_query_string([])
        ''
    """
    parts = [
        f"{quote(to_text(key), safe='')}={quote(to_text(value), safe='')}"
        for key, value in pairs
    ]
    if not parts:
        return ""
    return "?" + "&".join(parts)


def encode_json(value: Any) -> str:
    """Serialise *value* to JSON text without escaping ``/``.

    Raises:
        EncodeError: If *value* contains something JSON cannot represent,
            including ``NaN`` and infinite floats.
    """
    try:
        return json.dumps(value, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise EncodeError(f"Cannot encode JSON payload: {exc}") from exc


def decode_json(text: str) -> Any:
    """Parse JSON *text*.

    Raises:
        DecodeError: If *text* is not valid JSON.
    """
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError) as exc:
        raise DecodeError(f"Malformed JSON body: {exc}") from exc
