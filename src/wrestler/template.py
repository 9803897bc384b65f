"""URL template parsing and interpolation.

A template is a URL path in which every ``/``-separated token starting with
``$`` is a positional placeholder::

    literal/$var1/$var2/literal/$var3.zip

The placeholder name runs from after the sigil up to the first ``.``;
anything from that dot on (``.zip`` above) is a literal suffix that is put
back after substitution. A ``$`` anywhere other than the first character of
a token is plain text.

Templates are parsed once, when an endpoint is declared. The order of
:attr:`UrlTemplate.params <wrestler.models.UrlTemplate.params>` fixes the
positional parameters of the generated endpoint.
"""

from __future__ import annotations

import re
from typing import Any, Sequence, Union

from wrestler.codec import to_text
from wrestler.exceptions import ArityError, TemplateError
from wrestler.models import Segment, UrlTemplate

SIGIL = "$"

_NAME_RE = re.compile(r"^[A-Za-z0-9_-]+$")

TemplateLike = Union[str, UrlTemplate]


def parse(template: str) -> UrlTemplate:
    """Parse *template* into a :class:`~wrestler.models.UrlTemplate`.

    Args:
        template: A URL path such as ``"items/$id/files/$name.json"``.

    Returns:
        The parsed template with one :class:`~wrestler.models.Segment` per
        ``/``-separated token.

    Raises:
        TemplateError: If a placeholder has an empty name (``$`` or
            ``$.json``) or a name with characters other than letters,
            digits, ``_`` and ``-``.

    Example::

        >>> parse("items/$id.json").params
        ['id']
    """
    segments: list[Segment] = []
    for token in template.split("/"):
        if not token.startswith(SIGIL):
            segments.append(Segment(token=token))
            continue

        name, dot, rest = token[len(SIGIL):].partition(".")
        if not _NAME_RE.match(name):
            raise TemplateError(
                f"Malformed placeholder {token!r} in URL template {template!r}"
            )
        segments.append(Segment(token=token, name=name, suffix=dot + rest))

    return UrlTemplate(source=template, segments=tuple(segments))


def _ensure_parsed(template: TemplateLike) -> UrlTemplate:
    if isinstance(template, UrlTemplate):
        return template
    return parse(template)


def extract_params(template: TemplateLike) -> list[str]:
    """Return the placeholder names of *template* in positional order.

    Example::

        >>> extract_params("foo/$bar/baz/$bang.txt")
        ['bar', 'bang']
    """
    return _ensure_parsed(template).params


def interpolate(template: TemplateLike, values: Sequence[Any]) -> str:
    """Substitute *values* into the placeholders of *template*.

    Values are consumed positionally, in the order of
    :func:`extract_params`, and each placeholder's literal suffix is kept.

    Values are inserted verbatim, unlike query parameters, which
    :func:`~wrestler.codec.build_query_string` percent-encodes. A value such
    as ``"a/b"`` therefore spans two path segments, and ``?`` or ``#`` in a
    value starts the query or fragment. Quote untrusted values with
    :func:`urllib.parse.quote` before passing them.

    Raises:
        ArityError: If fewer values than placeholders are supplied.

    Example::

        >>> interpolate("a/$x/b/$y.json", ["1", "2"])
        'a/1/b/2.json'
    """
    parsed = _ensure_parsed(template)
    needed = len(parsed.params)
    if len(values) < needed:
        raise ArityError(
            f"URL template {parsed.source!r} needs {needed} value(s) "
            f"({', '.join(parsed.params)}), got {len(values)}"
        )

    parts: list[str] = []
    remaining = iter(values)
    for seg in parsed.segments:
        if seg.is_placeholder:
            parts.append(to_text(next(remaining)) + seg.suffix)
        else:
            parts.append(seg.token)
    return "/".join(parts)
