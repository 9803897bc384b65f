"""Canonical Pydantic models shared across all wrestler modules.

This is the single source of truth for data shapes in the project. The
models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config
directory:
    :class:`RequestConfig` and :class:`Profile`.

**Request pipeline models** -- produced and consumed while an endpoint is
declared and invoked:
    :class:`HTTPMethod`, :class:`Segment`, :class:`UrlTemplate`,
    :class:`EndpointSpec`, :class:`CallArguments`, :class:`RequestPlan`,
    and :class:`ResponseEnvelope`.

Pipeline models are frozen: a template is parsed once per declaration, and
plans and envelopes are built fresh for every call and never mutated.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# --- Configuration ---


class RequestConfig(BaseModel):
    """Default HTTP transport settings applied to every call of a client."""

    timeout: float = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    follow_redirects: bool = Field(
        default=True, description="Follow HTTP redirects transparently"
    )
    headers: dict[str, str] = Field(
        default_factory=dict, description="Extra headers sent with every request"
    )


class Profile(BaseModel):
    """Named client settings stored as JSON under the ``profiles/`` config directory.

    A profile lets the command line (and applications via
    :meth:`~wrestler.client.RestClient.from_profile`) point a client at a
    server and pick a response handler without repeating flags.

    Extra fields are preserved and accessible via ``model_extra``.

    See Also:
        :func:`~wrestler.config.load_profile`: Deserialise a profile by name.
        :func:`~wrestler.config.save_profile`: Persist a profile to disk.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    base_url: str = Field(description="Common URL prefix of every request")
    handler: str = Field(
        default="default", description="Response handler: default, simple, raw"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)


# --- Request pipeline ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods an endpoint can be declared with.

    Lookup is case-insensitive and accepts ``del`` as an alias for
    ``DELETE``::

        >>> HTTPMethod("GET") is HTTPMethod.GET
        True
        >>> HTTPMethod("del") is HTTPMethod.DELETE
        True
    """

    GET = "get"
    POST = "post"
    PUT = "put"
    DELETE = "delete"

    @classmethod
    def _missing_(cls, value: object) -> Optional[HTTPMethod]:
        if not isinstance(value, str):
            return None
        lowered = value.strip().lower()
        if lowered == "del":
            return cls.DELETE
        for member in cls:
            if member.value == lowered:
                return member
        return None


class Segment(BaseModel):
    """One ``/``-separated piece of a URL template.

    A literal segment has ``name=None``. A placeholder segment carries the
    parameter ``name`` (token without the ``$`` sigil, cut at the first
    ``.``) and the literal ``suffix`` that follows it, e.g. ``.json``.
    """

    model_config = ConfigDict(frozen=True)

    token: str
    name: Optional[str] = None
    suffix: str = ""

    @property
    def is_placeholder(self) -> bool:
        return self.name is not None


class UrlTemplate(BaseModel):
    """A parsed URL template; see :func:`wrestler.template.parse`."""

    model_config = ConfigDict(frozen=True)

    source: str
    segments: tuple[Segment, ...] = ()

    @property
    def params(self) -> list[str]:
        """Placeholder names in left-to-right order."""
        return [seg.name for seg in self.segments if seg.name is not None]

    def __str__(self) -> str:
        return self.source


class EndpointSpec(BaseModel):
    """Declaration of one endpoint: name, documentation, method and template."""

    model_config = ConfigDict(frozen=True)

    name: str
    doc: str = ""
    method: HTTPMethod
    template: UrlTemplate


class CallArguments(BaseModel):
    """Trailing call arguments split into URL values, query pairs and a payload.

    ``has_payload`` distinguishes "no payload" from an explicit ``None``
    payload, which is sent as JSON ``null``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    url_values: tuple[Any, ...] = ()
    query_pairs: tuple[tuple[str, Any], ...] = ()
    json_payload: Any = None
    has_payload: bool = False


class RequestPlan(BaseModel):
    """A fully assembled request, ready to hand to a transport."""

    model_config = ConfigDict(frozen=True)

    method: HTTPMethod
    url: str
    query_string: str = ""
    body: Optional[str] = None
    content_type: Optional[str] = None

    @model_validator(mode="after")
    def _content_type_needs_body(self) -> RequestPlan:
        if self.body is None and self.content_type is not None:
            raise ValueError("content_type is only allowed together with a body")
        return self

    @property
    def full_url(self) -> str:
        return f"{self.url}{self.query_string}"


class ResponseEnvelope(BaseModel):
    """Transport-neutral view of an HTTP response.

    ``body`` is ``None`` when the server sent no content. Header lookups
    through :meth:`header` ignore case, as HTTP requires.
    """

    model_config = ConfigDict(frozen=True)

    status_code: int
    headers: dict[str, str] = Field(default_factory=dict)
    body: Optional[str] = None
    url: Optional[str] = None

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return the value of header *name*, matched case-insensitively."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return default

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code <= 299
