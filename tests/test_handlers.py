"""Tests for wrestler.handlers -- response normalisation."""

from __future__ import annotations

import pytest

from wrestler.exceptions import ConfigError, DecodeError
from wrestler.handlers import HTTP_CODES, NO_CONTENT, get_handler, raw, simple, to_value
from wrestler.models import ResponseEnvelope


def _envelope(status: int, body: str | None = None, content_type: str | None = None) -> ResponseEnvelope:
    headers = {"Content-Type": content_type} if content_type else {}
    return ResponseEnvelope(status_code=status, headers=headers, body=body)


# ------------------------------------------------------------------ #
# to_value (default handler)
# ------------------------------------------------------------------ #


class TestToValue:
    """The default handler."""

    def test_json_body_decoded(self, plain_output) -> None:
        env = _envelope(200, '{"size": 3}', "application/json")
        assert to_value(env) == {"size": 3}

    def test_json_with_charset(self, plain_output) -> None:
        env = _envelope(200, "[1, 2]", "Application/JSON; charset=utf-8")
        assert to_value(env) == [1, 2]

    def test_text_body_passthrough(self, plain_output) -> None:
        assert to_value(_envelope(200, "hello", "text/plain")) == "hello"

    def test_missing_content_type_is_text(self, plain_output) -> None:
        assert to_value(_envelope(200, '{"a": 1}')) == '{"a": 1}'

    def test_empty_body_status_name(self, plain_output) -> None:
        assert to_value(_envelope(204)) == "no_content"
        assert to_value(_envelope(201)) == "created"

    def test_unknown_code_without_body_returns_envelope(self, plain_output) -> None:
        env = _envelope(299)
        assert to_value(env) is env

    def test_error_status_reported(self, plain_output, capsys) -> None:
        assert to_value(_envelope(404)) == "not_found"
        captured = capsys.readouterr()
        assert "[ERROR] Received a 404 HTTP status code response" in captured.err
        assert captured.out == ""

    def test_error_status_with_body_still_decoded(self, plain_output, capsys) -> None:
        env = _envelope(500, '{"error": "boom"}', "application/json")
        assert to_value(env) == {"error": "boom"}
        assert "500" in capsys.readouterr().err

    def test_success_not_reported(self, plain_output, capsys) -> None:
        to_value(_envelope(200, "ok", "text/plain"))
        assert capsys.readouterr().err == ""

    def test_malformed_json(self, plain_output) -> None:
        with pytest.raises(DecodeError):
            to_value(_envelope(200, "{oops", "application/json"))


# ------------------------------------------------------------------ #
# simple / raw
# ------------------------------------------------------------------ #


class TestSimple:
    """The strict handler that accepts only 200 and 204."""

    def test_ok_decoded(self, plain_output) -> None:
        assert simple(_envelope(200, '{"a": 1}', "application/json")) == {"a": 1}

    def test_ok_empty(self, plain_output) -> None:
        assert simple(_envelope(200)) is None

    def test_no_content(self, plain_output) -> None:
        result = simple(_envelope(204))
        assert result is NO_CONTENT
        assert not result
        assert repr(result) == "NO_CONTENT"

    def test_other_status_returns_envelope(self, plain_output, capsys) -> None:
        env = _envelope(201, "made", "text/plain")
        assert simple(env) is env
        assert "201" in capsys.readouterr().err


class TestRaw:
    """The pass-through handler."""

    def test_identity(self) -> None:
        env = _envelope(418, "short and stout", "text/plain")
        assert raw(env) is env


# ------------------------------------------------------------------ #
# Registry and status table
# ------------------------------------------------------------------ #


class TestRegistry:
    """Looking up built-in handlers by name."""

    @pytest.mark.parametrize("name,handler", [("default", to_value), ("simple", simple), ("raw", raw)])
    def test_builtin(self, name, handler) -> None:
        assert get_handler(name) is handler

    def test_unknown(self) -> None:
        with pytest.raises(ConfigError, match="Unknown response handler 'edn'"):
            get_handler("edn")


class TestHttpCodes:
    """The status code name table."""

    def test_common_names(self) -> None:
        assert HTTP_CODES[200] == "ok"
        assert HTTP_CODES[204] == "no_content"
        assert HTTP_CODES[404] == "not_found"
        assert HTTP_CODES[418] == "im_a_teapot"
        assert HTTP_CODES[503] == "service_unavailable"

    def test_names_are_identifiers(self) -> None:
        for name in HTTP_CODES.values():
            assert name.isidentifier()
