"""Tests for wrestler.classifier -- splitting call arguments."""

from __future__ import annotations

import enum

import pytest

from wrestler.classifier import JSON_KEY, classify, normalize_key
from wrestler.exceptions import ArityError, InvalidUsageError


class Flag(enum.Enum):
    VERBOSE = "verbose"


class TestClassify:
    """Splitting call arguments into URL values, query pairs and a payload."""

    def test_url_values_only(self) -> None:
        parts = classify(["a", "b"], 2)
        assert parts.url_values == ("a", "b")
        assert parts.query_pairs == ()
        assert parts.has_payload is False

    def test_query_pairs_in_order(self) -> None:
        parts = classify(["42", "verbose", "true", "page", 2], 1)
        assert parts.url_values == ("42",)
        assert parts.query_pairs == (("verbose", "true"), ("page", 2))

    def test_json_payload_extracted(self) -> None:
        payload = {"data": [{"name": "Earth"}], "user": "Ford"}
        parts = classify(["my-folder", "method", "make fancy", JSON_KEY, payload], 1)
        assert parts.query_pairs == (("method", "make fancy"),)
        assert parts.json_payload == payload
        assert parts.has_payload is True

    def test_json_may_appear_anywhere(self) -> None:
        parts = classify(["json", [1], "a", "1"], 0)
        assert parts.json_payload == [1]
        assert parts.query_pairs == (("a", "1"),)

    def test_last_json_wins(self) -> None:
        parts = classify(["json", 1, "json", 2], 0)
        assert parts.json_payload == 2

    def test_explicit_none_payload(self) -> None:
        parts = classify(["json", None], 0)
        assert parts.has_payload is True
        assert parts.json_payload is None

    def test_duplicate_query_keys_kept(self) -> None:
        parts = classify(["tag", "x", "tag", "y"], 0)
        assert parts.query_pairs == (("tag", "x"), ("tag", "y"))

    def test_kwargs_appended_after_positional(self) -> None:
        parts = classify(["1", "a", "x"], 1, {"b": "y", "json": {"k": 1}})
        assert parts.query_pairs == (("a", "x"), ("b", "y"))
        assert parts.json_payload == {"k": 1}

    def test_non_string_keys(self) -> None:
        parts = classify([Flag.VERBOSE, True, 3, "x"], 0)
        assert parts.query_pairs == (("verbose", True), ("3", "x"))

    def test_too_few_url_values(self) -> None:
        with pytest.raises(ArityError, match="at least 2"):
            classify(["only-one"], 2)

    def test_dangling_key(self) -> None:
        with pytest.raises(ArityError, match="no value"):
            classify(["1", "verbose"], 1)

    def test_arity_error_is_usage_error(self) -> None:
        with pytest.raises(InvalidUsageError):
            classify([], 1)


class TestNormalizeKey:
    """Rendering trailing-argument keys as query keys."""

    def test_str(self) -> None:
        assert normalize_key("page") == "page"

    def test_enum(self) -> None:
        assert normalize_key(Flag.VERBOSE) == "verbose"

    def test_int(self) -> None:
        assert normalize_key(5) == "5"

    def test_empty(self) -> None:
        with pytest.raises(InvalidUsageError, match="must not be empty"):
            normalize_key("")
