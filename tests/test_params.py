from __future__ import annotations

import pytest

from babel_magma.errors import ConfigurationError
from babel_magma.params import build_request, parse_flag, parse_result_type, parse_vars


def test_build_request_applies_defaults() -> None:
    request = build_request("print 1;", {})

    assert request.body == "print 1;"
    assert request.bindings == ()
    assert request.result_type == "value"
    assert request.isolate is False
    assert request.session == "none"
    assert request.needs_classification


def test_build_request_reads_every_parameter() -> None:
    request = build_request(
        "print xs;",
        {
            ":session": "algebra",
            ":var": [("xs", [1, 2]), "n=3"],
            ":magma-eval": "yes",
            ":result-type": "output",
        },
    )

    assert request.session == "algebra"
    assert request.bindings == (("xs", [1, 2]), ("n", 3))
    assert request.isolate is True
    assert request.result_type == "output"
    assert not request.needs_classification


def test_parse_vars_keeps_mapping_order() -> None:
    assert parse_vars({"z": 1, "a": 2}) == (("z", 1), ("a", 2))


def test_parse_vars_decodes_text_values() -> None:
    assert parse_vars("xs=[1, [2, 3]]") == (("xs", [1, [2, 3]]),)
    assert parse_vars(['s="a b"']) == (("s", "a b"),)


@pytest.mark.parametrize("raw", ["novalue", ["1x=2"], [("a", 1, 2)], 42])
def test_parse_vars_rejects_malformed_entries(raw: object) -> None:
    with pytest.raises(ConfigurationError):
        parse_vars(raw)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, False), (True, True), ("t", True), ("yes", True), ("nil", False), ("no", False), ("", False)],
)
def test_parse_flag(raw: object, expected: bool) -> None:
    assert parse_flag(raw) is expected


def test_parse_flag_rejects_unknown_words() -> None:
    with pytest.raises(ConfigurationError):
        parse_flag("maybe")


def test_parse_result_type() -> None:
    assert parse_result_type(None) == "value"
    assert parse_result_type("eval") == "eval"
    with pytest.raises(ConfigurationError, match="unknown :result-type"):
        parse_result_type("table")
