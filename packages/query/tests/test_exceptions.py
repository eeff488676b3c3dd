"""Tests for exceptions module."""

from __future__ import annotations

from diaspora_query.exceptions import (
    OperatorNotFoundError,
    QueryConflictError,
    QueryError,
    QueryOperandTypeError,
    QueryOptionsError,
)

# -- OperatorNotFoundError ---------------------------------------------------


def test_operator_not_found_fuzzy_suggestion():
    err = OperatorNotFoundError("$regx", ["$regex", "$in", "$notIn"])
    assert "$regx" in str(err)
    assert "$regex" in str(err)


def test_operator_not_found_no_matches():
    err = OperatorNotFoundError("zzzzz", ["$equal", "$in"])
    d = err.to_dict()
    assert d["error"] == "OPERATOR_NOT_FOUND"
    assert d["suggestions"] == []


# -- QueryConflictError -------------------------------------------------------


def test_conflict_to_dict():
    err = QueryConflictError("age", "$gt", "$greater")
    d = err.to_dict()
    assert d["error"] == "QUERY_CONFLICT"
    assert d["keys"] == ["$gt", "$greater"]
    assert "synonyms" in d["message"]


# -- QueryOperandTypeError -----------------------------------------------------


def test_operand_type_error_is_a_type_error():
    err = QueryOperandTypeError("bad", operator="$less", operand='"x"')
    assert isinstance(err, TypeError)
    assert err.to_dict() == {
        "error": "QUERY_OPERAND_TYPE",
        "operator": "$less",
        "operand": '"x"',
        "message": "bad",
    }


# -- QueryOptionsError ------------------------------------------------------------


def test_options_error_from_string():
    err = QueryOptionsError("broken")
    assert err.errors == {"__root__": ["broken"]}
    assert isinstance(err, ValueError)


def test_options_error_message_lists_fields():
    err = QueryOptionsError({"limit": ["too small"], "skip": ["negative"]})
    assert str(err) == "limit: too small; skip: negative"


# -- Hierarchy ---------------------------------------------------------------------


def test_all_errors_share_base():
    for err in (
        OperatorNotFoundError("x", []),
        QueryConflictError("f", "a", "b"),
        QueryOperandTypeError("m"),
        QueryOptionsError("m"),
    ):
        assert isinstance(err, QueryError)
        assert "error" in err.to_dict()
