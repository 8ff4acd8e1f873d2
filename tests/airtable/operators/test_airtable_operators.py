"""Unit tests for the Airtable formula operator compilers."""

from __future__ import annotations

import pytest

from datagate.airtable.operators import (
    compile_null,
    compile_set,
    compile_standard,
    compile_string,
    quote,
)
from datagate.exceptions import UnsupportedOperatorError
from datagate.query import WhereOperator


class TestQuote:
    def test_plain_string(self):
        assert quote("open") == '"open"'

    def test_escapes_quotes_and_backslashes(self):
        assert quote('say "hi"') == '"say \\"hi\\""'
        assert quote("a\\b") == '"a\\\\b"'

    def test_booleans_and_none(self):
        assert quote(True) == '"true"'
        assert quote(False) == '"false"'
        assert quote(None) == '""'

    def test_numbers_are_stringified(self):
        assert quote(42) == '"42"'
        assert quote(1.5) == '"1.5"'


class TestStandardOperators:
    @pytest.mark.parametrize(
        ("op", "symbol"),
        [
            (WhereOperator.EQUALS, "="),
            (WhereOperator.NOT_EQUALS, "!="),
            (WhereOperator.GT, ">"),
            (WhereOperator.GTE, ">="),
            (WhereOperator.LT, "<"),
            (WhereOperator.LTE, "<="),
        ],
    )
    def test_comparisons(self, op, symbol):
        assert compile_standard("{Amount}", op, 10) == f'{{Amount}}{symbol}"10"'

    def test_accepts_raw_operator_strings(self):
        assert compile_standard("{Name}", "=", "Ann") == '{Name}="Ann"'

    def test_other_operators_are_not_handled(self):
        assert compile_standard("{Name}", WhereOperator.LIKE, "x") is None
        assert compile_standard("{Name}", "between", [1, 2]) is None


class TestStringOperators:
    def test_like_and_search_render_search(self):
        assert compile_string("{Name}", "like", "ann") == 'SEARCH("ann",{Name})'
        assert compile_string("{Name}", "search", "ann") == 'SEARCH("ann",{Name})'

    def test_not_like_is_negated(self):
        assert compile_string("{Name}", "not_like", "ann") == 'NOT(SEARCH("ann",{Name}))'

    def test_sql_wildcards_are_stripped(self):
        assert compile_string("{Name}", "like", "%ann%") == 'SEARCH("ann",{Name})'

    def test_non_scalar_value_is_rejected(self):
        with pytest.raises(UnsupportedOperatorError):
            compile_string("{Name}", "like", ["a", "b"])

    def test_other_operators_are_not_handled(self):
        assert compile_string("{Name}", "=", "x") is None


class TestNullOperators:
    def test_is_null(self):
        assert compile_null("{Email}", "is_null", None) == "{Email}=BLANK()"

    def test_is_not_null(self):
        assert compile_null("{Email}", "is_not_null", None) == "NOT({Email}=BLANK())"

    def test_other_operators_are_not_handled(self):
        assert compile_null("{Email}", "=", None) is None


class TestSetOperators:
    def test_in_with_list(self):
        result = compile_set("{Status}", "in", ["open", "closed"])
        assert result == 'OR({Status}="open",{Status}="closed")'

    def test_in_with_single_value_is_unwrapped(self):
        assert compile_set("{Status}", "in", "open") == '{Status}="open"'

    def test_in_with_comma_string(self):
        result = compile_set("{Status}", "in", "open, closed")
        assert result == 'OR({Status}="open",{Status}="closed")'

    def test_empty_in_matches_nothing(self):
        assert compile_set("{Status}", "in", []) == "FALSE()"

    def test_not_in(self):
        result = compile_set("{Status}", "not_in", ["open", "closed"])
        assert result == 'AND({Status}!="open",{Status}!="closed")'

    def test_empty_not_in_matches_everything(self):
        assert compile_set("{Status}", "not_in", []) == "TRUE()"

    def test_none_is_rejected(self):
        with pytest.raises(UnsupportedOperatorError):
            compile_set("{Status}", "in", None)

    def test_other_operators_are_not_handled(self):
        assert compile_set("{Status}", "like", "x") is None
