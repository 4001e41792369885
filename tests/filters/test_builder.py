"""Tests for the filter builder helpers."""

import pytest

from esvectorstore.errors import MalformedExpressionError
from esvectorstore.filters import builder as b
from esvectorstore.filters.expression import And, Comparison, Group, Not, Operator, Or


class TestBuilder:
    """Test cases for shorthand constructors."""

    @pytest.mark.parametrize(
        ("factory", "operator"),
        [
            (b.eq, Operator.EQ),
            (b.ne, Operator.NE),
            (b.lt, Operator.LT),
            (b.lte, Operator.LTE),
            (b.gt, Operator.GT),
            (b.gte, Operator.GTE),
        ],
    )
    def test_scalar_comparisons(self, factory, operator):
        """Test that each helper builds the matching comparison."""
        assert factory("year", 2020) == Comparison("year", operator, 2020)

    def test_membership_helpers_accept_any_sequence(self):
        """Test is_in and not_in."""
        assert b.is_in("genre", ("a", "b")).value == ("a", "b")
        assert b.not_in("genre", ["a"]).operator is Operator.NIN

    def test_exists(self):
        """Test exists helper."""
        node = b.exists("author")
        assert node.operator is Operator.EXISTS
        assert node.value is None

    def test_and_or_fold_left(self):
        """Test variadic combinators."""
        x, y, z = b.eq("x", 1), b.eq("y", 2), b.eq("z", 3)
        assert b.and_(x, y, z) == And(And(x, y), z)
        assert b.or_(x, y) == Or(x, y)

    def test_single_operand_is_returned(self):
        """Test that one operand needs no combinator."""
        x = b.eq("x", 1)
        assert b.and_(x) is x
        assert b.or_(x) is x

    def test_empty_combinators_raise(self):
        """Test that combinators need operands."""
        with pytest.raises(MalformedExpressionError):
            b.and_()
        with pytest.raises(MalformedExpressionError):
            b.or_()

    def test_not_and_group(self):
        """Test unary helpers."""
        x = b.eq("x", 1)
        assert b.not_(x) == Not(x)
        assert b.group(x) == Group(x)
