"""Shorthand constructors for filter expressions.

Usage:
    >>> from esvectorstore.filters import builder as b
    >>> expr = b.and_(b.eq("country", "UK"), b.gte("year", 2020))
"""

from functools import reduce
from typing import Any, Sequence

from esvectorstore.errors import MalformedExpressionError
from esvectorstore.filters.expression import (
    And,
    Comparison,
    FilterExpression,
    Group,
    Not,
    Operator,
    Or,
)


__all__ = [
    "eq",
    "ne",
    "lt",
    "lte",
    "gt",
    "gte",
    "is_in",
    "not_in",
    "exists",
    "and_",
    "or_",
    "not_",
    "group",
]


def eq(field: str, value: Any) -> Comparison:
    return Comparison(field, Operator.EQ, value)


def ne(field: str, value: Any) -> Comparison:
    return Comparison(field, Operator.NE, value)


def lt(field: str, value: Any) -> Comparison:
    return Comparison(field, Operator.LT, value)


def lte(field: str, value: Any) -> Comparison:
    return Comparison(field, Operator.LTE, value)


def gt(field: str, value: Any) -> Comparison:
    return Comparison(field, Operator.GT, value)


def gte(field: str, value: Any) -> Comparison:
    return Comparison(field, Operator.GTE, value)


def is_in(field: str, values: Sequence[Any]) -> Comparison:
    return Comparison(field, Operator.IN, list(values))


def not_in(field: str, values: Sequence[Any]) -> Comparison:
    return Comparison(field, Operator.NIN, list(values))


def exists(field: str) -> Comparison:
    return Comparison(field, Operator.EXISTS)


def and_(*expressions: FilterExpression) -> FilterExpression:
    """Left-fold expressions into nested And nodes."""
    if not expressions:
        raise MalformedExpressionError("and_ requires at least one expression.")
    return reduce(And, expressions)


def or_(*expressions: FilterExpression) -> FilterExpression:
    """Left-fold expressions into nested Or nodes."""
    if not expressions:
        raise MalformedExpressionError("or_ requires at least one expression.")
    return reduce(Or, expressions)


def not_(expression: FilterExpression) -> Not:
    return Not(expression)


def group(expression: FilterExpression) -> Group:
    return Group(expression)
