"""Metadata filter expressions and their compilation to backend query syntax."""

from esvectorstore.filters.converter import (
    MATCH_ALL,
    ElasticsearchFilterExpressionConverter,
    FilterExpressionConverter,
    compile_filter,
)
from esvectorstore.filters.expression import (
    And,
    Comparison,
    FilterExpression,
    Group,
    Not,
    Operator,
    Or,
    is_expression,
)
from esvectorstore.filters.parser import from_dict, parse_filter, to_expression


__all__ = [
    # Expression tree
    "And",
    "Comparison",
    "FilterExpression",
    "Group",
    "Not",
    "Operator",
    "Or",
    "is_expression",
    # Compilation
    "MATCH_ALL",
    "ElasticsearchFilterExpressionConverter",
    "FilterExpressionConverter",
    "compile_filter",
    # Parsing
    "from_dict",
    "parse_filter",
    "to_expression",
]
