"""Filter expression converters.

Converts filter expression trees into backend-native query syntax. The
Elasticsearch converter renders the Lucene-based ``query_string`` grammar,
which is used as the candidate-restricting clause of the similarity query.

Rendering rules:
    - Equality: metadata.country:"UK", metadata.year:2020, metadata.draft:true
    - Inequality: NOT metadata.country:"UK"
    - Ordering: metadata.year:>=2020 for numbers; strings use range syntax,
      metadata.title:{* TO "m"}, since a quoted term cannot follow "<"
    - Membership: metadata.genre:("drama" OR "comedy")
    - Existence: _exists_:metadata.author
    - And/Or: infix AND/OR. A nested And/Or of the other kind is wrapped in
      parentheses, as are negated operands, so the rendered string keeps the
      tree's evaluation order.
    - No filter: the match-all wildcard "*".

Usage:
    >>> from esvectorstore.filters import builder as b
    >>> compile_filter(b.and_(b.eq("a", "x"), b.or_(b.eq("b", 1), b.eq("b", 2))))
    'metadata.a:"x" AND (metadata.b:1 OR metadata.b:2)'
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Optional

from esvectorstore.errors import MalformedExpressionError, UnsupportedOperatorError
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
    "FilterExpressionConverter",
    "ElasticsearchFilterExpressionConverter",
    "compile_filter",
    "MATCH_ALL",
]

MATCH_ALL = "*"

# query_string reserved characters that can be escaped with a backslash.
_ESCAPABLE = set('+-=&|!(){}[]^"~*?:\\/ ')

# query_string cannot escape these at all.
_UNESCAPABLE = set("<>")

_ORDERING_SYMBOLS = {
    Operator.LT: "<",
    Operator.LTE: "<=",
    Operator.GT: ">",
    Operator.GTE: ">=",
}


class FilterExpressionConverter(ABC):
    """Base class for converting filter trees to backend-native syntax.

    Each backend has its own filter grammar; subclasses render the closed set
    of expression nodes into it.
    """

    @abstractmethod
    def convert(self, expression: Optional[FilterExpression]) -> Any:
        """Convert a filter expression.

        Args:
            expression: Filter tree, or None for no filtering.

        Returns:
            Backend-native filter (string, dict, object, etc.).
        """


class ElasticsearchFilterExpressionConverter(FilterExpressionConverter):
    """Renders filter trees as Elasticsearch query_string expressions.

    Attributes:
        field_prefix: Prefix applied to every field name. Document metadata is
            stored under the "metadata" object, hence the "metadata." default.
    """

    def __init__(self, field_prefix: str = "metadata.") -> None:
        self.field_prefix = field_prefix

    def convert(self, expression: Optional[FilterExpression]) -> str:
        """Convert a filter tree to a query_string expression.

        Args:
            expression: Filter tree, or None.

        Returns:
            query_string expression; "*" when expression is None.

        Raises:
            MalformedExpressionError: If the tree contains a non-node value.
            UnsupportedOperatorError: If a literal cannot be expressed.
        """
        if expression is None:
            return MATCH_ALL
        return self._convert(expression)

    def _convert(self, node: Any) -> str:
        if isinstance(node, Comparison):
            return self._convert_comparison(node)
        if isinstance(node, (And, Or)):
            keyword = "AND" if isinstance(node, And) else "OR"
            left = self._operand(node, node.left)
            right = self._operand(node, node.right)
            return f"{left} {keyword} {right}"
        if isinstance(node, Not):
            child = node.child
            if isinstance(child, Group) or (
                isinstance(child, Comparison) and not _is_negated(child)
            ):
                return f"NOT {self._convert(child)}"
            return f"NOT ({self._convert(child)})"
        if isinstance(node, Group):
            return f"({self._convert(node.child)})"
        raise MalformedExpressionError(
            f"Unknown filter expression node: {type(node).__name__}"
        )

    def _operand(self, parent: Any, child: Any) -> str:
        rendered = self._convert(child)
        if isinstance(child, (And, Or)) and not isinstance(child, type(parent)):
            return f"({rendered})"
        if isinstance(child, Not) or (
            isinstance(child, Comparison) and _is_negated(child)
        ):
            return f"({rendered})"
        return rendered

    def _convert_comparison(self, node: Comparison) -> str:
        field = self._format_field(node.field)
        operator = node.operator

        if operator is Operator.EXISTS:
            return f"_exists_:{field}"
        if operator is Operator.EQ:
            return f"{field}:{self._format_value(node.value)}"
        if operator is Operator.NE:
            return f"NOT {field}:{self._format_value(node.value)}"
        if operator.is_ordering:
            if isinstance(node.value, bool):
                raise UnsupportedOperatorError(
                    f"Ordering operator '{operator.value}' cannot be applied to "
                    f"boolean literal for field '{node.field}'"
                )
            value = self._format_value(node.value)
            if isinstance(node.value, str):
                return f"{field}:{_string_range(operator, value)}"
            return f"{field}:{_ORDERING_SYMBOLS[operator]}{value}"
        if operator.is_membership:
            values = node.value
            if not isinstance(values, (list, tuple)) or not values:
                raise MalformedExpressionError(
                    f"'{operator.value}' requires a non-empty list for field "
                    f"'{node.field}'"
                )
            disjunction = " OR ".join(self._format_value(v) for v in values)
            rendered = f"{field}:({disjunction})"
            return f"NOT {rendered}" if operator is Operator.NIN else rendered

        raise UnsupportedOperatorError(f"Unsupported operator: {operator}")

    def _format_field(self, name: str) -> str:
        invalid = _UNESCAPABLE.intersection(name)
        if invalid:
            raise UnsupportedOperatorError(
                f"Field name '{name}' contains characters query_string cannot "
                f"escape: {sorted(invalid)}"
            )
        escaped = "".join(f"\\{ch}" if ch in _ESCAPABLE else ch for ch in name)
        return f"{self.field_prefix}{escaped}"

    @staticmethod
    def _format_value(value: Any) -> str:
        """Format a scalar literal.

        Args:
            value: str, bool, int or float.

        Returns:
            Quoted and escaped string, or canonical boolean/number text.
        """
        if isinstance(value, str):
            escaped = value.replace("\\", "\\\\").replace('"', '\\"')
            return f'"{escaped}"'
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, int):
            return _escape_sign(str(value))
        if isinstance(value, float):
            # Positional notation; an exponent's sign would read as an operator.
            text = format(Decimal(repr(value)), "f")
            return _escape_sign(text if "." in text else f"{text}.0")
        if isinstance(value, (list, tuple)):
            raise MalformedExpressionError(f"Nested list literal: {value!r}")
        raise UnsupportedOperatorError(
            f"Unsupported literal type: {type(value).__name__}"
        )


def _is_negated(node: Comparison) -> bool:
    return node.operator in (Operator.NE, Operator.NIN)


def _escape_sign(text: str) -> str:
    return f"\\{text}" if text.startswith("-") else text


def _string_range(operator: Operator, value: str) -> str:
    if operator is Operator.LT:
        return f"{{* TO {value}}}"
    if operator is Operator.LTE:
        return f"[* TO {value}]"
    if operator is Operator.GT:
        return f"{{{value} TO *}}"
    return f"[{value} TO *]"


_DEFAULT_CONVERTER = ElasticsearchFilterExpressionConverter()


def compile_filter(expression: Optional[FilterExpression]) -> str:
    """Compile a filter tree with the default Elasticsearch converter."""
    return _DEFAULT_CONVERTER.convert(expression)
