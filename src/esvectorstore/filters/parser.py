"""Parsers producing filter expression trees from dicts and text.

Two input forms are supported:

Canonical dict form (as found in YAML configuration files)::

    {"field": "country", "operator": "==", "value": "UK"}
    {"operator": "and", "conditions": [<filter>, <filter>, ...]}
    {"operator": "not", "conditions": [<filter>, ...]}

Leaf operators accept symbols and aliases ("eq", "$gte", "in", ...) plus
"range", which takes a [min, max] pair. "exists" takes no value or a boolean;
False means the field is missing. A "meta." field prefix is stripped in both
forms.

Text form, parsed with Python's ``ast`` module::

    country == 'UK' and year >= 2020
    genre in ['drama', 'comedy'] or not (draft == true)
    exists(author) AND year NIN [2001, 2002]

Upper-case AND/OR/NOT/IN/NIN keywords and the ``&&``/``||`` operators are
accepted alongside the Python spellings. ``true``/``false`` are booleans.
Keys that are not identifiers can be quoted: ``'release-year' > 2000``.
"""

import ast
import io
import tokenize
from functools import reduce
from typing import Any, Dict, List, Optional, Tuple, Union

from esvectorstore.errors import MalformedExpressionError, UnsupportedOperatorError
from esvectorstore.filters.expression import (
    And,
    Comparison,
    FilterExpression,
    Not,
    Operator,
    Or,
    is_expression,
)


__all__ = ["from_dict", "parse_filter", "to_expression"]

_META_PREFIX = "meta."

_TEXT_KEYWORDS = {
    "AND": ["and"],
    "OR": ["or"],
    "NOT": ["not"],
    "IN": ["in"],
    "NIN": ["not", "in"],
    "true": ["True"],
    "false": ["False"],
}

_AST_OPERATORS = {
    ast.Eq: Operator.EQ,
    ast.NotEq: Operator.NE,
    ast.Lt: Operator.LT,
    ast.LtE: Operator.LTE,
    ast.Gt: Operator.GT,
    ast.GtE: Operator.GTE,
    ast.In: Operator.IN,
    ast.NotIn: Operator.NIN,
}


def from_dict(filters: Dict[str, Any]) -> FilterExpression:
    """Build a filter tree from the canonical dict form.

    Args:
        filters: Leaf or combinator dict.

    Returns:
        Filter expression tree.

    Raises:
        MalformedExpressionError: If the dict structure is invalid.
        UnsupportedOperatorError: If an operator is unknown.
    """
    if not isinstance(filters, dict):
        raise MalformedExpressionError(
            f"Filter must be a dict, got {type(filters).__name__}"
        )

    if "conditions" in filters:
        operator = str(filters.get("operator", "and")).lower()
        conditions = filters["conditions"]
        if not isinstance(conditions, list) or not conditions:
            raise MalformedExpressionError(
                "'conditions' must be a non-empty list of filters."
            )
        children = [from_dict(condition) for condition in conditions]
        if operator == "and":
            return reduce(And, children)
        if operator == "or":
            return reduce(Or, children)
        if operator == "not":
            return Not(reduce(And, children))
        raise UnsupportedOperatorError(f"Unsupported logical operator: {operator}")

    if "field" not in filters:
        raise MalformedExpressionError(
            f"Filter leaf requires a 'field' key, got keys {sorted(filters)}"
        )

    field = _strip_meta(filters["field"])
    operator = filters.get("operator", "eq")
    value = filters.get("value")

    if isinstance(operator, str) and operator.lower() == "range":
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            raise MalformedExpressionError("'range' operator requires (min, max) pair")
        min_val, max_val = value
        return And(
            Comparison(field, Operator.GTE, min_val),
            Comparison(field, Operator.LTE, max_val),
        )

    if value is False and Operator.parse(operator) is Operator.EXISTS:
        return Not(Comparison(field, Operator.EXISTS))

    return Comparison(field, operator, value)


def parse_filter(text: str) -> FilterExpression:
    """Parse a textual filter expression.

    Args:
        text: Filter text, e.g. "country == 'UK' and year >= 2020".

    Returns:
        Filter expression tree.

    Raises:
        MalformedExpressionError: If the text cannot be parsed.
        UnsupportedOperatorError: If the text uses an unsupported operator.
    """
    if not isinstance(text, str) or not text.strip():
        raise MalformedExpressionError("Filter text must not be empty.")

    # Parenthesized so the expression may span lines; the newline keeps a
    # trailing comment from swallowing the closing parenthesis.
    source = _normalize_keywords(f"({text}\n)")
    try:
        tree = ast.parse(source, mode="eval")
    except SyntaxError as e:
        raise MalformedExpressionError(f"Invalid filter expression: {text!r}") from e
    return _convert_node(tree.body)


def to_expression(
    value: Optional[Union[FilterExpression, Dict[str, Any], str]],
) -> Optional[FilterExpression]:
    """Normalize any accepted filter form into a filter tree.

    Args:
        value: Filter tree, canonical dict, filter text, or None.

    Returns:
        Filter tree, or None when no filter was given.
    """
    if value is None:
        return None
    if is_expression(value):
        return value
    if isinstance(value, dict):
        return from_dict(value) if value else None
    if isinstance(value, str):
        return parse_filter(value)
    raise MalformedExpressionError(
        f"Unsupported filter type: {type(value).__name__}"
    )


def _normalize_keywords(text: str) -> str:
    tokens: List[Tuple[int, str]] = []
    try:
        for token in tokenize.generate_tokens(io.StringIO(text).readline):
            if token.type == tokenize.NAME and token.string in _TEXT_KEYWORDS:
                tokens.extend(
                    (tokenize.NAME, word) for word in _TEXT_KEYWORDS[token.string]
                )
            elif (
                token.type == tokenize.OP
                and token.string in ("&", "|")
                and tokens
                and tokens[-1] == (tokenize.OP, token.string)
            ):
                tokens[-1] = (tokenize.NAME, "and" if token.string == "&" else "or")
            else:
                tokens.append((token.type, token.string))
    except (tokenize.TokenError, SyntaxError) as e:
        raise MalformedExpressionError(f"Invalid filter expression: {text!r}") from e
    return tokenize.untokenize(tokens)


def _convert_node(node: ast.AST) -> FilterExpression:
    if isinstance(node, ast.BoolOp):
        combinator = And if isinstance(node.op, ast.And) else Or
        return reduce(combinator, [_convert_node(value) for value in node.values])

    if isinstance(node, ast.UnaryOp) and isinstance(node.op, ast.Not):
        return Not(_convert_node(node.operand))

    if isinstance(node, ast.Compare):
        if len(node.ops) != 1:
            raise MalformedExpressionError(
                f"Chained comparisons are not supported: {ast.unparse(node)}"
            )
        operator = _AST_OPERATORS.get(type(node.ops[0]))
        if operator is None:
            raise UnsupportedOperatorError(
                f"Unsupported comparison: {ast.unparse(node)}"
            )
        field = _strip_meta(_field_name(node.left))
        return Comparison(field, operator, _literal(node.comparators[0]))

    if (
        isinstance(node, ast.Call)
        and isinstance(node.func, ast.Name)
        and node.func.id == "exists"
    ):
        if len(node.args) != 1 or node.keywords:
            raise MalformedExpressionError("exists() takes exactly one field name")
        return Comparison(_strip_meta(_field_name(node.args[0])), Operator.EXISTS)

    raise MalformedExpressionError(f"Unsupported filter syntax: {ast.unparse(node)}")


def _field_name(node: ast.AST) -> str:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return f"{_field_name(node.value)}.{node.attr}"
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return node.value
    raise MalformedExpressionError(
        f"Expected a field name on the left side, got: {ast.unparse(node)}"
    )


def _strip_meta(field: Any) -> Any:
    if isinstance(field, str) and field.startswith(_META_PREFIX):
        return field[len(_META_PREFIX) :]
    return field


def _literal(node: ast.AST) -> Any:
    try:
        value = ast.literal_eval(node)
    except ValueError as e:
        raise MalformedExpressionError(
            f"Expected a literal value, got: {ast.unparse(node)}"
        ) from e
    return list(value) if isinstance(value, tuple) else value
