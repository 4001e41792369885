"""Filter expression tree for metadata filtering.

A filter is a tree built from a closed set of node types:

    - Comparison(field, operator, value): leaf predicate on one metadata field
    - And(left, right) / Or(left, right): boolean combinators
    - Not(child): negation
    - Group(child): explicit parenthesization

Nodes are frozen dataclasses and validate themselves on construction, so a
tree that was built successfully only fails compilation for backend-specific
limitations.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from esvectorstore.errors import MalformedExpressionError, UnsupportedOperatorError


__all__ = [
    "Operator",
    "Comparison",
    "And",
    "Or",
    "Not",
    "Group",
    "FilterExpression",
    "is_expression",
]


class Operator(str, Enum):
    """Comparison operators supported in filter leaves."""

    EQ = "=="
    NE = "!="
    LT = "<"
    LTE = "<="
    GT = ">"
    GTE = ">="
    IN = "in"
    NIN = "nin"
    EXISTS = "exists"

    @classmethod
    def parse(cls, value: Union["Operator", str]) -> "Operator":
        """Resolve an operator from its symbol or one of its aliases.

        Args:
            value: Operator instance, symbol ("==", ">=") or alias
                ("eq", "$gte", "not in").

        Returns:
            The matching Operator.

        Raises:
            UnsupportedOperatorError: If the value names no known operator.
        """
        if isinstance(value, Operator):
            return value
        if isinstance(value, str):
            operator = _OPERATOR_ALIASES.get(value.strip().lower())
            if operator is not None:
                return operator
        raise UnsupportedOperatorError(
            f"Unsupported operator: {value!r}. "
            f"Must be one of {sorted(_OPERATOR_ALIASES)}"
        )

    @property
    def is_ordering(self) -> bool:
        """True for <, <=, > and >=."""
        return self in (Operator.LT, Operator.LTE, Operator.GT, Operator.GTE)

    @property
    def is_membership(self) -> bool:
        """True for in and nin."""
        return self in (Operator.IN, Operator.NIN)


_OPERATOR_ALIASES = {
    "==": Operator.EQ,
    "=": Operator.EQ,
    "eq": Operator.EQ,
    "$eq": Operator.EQ,
    "!=": Operator.NE,
    "ne": Operator.NE,
    "$ne": Operator.NE,
    "<": Operator.LT,
    "lt": Operator.LT,
    "$lt": Operator.LT,
    "<=": Operator.LTE,
    "lte": Operator.LTE,
    "$lte": Operator.LTE,
    ">": Operator.GT,
    "gt": Operator.GT,
    "$gt": Operator.GT,
    ">=": Operator.GTE,
    "gte": Operator.GTE,
    "$gte": Operator.GTE,
    "in": Operator.IN,
    "$in": Operator.IN,
    "nin": Operator.NIN,
    "$nin": Operator.NIN,
    "not in": Operator.NIN,
    "exists": Operator.EXISTS,
    "$exists": Operator.EXISTS,
}

SCALAR_TYPES = (str, int, float, bool)


def _check_scalar(field: str, value: Any) -> None:
    if not isinstance(value, SCALAR_TYPES):
        raise MalformedExpressionError(
            f"Unsupported literal for field '{field}': {value!r} "
            f"({type(value).__name__}). Expected str, int, float or bool."
        )
    if isinstance(value, float) and not math.isfinite(value):
        raise UnsupportedOperatorError(
            f"Non-finite number {value!r} for field '{field}' cannot be expressed."
        )


@dataclass(frozen=True)
class Comparison:
    """Leaf predicate comparing one metadata field against a literal.

    Attributes:
        field: Metadata key. Must be non-empty.
        operator: Comparison operator (symbol or alias accepted).
        value: Literal. Lists are only valid for in/nin and are stored as
            tuples. Must be omitted (or True) for exists.
    """

    field: str
    operator: Operator
    value: Any = None

    def __post_init__(self) -> None:
        """Normalize the operator and validate the literal."""
        if not isinstance(self.field, str) or not self.field.strip():
            raise MalformedExpressionError("Comparison field name must not be empty.")

        operator = Operator.parse(self.operator)
        object.__setattr__(self, "operator", operator)

        value = self.value
        if operator is Operator.EXISTS:
            if value is True:
                object.__setattr__(self, "value", None)
            elif value is not None:
                raise MalformedExpressionError(
                    f"'exists' takes no value, got {value!r} for field '{self.field}'"
                )
            return

        if isinstance(value, (list, tuple)):
            if not operator.is_membership:
                raise MalformedExpressionError(
                    f"List literal is only valid with 'in'/'nin', "
                    f"got '{operator.value}' for field '{self.field}'"
                )
            if not value:
                raise MalformedExpressionError(
                    f"'{operator.value}' requires a non-empty list for field "
                    f"'{self.field}'"
                )
            for item in value:
                _check_scalar(self.field, item)
            object.__setattr__(self, "value", tuple(value))
            return

        if operator.is_membership:
            raise MalformedExpressionError(
                f"'{operator.value}' operator requires list, got {type(value).__name__}"
            )
        _check_scalar(self.field, value)


@dataclass(frozen=True)
class And:
    """Conjunction of two expressions."""

    left: "FilterExpression"
    right: "FilterExpression"

    def __post_init__(self) -> None:
        """Validate operands."""
        _check_operand(self, self.left)
        _check_operand(self, self.right)


@dataclass(frozen=True)
class Or:
    """Disjunction of two expressions."""

    left: "FilterExpression"
    right: "FilterExpression"

    def __post_init__(self) -> None:
        """Validate operands."""
        _check_operand(self, self.left)
        _check_operand(self, self.right)


@dataclass(frozen=True)
class Not:
    """Negation of an expression."""

    child: "FilterExpression"

    def __post_init__(self) -> None:
        """Validate operand."""
        _check_operand(self, self.child)


@dataclass(frozen=True)
class Group:
    """Explicit grouping of an expression."""

    child: "FilterExpression"

    def __post_init__(self) -> None:
        """Validate operand."""
        _check_operand(self, self.child)


FilterExpression = Union[Comparison, And, Or, Not, Group]

_NODE_TYPES = (Comparison, And, Or, Not, Group)


def is_expression(value: Any) -> bool:
    """Return True if value is a filter expression node."""
    return isinstance(value, _NODE_TYPES)


def _check_operand(node: Any, operand: Any) -> None:
    if not is_expression(operand):
        raise MalformedExpressionError(
            f"{type(node).__name__} operand must be a filter expression, "
            f"got {type(operand).__name__}"
        )
