"""Building condition expressions from legacy comparison parameters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from daxclient.errors import ERR_CODE_VALIDATION_EXCEPTION, ServiceError

ATTRIBUTE_NAMES_KEY_PREFIX = "#key"
ATTRIBUTE_VALUES_KEY_PREFIX = ":val"

AttributeValue = Mapping[str, Any]

_INVALID = "One or more parameter values were invalid: "

_ARITHMETIC_OPERATORS = {
    "EQ": "=",
    "NE": "<>",
    "LE": "<=",
    "GE": ">=",
    "LT": "<",
    "GT": ">",
}

_NOT_FOR_KEY_CONDITIONS = frozenset({"CONTAINS", "NOT_CONTAINS", "NULL", "NOT_NULL", "IN", "NE"})


def _validation_error(message: str) -> ServiceError:
    return ServiceError(ERR_CODE_VALIDATION_EXCEPTION, message)


@dataclass
class ExpressionContext:
    """Placeholder names and values collected while building expressions.

    Either mapping stays ``None`` until the first placeholder of its kind is added.
    """

    names: Optional[dict[str, str]] = None
    values: Optional[dict[str, AttributeValue]] = None

    def add_name(self, name: str) -> str:
        """Register an attribute name and return its ``#keyN`` placeholder."""
        if not name:
            return ""
        if self.names is None:
            self.names = {}
        placeholder = _free_key(self.names, ATTRIBUTE_NAMES_KEY_PREFIX)
        self.names[placeholder] = name
        return placeholder

    def add_value(self, value: AttributeValue) -> str:
        """Register an attribute value and return its ``:valN`` placeholder."""
        if self.values is None:
            self.values = {}
        placeholder = _free_key(self.values, ATTRIBUTE_VALUES_KEY_PREFIX)
        self.values[placeholder] = value
        return placeholder


def _free_key(existing: Mapping[str, Any], prefix: str) -> str:
    n = len(existing)
    while f"{prefix}{n}" in existing:
        n += 1
    return f"{prefix}{n}"


def attribute_type_name(value: AttributeValue) -> str:
    """Name the type of an attribute value (S, N, B, SS, ..., NULL), or "" if none."""
    for scalar in ("S", "N", "B"):
        if value.get(scalar) is not None:
            return scalar
    for collection in ("SS", "NS", "BS", "M", "L"):
        if value.get(collection):
            return collection
    for flag in ("BOOL", "NULL"):
        if value.get(flag) is not None:
            return flag
    return ""


def _validate_arg_count(
    expected: int, values: Optional[Sequence[Optional[AttributeValue]]], op: str, attribute: str
) -> None:
    if values is None and expected > 0:
        raise _validation_error(
            f"{_INVALID}Value or AttributeValueList must be used with ComparisonOperator: "
            f"{op} for Attribute {attribute}"
        )
    values = values or []
    if len(values) != expected or any(v is None for v in values):
        raise _validation_error(
            f"{_INVALID}Invalid number of argument(s) for the {op} ComparisonOperator"
        )


def _validate_scalar(values: Sequence[Optional[AttributeValue]], op: str) -> None:
    if op in ("=", "<>"):
        return
    for value in values:
        if value is None:
            continue
        if value.get("S") is None and value.get("N") is None and value.get("B") is None:
            raise _validation_error(
                f"{_INVALID}ComparisonOperator {op} is not valid for "
                f"{attribute_type_name(value)} AttributeValue type"
            )


def comparison_condition(
    context: ExpressionContext,
    attribute: str,
    operator: str,
    values: Optional[Sequence[Optional[AttributeValue]]],
    key_condition: bool,
) -> str:
    """Render ``attribute <operator> values`` as a condition expression."""
    if key_condition and operator in _NOT_FOR_KEY_CONDITIONS:
        raise _validation_error(f"Unsupported operator on KeyCondition: {operator}")

    if operator == "BETWEEN":
        _validate_arg_count(2, values, operator, attribute)
        _validate_scalar(values, operator)
        name = context.add_name(attribute)
        low = context.add_value(values[0])
        high = context.add_value(values[1])
        return f"{name} between {low} and {high}"

    if operator == "BEGINS_WITH":
        _validate_arg_count(1, values, operator, attribute)
        _validate_scalar(values, operator)
        name = context.add_name(attribute)
        return f"begins_with({name},{context.add_value(values[0])})"

    if operator in ("CONTAINS", "NOT_CONTAINS"):
        _validate_arg_count(1, values, operator, attribute)
        _validate_scalar(values, operator)
        name = context.add_name(attribute)
        expression = f"contains({name},{context.add_value(values[0])})"
        return expression if operator == "CONTAINS" else "not " + expression

    if operator in ("NULL", "NOT_NULL"):
        _validate_arg_count(0, values, operator, attribute)
        name = context.add_name(attribute)
        function = "attribute_not_exists" if operator == "NULL" else "attribute_exists"
        return f"{function}({name})"

    if operator == "IN":
        if values is None:
            raise _validation_error(
                f"{_INVALID}AttributeValueList must be used with ComparisonOperator: "
                f"{operator} for Attribute: {attribute}"
            )
        if not values:
            raise _validation_error(
                f"{_INVALID}Invalid number of argument(s)0 for the {operator} ComparisonOperator"
            )
        _validate_scalar(values, operator)
        name = context.add_name(attribute)
        placeholders = ",".join(context.add_value(v) for v in values if v is not None)
        return f"{name} in ({placeholders})"

    symbol = _ARITHMETIC_OPERATORS.get(operator)
    if symbol is None:
        raise _validation_error(f"Unknown comparison operator: {operator}")
    _validate_arg_count(1, values, symbol, attribute)
    _validate_scalar(values, symbol)
    name = context.add_name(attribute)
    return f"{name} {symbol} {context.add_value(values[0])}"


def _exists_condition(
    context: ExpressionContext, attribute: str, expected: Mapping[str, Any]
) -> str:
    if expected.get("AttributeValueList"):
        raise _validation_error(
            f"{_INVALID}AttributeValueList can only be used with a ComparisonOperator "
            f"for Attribute: {attribute}"
        )
    exists = expected.get("Exists")
    value = expected.get("Value")
    if exists is None or exists:
        if value is None:
            shown = "nil" if exists is None else "true"
            raise _validation_error(
                f"{_INVALID}Value must be provided when Exists is {shown} "
                f"for Attribute: {attribute}"
            )
        name = context.add_name(attribute)
        return f"{name} = {context.add_value(value)}"
    if value is not None:
        raise _validation_error(
            f"{_INVALID}Value cannot be used when Exists is false for Attribute: {attribute}"
        )
    return f"attribute_not_exists({context.add_name(attribute)})"


def expected_condition(
    context: ExpressionContext, attribute: str, expected: Optional[Mapping[str, Any]]
) -> str:
    """Render one legacy ``Expected`` entry as a condition expression."""
    if expected is None:
        return ""
    value = expected.get("Value")
    value_list = expected.get("AttributeValueList")
    if value is not None and value_list:
        raise _validation_error(
            f"{_INVALID}Value and AttributeValueList cannot be used together "
            f"for Attribute: {attribute}"
        )
    operator = expected.get("ComparisonOperator")
    if not operator:
        return _exists_condition(context, attribute, expected)
    if expected.get("Exists"):
        raise _validation_error(
            f"{_INVALID}Exists and ComparisonOperator cannot be used together "
            f"for Attribute: {attribute}"
        )
    if not value_list and value is not None:
        value_list = [value]
    return comparison_condition(context, attribute, operator, value_list, False)


def filter_condition(
    context: ExpressionContext,
    attribute: str,
    condition: Optional[Mapping[str, Any]],
    key_condition: bool,
) -> str:
    """Render one legacy filter or key condition as a condition expression."""
    if condition is None:
        if key_condition:
            raise _validation_error(f"KeyCondition cannot be nil for key: {attribute}")
        return ""
    operator = condition.get("ComparisonOperator")
    if not operator:
        raise _validation_error(
            f"{_INVALID}AttributeValueList can only be used with a ComparisonOperator "
            f"for Attribute: {attribute}"
        )
    return comparison_condition(
        context, attribute, operator, condition.get("AttributeValueList"), key_condition
    )


__all__ = [
    "ExpressionContext",
    "attribute_type_name",
    "comparison_condition",
    "expected_condition",
    "filter_condition",
]