"""Rewriting legacy request parameters as expressions.

Older request parameters (AttributesToGet, Expected, AttributeUpdates,
ScanFilter, QueryFilter and KeyConditions) are turned into the equivalent
projection, condition, update, filter and key condition expressions, with
placeholders recorded in ExpressionAttributeNames and ExpressionAttributeValues.
Requests are plain mappings using the service's field names. Each function
returns a new mapping and leaves its argument untouched.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from daxclient.conditions import ExpressionContext, expected_condition, filter_condition
from daxclient.errors import ERR_CODE_VALIDATION_EXCEPTION, ServiceError

Request = dict[str, Any]

_NAMES = "ExpressionAttributeNames"
_VALUES = "ExpressionAttributeValues"

_ACTION_PUT = "PUT"
_ACTION_ADD = "ADD"
_ACTION_DELETE = "DELETE"


def _validation_error(message: str) -> ServiceError:
    return ServiceError(ERR_CODE_VALIDATION_EXCEPTION, message)


def _check_exclusive(legacy: Any, expression: Optional[str], message: str) -> bool:
    """True when the legacy parameter is in use; raise if the expression is set too."""
    in_use = bool(legacy)
    if in_use and expression is not None:
        raise _validation_error(message)
    return in_use


def _has_attributes_to_get(request: Mapping[str, Any]) -> bool:
    return _check_exclusive(
        request.get("AttributesToGet"),
        request.get("ProjectionExpression"),
        "Cannot specify both AttributesToGet and ProjectionExpression",
    )


def _has_expected(request: Mapping[str, Any]) -> bool:
    return _check_exclusive(
        request.get("Expected"),
        request.get("ConditionExpression"),
        "Cannot specify both Expected and ConditionExpression",
    )


def _has_attribute_updates(request: Mapping[str, Any]) -> bool:
    return _check_exclusive(
        request.get("AttributeUpdates"),
        request.get("UpdateExpression"),
        "Cannot specify both AttributeUpdates and UpdateExpression",
    )


def _has_filter(conditions: Any, expression: Optional[str]) -> bool:
    return _check_exclusive(
        conditions,
        expression,
        "Cannot specify both [Scan|Query]Filter and [Scan|Query]FilterExpression",
    )


def _context_for(request: Mapping[str, Any]) -> ExpressionContext:
    names = request.get(_NAMES)
    values = request.get(_VALUES)
    return ExpressionContext(
        names=dict(names) if names is not None else None,
        values=dict(values) if values is not None else None,
    )


def _store_context(request: Request, context: ExpressionContext) -> None:
    for key, mapping in ((_NAMES, context.names), (_VALUES, context.values)):
        if mapping is None:
            request.pop(key, None)
        else:
            request[key] = mapping


def _separator(operator: Optional[str]) -> str:
    return f" {(operator or 'AND').strip()} "


def _projection(context: ExpressionContext, attributes: Sequence[Optional[str]]) -> str:
    return ",".join(context.add_name(a) for a in attributes if a)


def _expected_expression(
    context: ExpressionContext, operator: Optional[str], expected: Mapping[str, Any]
) -> str:
    return _separator(operator).join(
        expected_condition(context, attribute, entry) for attribute, entry in expected.items()
    )


def _filter_expression(
    context: ExpressionContext,
    operator: Optional[str],
    conditions: Mapping[str, Any],
    key_condition: bool,
) -> str:
    return _separator(operator).join(
        filter_condition(context, attribute, condition, key_condition)
        for attribute, condition in conditions.items()
    )


def _update_expression(context: ExpressionContext, updates: Mapping[str, Any]) -> str:
    sets: list[str] = []
    adds: list[str] = []
    deletes: list[str] = []
    removes: list[str] = []

    for attribute, update in updates.items():
        if update is None:
            continue
        action = update.get("Action") or _ACTION_PUT
        value = update.get("Value")
        if value is None and action != _ACTION_DELETE:
            raise _validation_error(
                "only DELETE action is allowed when no attribute value is specified"
            )
        name = context.add_name(attribute)
        placeholder = context.add_value(value) if value is not None else ""

        if action == _ACTION_PUT:
            sets.append(f"{name}={placeholder}")
        elif action == _ACTION_ADD:
            adds.append(f"{name} {placeholder}")
        elif action == _ACTION_DELETE:
            if placeholder:
                deletes.append(f"{name} {placeholder}")
            else:
                removes.append(name)
        else:
            raise _validation_error(f"unknown AttributeValueUpdate Action: {action}")

    clauses = [
        f"{keyword} {','.join(parts)}"
        for keyword, parts in (
            ("set", sets),
            ("add", adds),
            ("delete", deletes),
            ("remove", removes),
        )
        if parts
    ]
    return " ".join(clauses)


def _apply_expected(result: Request, context: ExpressionContext) -> None:
    result["ConditionExpression"] = _expected_expression(
        context, result.get("ConditionalOperator"), result["Expected"]
    )
    result.pop("ConditionalOperator", None)
    result.pop("Expected", None)


def _apply_projection(result: Request, context: ExpressionContext) -> None:
    result["ProjectionExpression"] = _projection(context, result["AttributesToGet"])
    result.pop("AttributesToGet", None)


def _apply_filter(result: Request, context: ExpressionContext, legacy_key: str) -> None:
    result["FilterExpression"] = _filter_expression(
        context, result.get("ConditionalOperator"), result[legacy_key], False
    )
    result.pop("ConditionalOperator", None)
    result.pop(legacy_key, None)


def translate_legacy_get_item_input(request: Mapping[str, Any]) -> Request:
    """Replace AttributesToGet with a ProjectionExpression."""
    result = dict(request)
    if not _has_attributes_to_get(result):
        return result
    context = _context_for(result)
    _apply_projection(result, context)
    _store_context(result, context)
    return result


def translate_legacy_put_item_input(request: Mapping[str, Any]) -> Request:
    """Replace Expected and ConditionalOperator with a ConditionExpression."""
    result = dict(request)
    if not _has_expected(result):
        return result
    context = _context_for(result)
    _apply_expected(result, context)
    _store_context(result, context)
    return result


def translate_legacy_delete_item_input(request: Mapping[str, Any]) -> Request:
    """Replace Expected and ConditionalOperator with a ConditionExpression."""
    return translate_legacy_put_item_input(request)


def translate_legacy_update_item_input(request: Mapping[str, Any]) -> Request:
    """Replace Expected and AttributeUpdates with condition and update expressions."""
    result = dict(request)
    has_condition = _has_expected(result)
    has_updates = _has_attribute_updates(result)
    if not has_condition and not has_updates:
        return result
    context = _context_for(result)
    if has_condition:
        _apply_expected(result, context)
    if has_updates:
        result["UpdateExpression"] = _update_expression(context, result["AttributeUpdates"])
        result.pop("AttributeUpdates", None)
    _store_context(result, context)
    return result


def translate_legacy_scan_input(request: Mapping[str, Any]) -> Request:
    """Replace AttributesToGet and ScanFilter with projection and filter expressions."""
    result = dict(request)
    has_projection = _has_attributes_to_get(result)
    has_filter = _has_filter(result.get("ScanFilter"), result.get("FilterExpression"))
    if not has_projection and not has_filter:
        return result
    context = _context_for(result)
    if has_projection:
        _apply_projection(result, context)
    if has_filter:
        _apply_filter(result, context, "ScanFilter")
    _store_context(result, context)
    return result


def translate_legacy_query_input(request: Mapping[str, Any]) -> Request:
    """Replace AttributesToGet, QueryFilter and KeyConditions with expressions."""
    result = dict(request)
    has_projection = _has_attributes_to_get(result)
    has_filter = _has_filter(result.get("QueryFilter"), result.get("FilterExpression"))
    has_keys = _has_filter(result.get("KeyConditions"), result.get("KeyConditionExpression"))
    if not has_projection and not has_filter and not has_keys:
        return result
    context = _context_for(result)
    if has_projection:
        _apply_projection(result, context)
    if has_filter:
        _apply_filter(result, context, "QueryFilter")
    if has_keys:
        result["KeyConditionExpression"] = _filter_expression(
            context, "AND", result["KeyConditions"], True
        )
        result.pop("KeyConditions", None)
    _store_context(result, context)
    return result


def translate_legacy_batch_get_item_input(request: Mapping[str, Any]) -> Request:
    """Add a ProjectionExpression for every table that lists AttributesToGet."""
    result = dict(request)
    request_items = result.get("RequestItems")
    if not request_items:
        return result

    translated: dict[str, Any] = {}
    for table, keys_and_attributes in request_items.items():
        if keys_and_attributes is None or not _has_attributes_to_get(keys_and_attributes):
            translated[table] = keys_and_attributes
            continue
        entry = dict(keys_and_attributes)
        context = _context_for(entry)
        entry["ProjectionExpression"] = _projection(context, entry["AttributesToGet"])
        _store_context(entry, context)
        translated[table] = entry
    result["RequestItems"] = translated
    return result


__all__ = [
    "translate_legacy_batch_get_item_input",
    "translate_legacy_delete_item_input",
    "translate_legacy_get_item_input",
    "translate_legacy_put_item_input",
    "translate_legacy_query_input",
    "translate_legacy_scan_input",
    "translate_legacy_update_item_input",
]