import pytest

from daxclient.conditions import (
    ExpressionContext,
    attribute_type_name,
    comparison_condition,
    expected_condition,
    filter_condition,
)
from daxclient.errors import ServiceError

N5 = {"N": "5"}
N6 = {"N": "6"}
ABC = {"S": "abc"}


def test_add_name_numbers_placeholders_in_order():
    ctx = ExpressionContext()
    assert ctx.add_name("a1") == "#key0"
    assert ctx.add_name("a2") == "#key1"
    assert ctx.names == {"#key0": "a1", "#key1": "a2"}


def test_add_name_empty_registers_nothing():
    ctx = ExpressionContext()
    assert ctx.add_name("") == ""
    assert ctx.names is None


def test_add_value_numbers_placeholders():
    ctx = ExpressionContext()
    assert ctx.add_value(N5) == ":val0"
    assert ctx.add_value(N6) == ":val1"
    assert ctx.values == {":val0": N5, ":val1": N6}


def test_add_name_skips_taken_placeholder():
    ctx = ExpressionContext(names={"#key1": "x"})
    placeholder = ctx.add_name("y")
    assert placeholder != "#key1"
    assert ctx.names["#key1"] == "x"
    assert ctx.names[placeholder] == "y"
    assert len(ctx.names) == 2


def test_expected_exists_with_value():
    ctx = ExpressionContext()
    expr = expected_condition(ctx, "a", {"Exists": True, "Value": N5})
    assert expr == "#key0 = :val0"
    assert ctx.names == {"#key0": "a"}
    assert ctx.values == {":val0": N5}


def test_expected_not_exists():
    ctx = ExpressionContext()
    assert expected_condition(ctx, "a", {"Exists": False}) == "attribute_not_exists(#key0)"
    assert ctx.values is None


def test_expected_none_is_empty():
    ctx = ExpressionContext()
    assert expected_condition(ctx, "a", None) == ""
    assert ctx.names is None


@pytest.mark.parametrize(
    "expected, expression",
    [
        (
            {"ComparisonOperator": "BETWEEN", "AttributeValueList": [N5, N6]},
            "#key0 between :val0 and :val1",
        ),
        ({"ComparisonOperator": "BEGINS_WITH", "AttributeValueList": [ABC]}, "begins_with(#key0,:val0)"),
        ({"ComparisonOperator": "CONTAINS", "AttributeValueList": [ABC]}, "contains(#key0,:val0)"),
        ({"ComparisonOperator": "NOT_CONTAINS", "AttributeValueList": [ABC]}, "not contains(#key0,:val0)"),
        ({"ComparisonOperator": "NULL"}, "attribute_not_exists(#key0)"),
        ({"ComparisonOperator": "NOT_NULL"}, "attribute_exists(#key0)"),
        (
            {"ComparisonOperator": "IN", "AttributeValueList": [ABC, {"S": "def"}, {"S": "ghi"}]},
            "#key0 in (:val0,:val1,:val2)",
        ),
        ({"ComparisonOperator": "NE", "AttributeValueList": [ABC]}, "#key0 <> :val0"),
        ({"ComparisonOperator": "EQ", "AttributeValueList": [ABC]}, "#key0 = :val0"),
        ({"ComparisonOperator": "LE", "AttributeValueList": [ABC]}, "#key0 <= :val0"),
        ({"ComparisonOperator": "GE", "AttributeValueList": [N5]}, "#key0 >= :val0"),
    ],
)
def test_expected_comparisons(expected, expression):
    ctx = ExpressionContext()
    assert expected_condition(ctx, "a", expected) == expression
    assert ctx.names == {"#key0": "a"}
    registered = list((ctx.values or {}).values())
    assert registered == list(expected.get("AttributeValueList", []))


def test_expected_single_value_used_with_operator():
    ctx = ExpressionContext()
    assert expected_condition(ctx, "a", {"ComparisonOperator": "EQ", "Value": ABC}) == "#key0 = :val0"
    assert ctx.values == {":val0": ABC}


@pytest.mark.parametrize(
    "expected, message",
    [
        (
            {"Value": N5, "AttributeValueList": [N5]},
            "One or more parameter values were invalid: Value and AttributeValueList cannot be used together for Attribute: a",
        ),
        (
            {"AttributeValueList": [N5]},
            "One or more parameter values were invalid: AttributeValueList can only be used with a ComparisonOperator for Attribute: a",
        ),
        (
            {"Exists": True},
            "One or more parameter values were invalid: Value must be provided when Exists is true for Attribute: a",
        ),
        (
            {},
            "One or more parameter values were invalid: Value must be provided when Exists is nil for Attribute: a",
        ),
        (
            {"Exists": False, "Value": N5},
            "One or more parameter values were invalid: Value cannot be used when Exists is false for Attribute: a",
        ),
        (
            {"ComparisonOperator": "BETWEEN", "AttributeValueList": [N5, {"NULL": True}]},
            "One or more parameter values were invalid: ComparisonOperator BETWEEN is not valid for NULL AttributeValue type",
        ),
        (
            {"Exists": True, "ComparisonOperator": "EQ", "Value": N5},
            "One or more parameter values were invalid: Exists and ComparisonOperator cannot be used together for Attribute: a",
        ),
    ],
)
def test_expected_errors(expected, message):
    ctx = ExpressionContext()
    with pytest.raises(ServiceError) as info:
        expected_condition(ctx, "a", expected)
    assert info.value.code == "ValidationException"
    assert info.value.message == message
    assert ctx.names is None
    assert ctx.values is None


def test_filter_condition_without_operator():
    with pytest.raises(ServiceError) as info:
        filter_condition(ExpressionContext(), "a", {}, False)
    assert info.value.message == (
        "One or more parameter values were invalid: AttributeValueList can only be used "
        "with a ComparisonOperator for Attribute: a"
    )


def test_filter_condition_contains_rejected_for_key():
    cond = {"ComparisonOperator": "CONTAINS", "AttributeValueList": [N5]}
    with pytest.raises(ServiceError) as info:
        filter_condition(ExpressionContext(), "a", cond, True)
    assert info.value.message == "Unsupported operator on KeyCondition: CONTAINS"


def test_filter_condition_none():
    ctx = ExpressionContext()
    assert filter_condition(ctx, "a", None, False) == ""
    with pytest.raises(ServiceError) as info:
        filter_condition(ctx, "k", None, True)
    assert info.value.message == "KeyCondition cannot be nil for key: k"


def test_filter_condition_key_eq():
    ctx = ExpressionContext()
    cond = {"ComparisonOperator": "EQ", "AttributeValueList": [ABC]}
    assert filter_condition(ctx, "k", cond, True) == "#key0 = :val0"
    assert ctx.names == {"#key0": "k"}


def test_unknown_operator():
    with pytest.raises(ServiceError) as info:
        comparison_condition(ExpressionContext(), "a", "FOO", [N5], False)
    assert info.value.message == "Unknown comparison operator: FOO"


def test_between_wrong_argument_count():
    with pytest.raises(ServiceError) as info:
        comparison_condition(ExpressionContext(), "a", "BETWEEN", [N5], False)
    assert info.value.message == (
        "One or more parameter values were invalid: Invalid number of argument(s) "
        "for the BETWEEN ComparisonOperator"
    )


def test_in_without_values():
    with pytest.raises(ServiceError) as none_info:
        comparison_condition(ExpressionContext(), "a", "IN", None, False)
    assert none_info.value.message == (
        "One or more parameter values were invalid: AttributeValueList must be used "
        "with ComparisonOperator: IN for Attribute: a"
    )
    with pytest.raises(ServiceError) as empty_info:
        comparison_condition(ExpressionContext(), "a", "IN", [], False)
    assert empty_info.value.message == (
        "One or more parameter values were invalid: Invalid number of argument(s)0 "
        "for the IN ComparisonOperator"
    )


def test_eq_allows_non_scalar_value():
    ctx = ExpressionContext()
    value = {"NULL": True}
    assert comparison_condition(ctx, "a", "EQ", [value], False) == "#key0 = :val0"
    assert ctx.values == {":val0": value}


@pytest.mark.parametrize(
    "value, name",
    [
        ({"S": "x"}, "S"),
        ({"N": "1"}, "N"),
        ({"B": b"x"}, "B"),
        ({"SS": ["x"]}, "SS"),
        ({"M": {"k": {"S": "v"}}}, "M"),
        ({"L": [{"S": "v"}]}, "L"),
        ({"BOOL": False}, "BOOL"),
        ({"NULL": True}, "NULL"),
        ({"SS": []}, ""),
        ({}, ""),
    ],
)
def test_attribute_type_name(value, name):
    assert attribute_type_name(value) == name