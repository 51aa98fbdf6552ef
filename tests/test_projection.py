import pytest

from daxclient.errors import ServiceError
from daxclient.projection import (
    DocumentPath,
    DocumentPathElement,
    ItemBuilder,
    build_document_path,
    build_projection_ordinals,
)


def name(n):
    return DocumentPathElement(name=n, index=-1)


def index(i):
    return DocumentPathElement(name="", index=i)


@pytest.mark.parametrize(
    "expression, names, expected",
    [
        ("a", None, DocumentPath((name("a"),))),
        ("a.b", None, DocumentPath((name("a"), name("b")))),
        ("a[3]", None, DocumentPath((name("a"), index(3)))),
        ("a.#s.c", {"#s": "b"}, DocumentPath((name("a"), name("b"), name("c")))),
        (
            "#a[1].#b",
            {"#a": "with.dot", "#b": "sub.field"},
            DocumentPath((name("with.dot"), index(1), name("sub.field"))),
        ),
    ],
)
def test_build_document_path(expression, names, expected):
    assert build_document_path(expression, names) == expected


def test_build_document_path_nested_indexes():
    assert build_document_path("a[1][2]", None) == DocumentPath((name("a"), index(1), index(2)))


@pytest.mark.parametrize("expression", ["[1]", "a[1", "a[1]b[2]"])
def test_build_document_path_invalid(expression):
    with pytest.raises(ServiceError) as info:
        build_document_path(expression, None)
    assert info.value.code == "InvalidParameter"
    assert info.value.message == "invalid path: " + expression


def test_build_document_path_bad_index():
    with pytest.raises(ValueError):
        build_document_path("a[x]", None)


@pytest.mark.parametrize(
    "expression, names, expected",
    [
        ("#1", {"#1": "a"}, [DocumentPath((name("a"),))]),
        (
            "#1, #2",
            {"#1": "a", "#2": "b"},
            [DocumentPath((name("a"),)), DocumentPath((name("b"),))],
        ),
    ],
)
def test_build_projection_ordinals(expression, names, expected):
    assert build_projection_ordinals(expression, names) == expected


@pytest.mark.parametrize("expression", [None, ""])
def test_build_projection_ordinals_empty(expression):
    assert build_projection_ordinals(expression, None) == []


ITEM_CASES = [
    ("a", None, {0: {"S": "av"}}, {"a": {"S": "av"}}),
    ("a,b[2],c.d", None, {}, {}),
    ("a.b", None, {0: {"S": "av"}}, {"a": {"M": {"b": {"S": "av"}}}}),
    ("a[3]", None, {0: {"S": "av"}}, {"a": {"L": [{"S": "av"}]}}),
    (
        "a[3],a[2]",
        None,
        {0: {"S": "av3"}, 1: {"S": "av2"}},
        {"a": {"L": [{"S": "av2"}, {"S": "av3"}]}},
    ),
    (
        "a[2],a[3]",
        None,
        {0: {"S": "av2"}, 1: {"S": "av3"}},
        {"a": {"L": [{"S": "av2"}, {"S": "av3"}]}},
    ),
    (
        "a[2].b.c,a[2].b.d,a[1].b.e",
        None,
        {2: {"M": {"field": {"S": "value"}}}, 0: {"N": "4"}, 1: {"N": "2"}},
        {
            "a": {
                "L": [
                    {"M": {"b": {"M": {"e": {"M": {"field": {"S": "value"}}}}}}},
                    {"M": {"b": {"M": {"c": {"N": "4"}, "d": {"N": "2"}}}}},
                ]
            }
        },
    ),
    (
        "a[4],a[2],b.c[12]",
        None,
        {2: {"L": [{"S": "elem"}]}, 0: {"N": "4"}, 1: {"N": "2"}},
        {
            "a": {"L": [{"N": "2"}, {"N": "4"}]},
            "b": {"M": {"c": {"L": [{"L": [{"S": "elem"}]}]}}},
        },
    ),
    (
        "#a[1].#b",
        {"#a": "with.dot", "#b": "sub.field"},
        {0: {"N": "4"}},
        {"with.dot": {"L": [{"M": {"sub.field": {"N": "4"}}}]}},
    ),
]


@pytest.mark.parametrize("expression, names, values, expected", ITEM_CASES)
def test_item_builder(expression, names, values, expected):
    paths = build_projection_ordinals(expression, names)
    builder = ItemBuilder()
    for ordinal, value in values.items():
        builder.insert(paths[ordinal], value)
    assert builder.to_item() == expected


def test_item_builder_empty():
    assert ItemBuilder().to_item() == {}