"""Projection expressions as document paths, and rebuilding items from projected values."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from daxclient.errors import ServiceError

ERR_CODE_INVALID_PARAMETER = "InvalidParameter"

_INTEGER = re.compile(r"[+-]?[0-9]+")

AttributeValue = dict[str, Any]


@dataclass(frozen=True)
class DocumentPathElement:
    """One step of a document path: a map key (index -1) or a list index."""

    index: int = -1
    name: str = ""


@dataclass(frozen=True)
class DocumentPath:
    """A sequence of path elements addressing a nested attribute."""

    elements: tuple[DocumentPathElement, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "elements", tuple(self.elements))


def _invalid_path(path: str) -> ServiceError:
    return ServiceError(ERR_CODE_INVALID_PARAMETER, "invalid path: " + path)


def _parse_index(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"invalid list index: {text!r}")
    return int(text)


def build_projection_ordinals(
    projection_expression: Optional[str],
    expression_attribute_names: Optional[Mapping[str, str]],
) -> list[DocumentPath]:
    """Split a projection expression into one document path per comma-separated term."""
    if not projection_expression:
        return []
    return [
        build_document_path(term.strip(), expression_attribute_names)
        for term in projection_expression.split(",")
    ]


def build_document_path(
    path: str, expression_attribute_names: Optional[Mapping[str, str]]
) -> DocumentPath:
    """Parse one projection term such as ``a.#b[2].c`` into a document path."""
    names = expression_attribute_names or {}
    elements: list[DocumentPathElement] = []

    for part in path.split("."):
        idx = part.find("[")
        if idx == -1:
            elements.append(DocumentPathElement(name=names.get(part, part)))
            continue
        if idx == 0:
            raise _invalid_path(path)

        prefix = part[:idx]
        elements.append(DocumentPathElement(name=names.get(prefix, prefix)))

        while idx != -1:
            part = part[idx + 1 :]
            idx = part.find("]")
            if idx == -1:
                raise _invalid_path(path)
            elements.append(DocumentPathElement(index=_parse_index(part[:idx])))
            part = part[idx + 1 :]
            idx = part.find("[")
            if idx > 0:
                raise _invalid_path(path)

    return DocumentPath(tuple(elements))


@dataclass
class _Node:
    children: dict[DocumentPathElement, "_Node"] = field(default_factory=dict)
    value: Optional[AttributeValue] = None

    def to_attribute(self) -> AttributeValue:
        if self.value is not None:
            return self.value
        if not self.children:
            return {}
        keys = list(self.children)
        # A successful request never mixes list indexes and map keys at one level.
        if keys[0].index < 0:
            return {"M": {k.name: child.to_attribute() for k, child in self.children.items()}}
        # Lists keep the item's order, not the order of the projection expression.
        ordered = sorted(keys, key=lambda k: k.index)
        return {"L": [self.children[k].to_attribute() for k in ordered]}


class ItemBuilder:
    """Assembles an item from values addressed by document paths."""

    def __init__(self) -> None:
        self._root: Optional[_Node] = None

    def insert(self, path: DocumentPath, value: AttributeValue) -> None:
        """Place ``value`` at ``path``, creating intermediate nodes as needed."""
        if self._root is None:
            self._root = _Node()
        node = self._root
        for element in path.elements:
            node = node.children.setdefault(element, _Node())
        node.value = value

    def to_item(self) -> dict[str, AttributeValue]:
        """Return the assembled item keyed by top-level attribute name."""
        if self._root is None:
            return {}
        return {k.name: child.to_attribute() for k, child in self._root.children.items()}


def _elements(items: Iterable[DocumentPathElement]) -> DocumentPath:
    return DocumentPath(tuple(items))


__all__ = [
    "DocumentPath",
    "DocumentPathElement",
    "ItemBuilder",
    "build_document_path",
    "build_projection_ordinals",
]