# ABOUTME: XML parsing capability for package documents, containers, and TOCs.
# ABOUTME: Wraps lxml behind a small protocol so tests can inject their own parser.

from collections.abc import Iterator
from typing import Protocol, runtime_checkable

from lxml import etree


class MalformedXml(ValueError):
    """Raised when a document cannot be turned into an element tree."""


@runtime_checkable
class XmlParser(Protocol):
    """Protocol for turning raw XML bytes into an lxml-compatible element."""

    def parse(self, data: bytes) -> etree._Element: ...


class LxmlParser:
    """Default parser: lxml in recover mode with entities and network disabled.

    Recover mode tolerates the small well-formedness errors common in
    real-world EPUBs. Input that yields no root element at all still raises
    MalformedXml.
    """

    def __init__(self, *, recover: bool = True) -> None:
        self._parser = etree.XMLParser(
            recover=recover,
            resolve_entities=False,
            no_network=True,
            remove_blank_text=False,
        )

    def parse(self, data: bytes) -> etree._Element:
        try:
            root = etree.fromstring(data, parser=self._parser)
        except etree.XMLSyntaxError as exc:
            raise MalformedXml(str(exc)) from exc
        if root is None:
            raise MalformedXml("document has no root element")
        return root


def local_name(tag: object) -> str:
    """Tag name without its namespace; empty for comments and PIs."""
    if not isinstance(tag, str):
        return ""
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


def iter_children(node: etree._Element, name: str) -> Iterator[etree._Element]:
    """Direct children whose local name matches, in document order."""
    for child in node:
        if local_name(child.tag) == name:
            yield child


def find_child(node: etree._Element, name: str) -> etree._Element | None:
    """First direct child with the given local name."""
    return next(iter_children(node, name), None)


def find_descendants(node: etree._Element, name: str) -> list[etree._Element]:
    """All descendants with the given local name, in document order."""
    return [el for el in node.iter() if local_name(el.tag) == name]


def get_attribute(node: etree._Element, name: str) -> str | None:
    """Attribute value matched on local name, so prefixed attributes are found too."""
    for key, value in node.attrib.items():
        if local_name(key) == name:
            return value
    return None
