"""Thin element-access layer over lxml used by the registry parser.

Document queries are namespace-qualified XPath; child lookups below a
matched element compare local names only, whatever namespace the child
is in.
"""

from typing import Iterator, Optional, Tuple

from lxml import etree


def find_all(doc, path: str, namespace: str, prefix: str = "ovm") -> list:
    """Return the elements matching a prefixed XPath, in document order."""
    if doc is None or not namespace:
        return []
    root = doc.getroot() if isinstance(doc, etree._ElementTree) else doc
    if root is None:
        return []
    return root.xpath(path, namespaces={prefix: namespace})


def child_elements(elem: etree._Element) -> Iterator[Tuple[str, etree._Element]]:
    """Yield (local_name, element) for element children only.

    Comments, processing instructions and entities are skipped.
    """
    for child in elem:
        if not isinstance(child.tag, str):
            continue
        yield etree.QName(child).localname, child


def first_child(elem: etree._Element, name: str) -> Optional[etree._Element]:
    for local_name, child in child_elements(elem):
        if local_name == name:
            return child
    return None


def element_text(elem: etree._Element) -> str:
    """Full text content of the element and its descendants, verbatim."""
    return "".join(elem.itertext())


def attribute(elem: etree._Element, name: str) -> Optional[str]:
    return elem.get(name)
