"""Node model for document trees.

Predicate, classifier, fingerprint and selector code only talks to nodes
through the ``NodeLike`` protocol below. ``Element``/``TextNode``/``Fragment``
are an in-memory tree used by the synthetic ``Document`` and by tests; the
BeautifulSoup adapter in ``domscribr.soup`` implements the same protocol.
"""

from __future__ import annotations

import html
from typing import Any, Iterator, Protocol, runtime_checkable

ELEMENT_NODE = 1
TEXT_NODE = 3
DOCUMENT_NODE = 9
DOCUMENT_FRAGMENT_NODE = 11

# Elements whose rendered text sits on its own line, as innerText lays it out.
BLOCK_TAGS = frozenset(
    {
        "address", "article", "aside", "blockquote", "dd", "details", "div", "dl", "dt",
        "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2", "h3", "h4",
        "h5", "h6", "header", "hr", "li", "main", "nav", "ol", "p", "pre", "section",
        "summary", "table", "tr", "ul",
    }
)
# Elements whose text is never rendered.
HIDDEN_TAGS = frozenset({"head", "noscript", "script", "style", "template", "title"})


def render_piece(tag: str, inner: str) -> str:
    """Wrap the rendered text of a child element the way layout would."""
    if tag in HIDDEN_TAGS:
        return ""
    if tag == "br":
        return "\n"
    if tag in BLOCK_TAGS:
        return f"\n{inner}\n"
    if tag in ("td", "th"):
        return f"{inner}\t"
    return inner


@runtime_checkable
class NodeLike(Protocol):
    """Narrow read-only view of an element node."""

    node_type: int

    @property
    def tag_name(self) -> str:
        """Upper-case tag name, e.g. ``DIV``."""
        ...

    @property
    def class_name(self) -> str:
        ...

    @property
    def class_tokens(self) -> list[str]:
        ...

    @property
    def text_content(self) -> str:
        """Rendered text of the node and its descendants."""
        ...

    @property
    def raw_markup(self) -> str:
        """Serialized inner markup."""
        ...

    @property
    def children(self) -> list["NodeLike"]:
        """Element children only, in document order."""
        ...

    @property
    def parent(self) -> "NodeLike | None":
        ...

    def get_attribute(self, name: str) -> str | None:
        ...

    def has_attribute(self, name: str) -> bool:
        ...

    def closest(self, attribute: str) -> "NodeLike | None":
        """Nearest ancestor-or-self carrying ``attribute``."""
        ...


def is_element(node: Any) -> bool:
    return getattr(node, "node_type", None) == ELEMENT_NODE


def iter_descendants(root: Any) -> Iterator[NodeLike]:
    """Yield element descendants of ``root`` in document order (root excluded)."""
    stack = list(reversed(getattr(root, "children", None) or []))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


class TextNode:
    """A text leaf. Its ``parent`` is the element that holds it."""

    node_type = TEXT_NODE

    def __init__(self, data: str = "", parent: "Element | Fragment | None" = None):
        self.data = data
        self.parent = parent

    def __repr__(self) -> str:
        return f"TextNode({self.data!r})"


class _Container:
    """Shared child-list handling for elements and fragments."""

    def __init__(self) -> None:
        self.child_nodes: list[Element | TextNode] = []

    def append(self, node: "Element | TextNode | Fragment | str") -> list["Element | TextNode"]:
        """
        Append a node, string or fragment.

        Returns the nodes actually inserted. A fragment is emptied into this
        container, like a DOM ``DocumentFragment``.
        """
        if isinstance(node, str):
            node = TextNode(node)
        if isinstance(node, Fragment):
            moved = list(node.child_nodes)
            node.child_nodes.clear()
            for child in moved:
                child.parent = self
                self.child_nodes.append(child)
            return moved
        if node.parent is not None:
            node.parent.remove(node)
        node.parent = self
        self.child_nodes.append(node)
        return [node]

    def remove(self, node: "Element | TextNode") -> None:
        self.child_nodes.remove(node)
        node.parent = None

    @property
    def children(self) -> list["Element"]:
        return [c for c in self.child_nodes if c.node_type == ELEMENT_NODE]

    @property
    def text_content(self) -> str:
        """Inline text runs together; block children get line breaks."""
        parts = []
        for child in self.child_nodes:
            if child.node_type == TEXT_NODE:
                parts.append(child.data)
            else:
                parts.append(render_piece(child.tag, child.text_content))
        return "".join(parts)

    @property
    def raw_markup(self) -> str:
        return "".join(_serialize(child) for child in self.child_nodes)


class Element(_Container):
    """In-memory element implementing ``NodeLike``."""

    node_type = ELEMENT_NODE

    def __init__(self, tag: str, attrs: dict[str, str] | None = None):
        super().__init__()
        self.tag = tag.lower()
        self.attrs = {k.lower(): v for k, v in (attrs or {}).items()}
        self.parent: Element | Fragment | None = None

    def __repr__(self) -> str:
        return f"Element({self.tag!r}, {self.attrs!r})"

    @property
    def tag_name(self) -> str:
        return self.tag.upper()

    @property
    def class_name(self) -> str:
        return self.attrs.get("class", "")

    @property
    def class_tokens(self) -> list[str]:
        return self.class_name.split()

    def get_attribute(self, name: str) -> str | None:
        return self.attrs.get(name.lower())

    def has_attribute(self, name: str) -> bool:
        return name.lower() in self.attrs

    def set_attribute(self, name: str, value: str) -> None:
        self.attrs[name.lower()] = value

    def closest(self, attribute: str) -> "Element | None":
        node: Any = self
        while is_element(node):
            if node.has_attribute(attribute):
                return node
            node = node.parent
        return None


class Fragment(_Container):
    """Parentless container for nodes inserted together."""

    node_type = DOCUMENT_FRAGMENT_NODE
    parent = None

    def __init__(self, *nodes: "Element | TextNode | str"):
        super().__init__()
        for node in nodes:
            self.append(node)


def h(tag: str, attrs: dict[str, str] | None = None, *children: "Element | TextNode | str") -> Element:
    """Build an element tree: ``h("div", {"class": "message"}, "Hi")``."""
    element = Element(tag, attrs)
    for child in children:
        element.append(child)
    return element


def _serialize(node: Element | TextNode) -> str:
    if node.node_type == TEXT_NODE:
        return html.escape(node.data, quote=False)
    attrs = "".join(f' {k}="{html.escape(v)}"' for k, v in node.attrs.items())
    return f"<{node.tag}{attrs}>{node.raw_markup}</{node.tag}>"


__all__ = [
    "ELEMENT_NODE",
    "TEXT_NODE",
    "DOCUMENT_NODE",
    "DOCUMENT_FRAGMENT_NODE",
    "BLOCK_TAGS",
    "HIDDEN_TAGS",
    "render_piece",
    "NodeLike",
    "is_element",
    "iter_descendants",
    "TextNode",
    "Element",
    "Fragment",
    "h",
]
