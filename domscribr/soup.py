"""BeautifulSoup adapter: ``NodeLike`` over parsed HTML.

Wrappers are cached per tag so the selector's identity-based dedup sees the
same wrapper for the same element no matter how it was reached.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from .node import DOCUMENT_NODE, ELEMENT_NODE, render_piece
from .schema import SourceContext


class SoupElement:
    """A BeautifulSoup ``Tag`` seen through the ``NodeLike`` protocol."""

    node_type = ELEMENT_NODE

    def __init__(self, tag: Tag, document: "SoupDocument"):
        self.tag = tag
        self._document = document

    def __repr__(self) -> str:
        return f"SoupElement(<{self.tag.name}>)"

    @property
    def tag_name(self) -> str:
        return self.tag.name.upper()

    @property
    def class_tokens(self) -> list[str]:
        value = self.tag.get("class") or []
        return value.split() if isinstance(value, str) else list(value)

    @property
    def class_name(self) -> str:
        return " ".join(self.class_tokens)

    @property
    def text_content(self) -> str:
        return _rendered_text(self.tag)

    @property
    def raw_markup(self) -> str:
        return self.tag.decode_contents()

    @property
    def children(self) -> list["SoupElement"]:
        return [self._document.wrap(c) for c in self.tag.children if isinstance(c, Tag)]

    @property
    def parent(self) -> "SoupElement | None":
        parent = self.tag.parent
        if parent is None or isinstance(parent, BeautifulSoup):
            return None
        return self._document.wrap(parent)

    def get_attribute(self, name: str) -> str | None:
        value = self.tag.get(name.lower())
        if isinstance(value, list):
            return " ".join(value)
        return value

    def has_attribute(self, name: str) -> bool:
        return self.tag.has_attr(name.lower())

    def closest(self, attribute: str) -> "SoupElement | None":
        node: SoupElement | None = self
        while node is not None:
            if node.has_attribute(attribute):
                return node
            node = node.parent
        return None


def _rendered_text(tag: Tag) -> str:
    parts = []
    for child in tag.children:
        if isinstance(child, Tag):
            parts.append(render_piece(child.name.lower(), _rendered_text(child)))
        elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
            # comments, doctypes and CDATA are not rendered
            parts.append(str(child))
    return "".join(parts)


class SoupDocument:
    """Static parsed document; harvest it with a watcher-less Harvester."""

    node_type = DOCUMENT_NODE

    def __init__(self, soup: BeautifulSoup, url: str = ""):
        self.soup = soup
        self.url = url
        self._wrappers: dict[int, SoupElement] = {}

    @property
    def title(self) -> str:
        if self.soup.title is None:
            return ""
        return self.soup.title.get_text(strip=True)

    @property
    def children(self) -> list[SoupElement]:
        return [self.wrap(c) for c in self.soup.children if isinstance(c, Tag)]

    def wrap(self, tag: Tag) -> SoupElement:
        wrapper = self._wrappers.get(id(tag))
        if wrapper is None:
            wrapper = SoupElement(tag, self)
            self._wrappers[id(tag)] = wrapper
        return wrapper

    def location(self) -> SourceContext:
        return SourceContext(url=self.url, title=self.title)


def parse_html(markup: str, url: str = "", parser: str = "html.parser") -> SoupDocument:
    return SoupDocument(BeautifulSoup(markup, parser), url=url)


__all__ = ["SoupElement", "SoupDocument", "parse_html"]
