"""Candidate selection over a subtree.

A fixed battery of structural queries enumerates likely message nodes
cheaply; ``is_message_element`` has the final say on admission.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable

from .node import NodeLike, is_element, iter_descendants
from .predicate import IGNORE_ATTRIBUTE, is_message_element


@dataclass(frozen=True)
class Query:
    """One structural query; ``selector`` is its CSS spelling, for display."""

    selector: str
    match: Callable[[NodeLike], bool]


def has_attribute(name: str) -> Query:
    return Query(f"[{name}]", lambda node: node.has_attribute(name))


def attribute_contains(name: str, needle: str) -> Query:
    needle = needle.lower()

    def match(node: NodeLike) -> bool:
        value = node.get_attribute(name)
        return value is not None and needle in value.lower()

    return Query(f'[{name}*="{needle}" i]', match)


def tag(name: str) -> Query:
    name = name.upper()
    return Query(name.lower(), lambda node: node.tag_name == name)


def class_token(name: str) -> Query:
    return Query(f".{name}", lambda node: name in node.class_tokens)


MESSAGE_QUERIES: tuple[Query, ...] = (
    has_attribute("data-message-author-role"),
    has_attribute("data-message-id"),
    attribute_contains("data-testid", "message"),
    tag("cib-chat-turn"),
    tag("cib-message"),
    tag("article"),
    class_token("chat-message"),
    class_token("message"),
    class_token("conversation-turn"),
    class_token("response"),
    class_token("prompt"),
)


def unique_nodes(nodes: Iterable[Any]) -> list[Any]:
    """De-duplicate by identity, keeping first-seen order."""
    seen: set[int] = set()
    result = []
    for node in nodes:
        if not is_element(node) or id(node) in seen:
            continue
        seen.add(id(node))
        result.append(node)
    return result


def collect_candidates(
    root: Any,
    queries: Iterable[Query] = MESSAGE_QUERIES,
    ignore_attribute: str = IGNORE_ATTRIBUTE,
) -> list[NodeLike]:
    """
    Find message elements in ``root`` (itself included).

    ``root`` may be a document, fragment or element; anything without
    children (text nodes, None) yields nothing beyond the root check.
    """
    matches = []
    if is_message_element(root, ignore_attribute):
        matches.append(root)
    if getattr(root, "children", None):
        descendants = list(iter_descendants(root))
        for query in queries:
            for node in descendants:
                if query.match(node) and is_message_element(node, ignore_attribute):
                    matches.append(node)
    return unique_nodes(matches)


__all__ = [
    "Query",
    "has_attribute",
    "attribute_contains",
    "tag",
    "class_token",
    "MESSAGE_QUERIES",
    "unique_nodes",
    "collect_candidates",
]
