"""Message-element predicate: decides whether a node is a chat message candidate."""

from __future__ import annotations

import re
from typing import Any

from .node import is_element

IGNORE_ATTRIBUTE = "data-dom-scribr-ignore"

MESSAGE_ID_ATTRIBUTE = "data-message-id"
AUTHOR_ROLE_ATTRIBUTE = "data-message-author-role"

STRUCTURAL_ROLES = frozenset({"article", "listitem", "group"})

_CHAT_CLASS = re.compile(r"message|assistant|user|conversation-turn|chat-item")


def is_message_element(node: Any, ignore_attribute: str = IGNORE_ATTRIBUTE) -> bool:
    """
    Return True if ``node`` should be admitted as a message element.

    Rules, first match wins:
    1. ignore marker on the node or an ancestor -> False
    2. explicit message id or author role attribute -> True
    3. structural ``role`` of article/listitem/group -> True
    4. class name mentions a chat keyword -> True
    5. ``ARTICLE`` tag -> True
    """
    if not is_element(node):
        return False
    if node.closest(ignore_attribute) is not None:
        return False
    if node.has_attribute(MESSAGE_ID_ATTRIBUTE) or node.has_attribute(AUTHOR_ROLE_ATTRIBUTE):
        return True
    role = node.get_attribute("role")
    if role and role.lower() in STRUCTURAL_ROLES:
        return True
    if _CHAT_CLASS.search(node.class_name.lower()):
        return True
    return node.tag_name == "ARTICLE"


__all__ = [
    "IGNORE_ATTRIBUTE",
    "MESSAGE_ID_ATTRIBUTE",
    "AUTHOR_ROLE_ATTRIBUTE",
    "STRUCTURAL_ROLES",
    "is_message_element",
]
