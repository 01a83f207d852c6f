"""Role classification for message elements.

Best-effort heuristic. Precedence:
explicit role attribute > class name > aria-label > role="status" > assistant.
"""

from __future__ import annotations

from .node import NodeLike
from .schema import Role

ROLE_ATTRIBUTES = (
    "data-message-author-role",
    "data-role",
    "data-message-role",
    "data-sender",
)

_ATTRIBUTE_KEYWORDS: tuple[tuple[Role, tuple[str, ...]], ...] = (
    (Role.USER, ("user", "customer")),
    (Role.ASSISTANT, ("assistant", "bot", "ai", "model")),
    (Role.SYSTEM, ("system",)),
)

_CLASS_KEYWORDS: tuple[tuple[Role, tuple[str, ...]], ...] = (
    (Role.ASSISTANT, ("assistant", "bot", "model")),
    (Role.USER, ("user", "prompt", "sender-user")),
)

_LABEL_KEYWORDS: tuple[tuple[Role, tuple[str, ...]], ...] = (
    (Role.ASSISTANT, ("assistant", "bot")),
    (Role.USER, ("user",)),
)


def _match(value: str, table: tuple[tuple[Role, tuple[str, ...]], ...]) -> Role | None:
    value = value.lower()
    for role, keywords in table:
        if any(k in value for k in keywords):
            return role
    return None


def explicit_role(node: NodeLike) -> str | None:
    """First non-empty role-bearing attribute value."""
    for name in ROLE_ATTRIBUTES:
        value = node.get_attribute(name)
        if value:
            return value
    return None


def infer_role(node: NodeLike) -> Role:
    direct = explicit_role(node)
    if direct:
        role = _match(direct, _ATTRIBUTE_KEYWORDS)
        if role:
            return role

    role = _match(node.class_name, _CLASS_KEYWORDS)
    if role:
        return role

    role = _match(node.get_attribute("aria-label") or "", _LABEL_KEYWORDS)
    if role:
        return role

    status = node.get_attribute("role")
    if status and status.lower() == "status":
        return Role.SYSTEM

    return Role.ASSISTANT


__all__ = ["ROLE_ATTRIBUTES", "explicit_role", "infer_role"]
