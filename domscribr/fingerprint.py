"""Fingerprints - stable identity strings for message elements.

Explicit ids win. Otherwise the fingerprint is a content hash:

    hash:<hex>:<len(trimmed)>:<TAG>

where ``<hex>`` is a signed 32-bit ``h = h*31 + c`` rolling hash over
``role::trimmed`` and lengths count UTF-16 code units, so fingerprints
match those produced by browser-side capture of the same content.
"""

from __future__ import annotations

from .classifier import infer_role
from .node import NodeLike

ID_ATTRIBUTES = ("data-message-id", "id", "data-id", "data-uuid")

DEFAULT_TEXT_LIMIT = 200


def _utf16(value: str) -> bytes:
    return value.encode("utf-16-le", "surrogatepass")


def hash_string(value: str) -> str:
    """
    Signed 32-bit rolling hash of ``value`` as lowercase hex.

    Negative results keep their sign: ``hash_string("assistant::Hello world")``
    is ``"-1832deba"``.
    """
    h = 0
    data = _utf16(value)
    for i in range(0, len(data), 2):
        code = data[i] | (data[i + 1] << 8)
        h = ((h << 5) - h + code) & 0xFFFFFFFF
    if h & 0x80000000:
        h -= 1 << 32
    return format(h, "x")


def truncate(text: str, limit: int = DEFAULT_TEXT_LIMIT) -> str:
    """First ``limit`` UTF-16 code units of ``text``."""
    data = _utf16(text)
    if len(data) <= limit * 2:
        return text
    return data[: limit * 2].decode("utf-16-le", "surrogatepass")


def explicit_id(node: NodeLike) -> str | None:
    for name in ID_ATTRIBUTES:
        value = node.get_attribute(name)
        if value:
            return value
    return None


def fingerprint(node: NodeLike, text: str, limit: int = DEFAULT_TEXT_LIMIT) -> str:
    """Identity of ``node`` given its normalized text (or raw markup)."""
    stable = explicit_id(node)
    if stable:
        return f"id:{stable}"
    role = infer_role(node)
    trimmed = truncate(text, limit)
    length = len(_utf16(trimmed)) // 2
    return f"hash:{hash_string(f'{role.value}::{trimmed}')}:{length}:{node.tag_name}"


__all__ = [
    "ID_ATTRIBUTES",
    "DEFAULT_TEXT_LIMIT",
    "hash_string",
    "truncate",
    "explicit_id",
    "fingerprint",
]
