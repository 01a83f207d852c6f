"""Synthetic live document with batched change notifications.

``Document`` owns an element tree and records mutations made through it.
Records queue up until ``flush()``, which hands them to every subscriber as
one ordered batch, the way a mutation observer delivers its records.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Protocol, Sequence

from .node import DOCUMENT_NODE, Element, Fragment, TextNode, h
from .schema import SourceContext

logger = logging.getLogger(__name__)

CHILD_LIST = "childList"
CHARACTER_DATA = "characterData"


@dataclass(frozen=True)
class MutationRecord:
    """One changed region: nodes added under ``target``, or a text change."""

    type: str
    target: Any
    added_nodes: tuple[Any, ...] = ()


MutationBatch = Sequence[MutationRecord]
BatchCallback = Callable[[MutationBatch], None]


class Watcher(Protocol):
    """Source of mutation batches."""

    def subscribe(self, on_batch: BatchCallback) -> int:
        ...

    def unsubscribe(self, handle: int) -> None:
        ...


class Document:
    """In-memory document: ``html > body`` plus location and title."""

    node_type = DOCUMENT_NODE

    def __init__(self, url: str = "about:blank", title: str = ""):
        self.url = url
        self.title = title
        self.body = h("body")
        self.document_element = h("html", None, self.body)
        self._subscribers: dict[int, BatchCallback] = {}
        self._handles = itertools.count(1)
        self._pending: list[MutationRecord] = []

    @property
    def children(self) -> list[Element]:
        return [self.document_element]

    def location(self) -> SourceContext:
        return SourceContext(url=self.url, title=self.title)

    # -------------------------------------------------------------------------
    # Watcher
    # -------------------------------------------------------------------------

    def subscribe(self, on_batch: BatchCallback) -> int:
        handle = next(self._handles)
        self._subscribers[handle] = on_batch
        return handle

    def unsubscribe(self, handle: int) -> None:
        self._subscribers.pop(handle, None)
        if not self._subscribers:
            self._pending.clear()

    @property
    def observed(self) -> bool:
        return bool(self._subscribers)

    def flush(self) -> int:
        """
        Deliver pending records as one batch.

        Returns the number of records delivered.
        """
        if not self._pending:
            return 0
        batch = tuple(self._pending)
        self._pending.clear()
        for handle, callback in list(self._subscribers.items()):
            if handle in self._subscribers:
                callback(batch)
        logger.debug(f"Delivered {len(batch)} mutation records")
        return len(batch)

    def _record(self, record: MutationRecord) -> None:
        if self._subscribers:
            self._pending.append(record)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def append(
        self,
        node: Element | TextNode | Fragment | str,
        parent: Element | None = None,
    ) -> list[Element | TextNode]:
        """Append ``node`` under ``parent`` (default ``body``) and record it."""
        parent = parent if parent is not None else self.body
        added = parent.append(node)
        if added:
            self._record(MutationRecord(CHILD_LIST, parent, tuple(added)))
        return added

    def remove(self, node: Element | TextNode) -> None:
        parent = node.parent
        if parent is None:
            return
        parent.remove(node)
        self._record(MutationRecord(CHILD_LIST, parent))

    def set_text(self, node: TextNode, data: str) -> None:
        node.data = data
        self._record(MutationRecord(CHARACTER_DATA, node))


__all__ = [
    "CHILD_LIST",
    "CHARACTER_DATA",
    "MutationRecord",
    "MutationBatch",
    "BatchCallback",
    "Watcher",
    "Document",
]
