"""
Mutation-driven harvester.

Runs a full harvest pass when recording starts, then re-harvests only the
regions reported in each mutation batch. Dedup state survives ``stop`` and
is cleared only by the next ``start``.

States:
- IDLE -> RECORDING on start (reset dedup, full pass, subscribe)
- RECORDING -> RECORDING on each mutation batch (scoped passes)
- RECORDING -> IDLE on stop (unsubscribe)
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable

from .builder import Clock, DedupState, build_message, utc_now
from .document import CHARACTER_DATA, MutationBatch, Watcher
from .fingerprint import DEFAULT_TEXT_LIMIT
from .node import DOCUMENT_FRAGMENT_NODE, is_element
from .predicate import IGNORE_ATTRIBUTE
from .schema import MessageRecord, SourceContext
from .selector import collect_candidates

logger = logging.getLogger(__name__)

EmitCallback = Callable[[list[MessageRecord]], None]


class HarvesterState(str, Enum):
    """Recording state of a Harvester."""

    IDLE = "idle"
    RECORDING = "recording"


class Harvester:
    """
    Owns the dedup state for one document and produces record batches.

    ``document`` must expose ``location()``; ``watcher`` may be None for a
    static document, in which case ``start`` only runs the initial pass.
    """

    def __init__(
        self,
        document: Any,
        emit: EmitCallback,
        watcher: Watcher | None = None,
        clock: Clock = utc_now,
        text_limit: int = DEFAULT_TEXT_LIMIT,
        ignore_attribute: str = IGNORE_ATTRIBUTE,
    ):
        self.document = document
        self.watcher = watcher
        self.dedup = DedupState()
        self.state = HarvesterState.IDLE
        self._emit = emit
        self._clock = clock
        self._text_limit = text_limit
        self._ignore_attribute = ignore_attribute
        self._subscription: int | None = None

    @property
    def recording(self) -> bool:
        return self.state == HarvesterState.RECORDING

    def start(self) -> bool:
        """
        Begin recording.

        Returns False (and changes nothing) if already recording.
        """
        if self.recording:
            return False
        self.state = HarvesterState.RECORDING
        self.dedup.reset()
        self.harvest(self.document)
        if self.watcher is not None:
            self._subscription = self.watcher.subscribe(self.handle_mutations)
        logger.debug(f"Recording started, {self.dedup.sequence} records from initial pass")
        return True

    def stop(self) -> bool:
        """Stop observing. Dedup state is kept until the next start."""
        was_recording = self.recording
        self.state = HarvesterState.IDLE
        if self.watcher is not None and self._subscription is not None:
            self.watcher.unsubscribe(self._subscription)
        self._subscription = None
        return was_recording

    def harvest(self, root: Any) -> list[MessageRecord]:
        """
        One harvest pass over ``root``.

        Emits and returns the records built; an empty pass emits nothing.
        """
        source = self._source()
        records = []
        for node in collect_candidates(root, ignore_attribute=self._ignore_attribute):
            record = build_message(node, self.dedup, source, self._clock, self._text_limit)
            if record is not None:
                records.append(record)
        if records:
            self._emit(records)
        return records

    def handle_mutations(self, batch: MutationBatch) -> int:
        """
        Harvest every region touched by ``batch``.

        Added elements and fragments are harvested as-is; a text change
        harvests the text node's parent. Returns the number of records built.
        """
        if not self.recording:
            return 0
        count = 0
        for mutation in batch:
            for node in mutation.added_nodes:
                if is_element(node) or getattr(node, "node_type", None) == DOCUMENT_FRAGMENT_NODE:
                    count += len(self.harvest(node))
            if mutation.type == CHARACTER_DATA:
                parent = getattr(mutation.target, "parent", None)
                if parent is not None:
                    count += len(self.harvest(parent))
        return count

    def _source(self) -> SourceContext:
        location = getattr(self.document, "location", None)
        if location is None:
            return SourceContext()
        return location()


__all__ = ["EmitCallback", "HarvesterState", "Harvester"]
