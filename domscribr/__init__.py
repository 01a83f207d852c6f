"""domscribr: incremental chat transcript capture from live documents.

Harvest layer (document context):
- Predicate / Selector: find message elements in a subtree
- Classifier / Fingerprint / Builder: turn them into deduplicated records
- Harvester: start/stop state machine driven by mutation batches

Aggregation layer (background context):
- Aggregator: ordered per-context session log behind a message router
- SessionStore: persistence of that log
"""

__version__ = "0.1.0"

# Harvest Layer
from .node import Element, Fragment, NodeLike, TextNode, h
from .document import Document, MutationRecord, Watcher
from .predicate import is_message_element
from .selector import collect_candidates
from .classifier import infer_role
from .fingerprint import fingerprint, hash_string
from .builder import DedupState, build_message, normalize_text
from .harvester import Harvester, HarvesterState
from .agent import ContentAgent

# Aggregation Layer
from .aggregator import Aggregator
from .store import JsonSessionStore, MemorySessionStore, SessionStore, SessionStoreError
from .transport import LocalCommandSink, LocalTransport, Transport, TransportError

# Types & Config
from .schema import MessageRecord, Role, Session, SessionStatus, SourceContext
from .config import ScribrConfig, default_config

__all__ = [
    # Harvest
    "Element",
    "Fragment",
    "NodeLike",
    "TextNode",
    "h",
    "Document",
    "MutationRecord",
    "Watcher",
    "is_message_element",
    "collect_candidates",
    "infer_role",
    "fingerprint",
    "hash_string",
    "DedupState",
    "build_message",
    "normalize_text",
    "Harvester",
    "HarvesterState",
    "ContentAgent",
    # Aggregation
    "Aggregator",
    "JsonSessionStore",
    "MemorySessionStore",
    "SessionStore",
    "SessionStoreError",
    "LocalCommandSink",
    "LocalTransport",
    "Transport",
    "TransportError",
    # Types & Config
    "MessageRecord",
    "Role",
    "Session",
    "SessionStatus",
    "SourceContext",
    "ScribrConfig",
    "default_config",
]
