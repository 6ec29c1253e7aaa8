"""Spawn depth resolution.

Depth counts the sub-agent levels between a session and its nearest
top-level ancestor:

- ``agent:main:main`` -> 0
- ``agent:main:subagent:a`` spawned by ``agent:main:main`` -> 1
- ``agent:main:subagent:b`` spawned by ``agent:main:subagent:a`` -> 2

Ancestry comes from an externally owned session store that may be
incomplete, stale, or cyclic. The walk is bounded by a visited set and by
ABSOLUTE_MAX_SPAWN_DEPTH, and never raises for malformed data.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Literal

from .constants import ABSOLUTE_MAX_SPAWN_DEPTH
from .models import SessionRecord
from .session_key import classify_session_key

logger = logging.getLogger(__name__)

StopReason = Literal[
    "not_nested",
    "no_store",
    "no_record",
    "cached",
    "no_parent",
    "top_level",
    "cycle",
    "depth_cap",
]

SessionStoreLike = Mapping[str, "SessionRecord | Mapping[str, Any]"]


@dataclass
class SpawnChain:
    """Result of walking a session's spawnedBy chain.

    Attributes:
        session_key: The (trimmed) key the walk started from.
        depth: Resolved spawn depth.
        stop_reason: Why the walk ended.
        ancestors: Parent keys visited, nearest first.
    """

    session_key: str
    depth: int
    stop_reason: StopReason
    ancestors: list[str] = field(default_factory=list)

    @property
    def truncated(self) -> bool:
        """True if the walk stopped at the absolute cap with chain remaining."""
        return self.stop_reason == "depth_cap"


def _spawn_depth_of(entry: Any) -> int | None:
    if isinstance(entry, SessionRecord):
        value = entry.spawn_depth
    elif isinstance(entry, Mapping):
        value = entry.get("spawnDepth", entry.get("spawn_depth"))
    else:
        return None
    # bool is an int subclass; a stray True is not a depth
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _spawned_by_of(entry: Any) -> str | None:
    if isinstance(entry, SessionRecord):
        value = entry.spawned_by
    elif isinstance(entry, Mapping):
        value = entry.get("spawnedBy", entry.get("spawned_by"))
    else:
        return None
    return value if isinstance(value, str) and value else None


def trace_spawn_chain(
    session_key: str | None,
    session_store: SessionStoreLike | None = None,
) -> SpawnChain:
    """Resolve spawn depth and record how it was reached.

    Args:
        session_key: Key of the session to resolve.
        session_store: Optional mapping of session key -> record. Entries may
            be SessionRecord instances or raw mappings with camelCase keys.

    Returns:
        SpawnChain with depth in [0, ABSOLUTE_MAX_SPAWN_DEPTH].
    """
    raw = (session_key or "").strip()
    if not classify_session_key(raw).is_nested:
        return SpawnChain(session_key=raw, depth=0, stop_reason="not_nested")

    # Without ancestry data assume a direct spawn
    if session_store is None:
        return SpawnChain(session_key=raw, depth=1, stop_reason="no_store")

    entry = session_store.get(raw)
    if entry is None:
        return SpawnChain(session_key=raw, depth=1, stop_reason="no_record")

    cached = _spawn_depth_of(entry)
    if cached is not None and cached > 0:
        # Every result, cached or walked, stays within [0, ABSOLUTE_MAX_SPAWN_DEPTH]
        if cached > ABSOLUTE_MAX_SPAWN_DEPTH:
            logger.warning(
                "Stored spawnDepth %d for %s exceeds cap, clamping to %d",
                cached,
                raw,
                ABSOLUTE_MAX_SPAWN_DEPTH,
            )
            cached = ABSOLUTE_MAX_SPAWN_DEPTH
        return SpawnChain(session_key=raw, depth=cached, stop_reason="cached")

    # The start key is not pre-seeded; a loop back to it is caught on its second visit
    visited: set[str] = set()
    ancestors: list[str] = []
    depth = 1
    current_key = _spawned_by_of(entry)

    while True:
        if current_key is None:
            stop_reason: StopReason = "no_parent"
            break
        if current_key in visited:
            logger.warning(
                "Cycle in spawnedBy chain for %s at %s (depth %d)", raw, current_key, depth
            )
            stop_reason = "cycle"
            break
        visited.add(current_key)
        ancestors.append(current_key)

        if not classify_session_key(current_key).is_nested:
            stop_reason = "top_level"
            break

        # A nested parent remains but depth cannot grow past the cap
        if depth >= ABSOLUTE_MAX_SPAWN_DEPTH:
            logger.warning(
                "Spawn chain for %s truncated at depth %d", raw, ABSOLUTE_MAX_SPAWN_DEPTH
            )
            stop_reason = "depth_cap"
            break

        depth += 1
        current_key = _spawned_by_of(session_store.get(current_key))

    logger.debug("Spawn depth for %s: %d (%s)", raw, depth, stop_reason)
    return SpawnChain(
        session_key=raw, depth=depth, stop_reason=stop_reason, ancestors=ancestors
    )


def compute_spawn_depth(
    session_key: str | None,
    session_store: SessionStoreLike | None = None,
) -> int:
    """Compute the spawn depth of a session.

    Returns 0 for top-level sessions and 1+ for sub-agent sessions. A nested
    key with no store or no record resolves to 1. A cached ``spawnDepth`` > 0
    on the record is trusted without walking the chain.

    Args:
        session_key: Key of the session to resolve.
        session_store: Optional mapping of session key -> record.

    Returns:
        Depth in [0, ABSOLUTE_MAX_SPAWN_DEPTH].
    """
    return trace_spawn_chain(session_key, session_store).depth
