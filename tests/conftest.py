"""Shared fixtures for spawn policy tests."""

from __future__ import annotations

import pytest

from amplifier_spawn_policy import SessionRecord
from amplifier_spawn_policy import SpawnPolicyConfig


def record(session_id: str, **kwargs) -> SessionRecord:
    """Build a SessionRecord with a fixed timestamp."""
    return SessionRecord(session_id=session_id, updated_at=1_700_000_000_000, **kwargs)


@pytest.fixture
def chain_store() -> dict[str, SessionRecord]:
    """Three-level chain: level-3 -> level-2 -> level-1 -> agent:main:main."""
    return {
        "agent:main:subagent:level-3": record("s3", spawned_by="agent:main:subagent:level-2"),
        "agent:main:subagent:level-2": record("s2", spawned_by="agent:main:subagent:level-1"),
        "agent:main:subagent:level-1": record("s1", spawned_by="agent:main:main"),
    }


@pytest.fixture
def nested_cfg() -> SpawnPolicyConfig:
    """Config with nested spawning on globally and one per-agent override."""
    return SpawnPolicyConfig.from_dict(
        {
            "agents": {
                "defaults": {
                    "subagents": {
                        "allowNestedSpawn": True,
                        "maxSpawnDepth": 3,
                        "nestedTools": {"deny": ["exec"]},
                    }
                },
                "list": [
                    {
                        "id": "jack-x",
                        "subagents": {
                            "maxSpawnDepth": 5,
                            "nestedTools": {"allow": ["read"], "deny": ["memory_search"]},
                        },
                    },
                    {"id": "locked", "subagents": {"allowNestedSpawn": False}},
                ],
            }
        }
    )
