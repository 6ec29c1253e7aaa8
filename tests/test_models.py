"""Tests for config and record models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from amplifier_spawn_policy.depth import compute_spawn_depth
from amplifier_spawn_policy.exceptions import ConfigValidationError
from amplifier_spawn_policy.exceptions import SpawnPolicyError
from amplifier_spawn_policy.models import NestedToolsConfig
from amplifier_spawn_policy.models import SessionRecord
from amplifier_spawn_policy.models import SpawnDecision
from amplifier_spawn_policy.models import SpawnPolicyConfig


class TestSpawnPolicyConfig:
    """Tests for SpawnPolicyConfig parsing."""

    def test_camel_and_snake_case_equivalent(self) -> None:
        camel = SpawnPolicyConfig.from_dict(
            {"agents": {"defaults": {"subagents": {"allowNestedSpawn": True, "maxSpawnDepth": 3}}}}
        )
        snake = SpawnPolicyConfig.from_dict(
            {"agents": {"defaults": {"subagents": {"allow_nested_spawn": True, "max_spawn_depth": 3}}}}
        )
        assert camel == snake

    def test_agent_list_alias(self) -> None:
        cfg = SpawnPolicyConfig.from_dict({"agents": {"list": [{"id": "a"}, {"id": "b"}]}})
        assert [entry.id for entry in cfg.agents.entries] == ["a", "b"]

    def test_none_and_empty(self) -> None:
        assert SpawnPolicyConfig.from_dict(None).agents is None
        assert SpawnPolicyConfig.from_dict({}).agents is None

    def test_unrelated_sections_preserved(self) -> None:
        """Other runtime config sections pass through untouched."""
        cfg = SpawnPolicyConfig.from_dict({"gateway": {"port": 8080}, "agents": {}})
        assert cfg.to_dict()["gateway"] == {"port": 8080}

    def test_invalid_structure_raises(self) -> None:
        with pytest.raises(ConfigValidationError, match="Invalid spawn policy config"):
            SpawnPolicyConfig.from_dict({"agents": {"list": [{"subagents": {}}]}})

    def test_invalid_scalar_raises(self) -> None:
        with pytest.raises(SpawnPolicyError):
            SpawnPolicyConfig.from_dict(
                {"agents": {"defaults": {"subagents": {"maxSpawnDepth": "deep"}}}}
            )

    def test_to_dict_round_trips_camel_case(self) -> None:
        data = {
            "agents": {
                "defaults": {"subagents": {"allowNestedSpawn": True}},
                "list": [{"id": "x", "subagents": {"nestedTools": {"deny": ["exec"]}}}],
            }
        }
        assert SpawnPolicyConfig.from_dict(data).to_dict() == data


class TestNestedToolsConfig:
    """Tests for NestedToolsConfig list sanitizing."""

    def test_valid_lists_kept(self) -> None:
        tools = NestedToolsConfig.model_validate({"allow": ["read"], "deny": []})
        assert tools.allow == ["read"]
        assert tools.deny == []

    def test_malformed_lists_dropped(self, caplog) -> None:
        tools = NestedToolsConfig.model_validate({"allow": "read", "deny": {"exec": True}})
        assert tools.allow is None
        assert tools.deny is None
        assert "malformed nestedTools" in caplog.text

    def test_non_string_items_dropped(self) -> None:
        assert NestedToolsConfig.model_validate({"deny": ["exec", None]}).deny is None


class TestSessionRecord:
    """Tests for SessionRecord."""

    def test_camel_case_keys(self) -> None:
        record = SessionRecord.model_validate(
            {"sessionId": "s1", "updatedAt": 1, "spawnDepth": 2, "spawnedBy": "agent:main:main"}
        )
        assert record.session_id == "s1"
        assert record.spawn_depth == 2
        assert record.spawned_by == "agent:main:main"

    def test_optional_fields(self) -> None:
        record = SessionRecord(session_id="s1")
        assert record.spawn_depth is None
        assert record.spawned_by is None

    def test_session_id_and_timestamp_not_required(self) -> None:
        record = SessionRecord.model_validate(
            {"updatedAt": "2024-06-10T00:00:00Z", "spawnedBy": "agent:main:main"}
        )
        assert record.session_id is None
        assert record.updated_at == "2024-06-10T00:00:00Z"
        assert record.spawned_by == "agent:main:main"

    def test_unusable_ancestry_values_become_none(self) -> None:
        """Bad spawnDepth/spawnedBy values read as absent, as with raw mappings."""
        for depth in (True, "3", 2.5):
            assert SessionRecord.model_validate({"spawnDepth": depth}).spawn_depth is None
        assert SessionRecord.model_validate({"spawnedBy": 42}).spawned_by is None
        assert SessionRecord.model_validate({"spawnedBy": ""}).spawned_by is None

    def test_bool_depth_matches_raw_mapping(self) -> None:
        raw = {"sessionId": "s1", "spawnDepth": True}
        assert compute_spawn_depth("subagent:a", {"subagent:a": raw}) == 1
        assert compute_spawn_depth(
            "subagent:a", {"subagent:a": SessionRecord.model_validate(raw)}
        ) == 1

    def test_extra_fields_preserved(self) -> None:
        record = SessionRecord.model_validate({"sessionId": "s1", "label": "research"})
        assert record.to_dict() == {"sessionId": "s1", "label": "research"}


class TestSpawnDecision:
    """Tests for SpawnDecision."""

    def test_frozen(self) -> None:
        decision = SpawnDecision(allowed=True, current_depth=0, max_depth=10)
        with pytest.raises(ValidationError):
            decision.allowed = False
