"""Nested spawn policy resolution.

Two decisions are made here:

- Whether a session may spawn another sub-agent (is_nested_spawn_allowed)
- Which tools a sub-agent nested two or more levels deep receives
  (resolve_nested_tools_policy)

Both read the ``subagents`` block from config. Per-agent values in
``agents.list[].subagents`` take precedence over ``agents.defaults.subagents``:

- Scalars (allowNestedSpawn, maxSpawnDepth) fall back field by field
- nestedTools is replaced wholesale, never merged list by list
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from typing import TypeVar

from .constants import ABSOLUTE_MAX_SPAWN_DEPTH
from .constants import DEFAULT_MAX_SPAWN_DEPTH
from .depth import SessionStoreLike
from .depth import compute_spawn_depth
from .models import AgentConfig
from .models import SpawnDecision
from .models import SpawnPolicyConfig
from .models import SubagentSettings
from .models import ToolPolicy
from .session_key import normalize_agent_id

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class NestedSpawnSettings:
    """Effective nested spawn settings for one agent."""

    allow_nested_spawn: bool
    max_spawn_depth: int


def resolve_setting(agent_value: T | None, default_value: T | None, hard_default: T) -> T:
    """Return the first configured value: agent override, then global default.

    None means "not set". Falsy values such as False or 0 are real settings.
    """
    if agent_value is not None:
        return agent_value
    if default_value is not None:
        return default_value
    return hard_default


def clamp_spawn_depth(value: int) -> int:
    """Clamp a configured depth limit into [1, ABSOLUTE_MAX_SPAWN_DEPTH]."""
    return min(ABSOLUTE_MAX_SPAWN_DEPTH, max(1, value))


def resolve_agent_config(cfg: SpawnPolicyConfig, agent_id: str) -> AgentConfig | None:
    """Find the override entry for an agent in ``agents.list``.

    Ids are compared after normalization, so ``Jack-X`` matches ``jack-x``.

    Args:
        cfg: Parsed config.
        agent_id: Agent identifier (normalized or not).

    Returns:
        The first matching AgentConfig, or None.
    """
    if cfg.agents is None:
        return None

    wanted = normalize_agent_id(agent_id)
    for entry in cfg.agents.entries:
        if normalize_agent_id(entry.id) == wanted:
            return entry
    return None


def _agent_subagents(cfg: SpawnPolicyConfig, agent_id: str) -> SubagentSettings | None:
    agent_config = resolve_agent_config(cfg, agent_id)
    return agent_config.subagents if agent_config else None


def _default_subagents(cfg: SpawnPolicyConfig) -> SubagentSettings | None:
    if cfg.agents is None or cfg.agents.defaults is None:
        return None
    return cfg.agents.defaults.subagents


def resolve_nested_spawn_settings(
    cfg: SpawnPolicyConfig, agent_id: str
) -> NestedSpawnSettings:
    """Resolve effective allowNestedSpawn / maxSpawnDepth for an agent.

    Args:
        cfg: Parsed config.
        agent_id: Agent identifier.

    Returns:
        NestedSpawnSettings. Nested spawning is off unless enabled, and the
        depth limit is always within [1, ABSOLUTE_MAX_SPAWN_DEPTH].
    """
    agent = _agent_subagents(cfg, agent_id)
    defaults = _default_subagents(cfg)

    allow_nested_spawn = resolve_setting(
        agent.allow_nested_spawn if agent else None,
        defaults.allow_nested_spawn if defaults else None,
        False,
    )
    max_spawn_depth = clamp_spawn_depth(
        resolve_setting(
            agent.max_spawn_depth if agent else None,
            defaults.max_spawn_depth if defaults else None,
            DEFAULT_MAX_SPAWN_DEPTH,
        )
    )

    return NestedSpawnSettings(
        allow_nested_spawn=bool(allow_nested_spawn),
        max_spawn_depth=max_spawn_depth,
    )


def is_nested_spawn_allowed(
    requester_session_key: str,
    requester_agent_id: str,
    cfg: SpawnPolicyConfig,
    session_store: SessionStoreLike | None = None,
) -> SpawnDecision:
    """Check whether the requester session may spawn a sub-agent.

    Top-level sessions may always spawn. Sub-agent sessions need
    allowNestedSpawn, and the child (current depth + 1) must not exceed the
    effective maxSpawnDepth. Denials are returned, not raised; callers decide
    how to surface them.

    Args:
        requester_session_key: Session key of the session requesting the spawn.
        requester_agent_id: Agent id of the requester (normalized here).
        cfg: Parsed config.
        session_store: Optional session store snapshot for depth resolution.

    Returns:
        SpawnDecision with the requester's depth and the applicable limit.
    """
    current_depth = compute_spawn_depth(requester_session_key, session_store)

    if current_depth == 0:
        return SpawnDecision(
            allowed=True,
            current_depth=0,
            max_depth=ABSOLUTE_MAX_SPAWN_DEPTH,
        )

    agent_id = normalize_agent_id(requester_agent_id)
    settings = resolve_nested_spawn_settings(cfg, agent_id)
    logger.debug(
        "Nested spawn settings for agent=%s: allow=%s max_depth=%d (current=%d)",
        agent_id,
        settings.allow_nested_spawn,
        settings.max_spawn_depth,
        current_depth,
    )

    if not settings.allow_nested_spawn:
        return SpawnDecision(
            allowed=False,
            reason=(
                "sessions_spawn is not allowed from sub-agent sessions "
                "(allowNestedSpawn: false)"
            ),
            current_depth=current_depth,
            max_depth=settings.max_spawn_depth,
        )

    child_depth = current_depth + 1
    if child_depth > settings.max_spawn_depth:
        return SpawnDecision(
            allowed=False,
            reason=(
                f"spawn depth limit exceeded "
                f"(current: {current_depth}, max: {settings.max_spawn_depth})"
            ),
            current_depth=current_depth,
            max_depth=settings.max_spawn_depth,
        )

    return SpawnDecision(
        allowed=True,
        current_depth=current_depth,
        max_depth=settings.max_spawn_depth,
    )


def _as_tool_list(value: Any) -> list[str] | None:
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    return None


def resolve_nested_tools_policy(
    cfg: SpawnPolicyConfig, agent_id: str, spawn_depth: int
) -> ToolPolicy | None:
    """Resolve the tool policy for a sub-agent at the given depth.

    Only sessions at depth 2 or deeper get a nested tools policy; a
    first-level sub-agent keeps the caller's ordinary tool policy.

    Args:
        cfg: Parsed config.
        agent_id: Agent id of the spawned session.
        spawn_depth: Depth the spawned session occupies.

    Returns:
        ToolPolicy from the agent's nestedTools if set, otherwise from the
        global defaults, or None if neither is configured.
    """
    if spawn_depth <= 1:
        return None

    agent = _agent_subagents(cfg, agent_id)
    defaults = _default_subagents(cfg)

    nested_tools = agent.nested_tools if agent else None
    if nested_tools is None:
        nested_tools = defaults.nested_tools if defaults else None
    if nested_tools is None:
        return None

    return ToolPolicy(
        allow=_as_tool_list(nested_tools.allow),
        deny=_as_tool_list(nested_tools.deny),
    )
