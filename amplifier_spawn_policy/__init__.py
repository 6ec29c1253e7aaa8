"""
Amplifier Spawn Policy - depth and tool policy for recursive sub-agent spawning.

Pure decision functions over a parsed config and a session store snapshot:

- compute_spawn_depth: how deeply nested a session is
- is_nested_spawn_allowed: whether a session may spawn another sub-agent
- resolve_nested_tools_policy: tool allow/deny lists for deeply nested sub-agents

Decisions are reported, never enforced; callers act on them.
"""

__version__ = "0.1.0"

from .constants import ABSOLUTE_MAX_SPAWN_DEPTH
from .constants import DEFAULT_AGENT_ID
from .constants import DEFAULT_MAX_SPAWN_DEPTH
from .depth import SpawnChain
from .depth import compute_spawn_depth
from .depth import trace_spawn_chain
from .exceptions import ConfigLoadError
from .exceptions import ConfigValidationError
from .exceptions import SessionStoreLoadError
from .exceptions import SpawnPolicyError
from .io import load_session_store
from .io import load_spawn_policy_config
from .models import AgentConfig
from .models import AgentDefaults
from .models import AgentsConfig
from .models import NestedToolsConfig
from .models import SessionRecord
from .models import SpawnDecision
from .models import SpawnPolicyConfig
from .models import SubagentSettings
from .models import ToolPolicy
from .policy import NestedSpawnSettings
from .policy import clamp_spawn_depth
from .policy import is_nested_spawn_allowed
from .policy import resolve_agent_config
from .policy import resolve_nested_spawn_settings
from .policy import resolve_nested_tools_policy
from .policy import resolve_setting
from .session_key import ParsedAgentSessionKey
from .session_key import SessionKeyClass
from .session_key import classify_session_key
from .session_key import is_subagent_session_key
from .session_key import normalize_agent_id
from .session_key import parse_agent_session_key
from .session_key import resolve_agent_id_from_session_key

__all__ = [
    "ABSOLUTE_MAX_SPAWN_DEPTH",
    "DEFAULT_AGENT_ID",
    "DEFAULT_MAX_SPAWN_DEPTH",
    "AgentConfig",
    "AgentDefaults",
    "AgentsConfig",
    "ConfigLoadError",
    "ConfigValidationError",
    "NestedSpawnSettings",
    "NestedToolsConfig",
    "ParsedAgentSessionKey",
    "SessionKeyClass",
    "SessionRecord",
    "SessionStoreLoadError",
    "SpawnChain",
    "SpawnDecision",
    "SpawnPolicyConfig",
    "SpawnPolicyError",
    "SubagentSettings",
    "ToolPolicy",
    "clamp_spawn_depth",
    "classify_session_key",
    "compute_spawn_depth",
    "is_nested_spawn_allowed",
    "is_subagent_session_key",
    "load_session_store",
    "load_spawn_policy_config",
    "normalize_agent_id",
    "parse_agent_session_key",
    "resolve_agent_config",
    "resolve_agent_id_from_session_key",
    "resolve_nested_spawn_settings",
    "resolve_nested_tools_policy",
    "resolve_setting",
    "trace_spawn_chain",
]
