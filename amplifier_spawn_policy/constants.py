"""Process-wide constants for spawn depth policy."""

# Depth limit applied when neither the agent nor the defaults set maxSpawnDepth.
DEFAULT_MAX_SPAWN_DEPTH = 1

# Hard ceiling for any configured or computed spawn depth.
ABSOLUTE_MAX_SPAWN_DEPTH = 10

DEFAULT_AGENT_ID = "main"

# Session keys are "agent:<id>:<rest>"; spawned sessions have rest "subagent:<id>".
AGENT_KEY_PREFIX = "agent"
SUBAGENT_MARKER = "subagent:"
