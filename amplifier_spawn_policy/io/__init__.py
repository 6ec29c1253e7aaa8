"""Read-only loaders for spawn policy config and session store snapshots."""

from .config import load_spawn_policy_config
from .store import load_session_store

__all__ = ["load_spawn_policy_config", "load_session_store"]
