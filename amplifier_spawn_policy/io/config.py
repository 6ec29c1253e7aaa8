"""YAML config loading."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from ..exceptions import ConfigLoadError
from ..models import SpawnPolicyConfig

logger = logging.getLogger(__name__)


def load_spawn_policy_config(path: Path | str) -> SpawnPolicyConfig:
    """Load spawn policy config from a YAML file.

    The file uses the runtime's config shape; only the ``agents`` section is read:

        agents:
          defaults:
            subagents:
              allowNestedSpawn: true
              maxSpawnDepth: 3
          list:
            - id: researcher
              subagents:
                nestedTools:
                  deny: [exec]

    Args:
        path: Path to YAML file. An empty file yields an empty config.

    Returns:
        Parsed SpawnPolicyConfig.

    Raises:
        ConfigLoadError: If the file is missing, unreadable, invalid YAML, or
            not a mapping at the top level.
        ConfigValidationError: If the content does not match the config structure.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigLoadError(f"Config file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigLoadError(f"Cannot read config file {path}: {e}") from e

    if not isinstance(content, dict):
        raise ConfigLoadError(
            f"Config file {path} must contain a mapping, got {type(content).__name__}"
        )

    logger.debug("Loaded spawn policy config from %s", path)
    return SpawnPolicyConfig.from_dict(content)
