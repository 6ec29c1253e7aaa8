"""
Data models for spawn policy.
Uses Pydantic for validation and serialization.

Config and record models accept the runtime's camelCase keys
(``allowNestedSpawn``, ``spawnedBy``) as well as snake_case field names.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationError
from pydantic import field_validator
from pydantic.alias_generators import to_camel

from .exceptions import ConfigValidationError

logger = logging.getLogger(__name__)


class _CamelModel(BaseModel):
    """Base for models loaded from runtime config / session records."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_dict(self) -> dict[str, Any]:
        """Dump with camelCase keys, omitting unset values."""
        return self.model_dump(by_alias=True, exclude_none=True)


class SessionRecord(_CamelModel):
    """One entry of the session store, keyed by session key.

    Records are written by the surrounding runtime; this package only reads them.
    Only ``spawnDepth`` and ``spawnedBy`` feed depth resolution, so the other
    fields are taken as-is and unusable ancestry values degrade to None
    instead of rejecting the record.
    """

    session_id: str | None = Field(default=None, description="Underlying execution session id")
    updated_at: Any = Field(default=None, description="Last write timestamp (not used for depth)")
    spawn_depth: int | None = Field(
        default=None, description="Cached nesting depth; authoritative when > 0"
    )
    spawned_by: str | None = Field(
        default=None, description="Session key of the parent session"
    )

    @field_validator("spawn_depth", mode="before")
    @classmethod
    def _ignore_non_int_depth(cls, value: Any) -> Any:
        # bool is an int subclass; a stray True is not a depth
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        return value

    @field_validator("spawned_by", mode="before")
    @classmethod
    def _ignore_non_str_parent(cls, value: Any) -> Any:
        return value if isinstance(value, str) and value else None


class NestedToolsConfig(_CamelModel):
    """Tool allow/deny lists applied to sessions nested two or more levels deep."""

    allow: list[str] | None = None
    deny: list[str] | None = None

    @field_validator("allow", "deny", mode="before")
    @classmethod
    def _drop_malformed_list(cls, value: Any) -> Any:
        # Malformed lists are dropped instead of rejecting the whole config
        if value is None:
            return None
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return value
        logger.warning("Ignoring malformed nestedTools list: %r", value)
        return None


class SubagentSettings(_CamelModel):
    """The ``subagents`` block, used both per-agent and under defaults."""

    allow_nested_spawn: bool | None = None
    max_spawn_depth: int | None = None
    nested_tools: NestedToolsConfig | None = None


class AgentConfig(_CamelModel):
    """Per-agent override entry in ``agents.list``."""

    id: str
    subagents: SubagentSettings | None = None


class AgentDefaults(_CamelModel):
    """Global defaults under ``agents.defaults``."""

    subagents: SubagentSettings | None = None


class AgentsConfig(_CamelModel):
    """The ``agents`` section: global defaults plus per-agent overrides."""

    defaults: AgentDefaults | None = None
    entries: list[AgentConfig] = Field(default_factory=list, alias="list")


class SpawnPolicyConfig(_CamelModel):
    """Parsed runtime configuration. Only the ``agents`` section is read."""

    agents: AgentsConfig | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> SpawnPolicyConfig:
        """Create config from a parsed dict.

        Args:
            data: Config mapping (e.g. from YAML). None yields an empty config.

        Returns:
            SpawnPolicyConfig instance.

        Raises:
            ConfigValidationError: If the data does not match the config structure.
        """
        try:
            return cls.model_validate(data or {})
        except ValidationError as e:
            raise ConfigValidationError(f"Invalid spawn policy config: {e}") from e


class SpawnDecision(BaseModel):
    """Outcome of a nested spawn permission check.

    Denials carry a human-readable reason; allows do not.
    """

    model_config = ConfigDict(frozen=True)

    allowed: bool
    reason: str | None = None
    current_depth: int
    max_depth: int


class ToolPolicy(BaseModel):
    """Tool allow/deny lists for a nested sub-agent."""

    model_config = ConfigDict(frozen=True)

    allow: list[str] | None = None
    deny: list[str] | None = None
