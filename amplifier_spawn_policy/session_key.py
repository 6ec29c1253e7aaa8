"""Session key parsing and classification.

Session keys encode where a session sits in the spawn hierarchy:

- ``main`` or ``agent:main:main`` - top-level session
- ``subagent:abc-123`` or ``agent:main:subagent:abc-123`` - spawned session

Classification is purely syntactic. Nothing here consults a session store.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .constants import AGENT_KEY_PREFIX
from .constants import DEFAULT_AGENT_ID
from .constants import SUBAGENT_MARKER

_VALID_AGENT_ID = re.compile(r"^[a-z0-9][a-z0-9_-]{0,63}$", re.IGNORECASE)
_INVALID_AGENT_ID_CHARS = re.compile(r"[^a-z0-9_-]+")
_MAX_AGENT_ID_LENGTH = 64


@dataclass(frozen=True)
class ParsedAgentSessionKey:
    """An ``agent:<id>:<rest>`` session key split into its parts."""

    agent_id: str
    rest: str


@dataclass(frozen=True)
class SessionKeyClass:
    """Result of classifying a session key.

    Attributes:
        is_nested: True if the key denotes a spawned (sub-agent) session.
        rest: The key with any ``agent:<id>:`` wrapper removed.
    """

    is_nested: bool
    rest: str


def parse_agent_session_key(session_key: str | None) -> ParsedAgentSessionKey | None:
    """Split an agent-scoped session key into agent id and remainder.

    Args:
        session_key: Raw session key, e.g. ``agent:main:subagent:abc``.

    Returns:
        ParsedAgentSessionKey, or None if the key has no ``agent:<id>:`` wrapper.

    Example:
        >>> parse_agent_session_key("agent:main:subagent:abc")
        ParsedAgentSessionKey(agent_id='main', rest='subagent:abc')
        >>> parse_agent_session_key("main") is None
        True
    """
    raw = (session_key or "").strip()
    if not raw:
        return None

    parts = [part for part in raw.split(":") if part]
    if len(parts) < 3 or parts[0] != AGENT_KEY_PREFIX:
        return None

    agent_id = parts[1].strip()
    rest = ":".join(parts[2:])
    if not agent_id or not rest:
        return None

    return ParsedAgentSessionKey(agent_id=agent_id, rest=rest)


def classify_session_key(session_key: str | None) -> SessionKeyClass:
    """Classify a session key as top-level or nested.

    The marker comparison is case-insensitive. Empty keys are top-level.

    Args:
        session_key: Raw session key (None is treated as empty).

    Returns:
        SessionKeyClass with the nesting flag and unscoped remainder.
    """
    raw = (session_key or "").strip()
    if not raw:
        return SessionKeyClass(is_nested=False, rest="")

    parsed = parse_agent_session_key(raw)
    rest = parsed.rest if parsed else raw
    return SessionKeyClass(
        is_nested=rest.lower().startswith(SUBAGENT_MARKER),
        rest=rest,
    )


def is_subagent_session_key(session_key: str | None) -> bool:
    """Check if a session key denotes a spawned sub-agent session."""
    return classify_session_key(session_key).is_nested


def normalize_agent_id(value: str | None) -> str:
    """Canonicalize an agent identifier.

    Valid ids are lower-cased. Anything else has runs of invalid characters
    collapsed to ``-`` and surrounding dashes stripped. Empty results fall
    back to the default agent id.

    Example:
        >>> normalize_agent_id("Jack-X")
        'jack-x'
        >>> normalize_agent_id("  My Agent! ")
        'my-agent'
        >>> normalize_agent_id("")
        'main'
    """
    trimmed = (value or "").strip()
    if not trimmed:
        return DEFAULT_AGENT_ID

    if _VALID_AGENT_ID.match(trimmed):
        return trimmed.lower()

    normalized = _INVALID_AGENT_ID_CHARS.sub("-", trimmed.lower()).strip("-")
    return normalized[:_MAX_AGENT_ID_LENGTH] or DEFAULT_AGENT_ID


def resolve_agent_id_from_session_key(session_key: str | None) -> str:
    """Return the normalized agent id a session key is scoped to.

    Keys without an ``agent:<id>:`` wrapper belong to the default agent.
    """
    parsed = parse_agent_session_key(session_key)
    return normalize_agent_id(parsed.agent_id if parsed else None)
