"""Exception hierarchy for amplifier-spawn-policy.

Decision functions never raise for malformed data. These exceptions are
reserved for the loading surface (config files, session store snapshots).
"""


class SpawnPolicyError(Exception):
    """Base exception for all spawn policy errors."""


class ConfigLoadError(SpawnPolicyError):
    """Config file could not be read or parsed (missing, invalid YAML, not a mapping)."""


class ConfigValidationError(SpawnPolicyError):
    """Config file parsed but does not match the expected structure."""


class SessionStoreLoadError(SpawnPolicyError):
    """Session store snapshot could not be read or parsed."""
