"""Session store snapshot loading.

The store is owned by the surrounding runtime and is only read here. The
snapshot is a JSON object mapping session key -> record:

    {
      "agent:main:subagent:abc": {
        "sessionId": "s1",
        "updatedAt": 1718000000000,
        "spawnedBy": "agent:main:main"
      }
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..exceptions import SessionStoreLoadError
from ..models import SessionRecord

logger = logging.getLogger(__name__)


def _read_json_object(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise SessionStoreLoadError(f"Invalid JSON in session store {path}: {e}") from e
    except OSError as e:
        raise SessionStoreLoadError(f"Cannot read session store {path}: {e}") from e

    if not isinstance(data, dict):
        raise SessionStoreLoadError(
            f"Session store {path} must contain an object, got {type(data).__name__}"
        )
    return data


def load_session_store(path: Path | str) -> dict[str, SessionRecord]:
    """Load a session store snapshot from JSON.

    Falls back to ``<path>.backup`` when the main file is missing or corrupt.
    Records are read leniently: bad values in fields that do not feed depth
    resolution never drop a record. Only entries that are not JSON objects
    are skipped, with a warning.

    Args:
        path: Path to the JSON snapshot.

    Returns:
        Dict of session key -> SessionRecord.

    Raises:
        SessionStoreLoadError: If neither the file nor its backup can be read
            as a JSON object.
    """
    path = Path(path)
    backup = path.with_name(path.name + ".backup")

    if not path.exists() and not backup.exists():
        raise SessionStoreLoadError(f"Session store not found: {path}")

    try:
        data = _read_json_object(path) if path.exists() else None
    except SessionStoreLoadError as e:
        if not backup.exists():
            raise
        logger.warning("Failed to load session store, trying backup: %s", e)
        data = None

    if data is None:
        data = _read_json_object(backup)
        logger.info("Loaded session store from backup %s", backup)

    records: dict[str, SessionRecord] = {}
    for key, entry in data.items():
        try:
            records[key] = SessionRecord.model_validate(entry)
        except ValidationError as e:
            logger.warning("Skipping malformed session record %s: %s", key, e)

    logger.debug("Loaded %d session records from %s", len(records), path)
    return records
