"""Read in-flight agent sessions from .git/entire-sessions/.

The entire CLI keeps one JSON file per live session there. Files that
cannot be read or validated are skipped; sessions whose phase is "ended"
are not active and are left out.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from .metadata import ActiveSession

logger = logging.getLogger(__name__)

ENDED_PHASE = "ended"


def read_active_sessions(sessions_dir: Path) -> list[ActiveSession]:
    """Return every non-ended session file in a directory, by file name."""
    if not sessions_dir.is_dir():
        return []

    sessions = []
    for path in sorted(sessions_dir.glob("*.json")):
        session = _read_session_file(path)
        if session and session.phase != ENDED_PHASE:
            sessions.append(session)
    return sessions


def _read_session_file(path: Path) -> ActiveSession | None:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to read session file %s: %s", path, e)
        return None

    try:
        return ActiveSession.model_validate(data)
    except ValidationError as e:
        logger.warning("Invalid session file %s: %d schema error(s)", path, e.error_count())
        return None
