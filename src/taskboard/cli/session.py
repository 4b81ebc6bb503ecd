"""Client-side session storage for the CLI.

The CLI keeps the bearer token and the user it belongs to in a small
JSON file, readable only by the owner. Logging out, or any 401 from the
API, deletes the file. Nothing about the session lives on the server.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

DEFAULT_SESSION_FILE = Path.home() / ".taskboard" / "session.json"


def session_path() -> Path:
    override = os.environ.get("TASKBOARD_SESSION_FILE")
    return Path(override).expanduser() if override else DEFAULT_SESSION_FILE


def load_session() -> Optional[dict]:
    """Return {"token": ..., "user": {...}} or None if logged out."""
    path = session_path()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, ValueError):
        # Unreadable or corrupt: treat as logged out
        return None
    if not isinstance(data, dict) or not data.get("token"):
        return None
    return data


def save_session(token: str, user: dict) -> Path:
    path = session_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"token": token, "user": user}), encoding="utf-8")
    path.chmod(0o600)
    return path


def clear_session() -> bool:
    """Delete the session file. Returns True if there was one."""
    try:
        session_path().unlink()
    except FileNotFoundError:
        return False
    return True
