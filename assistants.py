# assistants.py
"""
Assistant persistence and CRUD helpers (server side).

This module owns the structure of assistants.json and nothing else.
Route handlers should NEVER manipulate assistants.json directly.

Layout:
{
    "<user id>": [ { "id": ..., "name": ..., ... }, ... ]
}
"""

import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from storage import ASSISTANTS_FILE, load_json, save_json

import logging
logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# Raw file access
# -------------------------------------------------------------------

def _load_all() -> Dict[str, List[Dict]]:
    data = load_json(ASSISTANTS_FILE, {})
    if not isinstance(data, dict):
        logger.warning("assistants.json has an unexpected layout, starting empty")
        return {}
    return data


def _save_all(data: Dict[str, List[Dict]]) -> None:
    save_json(ASSISTANTS_FILE, data)


# -------------------------------------------------------------------
# Public API (always scoped to one user)
# -------------------------------------------------------------------

def get_assistants_by_user_id(user_id: str) -> List[Dict]:
    """
    All assistants of a user, newest first.
    """
    # records are appended on creation
    return list(reversed(_load_all().get(user_id, [])))


def get_assistant(user_id: str, assistant_id: str) -> Dict | None:
    for record in _load_all().get(user_id, []):
        if record['id'] == assistant_id:
            return record
    return None


def create_assistant(
    user_id: str,
    name: str,
    instructions: str,
    persona: Optional[str] = None,
) -> Dict:
    data = _load_all()

    record = {
        'id': uuid.uuid4().hex,
        'name': name,
        'instructions': instructions,
        'persona': persona or None,
        'createdAt': datetime.now(timezone.utc).isoformat(),
        'userId': user_id,
    }
    data.setdefault(user_id, []).append(record)

    _save_all(data)
    logger.info(f"Assistant {record['id']} created for {user_id}")
    return record


def update_assistant(
    user_id: str,
    assistant_id: str,
    *,
    name: Optional[str] = None,
    instructions: Optional[str] = None,
    persona: Optional[str] = None,
) -> Dict | None:
    """
    Partial update; None leaves a field unchanged, an empty persona clears it.
    Returns the updated record, or None if the user has no such assistant.
    """
    data = _load_all()

    for record in data.get(user_id, []):
        if record['id'] != assistant_id:
            continue
        if name is not None:
            record['name'] = name
        if instructions is not None:
            record['instructions'] = instructions
        if persona is not None:
            record['persona'] = persona or None
        _save_all(data)
        logger.info(f"Assistant {assistant_id} updated for {user_id}")
        return record

    return None


def delete_assistant(user_id: str, assistant_id: str) -> bool:
    data = _load_all()
    records = data.get(user_id, [])
    remaining = [r for r in records if r['id'] != assistant_id]

    if len(remaining) == len(records):
        return False

    data[user_id] = remaining
    _save_all(data)
    logger.info(f"Assistant {assistant_id} deleted for {user_id}")
    return True
