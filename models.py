# models.py
"""
Assistant data model.

Wire and storage form is the camelCase JSON object returned by the
assistants resource; the dataclasses below are what the rest of the
application passes around.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


REQUIRED_FIELDS = ('id', 'name', 'instructions')


@dataclass
class Assistant:
    id: str
    name: str
    instructions: str
    persona: Optional[str] = None
    created_at: Optional[str] = None
    user_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Assistant':
        """
        Build an Assistant from its wire form.

        Raises KeyError if a required field is missing and TypeError if
        `data` is not a mapping.
        """
        if not isinstance(data, dict):
            raise TypeError(f'Assistant data must be an object, got {type(data).__name__}')
        for key in REQUIRED_FIELDS:
            if not isinstance(data.get(key), str):
                raise KeyError(key)
        return cls(
            id=data['id'],
            name=data['name'],
            instructions=data['instructions'],
            persona=data.get('persona') or None,
            created_at=data.get('createdAt'),
            user_id=data.get('userId'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'instructions': self.instructions,
            'persona': self.persona,
            'createdAt': self.created_at,
            'userId': self.user_id,
        }


@dataclass
class SelectionState:
    """Client-local record of the active assistant."""
    assistant_id: str
    snapshot: Assistant
