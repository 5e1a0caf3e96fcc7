# assistant_routes.py
"""
REST handlers for the assistants resource.

Every handler resolves the user from the ingress header and scopes all
reads and writes to that user's assistants. Persistence is delegated to
assistants.py.
"""

import json

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

import assistants

import logging
logger = logging.getLogger(__name__)

USER_HEADER = "x-remote-user-id"

router = APIRouter(prefix="/assistants")


# -------------------
# Helpers
# -------------------

def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _current_user(request: Request) -> str | None:
    return request.headers.get(USER_HEADER) or None


async def _read_body(request: Request) -> dict | None:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return body if isinstance(body, dict) else None


def _is_text(value) -> bool:
    return isinstance(value, str) and bool(value.strip())


# -------------------
# Collection
# -------------------

@router.get("")
async def list_assistants(request: Request):
    try:
        user_id = _current_user(request)
        if not user_id:
            return _error("Unauthorized", 401)

        return JSONResponse(assistants.get_assistants_by_user_id(user_id))
    except Exception:
        logger.exception("Error fetching assistants")
        return _error("Failed to fetch assistants", 500)


@router.post("")
async def create_assistant(request: Request):
    try:
        user_id = _current_user(request)
        if not user_id:
            return _error("Unauthorized", 401)

        body = await _read_body(request)
        if body is None:
            return _error("Invalid JSON body", 400)

        name = body.get("name")
        instructions = body.get("instructions")
        if not _is_text(name) or not _is_text(instructions):
            return _error("Name and instructions are required", 400)
        if not isinstance(body.get("persona"), (str, type(None))):
            return _error("Persona must be a string", 400)

        record = assistants.create_assistant(
            user_id,
            name=name,
            instructions=instructions,
            persona=body.get("persona"),
        )
        return JSONResponse(record, status_code=201)
    except Exception:
        logger.exception("Error creating assistant")
        return _error("Failed to create assistant", 500)


# -------------------
# Single assistant
# -------------------

@router.get("/{assistant_id}")
async def get_assistant(assistant_id: str, request: Request):
    try:
        user_id = _current_user(request)
        if not user_id:
            return _error("Unauthorized", 401)

        record = assistants.get_assistant(user_id, assistant_id)
        if record is None:
            return _error("Assistant not found", 404)
        return JSONResponse(record)
    except Exception:
        logger.exception(f"Error fetching assistant {assistant_id}")
        return _error("Failed to fetch assistant", 500)


@router.put("/{assistant_id}")
async def update_assistant(assistant_id: str, request: Request):
    try:
        user_id = _current_user(request)
        if not user_id:
            return _error("Unauthorized", 401)

        body = await _read_body(request)
        if body is None:
            return _error("Invalid JSON body", 400)

        for field in ("name", "instructions"):
            if body.get(field) is not None and not _is_text(body[field]):
                return _error("Name and instructions cannot be empty", 400)
        if not isinstance(body.get("persona"), (str, type(None))):
            return _error("Persona must be a string", 400)

        record = assistants.update_assistant(
            user_id,
            assistant_id,
            name=body.get("name"),
            instructions=body.get("instructions"),
            persona=body.get("persona"),
        )
        if record is None:
            return _error("Assistant not found", 404)
        return JSONResponse(record)
    except Exception:
        logger.exception(f"Error updating assistant {assistant_id}")
        return _error("Failed to update assistant", 500)


@router.delete("/{assistant_id}")
async def delete_assistant(assistant_id: str, request: Request):
    try:
        user_id = _current_user(request)
        if not user_id:
            return _error("Unauthorized", 401)

        if not assistants.delete_assistant(user_id, assistant_id):
            return _error("Assistant not found", 404)
        return JSONResponse({"message": "Assistant deleted successfully"})
    except Exception:
        logger.exception(f"Error deleting assistant {assistant_id}")
        return _error("Failed to delete assistant", 500)
