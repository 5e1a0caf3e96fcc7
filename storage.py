# storage.py
"""
Filesystem layout, configuration and persistence helpers.

All data for the application lives under DATA_ROOT (default /data).
"""

import os
from pathlib import Path
import json
from typing import Any

import logging
logger = logging.getLogger(__name__)

# -------------------------------------------------------------------
# Root & directory layout (configurable)
# -------------------------------------------------------------------

DATA_ROOT: Path = Path(os.getenv("ASSISTANT_MNGR_DATA", "/data"))

ASSISTANTS_FILE = DATA_ROOT / 'assistants.json'
ADDON_CONFIG_FILE = DATA_ROOT / 'options.json'


# -------------------------------------------------------------------
# Initialization
# -------------------------------------------------------------------
def _ensure_dirs() -> None:
    """
    Ensure required directories exist.
    """
    DATA_ROOT.mkdir(parents=True, exist_ok=True)

_ensure_dirs()


# -------------------------------------------------------------------
# JSON helpers
# -------------------------------------------------------------------
def load_json(path: Path, default: Any):
    if not path.exists():
        logger.debug(f"No JSON file found at {path}")
        return default
    try:
        return json.loads(path.read_text())
    except json.JSONDecodeError:
        logger.warning(f"Load JSON file failed: {path}")
        return default

def save_json(path: Path, data: Any) -> None:
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(data, indent=2, sort_keys=True))
    tmp.replace(path)


# -------------------------------------------------------------------
# Addon config helpers
# -------------------------------------------------------------------
addon_options = load_json(ADDON_CONFIG_FILE, {})
if not isinstance(addon_options, dict):
    logger.warning("options.json is not an object, ignoring it")
    addon_options = {}

STORAGE_SECRET = (
    os.getenv("ASSISTANT_MNGR_STORAGE_SECRET")
    or addon_options.get("storage_secret")
    or "assistant-mngr-secret"
)

# empty means: talk to the local FastAPI app in-process
API_BASE_URL = os.getenv("ASSISTANT_MNGR_API_URL", addon_options.get("api_url", ""))

# used by UI pages opened without an ingress user header
DEFAULT_USER_ID = os.getenv(
    "ASSISTANT_MNGR_DEFAULT_USER",
    addon_options.get("default_user", "local"),
)
