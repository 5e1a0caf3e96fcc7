# main.py
import os
import mimetypes
import nicegui
from nicegui import ui
from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

import ui.navigation as navigation
from assistant_routes import router as assistants_router
from storage import DATA_ROOT, STORAGE_SECRET

import logging
import sys
from contextlib import asynccontextmanager


# -------------------
# Logging setup
# -------------------

LOG_LEVEL = os.getenv("LOG_LEVEL", "info").upper()

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s [%(levelname)s] %(threadName)s: %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)

# -------------------
# MIME types (for HA Ingress static files)
# -------------------
mimetypes.add_type("text/css", ".css")
mimetypes.add_type("application/javascript", ".js")
mimetypes.add_type("font/woff2", ".woff2")
mimetypes.add_type("font/woff", ".woff")
mimetypes.add_type("font/ttf", ".ttf")


# =========================================================
# FastAPI lifespan
# =========================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Assistant manager starting, data root: {DATA_ROOT}")

    yield  # ---- application runs here ----

    logger.info("Assistant manager stopping")


# -------------------
# FastAPI app (single ASGI root)
# -------------------
app = FastAPI(lifespan=lifespan)

# -------------------
# Ingress middleware (HTTP only)
# -------------------
class IngressMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        ingress_path = request.headers.get("X-Ingress-Path")
        if ingress_path:
            request.scope["root_path"] = ingress_path
        return await call_next(request)

app.add_middleware(IngressMiddleware)

# -------------------
# REST API
# -------------------
app.include_router(assistants_router, prefix="/api")
navigation.attach_api(app)

# -------------------
# Manual static serving for NiceGUI assets
# -------------------
nicegui_path = os.path.dirname(nicegui.__file__)
static_dir = os.path.join(nicegui_path, "static")
version = nicegui.__version__

@app.get(f"/_nicegui/{version}/static/{{file_path:path}}")
async def nicegui_static(file_path: str):
    full_path = os.path.join(static_dir, file_path)
    if not os.path.exists(full_path):
        return Response("Not found", status_code=404)

    media_type, _ = mimetypes.guess_type(full_path)
    media_type = media_type or "application/octet-stream"

    with open(full_path, "rb") as f:
        return Response(f.read(), media_type=media_type)

# -------------------
# Attach NiceGUI to FastAPI
# -------------------
ui.run_with(app, storage_secret=STORAGE_SECRET, title="Assistant Manager")

# -------------------
# Uvicorn entrypoint
# -------------------
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=5002,
        reload=False,
    )
