"""FastAPI application — entry point for the gyrokite backend.

Route modules are registered here and an optional SPA build is served from
./static. The service is stateless: every request evaluates the model from
the design it carries.
"""

from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from gyrokite.routes.assistant import router as assistant_router
from gyrokite.routes.simulate import router as simulate_router
from gyrokite.routes.sweep import router as sweep_router
from gyrokite.routes.websocket import router as websocket_router

VERSION = "0.1.0"

app = FastAPI(title="gyrokite", version=VERSION)

# ---------------------------------------------------------------------------
# CORS middleware for development (Vite dev server at localhost:5173)
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# API route registration
# ---------------------------------------------------------------------------
app.include_router(simulate_router)
app.include_router(sweep_router)
app.include_router(assistant_router)
app.include_router(websocket_router)


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "version": VERSION}


# ---------------------------------------------------------------------------
# Static files mount MUST be last — it catches all unmatched routes.
# ---------------------------------------------------------------------------
_static_dir = Path("static")
if _static_dir.is_dir():
    app.mount("/", StaticFiles(directory="static", html=True), name="static")
