"""FastAPI application: entry point for the task board store."""

from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException

from taskboard.config import get_settings
from taskboard.domain.handlers import ActionRejected
from taskboard.domain.models import AppData, DispatchRequest, PackingRequest, PackingResult
from taskboard.repos.json_file import JsonFileRepository
from taskboard.services.packing import estimate_all

settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Task Board Store")

# ── Singletons (created at import time for simplicity) ────────────────
repository = JsonFileRepository(settings.data_file)


def get_repository() -> JsonFileRepository:
    return repository


# ── Routes ────────────────────────────────────────────────────────────


@app.get("/api/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/api/data", response_model=AppData)
def read_data(repo: JsonFileRepository = Depends(get_repository)) -> AppData:
    """Return the whole document, seeding it on first use."""
    try:
        return repo.load()
    except OSError as exc:
        logger.exception("Failed to read data: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to read data")


@app.post("/api/data", response_model=AppData)
def dispatch_action(
    body: DispatchRequest, repo: JsonFileRepository = Depends(get_repository)
) -> AppData:
    """Apply one named action and return the full updated document."""
    try:
        return repo.dispatch(body.action, body.payload)
    except ActionRejected as exc:
        logger.warning("Rejected %s: %s", body.action, exc)
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:  # noqa: BLE001
        logger.exception("API error while dispatching %s: %s", body.action, exc)
        raise HTTPException(status_code=500, detail="Internal server error")


@app.post("/api/packing", response_model=dict[str, PackingResult])
def packing_estimate(payload: PackingRequest) -> dict[str, PackingResult]:
    """Best orientation and box count for each container size."""
    return estimate_all(payload.length, payload.width, payload.height)
