"""FastAPI Web application — serves the live feed as JSON."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException

from iracing_feed.client.options import ClientOptions, env_bool
from iracing_feed.client.poller import TelemetryClient
from iracing_feed.exceptions import OutOfRangeError
from iracing_feed.web.schemas import (
    HealthResponse,
    SessionResponse,
    StatusResponse,
    VarHeaderRecord,
    VarValueResponse,
)
from iracing_feed.web.service import FeedService

load_dotenv()  # loads .env from project root; must run before env vars are consumed

_logger = logging.getLogger(__name__)

VERSION = "0.1.0"

_service: FeedService | None = None


def get_service() -> FeedService:
    """Return the process-wide feed service, creating it on first use."""
    global _service
    if _service is None:
        _service = FeedService(TelemetryClient(options=ClientOptions.from_env()))
    return _service


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    autostart = env_bool(os.environ.get("IRACING_FEED_AUTOSTART"), False)
    if autostart:
        _logger.info("Autostarting telemetry polling")
        get_service().start()
    try:
        yield
    finally:
        if _service is not None:
            _service.stop()


app = FastAPI(title="iRacing Feed", version=VERSION, lifespan=lifespan)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", version=VERSION)


@app.get("/api/status", response_model=StatusResponse)
def status(service: FeedService = Depends(get_service)) -> StatusResponse:
    return StatusResponse(**service.status())


@app.get("/api/session", response_model=SessionResponse, response_model_by_alias=True)
def session(service: FeedService = Depends(get_service)) -> SessionResponse:
    """Return the most recent session-info snapshot."""
    update = service.latest_session()
    if update is None:
        raise HTTPException(status_code=404, detail="No session info received yet")
    return SessionResponse(update_count=update.update_count, session_info=update.session_info)


@app.get("/api/telemetry")
def telemetry(service: FeedService = Depends(get_service)) -> dict:
    """Return the most recent telemetry frame."""
    frame = service.latest_telemetry()
    if frame is None:
        raise HTTPException(status_code=404, detail="No telemetry received yet")
    return frame


@app.get("/api/vars", response_model=list[VarHeaderRecord], response_model_by_alias=True)
def list_vars(service: FeedService = Depends(get_service)) -> list[VarHeaderRecord]:
    return [VarHeaderRecord(**h.to_dict()) for h in service.client.get_var_headers()]


@app.get("/api/vars/{name}", response_model=VarValueResponse)
def var_value(
    name: str, entry: int | None = None, service: FeedService = Depends(get_service)
) -> VarValueResponse:
    """Read one entry of variable *name* from the latest sample."""
    client = service.client
    if not any(h.name == name for h in client.get_var_headers()):
        raise HTTPException(status_code=404, detail=f"Unknown variable {name!r}")
    try:
        value = client.get_var_value(name, entry)
    except OutOfRangeError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return VarValueResponse(name=name, entry=entry, value=value)
