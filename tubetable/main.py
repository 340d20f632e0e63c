from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

from tubetable.config import settings
from tubetable.routers.timetable_api import router as timetable_api_router
from tubetable.routers.web import router as web_router
from tubetable.services.tfl_client import close_client, get_client

logging.basicConfig(
    level=getattr(logging, (settings.LOG_LEVEL or "INFO").upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

log = logging.getLogger("http")


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        t0 = time.perf_counter()
        response = await call_next(request)
        log.info(
            "%s %s -> %s (%.0f ms)",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - t0) * 1000.0,
        )
        return response


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    client = get_client()
    if not client.transport.app_key:
        log.warning("No TfL app key configured; requests will be rate limited")
    log.info("TfL client ready base_url=%s", client.transport.base_url)
    try:
        yield
    finally:
        close_client()


app = FastAPI(title="tubetable", lifespan=lifespan)
app.add_middleware(RequestLogMiddleware)

app.include_router(web_router)
app.include_router(timetable_api_router)


@app.get("/healthz")
def healthz():
    return {"ok": True}
