# tubetable/routers/timetable_api.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from tubetable.config import settings
from tubetable.errors import NoStopsFound, TimetableError
from tubetable.services.stop_resolver import StopResolver
from tubetable.services.tfl_client import TflClient, get_client
from tubetable.services.timetable_renderer import TimetableRenderer, build_grid
from tubetable.services.timetable_service import load_timetable_model
from tubetable.viewkit import http_error, timetable_url

router = APIRouter(prefix="/api", tags=["api:timetable"])


@router.get("/stops/resolve")
def resolve_stops(
    q: str = Query(..., min_length=1),
    mode: str | None = Query(None),
    client: TflClient = Depends(get_client),
):
    mode = (mode or settings.DEFAULT_MODE).strip().lower()
    try:
        pairs = StopResolver(client).resolve(q, mode)
        if not pairs:
            raise NoStopsFound(q)
    except TimetableError as e:
        raise http_error(e) from e

    return {
        "query": q,
        "mode": mode,
        "items": [
            {
                "line_id": p.line_id,
                "platform_id": p.platform_id,
                "timetable_url": timetable_url(p.line_id, p.platform_id),
            }
            for p in pairs
        ],
    }


@router.get("/timetable")
def timetable_json(
    line_id: str = Query(""),
    stop_point_id: str = Query(""),
    to_stop_point_id: str | None = Query(None),
    max_journeys: int = Query(settings.TIMETABLE_MAX_JOURNEYS, ge=0, le=1000),
    col_width: int = Query(settings.TIMETABLE_STATION_COL_WIDTH, ge=4, le=200),
    client: TflClient = Depends(get_client),
):
    if not line_id.strip() or not stop_point_id.strip():
        raise HTTPException(status_code=400, detail="Missing line_id or stop_point_id")

    try:
        resolved_id = StopResolver(client).resolve_stop_point_id(stop_point_id.strip())
        model = load_timetable_model(
            client, line_id.strip(), resolved_id, (to_stop_point_id or "").strip() or None
        )
    except TimetableError as e:
        raise http_error(e) from e

    grid = build_grid(model, max_journeys)
    return {
        "line_id": line_id.strip(),
        "line_name": model.line_name,
        "schedule": model.schedule_name,
        "departure_stop_id": model.departure_stop_id,
        "trains": grid.headers,
        "rows": [{"stop_id": r.stop_id, "name": r.name, "times": r.cells} for r in grid.rows],
        "text": TimetableRenderer(model).render_as_text(max_journeys, col_width),
    }
