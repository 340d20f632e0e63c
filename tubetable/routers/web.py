# tubetable/routers/web.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse

from tubetable.config import settings
from tubetable.errors import NoStopsFound, TimetableError
from tubetable.services.stop_resolver import StopResolver
from tubetable.services.tfl_client import TflClient, get_client
from tubetable.services.timetable_renderer import TimetableRenderer
from tubetable.services.timetable_service import load_timetable_model
from tubetable.viewkit import http_error, render, timetable_url

router = APIRouter(tags=["web"])

log = logging.getLogger("web")


# --- HOME / SEARCH ---


@router.get("/", response_class=HTMLResponse)
def home(
    request: Request,
    q: str = Query(default=""),
    client: TflClient = Depends(get_client),
):
    q = (q or "").strip()
    ctx: dict = {"q": q, "pairs": [], "error": None, "searched": bool(q)}
    if q:
        try:
            ctx["pairs"] = StopResolver(client).resolve(q, settings.DEFAULT_MODE)
        except TimetableError as e:
            log.warning("search failed q=%r err=%s", q, e)
            ctx["error"] = str(e)
    return render(request, "search.html", ctx)


# --- DEMO ---


@router.get("/demo")
def demo(client: TflClient = Depends(get_client)):
    station = settings.DEMO_STATION_NAME
    try:
        pairs = StopResolver(client).resolve(station, settings.DEFAULT_MODE)
        if not pairs:
            raise NoStopsFound(station)
    except TimetableError as e:
        raise http_error(e) from e

    # first pair only, e.g. District line at Richmond
    pair = pairs[0]
    return RedirectResponse(timetable_url(pair.line_id, pair.platform_id), status_code=302)


# --- TIMETABLE ---


@router.get("/timetable", response_class=HTMLResponse)
def timetable(
    request: Request,
    line_id: str = Query(default=""),
    stop_point_id: str = Query(default=""),
    to_stop_point_id: str | None = Query(default=None),
    format: str = Query(default="html", pattern="^(html|text)$"),
    client: TflClient = Depends(get_client),
):
    line_id = (line_id or "").strip()
    stop_point_id = (stop_point_id or "").strip()
    if not line_id or not stop_point_id:
        raise HTTPException(status_code=400, detail="Missing line_id or stop_point_id")

    try:
        resolved_id = StopResolver(client).resolve_stop_point_id(stop_point_id)
        model = load_timetable_model(client, line_id, resolved_id, to_stop_point_id or None)
    except TimetableError as e:
        log.warning("timetable failed line=%s stop=%s err=%s", line_id, stop_point_id, e)
        raise http_error(e) from e

    renderer = TimetableRenderer(model)
    text = renderer.render_as_text(
        settings.TIMETABLE_MAX_JOURNEYS, settings.TIMETABLE_STATION_COL_WIDTH
    )
    if format == "text":
        return PlainTextResponse(text)

    return render(
        request,
        "timetable.html",
        {
            "stop_point_id": resolved_id,
            "line_id": line_id,
            "text": text,
            "table_html": renderer.render_as_html(settings.TIMETABLE_MAX_JOURNEYS),
        },
    )
