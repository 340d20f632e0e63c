# tubetable/viewkit.py
from pathlib import Path
from urllib.parse import urlencode

from fastapi import HTTPException, Request
from fastapi.templating import Jinja2Templates

from tubetable.errors import (
    AmbiguousQuery,
    NoScheduleData,
    NoStopsFound,
    TimetableError,
    UpstreamUnavailable,
)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def title_words(value) -> str:
    """'hammersmith-city' -> 'Hammersmith-City'."""
    s = "" if value is None else str(value)
    out = []
    in_word = False
    for ch in s:
        out.append(ch.upper() if ch.isalpha() and not in_word else ch)
        in_word = ch.isalnum() or ch == "_"
    return "".join(out)


templates.env.filters["title_words"] = title_words


def timetable_url(line_id: str, stop_point_id: str, to_stop_point_id: str | None = None) -> str:
    params = {"line_id": line_id, "stop_point_id": stop_point_id}
    if to_stop_point_id:
        params["to_stop_point_id"] = to_stop_point_id
    return "/timetable?" + urlencode(params)


templates.env.globals["timetable_url"] = timetable_url


_STATUS_BY_ERROR: list[tuple[type[TimetableError], int]] = [
    (NoStopsFound, 404),
    (NoScheduleData, 404),
    (AmbiguousQuery, 409),
    (UpstreamUnavailable, 502),
]


def http_status_for(exc: TimetableError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(exc, cls):
            return status
    return 500


def http_error(exc: TimetableError) -> HTTPException:
    return HTTPException(status_code=http_status_for(exc), detail=str(exc))


def render(request: Request, name: str, ctx: dict | None = None, status_code: int = 200):
    base = {"request": request}
    if ctx:
        base.update(ctx)
    return templates.TemplateResponse(request, name, base, status_code=status_code)
