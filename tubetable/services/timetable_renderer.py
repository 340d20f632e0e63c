# tubetable/services/timetable_renderer.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from jinja2 import Environment, PackageLoader, select_autoescape

from tubetable.domain.models import Journey, TimetableModel
from tubetable.domain.tfl_models import TimetableResponse
from tubetable.errors import UnresolvedInterval
from tubetable.services.timetable_builder import build_timetable_model
from tubetable.utils.clock import arrival_time

TRAIN_COL_WIDTH = 10
SEPARATOR = " | "
MISSING_STOP = "---"
MISSING_INTERVAL = "err"
ELLIPSIS = "..."

_env = Environment(
    loader=PackageLoader("tubetable", "templates"),
    autoescape=select_autoescape(["html"]),
)


@dataclass
class GridRow:
    stop_id: str
    name: str
    cells: list[str] = field(default_factory=list)


@dataclass
class TimetableGrid:
    line_name: str
    departure_stop_id: str
    schedule_name: str
    headers: list[str] = field(default_factory=list)
    rows: list[GridRow] = field(default_factory=list)


def truncate_name(name: str, width: int) -> str:
    if len(name) <= width:
        return name
    return name[: max(0, width - len(ELLIPSIS))] + ELLIPSIS


def _cell(model: TimetableModel, stop_id: str, journey: Journey) -> str:
    try:
        table = model.offsets_for(journey.interval_id)
    except UnresolvedInterval:
        return MISSING_INTERVAL
    if stop_id not in table:
        return MISSING_STOP
    return arrival_time(journey.hour, journey.minute, table[stop_id])


def build_grid(model: TimetableModel, max_journeys: int) -> TimetableGrid:
    journeys = model.journeys
    if max_journeys > 0 and len(journeys) > max_journeys:
        journeys = journeys[:max_journeys]

    grid = TimetableGrid(
        line_name=model.line_name,
        departure_stop_id=model.departure_stop_id,
        schedule_name=model.schedule_name,
        headers=[f"Train {i + 1}" for i in range(len(journeys))],
    )
    for stop in model.stops:
        grid.rows.append(
            GridRow(
                stop_id=stop.stop_id,
                name=stop.name,
                cells=[_cell(model, stop.stop_id, j) for j in journeys],
            )
        )
    return grid


class TimetableRenderer:
    def __init__(self, model: TimetableModel):
        self.model = model

    def render_as_text(self, max_journeys: int, station_col_width: int) -> str:
        grid = build_grid(self.model, max_journeys)
        lines = [
            f"Timetable for {grid.line_name} at {grid.departure_stop_id}",
            "",
            f"Schedule: {grid.schedule_name}",
        ]

        header = f"{'Station':<{station_col_width}}" + "".join(
            f"{SEPARATOR}{h:<{TRAIN_COL_WIDTH}}" for h in grid.headers
        )
        lines.append(header)
        lines.append("-" * (station_col_width + len(grid.headers) * (TRAIN_COL_WIDTH + 3)))

        for row in grid.rows:
            name = truncate_name(row.name, station_col_width)
            lines.append(
                f"{name:<{station_col_width}}"
                + "".join(f"{SEPARATOR}{c:<{TRAIN_COL_WIDTH}}" for c in row.cells)
            )
        return "\n".join(lines) + "\n"

    def render_as_html(self, max_journeys: int) -> str:
        grid = build_grid(self.model, max_journeys)
        return _env.get_template("partials/timetable_table.html").render(grid=grid)


def render(
    parsed: TimetableResponse | dict[str, Any], max_journeys: int, column_width: int
) -> str:
    return TimetableRenderer(build_timetable_model(parsed)).render_as_text(
        max_journeys, column_width
    )
