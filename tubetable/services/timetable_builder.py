# tubetable/services/timetable_builder.py
from __future__ import annotations

import logging
from typing import Any

from tubetable.domain.models import IntervalGroup, Journey, Stop, TimetableModel
from tubetable.domain.tfl_models import Schedule, TimetableResponse, TimetableRoute
from tubetable.errors import NoScheduleData
from tubetable.utils.clock import lenient_int

log = logging.getLogger("timetable")

STATION_ONLY_SUFFIX = " [S]"


def _pick_schedule(resp: TimetableResponse) -> tuple[TimetableRoute, Schedule]:
    # First route with a schedule, first schedule in it. Direction is not matched.
    routes = resp.timetable.routes if resp.timetable else []
    for route in routes:
        if route.schedules:
            return route, route.schedules[0]
    raise NoScheduleData(f"no schedules found in any route of {resp.line_id or 'timetable'}")


def _name_lookup(resp: TimetableResponse) -> dict[str, str]:
    names = {s.id: s.name for s in resp.stops}
    for s in resp.stations:
        if s.id not in names:
            names[s.id] = s.name + STATION_ONLY_SUFFIX
    return names


def interval_groups(route: TimetableRoute) -> list[IntervalGroup]:
    return [
        IntervalGroup(
            interval_id=lenient_int(si.id),
            offsets=tuple((iv.stop_id, iv.time_to_arrival) for iv in si.intervals),
        )
        for si in route.station_intervals
    ]


def build_timetable_model(raw: TimetableResponse | dict[str, Any]) -> TimetableModel:
    resp = raw if isinstance(raw, TimetableResponse) else TimetableResponse.model_validate(raw)
    if resp.timetable is None or not resp.timetable.routes:
        raise NoScheduleData("no timetable data available")

    route, schedule = _pick_schedule(resp)
    names = _name_lookup(resp)
    dep_id = resp.timetable.departure_stop_id

    stops = [Stop(stop_id=dep_id, name=names.get(dep_id, ""), row=0)]
    seen = {dep_id}
    offsets: dict[int, dict[str, float]] = {}
    order: list[int] = []

    for group in interval_groups(route):
        table: dict[str, float] = {dep_id: 0.0}
        for stop_id, minutes in group.offsets:
            table[stop_id] = minutes
            if stop_id not in seen:
                seen.add(stop_id)
                stops.append(Stop(stop_id=stop_id, name=names.get(stop_id, ""), row=len(stops)))
        # the departure stop is always 0, whatever the feed says
        table[dep_id] = 0.0
        offsets[group.interval_id] = table
        order.append(group.interval_id)

    journeys = [
        Journey(hour=j.hour, minute=j.minute, interval_id=j.interval_id)
        for j in schedule.known_journeys
    ]

    log.debug(
        "built timetable line=%s dep=%s stops=%d groups=%d journeys=%d",
        resp.line_id,
        dep_id,
        len(stops),
        len(offsets),
        len(journeys),
    )
    return TimetableModel(
        departure_stop_id=dep_id,
        stops=stops,
        offsets=offsets,
        interval_order=order,
        journeys=journeys,
        line_name=resp.line_name,
        schedule_name=schedule.name,
    )
