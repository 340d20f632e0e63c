from __future__ import annotations

import json
from pathlib import Path

from tubetable.domain.tfl_models import (
    SearchMatch,
    StopNode,
    TimetableResponse,
    TimetableResult,
    classify_timetable,
)
from tubetable.errors import UpstreamUnavailable

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str):
    return json.loads((FIXTURES_DIR / name).read_text(encoding="utf-8"))


class FakeTfl:
    """In-memory stand-in for TflClient; a single-id StopPoint call fails like the real API."""

    def __init__(
        self,
        matches: list[dict] | None = None,
        stop_points: dict[str, dict] | None = None,
        timetables: list[dict] | None = None,
    ):
        self.matches = [SearchMatch.model_validate(m) for m in (matches or [])]
        self.stop_points = {k: StopNode.model_validate(v) for k, v in (stop_points or {}).items()}
        self.timetables = list(timetables or [])
        self.search_calls: list[tuple[str, list[str]]] = []
        self.get_calls: list[list[str]] = []
        self.timetable_calls: list[tuple[str, str, str | None, dict | None]] = []
        self.fail_with: Exception | None = None

    def search_stop_points(self, query, modes, *, include_hubs=False) -> list[SearchMatch]:
        if self.fail_with:
            raise self.fail_with
        self.search_calls.append((query, list(modes)))
        return list(self.matches)

    def get_stop_points(self, ids: list[str]) -> list[StopNode]:
        if self.fail_with:
            raise self.fail_with
        self.get_calls.append(list(ids))
        if len(ids) == 1:
            raise UpstreamUnavailable("expected a StopPoint array for 1 ids, got dict")
        return [self.stop_points[i] for i in ids if i in self.stop_points]

    def line_timetable(
        self, line_id, from_stop_point_id, to_stop_point_id=None, *, extra_params=None
    ) -> TimetableResult:
        if self.fail_with:
            raise self.fail_with
        self.timetable_calls.append(
            (line_id, from_stop_point_id, to_stop_point_id, dict(extra_params or {}) or None)
        )
        raw = self.timetables.pop(0) if self.timetables else {}
        return classify_timetable(TimetableResponse.model_validate(raw))


def make_timetable(
    groups: dict[str, dict[str, float]],
    journeys: list[tuple[str, str, int]],
    *,
    departure: str = "DEP",
    names: dict[str, str] | None = None,
) -> dict:
    """Small timetable payload: groups maps interval id -> {stop id: minutes}."""
    names = names or {}
    return {
        "lineId": "test",
        "lineName": "Test",
        "stops": [{"id": k, "name": v} for k, v in names.items()],
        "stations": [],
        "timetable": {
            "departureStopId": departure,
            "routes": [
                {
                    "stationIntervals": [
                        {
                            "id": gid,
                            "intervals": [
                                {"stopId": sid, "timeToArrival": t} for sid, t in table.items()
                            ],
                        }
                        for gid, table in groups.items()
                    ],
                    "schedules": [
                        {
                            "name": "Everyday",
                            "knownJourneys": [
                                {"hour": h, "minute": m, "intervalId": i} for h, m, i in journeys
                            ],
                        }
                    ],
                }
            ],
        },
    }
