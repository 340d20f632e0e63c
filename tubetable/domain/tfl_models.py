# tubetable/domain/tfl_models.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl, urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class TflModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # TfL sends explicit nulls for empty collections; let defaults apply instead.
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


# -------- StopPoint --------


class SearchMatch(TflModel):
    id: str
    name: str = ""


class SearchResponse(TflModel):
    query: str = ""
    total: int = 0
    matches: list[SearchMatch] = Field(default_factory=list)


class LineIdentifier(TflModel):
    id: str
    name: str = ""


class StopNode(TflModel):
    id: str = ""
    naptan_id: str | None = None
    name: str = Field("", alias="commonName")
    children: list[StopNode] = Field(default_factory=list)
    lines: list[LineIdentifier] = Field(default_factory=list)

    @property
    def platform_id(self) -> str:
        return self.naptan_id or self.id

    def is_hub(self, hub_prefix: str) -> bool:
        return self.id.startswith(hub_prefix)


StopNode.model_rebuild()


# -------- Line timetable --------


class NamedStop(TflModel):
    id: str = ""
    name: str = ""


class Interval(TflModel):
    stop_id: str = ""
    time_to_arrival: float = 0.0


class StationInterval(TflModel):
    id: str = ""
    intervals: list[Interval] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v: Any) -> str:
        return "" if v is None else str(v)


class KnownJourney(TflModel):
    hour: str = ""
    minute: str = ""
    interval_id: int = 0

    @field_validator("hour", "minute", mode="before")
    @classmethod
    def _time_as_str(cls, v: Any) -> str:
        return "" if v is None else str(v)


class Schedule(TflModel):
    name: str = ""
    known_journeys: list[KnownJourney] = Field(default_factory=list)


class TimetableRoute(TflModel):
    station_intervals: list[StationInterval] = Field(default_factory=list)
    schedules: list[Schedule] = Field(default_factory=list)


class Timetable(TflModel):
    departure_stop_id: str = ""
    routes: list[TimetableRoute] = Field(default_factory=list)


class DisambiguationOption(TflModel):
    description: str = ""
    uri: str = ""

    def query_params(self) -> dict[str, str]:
        return dict(parse_qsl(urlsplit(self.uri).query, keep_blank_values=True))


class Disambiguation(TflModel):
    disambiguation_options: list[DisambiguationOption] = Field(default_factory=list)


class TimetableResponse(TflModel):
    line_id: str = ""
    line_name: str = ""
    direction: str = ""
    stations: list[NamedStop] = Field(default_factory=list)
    stops: list[NamedStop] = Field(default_factory=list)
    timetable: Timetable | None = None
    disambiguation: Disambiguation | None = None


# -------- Tagged result --------


@dataclass(frozen=True)
class TimetableFound:
    response: TimetableResponse


@dataclass(frozen=True)
class NeedsDisambiguation:
    options: list[DisambiguationOption] = field(default_factory=list)


@dataclass(frozen=True)
class EmptyTimetable:
    line_id: str = ""


TimetableResult = TimetableFound | NeedsDisambiguation | EmptyTimetable


def classify_timetable(resp: TimetableResponse) -> TimetableResult:
    if resp.timetable is not None and resp.timetable.routes:
        return TimetableFound(resp)
    opts = resp.disambiguation.disambiguation_options if resp.disambiguation else []
    if opts:
        return NeedsDisambiguation(list(opts))
    return EmptyTimetable(resp.line_id)
