# tubetable/services/timetable_service.py
from __future__ import annotations

import logging
from typing import Protocol

from tubetable.domain.models import TimetableModel
from tubetable.domain.tfl_models import (
    EmptyTimetable,
    NeedsDisambiguation,
    TimetableFound,
    TimetableResponse,
    TimetableResult,
)
from tubetable.errors import AmbiguousQuery, NoScheduleData
from tubetable.services.timetable_builder import build_timetable_model

log = logging.getLogger("timetable")


class TimetableSource(Protocol):
    def line_timetable(
        self,
        line_id: str,
        from_stop_point_id: str,
        to_stop_point_id: str | None = None,
        *,
        extra_params: dict[str, str] | None = None,
    ) -> TimetableResult: ...


def fetch_timetable(
    client: TimetableSource,
    line_id: str,
    from_stop_point_id: str,
    to_stop_point_id: str | None = None,
) -> TimetableResponse:
    """
    Query a line timetable. A disambiguation answer is followed once, using the
    first option's query parameters on the same endpoint.
    """
    result = client.line_timetable(line_id, from_stop_point_id, to_stop_point_id)

    if isinstance(result, NeedsDisambiguation):
        option = result.options[0]
        log.info(
            "timetable %s@%s ambiguous (%d options), following %r",
            line_id,
            from_stop_point_id,
            len(result.options),
            option.description or option.uri,
        )
        result = client.line_timetable(
            line_id, from_stop_point_id, to_stop_point_id, extra_params=option.query_params()
        )
        if isinstance(result, NeedsDisambiguation):
            raise AmbiguousQuery(
                f"timetable for {line_id} at {from_stop_point_id} is still ambiguous",
                result.options,
            )

    if isinstance(result, TimetableFound):
        return result.response
    if isinstance(result, EmptyTimetable):
        raise NoScheduleData(f"no timetable for {line_id} at {from_stop_point_id}")
    raise AmbiguousQuery(f"unexpected timetable answer for {line_id}")


def load_timetable_model(
    client: TimetableSource,
    line_id: str,
    from_stop_point_id: str,
    to_stop_point_id: str | None = None,
) -> TimetableModel:
    return build_timetable_model(
        fetch_timetable(client, line_id, from_stop_point_id, to_stop_point_id)
    )
