# tubetable/errors.py
from __future__ import annotations


class TimetableError(Exception):
    """Base class for every failure the resolver, client and builder raise."""


class NoScheduleData(TimetableError):
    pass


class NoStopsFound(TimetableError):
    def __init__(self, station_name: str):
        super().__init__(f"No lines or stops found for {station_name}")
        self.station_name = station_name


class UpstreamUnavailable(TimetableError):
    pass


class AmbiguousQuery(TimetableError):
    def __init__(self, message: str, options: list | None = None):
        super().__init__(message)
        self.options = list(options or [])


class UnresolvedInterval(TimetableError):
    def __init__(self, interval_id: int):
        super().__init__(f"interval {interval_id} not in route and no fallback interval")
        self.interval_id = interval_id
