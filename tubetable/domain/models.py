# tubetable/domain/models.py
from __future__ import annotations

from dataclasses import dataclass, field

from tubetable.errors import UnresolvedInterval


@dataclass(frozen=True)
class LineAttachment:
    line_id: str
    platform_id: str  # NaPTAN id of the platform, never a hub


@dataclass(frozen=True)
class Journey:
    hour: str
    minute: str
    interval_id: int


@dataclass(frozen=True)
class IntervalGroup:
    interval_id: int
    offsets: tuple[tuple[str, float], ...] = ()


@dataclass(frozen=True)
class Stop:
    stop_id: str
    name: str
    row: int


@dataclass
class TimetableModel:
    departure_stop_id: str
    stops: list[Stop] = field(default_factory=list)
    offsets: dict[int, dict[str, float]] = field(default_factory=dict)
    interval_order: list[int] = field(default_factory=list)
    journeys: list[Journey] = field(default_factory=list)
    line_name: str = ""
    schedule_name: str = ""

    @property
    def stop_ids(self) -> list[str]:
        return [s.stop_id for s in self.stops]

    def offsets_for(self, interval_id: int) -> dict[str, float]:
        """Offsets for a journey's interval group, falling back to the route's first group."""
        table = self.offsets.get(interval_id)
        if table is not None:
            return table
        if self.interval_order:
            return self.offsets[self.interval_order[0]]
        raise UnresolvedInterval(interval_id)
