# tubetable/services/stop_resolver.py
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

from tubetable.config import Settings, settings
from tubetable.domain.models import LineAttachment
from tubetable.domain.tfl_models import SearchMatch, StopNode

log = logging.getLogger("stop_resolver")


class StopPointSource(Protocol):
    def search_stop_points(
        self, query: str, modes: Iterable[str], *, include_hubs: bool = False
    ) -> list[SearchMatch]: ...

    def get_stop_points(self, ids: list[str]) -> list[StopNode]: ...


def collect_platform_ids(
    children: Iterable[StopNode] | None, platform_prefix: str, max_depth: int = 32
) -> list[str]:
    """Pre-order walk of a hub's child tree, keeping ids with the platform prefix."""
    out: list[str] = []
    seen: set[int] = set()
    stack: list[tuple[StopNode, int]] = [(c, 1) for c in reversed(list(children or []))]
    while stack:
        node, depth = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        if node.id.startswith(platform_prefix):
            out.append(node.id)
        if depth >= max_depth:
            if node.children:
                log.warning("stop tree deeper than %s below %s, not descending", max_depth, node.id)
            continue
        for child in reversed(node.children or []):
            stack.append((child, depth + 1))
    return out


class StopResolver:
    def __init__(self, client: StopPointSource, cfg: Settings | None = None):
        cfg = cfg or settings
        self.client = client
        self.hub_prefix = cfg.HUB_ID_PREFIX
        self.platform_prefix = cfg.PLATFORM_ID_PREFIX
        self.pad_id = cfg.SINGLETON_PAD_ID
        self.pad_alt_id = cfg.SINGLETON_PAD_ALT_ID
        self.max_depth = cfg.STOP_TREE_MAX_DEPTH

    # -------- helpers --------

    def _padded(self, ids: list[str]) -> tuple[list[str], str | None]:
        if len(ids) != 1:
            return list(ids), None
        pad = self.pad_alt_id if ids[0] == self.pad_id else self.pad_id
        return [ids[0], pad], pad

    def _fetch(self, ids: list[str]) -> list[StopNode]:
        request_ids, pad = self._padded(ids)
        nodes = self.client.get_stop_points(request_ids)
        if pad is None:
            return nodes
        return [n for n in nodes if n.id != pad]

    # -------- public --------

    def resolve(self, station_name: str, mode: str) -> list[LineAttachment]:
        matches = self.client.search_stop_points(station_name, [mode], include_hubs=False)
        if not matches:
            log.info("no stop matches for %r (%s)", station_name, mode)
            return []

        candidates = [m.id for m in matches if m.id]
        platform_ids: list[str] = []
        for sp in self._fetch(candidates):
            if sp.is_hub(self.hub_prefix):
                platform_ids.extend(
                    collect_platform_ids(sp.children, self.platform_prefix, self.max_depth)
                )
                continue
            platform_ids.append(sp.id)

        if not platform_ids:
            return []

        pairs: list[LineAttachment] = []
        for sp in self._fetch(platform_ids):
            if sp.is_hub(self.hub_prefix):
                continue
            for line in sp.lines:
                pairs.append(LineAttachment(line_id=line.id, platform_id=sp.platform_id))

        log.info(
            "resolved %r (%s): %d matches, %d platforms, %d pairs",
            station_name,
            mode,
            len(candidates),
            len(platform_ids),
            len(pairs),
        )
        return pairs

    def resolve_stop_point_id(self, stop_point_id: str) -> str:
        """Swap a hub id for its first platform descendant; other ids pass through."""
        if not stop_point_id.startswith(self.hub_prefix):
            return stop_point_id

        nodes = self._fetch([stop_point_id])
        if not nodes:
            return stop_point_id

        target = next((n for n in nodes if n.id.lower() == stop_point_id.lower()), nodes[0])
        found = collect_platform_ids(target.children, self.platform_prefix, self.max_depth)
        return found[0] if found else stop_point_id
