# tubetable/services/tfl_client.py
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any
from urllib.parse import quote

import requests
from pydantic import ValidationError

from tubetable.config import TransportConfig, settings
from tubetable.domain.tfl_models import (
    SearchMatch,
    SearchResponse,
    StopNode,
    TimetableResponse,
    TimetableResult,
    classify_timetable,
)
from tubetable.errors import UpstreamUnavailable

log = logging.getLogger("tfl_client")


class TflClient:
    def __init__(self, transport: TransportConfig, session: requests.Session | None = None):
        self.transport = transport

        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "User-Agent": transport.user_agent,
                "Accept": "application/json",
                "Accept-Encoding": "gzip, deflate, br",
            }
        )

    def _get_json(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        query: dict[str, Any] = dict(params or {})
        if self.transport.app_key:
            query["app_key"] = self.transport.app_key
        url = f"{self.transport.base_url}{path}"
        log.debug("GET %s params=%s", path, sorted(k for k in query if k != "app_key"))
        try:
            r = self._session.get(url, params=query, timeout=self.transport.timeout)
            r.raise_for_status()
            return r.json()
        except requests.RequestException as e:
            log.warning("TfL call failed path=%s err=%r", path, e)
            raise UpstreamUnavailable(f"TfL request to {path} failed: {e}") from e
        except ValueError as e:
            log.warning("TfL returned non-JSON body path=%s", path)
            raise UpstreamUnavailable(f"TfL response for {path} is not JSON") from e

    def search_stop_points(
        self, query: str, modes: Iterable[str], *, include_hubs: bool = False
    ) -> list[SearchMatch]:
        raw = self._get_json(
            f"/StopPoint/Search/{quote(query, safe='')}",
            {"modes": ",".join(modes), "includeHubs": str(include_hubs).lower()},
        )
        try:
            return SearchResponse.model_validate(raw).matches
        except ValidationError as e:
            raise UpstreamUnavailable(f"unexpected search payload for {query!r}") from e

    def get_stop_points(self, ids: list[str]) -> list[StopNode]:
        """
        Batch StopPoint lookup. TfL answers a single id with a bare object; callers
        are expected to send at least two ids so the payload is always an array.
        """
        if not ids:
            return []
        raw = self._get_json("/StopPoint/" + ",".join(quote(i, safe="") for i in ids))
        if not isinstance(raw, list):
            raise UpstreamUnavailable(
                f"expected a StopPoint array for {len(ids)} ids, got {type(raw).__name__}"
            )
        try:
            return [StopNode.model_validate(item) for item in raw]
        except ValidationError as e:
            raise UpstreamUnavailable("unexpected StopPoint payload") from e

    def line_timetable(
        self,
        line_id: str,
        from_stop_point_id: str,
        to_stop_point_id: str | None = None,
        *,
        extra_params: Mapping[str, str] | None = None,
    ) -> TimetableResult:
        path = f"/Line/{quote(line_id, safe='')}/Timetable/{quote(from_stop_point_id, safe='')}"
        if to_stop_point_id:
            path += f"/to/{quote(to_stop_point_id, safe='')}"
        raw = self._get_json(path, extra_params)
        try:
            resp = TimetableResponse.model_validate(raw)
        except ValidationError as e:
            raise UpstreamUnavailable(f"unexpected timetable payload for {line_id}") from e
        return classify_timetable(resp)

    def close(self) -> None:
        self._session.close()


_client_singleton: TflClient | None = None


def get_client() -> TflClient:
    global _client_singleton
    if _client_singleton is None:
        _client_singleton = TflClient(TransportConfig.from_settings(settings))
    return _client_singleton


def close_client() -> None:
    global _client_singleton
    if _client_singleton is not None:
        _client_singleton.close()
        _client_singleton = None
