from __future__ import annotations

import pytest

from tests.helpers import FakeTfl, load_fixture


@pytest.fixture
def richmond_client() -> FakeTfl:
    return FakeTfl(
        matches=load_fixture("richmond_search.json")["matches"],
        stop_points=load_fixture("stop_points.json"),
    )


@pytest.fixture
def district_timetable() -> dict:
    return load_fixture("richmond_district_timetable.json")
