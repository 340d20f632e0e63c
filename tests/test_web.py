from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from tests.helpers import FakeTfl, load_fixture
from tubetable.errors import UpstreamUnavailable
from tubetable.main import app
from tubetable.services.tfl_client import get_client


@pytest.fixture
def fake() -> FakeTfl:
    return FakeTfl(
        matches=load_fixture("richmond_search.json")["matches"],
        stop_points=load_fixture("stop_points.json"),
        timetables=[load_fixture("richmond_district_timetable.json")],
    )


@pytest.fixture
def http(fake):
    app.dependency_overrides[get_client] = lambda: fake
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_healthz(http):
    assert http.get("/healthz").json() == {"ok": True}


def test_search_form(http):
    r = http.get("/")
    assert r.status_code == 200
    assert "TFL Timetable Search" in r.text
    assert "Results for" not in r.text


def test_search_lists_pairs(http):
    r = http.get("/", params={"q": "Richmond"})

    assert r.status_code == 200
    assert "Results for 'Richmond'" in r.text
    assert "District Line at Stop 940GZZLURMD" in r.text
    assert "Circle Line at Stop 940GZZLUXYZ" in r.text
    assert "/timetable?line_id=district&amp;stop_point_id=940GZZLURMD" in r.text


def test_search_without_results(http, fake):
    fake.matches = []
    r = http.get("/", params={"q": "Nowhere"})

    assert r.status_code == 200
    assert "No results found for" in r.text


def test_search_shows_upstream_error(http, fake):
    fake.fail_with = UpstreamUnavailable("TfL is down")
    r = http.get("/", params={"q": "Richmond"})

    assert r.status_code == 200
    assert "Error: TfL is down" in r.text


def test_demo_redirects_to_first_pair(http):
    r = http.get("/demo", follow_redirects=False)

    assert r.status_code == 302
    assert r.headers["location"] == "/timetable?line_id=district&stop_point_id=940GZZLURMD"


def test_demo_not_found(http, fake):
    fake.matches = []
    r = http.get("/demo", follow_redirects=False)

    assert r.status_code == 404
    assert "Richmond" in r.json()["detail"]


def test_timetable_requires_params(http):
    assert http.get("/timetable", params={"line_id": "district"}).status_code == 400
    assert http.get("/timetable").status_code == 400


def test_timetable_text_resolves_hub(http, fake):
    r = http.get(
        "/timetable", params={"line_id": "district", "stop_point_id": "HUBRMD", "format": "text"}
    )

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/plain")
    assert r.text.startswith("Timetable for District at 940GZZLURMD")
    assert fake.timetable_calls[0][:2] == ("district", "940GZZLURMD")


def test_timetable_html(http):
    r = http.get("/timetable", params={"line_id": "district", "stop_point_id": "940GZZLURMD"})

    assert r.status_code == 200
    assert "<h1>Timetable for 940GZZLURMD</h1>" in r.text
    assert "<pre>" in r.text
    assert '<table class="timetable">' in r.text


@pytest.mark.parametrize(
    ("timetable", "status"),
    [
        ({"lineId": "district", "timetable": None}, 404),
        (
            {
                "disambiguation": {
                    "disambiguationOptions": [{"uri": "/Line/district/Timetable/X?direction=a"}]
                }
            },
            409,
        ),
    ],
)
def test_timetable_errors(http, fake, timetable, status):
    fake.timetables = [timetable, timetable]
    r = http.get("/timetable", params={"line_id": "district", "stop_point_id": "940GZZLURMD"})

    assert r.status_code == status


def test_timetable_upstream_unavailable(http, fake):
    fake.fail_with = UpstreamUnavailable("timeout")
    r = http.get("/timetable", params={"line_id": "district", "stop_point_id": "940GZZLURMD"})

    assert r.status_code == 502


def test_api_resolve(http):
    r = http.get("/api/stops/resolve", params={"q": "Richmond"})

    assert r.status_code == 200
    body = r.json()
    assert body["mode"] == "tube"
    assert [(i["line_id"], i["platform_id"]) for i in body["items"]] == [
        ("district", "940GZZLURMD"),
        ("district", "940GZZLUXYZ"),
        ("circle", "940GZZLUXYZ"),
    ]


def test_api_resolve_not_found(http, fake):
    fake.matches = []
    assert http.get("/api/stops/resolve", params={"q": "Nowhere"}).status_code == 404


def test_api_timetable(http):
    r = http.get(
        "/api/timetable",
        params={"line_id": "district", "stop_point_id": "940GZZLURMD", "max_journeys": 2},
    )

    assert r.status_code == 200
    body = r.json()
    assert body["schedule"] == "Monday - Friday"
    assert body["trains"] == ["Train 1", "Train 2"]
    assert body["rows"][0] == {
        "stop_id": "940GZZLURMD",
        "name": "Richmond Underground Station",
        "times": ["05:32", "23:45"],
    }
    assert body["text"].startswith("Timetable for District at 940GZZLURMD")
