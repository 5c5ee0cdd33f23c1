from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from api.main import app
from core.data import clear_cache

DATASET = {
    "campaigns": [
        {
            "id": "A",
            "name": "Alpha",
            "spend": 100,
            "revenue": 200,
            "demographic_breakdown": [
                {"gender": "Male", "age_group": "25-34", "percentage_of_audience": 50, "performance": {"impressions": 1000, "clicks": 50, "conversions": 5}},
                {"gender": "Female", "age_group": "35-44", "percentage_of_audience": 50, "performance": {"impressions": 400, "clicks": 20, "conversions": 2}},
            ],
            "device_performance": [
                {"device": "Mobile", "percentage_of_traffic": 70, "impressions": 900, "clicks": 45, "conversions": 4},
                {"device": "Desktop", "percentage_of_traffic": 30, "impressions": 500, "clicks": 25, "conversions": 3},
            ],
            "regional_performance": [
                {"region": "London", "country": "UK", "spend": 60, "revenue": 150, "impressions": 800, "clicks": 40, "conversions": 4},
                {"region": "Muscat", "country": "Oman", "spend": 40, "revenue": 50, "impressions": 600, "clicks": 30, "conversions": 3},
            ],
            "weekly_performance": [
                {"week_start": "2024-01-01", "spend": 40, "revenue": 90},
                {"week_start": "2024-01-08", "spend": 60, "revenue": 110},
            ],
        },
        {
            "id": "B",
            "name": "Beta",
            "spend": 50,
            "revenue": 50,
            "demographic_breakdown": [
                {"gender": "male", "age_group": "25-34", "percentage_of_audience": 100, "performance": {"impressions": 500, "clicks": 25, "conversions": 1}},
            ],
            "device_performance": [],
            "regional_performance": [],
            "weekly_performance": [],
        },
    ]
}


@pytest.fixture
def client(tmp_path, monkeypatch):
    path = tmp_path / "marketing_data.json"
    path.write_text(json.dumps(DATASET), encoding="utf-8")
    monkeypatch.setenv("MARKETING_DATA_FILE", str(path))
    clear_cache()
    yield TestClient(app)
    clear_cache()


def test_meta_endpoints(client) -> None:
    assert client.get("/meta/campaigns").json() == {
        "campaigns": [{"id": "A", "name": "Alpha"}, {"id": "B", "name": "Beta"}]
    }
    assert client.get("/meta/devices").json() == {"values": ["Desktop", "Mobile"]}
    assert client.get("/meta/regions").json() == {"values": ["London", "Muscat"]}


def test_demographics_endpoint(client) -> None:
    resp = client.post("/demographics", json={})
    assert resp.status_code == 200
    body = resp.json()
    male = body["age_groups"]["male"][0]
    assert male["impressions"] == 1500
    assert male["spend"] == pytest.approx(100.0)
    assert male["revenue"] == pytest.approx(150.0)
    assert male["conversion_rate"] == pytest.approx(8.0)


def test_devices_endpoint_sorted_by_revenue(client) -> None:
    body = client.post("/devices", json={"top_n": 10}).json()
    assert [d["device"] for d in body["devices"]] == ["Mobile", "Desktop"]
    assert body["kpis"]["total_spend"] == pytest.approx(100.0)


def test_regions_endpoint_reports_unmapped(client) -> None:
    body = client.post("/regions", json={"charts": {"color_scheme": "purple"}}).json()
    bubble_map = body["bubble_map"]
    assert bubble_map["mapped_count"] == 1
    assert bubble_map["unmapped_count"] == 1
    assert bubble_map["points"][0]["region"] == "London"
    assert bubble_map["points"][0]["color"].startswith("#")
    assert len(body["weekly"]["revenue"]["points"]) == 2


def test_export_csv(client) -> None:
    resp = client.post("/export/regions", json={})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    lines = resp.text.strip().splitlines()
    assert lines[0].startswith("region,")
    assert lines[1].startswith("London,")

    weekly = client.post("/export/weekly", json={}).text.strip().splitlines()
    assert weekly == ["week_start,spend,revenue", "2024-01-01,40.0,90.0", "2024-01-08,60.0,110.0"]

    demo = client.post("/export/demographics", json={}).text.strip().splitlines()
    assert demo[0].startswith("gender,age_group,")


def test_export_unknown_page_is_empty(client) -> None:
    resp = client.post("/export/nope", json={})
    assert resp.status_code == 200
    assert resp.headers["content-disposition"] == "attachment; filename=nope.csv"
    assert "," not in resp.text


def test_broken_dataset_returns_500(tmp_path, monkeypatch) -> None:
    path = tmp_path / "broken.json"
    path.write_text(json.dumps({"campaigns": "oops"}), encoding="utf-8")
    monkeypatch.setenv("MARKETING_DATA_FILE", str(path))
    clear_cache()
    resp = TestClient(app).post("/regions", json={})
    assert resp.status_code == 500
    assert resp.json()["type"] == "ValueError"
