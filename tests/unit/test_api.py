"""Tests for the HTTP API."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.main import app

COMPACT_ROW = "1 123456 15 TUR DE 08 A 14 H. CONDUCTOR 1A MEDITERRANEAN SHIPPING C.TV MSC AURORA CARGA 45.50"
PORTAL_TEXT = "JORNALES DE MARZO DE 2026\n" + COMPACT_ROW + "\n"


@pytest.fixture
def client():
    return TestClient(app)


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_parse(client):
    response = client.post(
        "/api/parse", json={"text": COMPACT_ROW, "group": "I", "irpf": 15, "today": "2026-03-10"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["dialect"] == "token_stream"
    assert data["summary"] == {"detected": 1, "calculated": 1, "skipped": 0}
    (entry,) = data["entries"]
    assert entry["date"] == "2026-03-15"
    assert entry["group"] == "II"
    assert entry["day_type"] == "FESTIVO"
    assert entry["company"] == "MSC"
    assert entry["production"] == "45.50"
    assert data["parsed_on"] == "2026-03-10"


def test_parse_unknown_group(client):
    response = client.post("/api/parse", json={"text": COMPACT_ROW, "group": "VII"})
    assert response.status_code == 400


def test_process_upload(client):
    response = client.post(
        "/api/process",
        files={
            "portal_file": ("portal.txt", PORTAL_TEXT.encode("utf-8"), "text/plain"),
            "salary_table_file": ("table.csv", b"g;d;s;a\nII;FESTIVO;08-14;300,00\n", "text/csv"),
        },
        data={"group": "I", "irpf": "0"},
    )
    assert response.status_code == 200
    (entry,) = response.json()["entries"]
    assert entry["day_type"] == "FESTIVO"
    assert entry["base"] == "300.00"
    assert entry["total"] == "345.50"
    assert entry["net"] == "345.50"


def test_process_rejects_other_file_types(client):
    response = client.post(
        "/api/process", files={"portal_file": ("portal.docx", b"x", "application/octet-stream")},
    )
    assert response.status_code == 400


def test_recalculate(client):
    parsed = client.post(
        "/api/parse", json={"text": COMPACT_ROW, "irpf": 15, "today": "2026-03-10"},
    ).json()
    response = client.post("/api/recalculate", json={"entries": parsed["entries"], "irpf": 0})
    assert response.status_code == 200
    data = response.json()
    (entry,) = data["entries"]
    assert entry["net"] == entry["total"] == parsed["entries"][0]["total"]
    assert data["skipped"] == 0


def test_recalculate_skips_incomplete_entries(client):
    response = client.post("/api/recalculate", json={"entries": [{"group": "II"}], "irpf": 15})
    assert response.json()["skipped"] == 1


def test_recalculate_rejects_bad_date(client):
    response = client.post(
        "/api/recalculate", json={"entries": [{"date": "15/03/2026", "group": "II", "shift": "08-14"}], "irpf": 15},
    )
    assert response.status_code == 400
