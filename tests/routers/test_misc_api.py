"""
Tests for health, search, company, statistics and export endpoints.
"""
import csv
import io

import pytest


def test_root(client):
    body = client.get("/").json()
    assert body["status"] == "operational"
    assert body["dashboard"] == "/dashboard"


def test_health(client, sample_snapshot):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["data_status"]["total_leads"] == len(sample_snapshot.leads)
    assert body["data_status"]["last_update"] == sample_snapshot.generated_at
    assert "offline_mode" in body["feature_flags"]


def test_dashboard_is_served(client):
    response = client.get("/dashboard/")

    assert response.status_code == 200
    assert "FDA Regulatory Lead Dashboard" in response.text


@pytest.mark.parametrize("params", [{}, {"q": ""}, {"q": "   "}])
def test_search_requires_query(client, params):
    response = client.get("/api/search", params=params)

    assert response.status_code == 400
    assert response.json()["detail"] == "Search query required"


def test_search(client):
    body = client.get("/api/search", params={"q": "TEVA"}).json()

    assert body["query"] == "TEVA"
    assert body["count"] == len(body["results"]) > 0


def test_companies(client, sample_snapshot):
    companies = client.get("/api/companies").json()

    assert len(companies) == len(sample_snapshot.companies)
    touchpoints = [c["touchpoints"] for c in companies]
    assert touchpoints == sorted(touchpoints, reverse=True)


def test_company_by_variant_name(client):
    response = client.get("/api/companies/Teva Pharmaceuticals, Inc.")

    assert response.status_code == 200
    assert response.json()["name"] == "TEVA"


def test_unknown_company(client):
    response = client.get("/api/companies/Nobody Inc")

    assert response.status_code == 404
    assert response.json()["detail"] == "Company not found: Nobody Inc"


def test_statistics(client, sample_snapshot):
    body = client.get("/api/statistics").json()
    assert body["total_leads"] == len(sample_snapshot.leads)


def test_comprehensive_analytics(client, sample_snapshot):
    body = client.get("/api/analytics/comprehensive").json()
    assert body["overview"]["total_leads"] == len(sample_snapshot.leads)


def test_json_export_round_trip(client, sample_snapshot):
    response = client.get("/api/export/leads", params={"format": "json"})

    assert response.status_code == 200
    assert response.headers["content-disposition"] == 'attachment; filename="fda_leads.json"'
    body = response.json()
    assert body["total_leads"] == len(sample_snapshot.leads)
    assert {lead["id"] for lead in body["leads"]} == {lead.id for lead in sample_snapshot.leads}


def test_csv_export(client, sample_snapshot):
    response = client.get("/api/export/leads", params={"format": "CSV", "priority": "CRITICAL"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["content-disposition"] == 'attachment; filename="fda_leads.csv"'
    rows = list(csv.DictReader(io.StringIO(response.text)))
    assert rows
    assert all(row["priority"] == "CRITICAL" for row in rows)


def test_unsupported_export_format(client):
    response = client.get("/api/export/leads", params={"format": "xml"})

    assert response.status_code == 400
    assert "Unsupported export format" in response.json()["detail"]


def test_generate_leads(client, monkeypatch):
    monkeypatch.setattr("fdaleads.services.lead_generation.OFFLINE_MODE", True)
    monkeypatch.setattr("fdaleads.services.lead_generation.ENABLE_SAMPLE_FALLBACK", True)

    response = client.post("/api/generate-leads")

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "FDA lead generation completed"
    assert body["count"] > 0
    assert len(body["top_leads"]) == min(5, body["count"])
    assert set(body["sources"].values()) == {"sample"}
