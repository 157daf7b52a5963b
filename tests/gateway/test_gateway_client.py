"""
Tests for the gateway fetches, with httpx.AsyncClient mocked out.
"""
import httpx
import pytest

from fdaleads.services.gateway import api_client
from fdaleads.services.gateway.api_client import (
    fetch_all,
    fetch_clinical_trials,
    fetch_drug_applications,
    fetch_recalls,
    fetch_warning_letters,
    merge_studies,
)
from fdaleads.models.records import TrialRecord


class MockResp:
    def __init__(self, payload=None, status_code=200):
        self._payload = payload if payload is not None else {}
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            request = httpx.Request("GET", "https://example.test")
            raise httpx.HTTPStatusError(
                f"HTTP {self.status_code}", request=request, response=httpx.Response(self.status_code, request=request)
            )

    def json(self):
        return self._payload


def make_client(responses, calls):
    """DummyAsyncClient answering GETs by URL suffix; a missing suffix raises ConnectError."""
    class DummyAsyncClient:
        def __init__(self, *args, **kwargs):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_type, exc, tb):
            return False

        async def get(self, url, params=None, **kwargs):
            calls.append((url, params))
            for suffix, response in responses.items():
                if url.endswith(suffix):
                    return response
            raise httpx.ConnectError("connection refused")

    return DummyAsyncClient


@pytest.fixture
def calls():
    """Records every (url, params) the mocked client receives"""
    return []


@pytest.mark.asyncio
async def test_live_applications_are_used(monkeypatch, calls, raw_application, today):
    monkeypatch.setattr("httpx.AsyncClient", make_client(
        {"/drugsfda.json": MockResp({"results": [raw_application]})}, calls
    ))

    result = await fetch_drug_applications(today=today)

    assert result.source == "live"
    assert [a.application_number for a in result.records] == ["NDA021234"]
    url, params = calls[0]
    assert params["search"].startswith("submissions.submission_status_date:[20240615 TO 20250615]")
    assert params["limit"] == 100


@pytest.mark.asyncio
async def test_network_failure_falls_back_to_sample(monkeypatch, calls, today):
    monkeypatch.setattr("httpx.AsyncClient", make_client({}, calls))

    result = await fetch_drug_applications(today=today)

    assert result.source == "sample"
    assert len(result.records) == 5
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_http_error_without_fallback_is_empty(monkeypatch, calls, today):
    monkeypatch.setattr("httpx.AsyncClient", make_client(
        {"/drugsfda.json": MockResp(status_code=503)}, calls
    ))

    result = await fetch_drug_applications(fallback=False, today=today)

    assert result.source == "empty"
    assert result.records == []


@pytest.mark.asyncio
async def test_empty_live_result_falls_back(monkeypatch, calls, today):
    monkeypatch.setattr("httpx.AsyncClient", make_client(
        {"/drugsfda.json": MockResp({"results": []})}, calls
    ))

    result = await fetch_drug_applications(today=today)

    assert result.source == "sample"


@pytest.mark.asyncio
async def test_offline_mode_never_calls_network(monkeypatch, calls, today):
    monkeypatch.setattr("httpx.AsyncClient", make_client({}, calls))

    data = await fetch_all(offline=True, today=today)

    assert calls == []
    assert set(data.sources.values()) == {"sample"}
    assert len(data.applications) == 5
    assert len(data.trials) == 6
    assert len(data.recalls) == 4


@pytest.mark.asyncio
async def test_trials_fan_out_and_deduplicate(monkeypatch, calls, raw_study, today):
    monkeypatch.setattr("httpx.AsyncClient", make_client(
        {"/studies": MockResp({"studies": [raw_study]})}, calls
    ))

    result = await fetch_clinical_trials(today=today)

    assert len(calls) == 4
    assert result.source == "live"
    assert [t.nct_id for t in result.records] == ["NCT05551234"]
    statuses = [params.get("filter.overallStatus") for _, params in calls]
    assert "RECRUITING,ACTIVE_NOT_RECRUITING,SUSPENDED,TERMINATED" in statuses


@pytest.mark.asyncio
async def test_warning_letters_keep_serious_actions_only(monkeypatch, calls, today):
    reports = [
        {"recall_number": "D-1", "recalling_firm": "A", "classification": "Class III",
         "reason_for_recall": "Labeling error"},
        {"recall_number": "D-2", "recalling_firm": "B", "classification": "Class III",
         "reason_for_recall": "CGMP deviations"},
        {"recall_number": "D-3", "recalling_firm": "C", "classification": "Class II",
         "reason_for_recall": "Subpotent"},
    ]
    monkeypatch.setattr("httpx.AsyncClient", make_client(
        {"/enforcement.json": MockResp({"results": reports})}, calls
    ))

    result = await fetch_warning_letters(today=today)

    assert [r.recall_number for r in result.records] == ["D-2", "D-3"]


@pytest.mark.asyncio
async def test_malformed_payload_is_treated_as_empty(monkeypatch, calls, today):
    monkeypatch.setattr("httpx.AsyncClient", make_client(
        {"/enforcement.json": MockResp({"results": "not-a-list"})}, calls
    ))

    result = await fetch_recalls(fallback=False, today=today)

    assert result.source == "empty"


@pytest.mark.asyncio
async def test_get_json_unexpected_error_returns_none(monkeypatch):
    class BrokenClient:
        def __init__(self, *args, **kwargs):
            raise RuntimeError("boom")

    monkeypatch.setattr("httpx.AsyncClient", BrokenClient)

    assert await api_client.get_json("https://example.test", {}, 1, "test") is None


def test_merge_studies_first_occurrence_wins():
    first = TrialRecord(nct_id="NCT1", title="first")
    duplicate = TrialRecord(nct_id="NCT1", title="second")
    other = TrialRecord(nct_id="NCT2")

    merged = merge_studies([[first], [duplicate, other]])

    assert [t.nct_id for t in merged] == ["NCT1", "NCT2"]
    assert merged[0].title == "first"
