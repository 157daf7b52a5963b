"""
External Data Gateway - API Client Module

Async fetches from openFDA and ClinicalTrials.gov API v2. Every failure is
logged and turned into an empty result, and an empty result is replaced by the
built-in sample records, so callers always receive decodable input.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Optional

import httpx

from ...config import ENABLE_SAMPLE_FALLBACK
from ...models.records import ApplicationRecord, EnforcementRecord, TrialRecord
from .config import (
    ACTIVE_STATUSES,
    APPLICATION_LIMIT,
    APPLICATION_WINDOW_DAYS,
    CTGOV_REQUEST_TIMEOUT,
    CTGOV_STUDIES_URL,
    DRUGSFDA_URL,
    EARLY_PHASE_PAGE_SIZE,
    EARLY_PHASES,
    ENFORCEMENT_URL,
    FDA_REQUEST_TIMEOUT,
    INSPECTION_LIMIT,
    INSPECTION_SEARCH,
    PHASE2_PHASES,
    PHASE2_STATUSES,
    RECALL_LIMIT,
    RECALL_WINDOW_DAYS,
    RECENT_STATUSES,
    RECENT_TRIAL_WINDOW_DAYS,
    TRIAL_PAGE_SIZE,
    WARNING_CLASSIFICATIONS,
    WARNING_LETTER_LIMIT,
    WARNING_LETTER_WINDOW_DAYS,
    WARNING_REASON_KEYWORDS,
)
from .decoder import decode_application, decode_enforcement, decode_many, decode_study
from .query_builder import CTGovQueryBuilder, OpenFDAQueryBuilder
from .sample_data import sample_applications, sample_enforcement, sample_studies

logger = logging.getLogger(__name__)

SOURCE_LIVE = "live"
SOURCE_SAMPLE = "sample"
SOURCE_EMPTY = "empty"


@dataclass
class FetchResult:
    """Decoded records plus where they came from (live, sample or empty)."""
    records: list
    source: str


@dataclass
class UpstreamData:
    applications: List[ApplicationRecord] = field(default_factory=list)
    trials: List[TrialRecord] = field(default_factory=list)
    warning_letters: List[EnforcementRecord] = field(default_factory=list)
    recalls: List[EnforcementRecord] = field(default_factory=list)
    inspections: List[EnforcementRecord] = field(default_factory=list)
    sources: Dict[str, str] = field(default_factory=dict)


async def get_json(url: str, params: Dict[str, Any], timeout: float, label: str) -> Optional[Any]:
    """
    GET a JSON document.

    Returns:
        Parsed JSON, or None on any network, HTTP or decoding failure
    """
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(url, params=params)
            response.raise_for_status()
            return response.json()
    except httpx.RequestError as e:
        logger.warning(f"{label}: request failed: {e}")
    except httpx.HTTPStatusError as e:
        logger.warning(f"{label}: upstream returned error status {e.response.status_code}")
    except ValueError as e:
        logger.warning(f"{label}: malformed JSON payload: {e}")
    except Exception as e:
        logger.error(f"{label}: unexpected error: {e}", exc_info=True)
    return None


def _results(payload: Any, key: str) -> List[Any]:
    if isinstance(payload, dict) and isinstance(payload.get(key), list):
        return payload[key]
    return []


def _with_fallback(
    label: str,
    live: list,
    sample_factory: Callable[[], List[Dict[str, Any]]],
    decoder: Callable,
    keep: Optional[Callable[[Any], bool]] = None,
    fallback: bool = True,
) -> FetchResult:
    if keep is not None:
        live = [record for record in live if keep(record)]
    if live:
        return FetchResult(records=live, source=SOURCE_LIVE)
    if not fallback:
        logger.warning(f"{label}: no upstream records and sample fallback disabled")
        return FetchResult(records=[], source=SOURCE_EMPTY)

    records = decode_many(sample_factory(), decoder)
    if keep is not None:
        records = [record for record in records if keep(record)]
    logger.warning(f"{label}: upstream empty or unavailable, using {len(records)} sample records")
    return FetchResult(records=records, source=SOURCE_SAMPLE)


async def fetch_drug_applications(
    offline: bool = False,
    fallback: bool = ENABLE_SAMPLE_FALLBACK,
    today: Optional[date] = None,
) -> FetchResult:
    """Applications with a submission status change in the last year."""
    live: List[ApplicationRecord] = []
    if not offline:
        params = (
            OpenFDAQueryBuilder()
            .add_date_range("submissions.submission_status_date", APPLICATION_WINDOW_DAYS, today)
            .set_limit(APPLICATION_LIMIT)
            .build()
        )
        payload = await get_json(DRUGSFDA_URL, params, FDA_REQUEST_TIMEOUT, "drugs@FDA")
        live = decode_many(_results(payload, "results"), decode_application)
        logger.info(f"drugs@FDA returned {len(live)} applications")

    return _with_fallback(
        "drugs@FDA", live, lambda: sample_applications(today), decode_application, fallback=fallback
    )


def _trial_queries(today: Optional[date] = None) -> Dict[str, Dict[str, Any]]:
    """The four ClinicalTrials.gov queries fanned out concurrently."""
    return {
        "active": (
            CTGovQueryBuilder().add_intervention("Drug").add_status(ACTIVE_STATUSES)
            .set_page_size(TRIAL_PAGE_SIZE).build()
        ),
        "recent": (
            CTGovQueryBuilder().add_intervention("Drug").add_status(RECENT_STATUSES)
            .add_first_submitted_since(RECENT_TRIAL_WINDOW_DAYS, today)
            .set_page_size(TRIAL_PAGE_SIZE).build()
        ),
        "early_phase": (
            CTGovQueryBuilder().add_intervention("Drug").add_status(RECENT_STATUSES)
            .add_phase(EARLY_PHASES).set_page_size(EARLY_PHASE_PAGE_SIZE).build()
        ),
        "phase2": (
            CTGovQueryBuilder().add_intervention("Drug").add_status(PHASE2_STATUSES)
            .add_phase(PHASE2_PHASES).set_page_size(TRIAL_PAGE_SIZE).build()
        ),
    }


def merge_studies(batches: List[List[TrialRecord]]) -> List[TrialRecord]:
    """Concatenate study batches, keeping the first record seen per NCT ID."""
    seen = set()
    merged = []
    for batch in batches:
        for record in batch:
            if record.nct_id in seen:
                continue
            seen.add(record.nct_id)
            merged.append(record)
    return merged


async def fetch_clinical_trials(
    offline: bool = False,
    fallback: bool = ENABLE_SAMPLE_FALLBACK,
    today: Optional[date] = None,
) -> FetchResult:
    """Drug trials from four concurrent queries, deduplicated by NCT ID."""
    live: List[TrialRecord] = []
    if not offline:
        queries = _trial_queries(today)
        payloads = await asyncio.gather(*[
            get_json(CTGOV_STUDIES_URL, params, CTGOV_REQUEST_TIMEOUT, f"ClinicalTrials.gov {name}")
            for name, params in queries.items()
        ])
        batches = [decode_many(_results(payload, "studies"), decode_study) for payload in payloads]
        live = merge_studies(batches)
        logger.info(
            f"ClinicalTrials.gov returned {sum(len(b) for b in batches)} studies, {len(live)} unique"
        )

    return _with_fallback(
        "ClinicalTrials.gov", live, lambda: sample_studies(today), decode_study, fallback=fallback
    )


def is_warning_grade(record: EnforcementRecord) -> bool:
    """Class I/II actions, or any action citing cGMP or adulteration."""
    reason = record.reason_for_recall.lower()
    return (
        record.classification in WARNING_CLASSIFICATIONS
        or any(keyword in reason for keyword in WARNING_REASON_KEYWORDS)
    )


def is_gmp_finding(record: EnforcementRecord) -> bool:
    reason = record.reason_for_recall.lower()
    return "gmp" in reason or "manufactur" in reason


async def _fetch_enforcement(label: str, params: Dict[str, Any], offline: bool) -> List[EnforcementRecord]:
    if offline:
        return []
    payload = await get_json(ENFORCEMENT_URL, params, FDA_REQUEST_TIMEOUT, label)
    records = decode_many(_results(payload, "results"), decode_enforcement)
    logger.info(f"{label} returned {len(records)} enforcement reports")
    return records


async def fetch_warning_letters(
    offline: bool = False,
    fallback: bool = ENABLE_SAMPLE_FALLBACK,
    today: Optional[date] = None,
) -> FetchResult:
    """Serious enforcement actions reported in the last 180 days."""
    params = (
        OpenFDAQueryBuilder()
        .add_date_range("report_date", WARNING_LETTER_WINDOW_DAYS, today)
        .set_limit(WARNING_LETTER_LIMIT)
        .build()
    )
    live = await _fetch_enforcement("openFDA warning letters", params, offline)
    return _with_fallback(
        "openFDA warning letters", live, lambda: sample_enforcement(today), decode_enforcement,
        keep=is_warning_grade, fallback=fallback,
    )


async def fetch_recalls(
    offline: bool = False,
    fallback: bool = ENABLE_SAMPLE_FALLBACK,
    today: Optional[date] = None,
) -> FetchResult:
    """Recalls initiated in the last 90 days."""
    params = (
        OpenFDAQueryBuilder()
        .add_date_range("recall_initiation_date", RECALL_WINDOW_DAYS, today)
        .set_limit(RECALL_LIMIT)
        .build()
    )
    live = await _fetch_enforcement("openFDA recalls", params, offline)
    return _with_fallback(
        "openFDA recalls", live, lambda: sample_enforcement(today), decode_enforcement, fallback=fallback
    )


async def fetch_inspection_findings(
    offline: bool = False,
    fallback: bool = ENABLE_SAMPLE_FALLBACK,
    today: Optional[date] = None,
) -> FetchResult:
    """GMP-related enforcement reports, used as a proxy for inspection findings."""
    params = OpenFDAQueryBuilder().add_raw(INSPECTION_SEARCH).set_limit(INSPECTION_LIMIT).build()
    live = await _fetch_enforcement("openFDA inspections", params, offline)
    return _with_fallback(
        "openFDA inspections", live, lambda: sample_enforcement(today), decode_enforcement,
        keep=is_gmp_finding, fallback=fallback,
    )


async def fetch_all(
    offline: bool = False,
    fallback: bool = ENABLE_SAMPLE_FALLBACK,
    include_trials: bool = True,
    include_enforcement: bool = True,
    today: Optional[date] = None,
) -> UpstreamData:
    """Fetch every dataset the generation pass consumes."""
    tasks = {"applications": fetch_drug_applications(offline, fallback, today)}
    if include_trials:
        tasks["trials"] = fetch_clinical_trials(offline, fallback, today)
    if include_enforcement:
        tasks["warning_letters"] = fetch_warning_letters(offline, fallback, today)
        tasks["recalls"] = fetch_recalls(offline, fallback, today)
        tasks["inspections"] = fetch_inspection_findings(offline, fallback, today)

    results = await asyncio.gather(*tasks.values())
    data = UpstreamData()
    for name, result in zip(tasks.keys(), results):
        setattr(data, name, result.records)
        data.sources[name] = result.source
    return data
