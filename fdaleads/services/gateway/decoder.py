"""
External Data Gateway - Decoder Module

Decodes raw openFDA and ClinicalTrials.gov API v2 JSON into the fully defaulted
records in fdaleads.models.records. Upstream nulls, wrong types and missing keys
all collapse to defaults here, once, at the boundary.
"""
import logging
from typing import Any, Dict, List, Optional

from ...models.records import (
    ApplicationRecord,
    EligibilityRecord,
    EnforcementRecord,
    InterventionRecord,
    OutcomeRecord,
    ProductRecord,
    SubmissionRecord,
    TrialRecord,
)
from ...utils.dates import parse_date

logger = logging.getLogger(__name__)


def _section(data: Any, key: str) -> Dict[str, Any]:
    value = data.get(key) if isinstance(data, dict) else None
    return value if isinstance(value, dict) else {}


def _items(data: Any, key: str) -> List[Any]:
    value = data.get(key) if isinstance(data, dict) else None
    return value if isinstance(value, list) else []


def _text(data: Any, key: str, default: str = "") -> str:
    value = data.get(key) if isinstance(data, dict) else None
    if value is None:
        return default
    return str(value).strip()


def _texts(data: Any, key: str) -> List[str]:
    return [str(v).strip() for v in _items(data, key) if v is not None and str(v).strip()]


def _int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _submission_order(submission: SubmissionRecord) -> int:
    parsed = parse_date(submission.submission_status_date)
    return parsed.toordinal() if parsed else 0


def decode_application(raw: Any) -> Optional[ApplicationRecord]:
    """
    Decode one drugs@FDA result.

    Returns None for non-object payload items.
    """
    if not isinstance(raw, dict):
        return None

    products = []
    for item in _items(raw, "products"):
        if not isinstance(item, dict):
            continue
        ingredients = []
        for ingredient in _items(item, "active_ingredients"):
            if isinstance(ingredient, dict):
                name = _text(ingredient, "name")
            else:
                name = str(ingredient).strip() if ingredient is not None else ""
            if name:
                ingredients.append(name)
        products.append(ProductRecord(
            brand_name=_text(item, "brand_name"),
            generic_name=_text(item, "generic_name"),
            dosage_form=_text(item, "dosage_form"),
            active_ingredients=ingredients,
        ))

    submissions = [
        SubmissionRecord(
            submission_type=_text(item, "submission_type"),
            submission_number=_text(item, "submission_number"),
            submission_status=_text(item, "submission_status"),
            submission_status_date=_text(item, "submission_status_date"),
            review_priority=_text(item, "review_priority").upper(),
        )
        for item in _items(raw, "submissions")
        if isinstance(item, dict)
    ]
    # Most recent first; undated submissions sink to the end
    submissions.sort(key=_submission_order, reverse=True)

    openfda = _section(raw, "openfda")
    pharm_class = (
        _texts(openfda, "pharm_class")
        + _texts(openfda, "pharm_class_epc")
        + _texts(openfda, "pharm_class_moa")
        + _texts(openfda, "pharm_class_cs")
    )
    sponsor = _text(raw, "sponsor_name") or " ".join(_texts(openfda, "manufacturer_name")[:1])

    return ApplicationRecord(
        application_number=_text(raw, "application_number"),
        sponsor_name=sponsor,
        products=products,
        submissions=submissions,
        pharm_class=pharm_class,
    )


def decode_study(raw: Any) -> Optional[TrialRecord]:
    """
    Decode one ClinicalTrials.gov v2 study.

    Returns None if the study has no NCT ID.
    """
    if not isinstance(raw, dict):
        return None

    protocol = _section(raw, "protocolSection")
    identification = _section(protocol, "identificationModule")
    nct_id = _text(identification, "nctId")
    if not nct_id:
        return None

    status = _section(protocol, "statusModule")
    sponsors = _section(protocol, "sponsorCollaboratorsModule")
    design = _section(protocol, "designModule")
    design_info = _section(design, "designInfo")
    enrollment = _section(design, "enrollmentInfo")
    conditions = _section(protocol, "conditionsModule")
    arms = _section(protocol, "armsInterventionsModule")
    outcomes = _section(protocol, "outcomesModule")
    eligibility = _section(protocol, "eligibilityModule")
    locations = _section(protocol, "contactsLocationsModule")

    interventions = [
        InterventionRecord(
            type=_text(item, "type").upper(),
            name=_text(item, "name"),
            description=_text(item, "description"),
        )
        for item in _items(arms, "interventions")
        if isinstance(item, dict)
    ]
    primary_outcomes = [
        OutcomeRecord(
            measure=_text(item, "measure"),
            time_frame=_text(item, "timeFrame"),
            description=_text(item, "description"),
        )
        for item in _items(outcomes, "primaryOutcomes")
        if isinstance(item, dict)
    ]

    return TrialRecord(
        nct_id=nct_id,
        title=_text(identification, "briefTitle"),
        official_title=_text(identification, "officialTitle"),
        sponsor=_text(_section(sponsors, "leadSponsor"), "name"),
        collaborators=[
            _text(item, "name") for item in _items(sponsors, "collaborators")
            if isinstance(item, dict) and _text(item, "name")
        ],
        phases=[phase.upper() for phase in _texts(design, "phases")],
        study_type=_text(design, "studyType").upper(),
        status=_text(status, "overallStatus").upper(),
        conditions=_texts(conditions, "conditions"),
        enrollment=_int(enrollment.get("count")),
        enrollment_type=_text(enrollment, "type"),
        intervention_model=_text(design_info, "interventionModel"),
        primary_purpose=_text(design_info, "primaryPurpose"),
        start_date=_text(_section(status, "startDateStruct"), "date"),
        first_submit_date=_text(status, "studyFirstSubmitDate"),
        first_posted_date=_text(_section(status, "studyFirstPostDateStruct"), "date"),
        last_update_posted_date=_text(_section(status, "lastUpdatePostDateStruct"), "date"),
        primary_completion_date=_text(_section(status, "primaryCompletionDateStruct"), "date"),
        completion_date=_text(_section(status, "completionDateStruct"), "date"),
        interventions=interventions,
        primary_outcomes=primary_outcomes,
        secondary_outcome_count=len(_items(outcomes, "secondaryOutcomes")),
        eligibility=EligibilityRecord(
            criteria=_text(eligibility, "eligibilityCriteria"),
        ),
        location_count=len(_items(locations, "locations")),
    )


def decode_enforcement(raw: Any) -> Optional[EnforcementRecord]:
    """Decode one openFDA drug enforcement report."""
    if not isinstance(raw, dict):
        return None

    return EnforcementRecord(
        recall_number=_text(raw, "recall_number"),
        event_id=_text(raw, "event_id"),
        recalling_firm=_text(raw, "recalling_firm"),
        classification=_text(raw, "classification"),
        status=_text(raw, "status"),
        reason_for_recall=_text(raw, "reason_for_recall"),
        product_description=_text(raw, "product_description"),
        code_info=_text(raw, "code_info"),
        distribution_pattern=_text(raw, "distribution_pattern"),
        voluntary_mandated=_text(raw, "voluntary_mandated"),
        report_date=_text(raw, "report_date"),
        recall_initiation_date=_text(raw, "recall_initiation_date"),
    )


def decode_many(items: Any, decoder) -> list:
    """Apply a decoder to a payload list, dropping items it rejects."""
    if not isinstance(items, list):
        return []
    decoded = []
    for item in items:
        record = decoder(item)
        if record is None:
            logger.debug(f"Skipping undecodable upstream item: {str(item)[:80]}")
            continue
        decoded.append(record)
    return decoded
