"""
Pytest fixtures for External Data Gateway tests.
"""
from datetime import date
from typing import Any, Dict, List

import pytest


@pytest.fixture
def today() -> date:
    """Fixed reference date so every lookback window is reproducible"""
    return date(2025, 6, 15)


@pytest.fixture
def raw_application() -> Dict[str, Any]:
    """drugs@FDA result with submissions out of date order"""
    return {
        "application_number": "NDA021234",
        "sponsor_name": "ACME PHARMACEUTICALS INC",
        "products": [
            {
                "brand_name": "ACMEZOL",
                "generic_name": "acmezolimab",
                "dosage_form": "TABLET",
                "active_ingredients": [{"name": "ACMEZOLIMAB", "strength": "10MG"}],
            },
            "not-a-product",
        ],
        "submissions": [
            {"submission_type": "ORIG", "submission_status": "AP", "submission_status_date": "20200101"},
            {"submission_type": "SUPPL", "submission_status": "CR", "submission_status_date": "20250601",
             "review_priority": "priority"},
            {"submission_type": "SUPPL", "submission_status": "FI", "submission_status_date": None},
        ],
        "openfda": {"pharm_class_epc": ["Kinase Inhibitor [EPC]"]},
    }


@pytest.fixture
def raw_study() -> Dict[str, Any]:
    """ClinicalTrials.gov v2 study with a few modules missing"""
    return {
        "protocolSection": {
            "identificationModule": {"nctId": "NCT05551234", "briefTitle": "Study of ABC-1 in Melanoma"},
            "statusModule": {"overallStatus": "recruiting", "startDateStruct": {"date": "2024-01"}},
            "sponsorCollaboratorsModule": {
                "leadSponsor": {"name": "Alpha Bio"},
                "collaborators": [{"name": "Beta Labs"}, {"class": "OTHER"}],
            },
            "designModule": {
                "studyType": "INTERVENTIONAL",
                "phases": ["phase2"],
                "enrollmentInfo": {"count": "85"},
            },
            "conditionsModule": {"conditions": ["Melanoma", None]},
            "armsInterventionsModule": {"interventions": [{"type": "drug", "name": "ABC-1"}]},
        }
    }


@pytest.fixture
def studies_payload(raw_study) -> Dict[str, List[Dict[str, Any]]]:
    """Studies response containing one decodable and one broken study"""
    return {"studies": [raw_study, {"protocolSection": {}}]}
