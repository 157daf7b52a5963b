"""
External Data Gateway - Synthetic Sample Records

Served when an upstream is unreachable or returns nothing. Records use the raw
upstream JSON shape so they pass through the same decoder as live data, and all
dates are relative to the day of generation.
"""
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from ...utils.dates import add_months


def _fda_date(day: date) -> str:
    return day.strftime("%Y%m%d")


def _ct_date(day: date) -> str:
    return day.isoformat()


def sample_applications(today: Optional[date] = None) -> List[Dict[str, Any]]:
    """Five drugs@FDA applications covering CRL, RTF, active review and approval."""
    today = today or date.today()

    def application(number, sponsor, brand, generic, form, sub_type, status, days_ago, priority, pharm_class):
        return {
            "application_number": number,
            "sponsor_name": sponsor,
            "products": [{
                "brand_name": brand,
                "generic_name": generic,
                "dosage_form": form,
                "active_ingredients": [{"name": generic.upper()}],
            }],
            "submissions": [{
                "submission_type": sub_type,
                "submission_status": status,
                "submission_status_date": _fda_date(today - timedelta(days=days_ago)),
                "review_priority": priority,
            }],
            "openfda": {"pharm_class": [pharm_class]},
        }

    return [
        application("NDA-216845", "GILEAD SCIENCES", "VEKLURY", "remdesivir", "INJECTION",
                    "SUPPL", "CR", 10, "PRIORITY", "Antiviral"),
        application("BLA-125742", "BIOGEN", "ADUHELM", "aducanumab", "INJECTION",
                    "SUPPL", "FI", 28, "STANDARD", "Alzheimer Disease Agent"),
        application("ANDA-218956", "TEVA PHARMACEUTICALS", None, "imatinib mesylate", "TABLET",
                    "ORIG", "RT", 14, "STANDARD", "Kinase Inhibitor"),
        application("NDA-217832", "MODERNA", "SPIKEVAX", "covid-19 vaccine mRNA", "INJECTION",
                    "SUPPL", "AP", 18, "PRIORITY", "Vaccine"),
        application("BLA-761239", "CAR-T THERAPEUTICS", "CARTEVAX", "autologous car-t cells", "INJECTION",
                    "ORIG", "FI", 33, "BREAKTHROUGH", "Antineoplastic Agent"),
    ]


def _study(
    nct_id: str,
    title: str,
    sponsor: str,
    phases: List[str],
    status: str,
    start: date,
    first_submitted: date,
    conditions: List[str],
    enrollment: int,
    interventions: List[Dict[str, str]],
    criteria: str,
    primary_outcomes: List[str],
    locations: int,
    intervention_model: str = "SINGLE_GROUP",
) -> Dict[str, Any]:
    return {
        "protocolSection": {
            "identificationModule": {"nctId": nct_id, "briefTitle": title, "officialTitle": title},
            "statusModule": {
                "overallStatus": status,
                "startDateStruct": {"date": _ct_date(start)},
                "studyFirstSubmitDate": _ct_date(first_submitted),
                "studyFirstPostDateStruct": {"date": _ct_date(first_submitted + timedelta(days=7))},
                "lastUpdatePostDateStruct": {"date": _ct_date(first_submitted + timedelta(days=14))},
                "primaryCompletionDateStruct": {"date": _ct_date(add_months(start, 36))},
            },
            "sponsorCollaboratorsModule": {"leadSponsor": {"name": sponsor, "class": "INDUSTRY"}},
            "designModule": {
                "studyType": "INTERVENTIONAL",
                "phases": phases,
                "designInfo": {
                    "allocation": "RANDOMIZED" if intervention_model == "PARALLEL" else "NA",
                    "interventionModel": intervention_model,
                    "primaryPurpose": "TREATMENT",
                    "maskingInfo": {"masking": "NONE"},
                },
                "enrollmentInfo": {"count": enrollment, "type": "ESTIMATED"},
            },
            "conditionsModule": {"conditions": conditions},
            "armsInterventionsModule": {"interventions": interventions},
            "outcomesModule": {
                "primaryOutcomes": [{"measure": m, "timeFrame": "24 months"} for m in primary_outcomes],
                "secondaryOutcomes": [{"measure": "Safety and tolerability"}],
            },
            "eligibilityModule": {"eligibilityCriteria": criteria, "sex": "ALL", "minimumAge": "18 Years"},
            "contactsLocationsModule": {"locations": [{"facility": f"Site {i + 1}"} for i in range(locations)]},
        }
    }


def sample_studies(today: Optional[date] = None) -> List[Dict[str, Any]]:
    """Six ClinicalTrials.gov studies spanning first-in-human to pivotal."""
    today = today or date.today()
    drug = lambda name: {"type": "DRUG", "name": name}

    return [
        _study(
            "NCT90000001",
            "A First-in-Human Study of NVX-101 in Patients With Advanced Solid Tumors",
            "Nuvexa Therapeutics, Inc.",
            ["PHASE1"], "NOT_YET_RECRUITING",
            start=today + timedelta(days=30), first_submitted=today - timedelta(days=20),
            conditions=["Advanced Solid Tumors"], enrollment=48,
            interventions=[drug("NVX-101")],
            criteria="Inclusion: histologically confirmed advanced solid tumor refractory to standard therapy.",
            primary_outcomes=["Incidence of dose-limiting toxicities", "Maximum tolerated dose"],
            locations=4,
        ),
        _study(
            "NCT90000002",
            "Dose Optimization Study of HLB-202 in HER2-Positive and HER2-Negative Metastatic Breast Cancer",
            "Halcyon Biopharma",
            ["PHASE2"], "RECRUITING",
            start=add_months(today, -30), first_submitted=add_months(today, -31),
            conditions=["Metastatic Breast Cancer"], enrollment=120,
            interventions=[drug("HLB-202"), drug("Trastuzumab")],
            criteria=("Inclusion: HER2 positive or HER2 negative by central testing; documented PIK3CA mutation "
                      "status; progression after prior therapy; refractory or relapsed disease."),
            primary_outcomes=["Objective response rate", "Biomarker expression level change"],
            locations=12, intervention_model="PARALLEL",
        ),
        _study(
            "NCT90000003",
            "Phase 1/2 Study of MRD-330, a KRAS G12C Inhibitor, in Non-Small Cell Lung Cancer",
            "Meridian Oncology Sciences",
            ["PHASE1", "PHASE2"], "RECRUITING",
            start=add_months(today, -4), first_submitted=add_months(today, -5),
            conditions=["Non-Small Cell Lung Cancer"], enrollment=160,
            interventions=[drug("MRD-330")],
            criteria="Inclusion: KRAS G12C mutation confirmed by NGS panel; prior platinum-based chemotherapy.",
            primary_outcomes=["Dose-limiting toxicities", "Objective response rate"],
            locations=18,
        ),
        _study(
            "NCT90000004",
            "Adaptive Phase 3 Study of CTX-450 in Early Alzheimer Disease",
            "Cortexa Pharmaceuticals",
            ["PHASE3"], "ACTIVE_NOT_RECRUITING",
            start=add_months(today, -20), first_submitted=add_months(today, -22),
            conditions=["Alzheimer Disease"], enrollment=1200,
            interventions=[drug("CTX-450"), {"type": "DRUG", "name": "Placebo"}],
            criteria="Inclusion: amyloid PET positive; MMSE 22-30.",
            primary_outcomes=["Change from baseline in CDR-SB at 18 months"],
            locations=140, intervention_model="PARALLEL",
        ),
        _study(
            "NCT90000005",
            "Phase 2 Study of RB-77 Gene Therapy in Duchenne Muscular Dystrophy",
            "Rarity Bio",
            ["PHASE2"], "SUSPENDED",
            start=add_months(today, -14), first_submitted=add_months(today, -15),
            conditions=["Duchenne Muscular Dystrophy (rare)"], enrollment=32,
            interventions=[{"type": "BIOLOGICAL", "name": "RB-77"}],
            criteria="Inclusion: confirmed DMD mutation; ambulatory boys aged 4-7.",
            primary_outcomes=["Micro-dystrophin expression level"],
            locations=3,
        ),
        _study(
            "NCT90000006",
            "Biomarker Enrichment Phase 2 Study of HLB-215 in Metastatic Breast Cancer",
            "Halcyon Biopharma",
            ["PHASE2"], "ACTIVE_NOT_RECRUITING",
            start=add_months(today, -18), first_submitted=add_months(today, -19),
            conditions=["Metastatic Breast Cancer"], enrollment=90,
            interventions=[drug("HLB-215")],
            criteria="Inclusion: ESR1 mutation detected by ctDNA liquid biopsy; prior endocrine therapy.",
            primary_outcomes=["Progression-free survival"],
            locations=9,
        ),
    ]


def sample_enforcement(today: Optional[date] = None) -> List[Dict[str, Any]]:
    """Four openFDA enforcement reports across Class I-III."""
    today = today or date.today()

    def report(number, firm, classification, reason, product, days_ago, voluntary="Voluntary: Firm initiated"):
        return {
            "recall_number": number,
            "event_id": number.split("-")[1],
            "recalling_firm": firm,
            "classification": classification,
            "status": "Ongoing",
            "reason_for_recall": reason,
            "product_description": product,
            "code_info": "Lot numbers listed on recall notice",
            "distribution_pattern": "Nationwide",
            "voluntary_mandated": voluntary,
            "report_date": _fda_date(today - timedelta(days=days_ago)),
            "recall_initiation_date": _fda_date(today - timedelta(days=days_ago + 8)),
        }

    return [
        report("D-0101-2025", "Solara Pharma Labs LLC", "Class I",
               "CGMP Deviations: sterility assurance failures in aseptic filling",
               "Ceftriaxone for Injection, 1 g vials", 12, voluntary="FDA Mandated"),
        report("D-0102-2025", "Brightwell Generics Inc.", "Class II",
               "Adulterated product: presence of foreign particulate matter",
               "Metformin HCl Extended-Release Tablets, 500 mg", 25),
        report("D-0103-2025", "Northfield Compounding Co.", "Class III",
               "Manufacturing controls: failed dissolution specifications",
               "Levothyroxine Sodium Tablets, 50 mcg", 40),
        report("D-0104-2025", "Teva Pharmaceuticals, Inc.", "Class II",
               "Failed impurity specifications (nitrosamine above acceptable intake)",
               "Valsartan Tablets, 160 mg", 30),
    ]
