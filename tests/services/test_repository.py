"""
Tests for the lead repository: publishing, lookups, filters and search.
"""
from fdaleads.services.repository import LeadRepository, LeadSnapshot, get_lead_repository


def test_new_repository_is_empty():
    repository = LeadRepository()

    assert repository.snapshot.leads == ()
    assert repository.counts()["total_leads"] == 0
    assert repository.get("app-NDA-216845") is None


def test_publish_swaps_whole_snapshot(repository, snapshot):
    previous = repository.publish(LeadSnapshot())

    assert previous is snapshot
    assert repository.snapshot.leads == ()


def test_get_by_id(repository, snapshot):
    lead = snapshot.leads[0]
    assert repository.get(lead.id) is lead
    assert set(snapshot.by_id) == {lead.id for lead in snapshot.leads}


def test_get_follows_published_snapshot(repository, snapshot):
    lead_id = snapshot.leads[0].id
    repository.publish(LeadSnapshot())

    assert repository.get(lead_id) is None


def test_filter_ignores_case(repository, snapshot):
    critical = repository.filter(priority="critical")

    assert critical
    assert all(lead.priority.value == "CRITICAL" for lead in critical)
    assert len(repository.filter(lead_type="clinical_trial")) == sum(
        1 for lead in snapshot.leads if lead.lead_type.value == "CLINICAL_TRIAL"
    )


def test_filters_combine(repository):
    leads = repository.filter(lead_type="CLINICAL_TRIAL", phase="PHASE2")
    assert all(lead.trial and lead.trial.phase == "PHASE2" for lead in leads)


def test_high_value_filter(repository):
    for lead in repository.filter(high_value="true"):
        assert lead.is_high_value or lead.score >= 80


def test_search_matches_company_and_ids(repository):
    assert any(lead.company_name == "TEVA" for lead in repository.search("teva"))
    assert [lead.id for lead in repository.search("NCT90000002")] == ["trial-NCT90000002"]
    assert repository.search("   ") == []


def test_get_company_by_variant_name(repository):
    assert repository.get_company("Teva Pharmaceuticals, Inc.").name == "TEVA"
    assert repository.get_company("No Such Company") is None


def test_counts(repository, snapshot):
    counts = repository.counts()

    assert counts["total_leads"] == len(snapshot.leads)
    assert counts["companies"] == len(snapshot.companies)
    assert counts["last_update"] == snapshot.generated_at


def test_singleton():
    assert get_lead_repository() is get_lead_repository()
