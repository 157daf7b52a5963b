"""
Tests for lead listing, lookup and email endpoints.
"""


def test_list_leads(client, sample_snapshot):
    response = client.get("/api/leads")

    assert response.status_code == 200
    assert [lead["id"] for lead in response.json()] == [lead.id for lead in sample_snapshot.leads]


def test_list_leads_filtered(client):
    response = client.get("/api/leads", params={"priority": "critical", "type": "DRUG_APPLICATION"})

    assert response.status_code == 200
    leads = response.json()
    assert leads
    assert all(lead["priority"] == "CRITICAL" and lead["lead_type"] == "DRUG_APPLICATION" for lead in leads)


def test_list_leads_by_phase(client):
    response = client.get("/api/leads", params={"type": "CLINICAL_TRIAL", "phase": "PHASE2"})

    assert response.status_code == 200
    assert all(lead["trial"]["phase"] == "PHASE2" for lead in response.json())


def test_get_lead(client, sample_snapshot):
    lead = sample_snapshot.leads[0]

    response = client.get(f"/api/leads/{lead.id}")

    assert response.status_code == 200
    assert response.json()["company_name"] == lead.company_name


def test_get_unknown_lead(client):
    response = client.get("/api/leads/app-NOPE")

    assert response.status_code == 404
    assert response.json()["detail"] == "Lead not found: app-NOPE"


def test_lead_email(client, sample_snapshot):
    lead = next(l for l in sample_snapshot.leads if l.lead_type.value == "CLINICAL_TRIAL")

    response = client.get(f"/api/leads/{lead.id}/email")

    assert response.status_code == 200
    body = response.json()
    assert body["email"]["subject"] == lead.email.subject
    assert body["metadata"]["lead_id"] == lead.id
    assert body["trial_context"]["nct_id"] == lead.trial.nct_id


def test_unknown_lead_email(client):
    assert client.get("/api/leads/trial-NCT00000000/email").status_code == 404
