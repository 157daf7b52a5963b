"""
Pytest fixtures for lead generation, company and repository tests.
"""
import asyncio
import random
from datetime import date

import pytest

from fdaleads.services.email_templates import EmailTemplateEngine
from fdaleads.services.gateway import fetch_all
from fdaleads.services.lead_generation import build_snapshot
from fdaleads.services.repository import LeadRepository


@pytest.fixture
def today() -> date:
    """Fixed reference date for the sample datasets"""
    return date(2025, 6, 15)


@pytest.fixture
def offline_data(today):
    """Every dataset served from the bundled samples"""
    return asyncio.run(fetch_all(offline=True, today=today))


@pytest.fixture
def snapshot(offline_data, today):
    """Snapshot built from the sample datasets with a seeded template engine"""
    return build_snapshot(offline_data, today, EmailTemplateEngine(random.Random(7)))


@pytest.fixture
def repository(snapshot) -> LeadRepository:
    """Fresh repository with the sample snapshot published"""
    repo = LeadRepository()
    repo.publish(snapshot)
    return repo
