"""
Pytest fixtures for API router tests.
"""
import asyncio
from datetime import date

import pytest
from fastapi.testclient import TestClient

from fdaleads.main import app
from fdaleads.services.gateway import fetch_all
from fdaleads.services.lead_generation import build_snapshot
from fdaleads.services.repository import get_lead_repository


@pytest.fixture(scope="module")
def sample_snapshot():
    """Snapshot built once from the bundled sample datasets"""
    today = date(2025, 6, 15)
    return build_snapshot(asyncio.run(fetch_all(offline=True, fallback=True, today=today)), today)


@pytest.fixture
def client(sample_snapshot):
    """TestClient over the app with the sample snapshot published"""
    repository = get_lead_repository()
    previous = repository.publish(sample_snapshot)
    yield TestClient(app)
    repository.publish(previous)
