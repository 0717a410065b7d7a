"""Shared test fixtures — in-memory MongoDB + FastAPI test client.

Invariants:
    - Every test gets a fresh mongomock collection (no MongoDB server needed)
    - get_patient_repository dependency overridden to use the test repository
    - Lifespan never runs under ASGITransport, so no real connection is attempted

Design Decisions:
    - mongomock over a hand-written fake: real $push/$pull/positional $ semantics
    - Routes exercise the real MongoPatientRepository, only the collection is swapped
"""

import os

import mongomock
import pytest
from httpx import ASGITransport, AsyncClient

# Ensure tests never reach a real database
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")

from health_monitor.infrastructure.database import (  # noqa: E402
    MongoPatientRepository, get_patient_repository,
)
from health_monitor.main import app  # noqa: E402


@pytest.fixture
def mongo_collection():
    client = mongomock.MongoClient()
    yield client["hospital"]["patients"]
    client.close()


@pytest.fixture
def repository(mongo_collection):
    return MongoPatientRepository(mongo_collection)


@pytest.fixture
async def client(repository):
    """FastAPI test client with the repository dependency overridden."""
    app.dependency_overrides[get_patient_repository] = lambda: repository

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def seed_patient(mongo_collection):
    """Insert a patient with two prescriptions directly into the collection."""
    def _seed(**fields):
        document = {
            "name": "Bob",
            "prescriptions": [
                {"_id": "rx-1", "drug": "Ibuprofen", "dose": "200mg"},
                {"_id": "rx-2", "drug": "Amoxicillin", "dose": "500mg"},
            ],
        }
        document.update(fields)
        return mongo_collection.insert_one(document).inserted_id
    return _seed
