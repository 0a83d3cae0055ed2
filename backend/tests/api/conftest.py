"""API test fixtures: FastAPI app wired to fake collaborators over httpx ASGITransport.

Invariants:
    - app.state.services replaced per test and removed afterwards
    - Lifespan is not run; no real database, bucket or email provider touched
"""

import pytest
from httpx import ASGITransport, AsyncClient

from payproof.core.object_keys import generate_object_key
from payproof.infrastructure.wiring import Services
from payproof.main import app
from payproof.services.listing import ListingService
from payproof.services.submission import SubmissionOrchestrator

FORM = {
    "name": "Sari",
    "phone_number": "0812xxxx",
    "payment_method": "bank_transfer",
    "reason": "order #4",
}


def make_services(object_store, record_store, notifier, key_factory=None) -> Services:
    orchestrator = SubmissionOrchestrator(
        object_store, record_store, notifier, key_factory or generate_object_key,
    )
    return Services(
        object_store=object_store,
        record_store=record_store,
        notifier=notifier,
        orchestrator=orchestrator,
        listing=ListingService(record_store),
    )


@pytest.fixture
def form() -> dict:
    return dict(FORM)


@pytest.fixture
def services(object_store, record_store, notifier) -> Services:
    return make_services(object_store, record_store, notifier)


@pytest.fixture
def service_factory():
    return make_services


@pytest.fixture
async def client(services):
    app.state.services = services
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        yield c
    del app.state.services
