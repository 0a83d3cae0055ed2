"""FastAPI dependencies: hand the process-wide services to route handlers."""

from fastapi import Request

from payproof.infrastructure.wiring import Services
from payproof.services.listing import ListingService
from payproof.services.submission import SubmissionOrchestrator


def get_services(request: Request) -> Services:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Services not initialized")
    return services


def get_orchestrator(request: Request) -> SubmissionOrchestrator:
    return get_services(request).orchestrator


def get_listing_service(request: Request) -> ListingService:
    return get_services(request).listing
