"""Itinerary generation endpoints."""

import uuid

from fastapi import APIRouter, Depends, Response

from backend.app.models.itinerary import ItineraryDocument, ItineraryRequest
from backend.app.services import ServiceRegistry, get_services

router = APIRouter(prefix="/api/itinerary")


def _set_headers(response: Response, document: ItineraryDocument) -> None:
    metadata = document.metadata
    if metadata is None:
        return
    response.headers["X-Request-ID"] = metadata.request_id
    response.headers["X-Processing-Time"] = f"{metadata.processing_time}ms"
    response.headers["X-Image-Count"] = str(metadata.image_count)


@router.post("", response_model=ItineraryDocument, response_model_by_alias=True)
async def create_itinerary(
    request: ItineraryRequest,
    response: Response,
    services: ServiceRegistry = Depends(get_services),
) -> ItineraryDocument:
    """Generate an itinerary.

    Upstream failures never fail the request: the document falls back to
    deterministic generation and/or curated images, flagged in its metadata.

    Returns:
        200 with the itinerary document
        422 if the request body is invalid
    """
    document = await services.itineraries.generate(request, request_id=str(uuid.uuid4()))
    _set_headers(response, document)
    return document


@router.post("/fallback", response_model=ItineraryDocument, response_model_by_alias=True)
async def create_fallback_itinerary(
    request: ItineraryRequest,
    response: Response,
    services: ServiceRegistry = Depends(get_services),
) -> ItineraryDocument:
    """Deterministic itinerary only; makes no upstream calls."""
    document = services.itineraries.generate_fallback(request, request_id=str(uuid.uuid4()))
    _set_headers(response, document)
    return document
