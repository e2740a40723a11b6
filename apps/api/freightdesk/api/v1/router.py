"""API v1 router combining all route modules."""

from fastapi import APIRouter

from freightdesk.api.v1 import chat, extract, health, shipments

api_router = APIRouter()

# Include health check routes (no prefix)
api_router.include_router(health.router)

# Assistant chat (tool loop over the caller's shipments)
api_router.include_router(
    chat.router,
    prefix="/chat",
    tags=["chat"],
)

# Document extraction (BOLs, rate confirmations)
api_router.include_router(
    extract.router,
    prefix="/extract",
    tags=["extract"],
)

# Shipment CRUD and dashboard stats
api_router.include_router(
    shipments.router,
    prefix="/shipments",
    tags=["shipments"],
)
