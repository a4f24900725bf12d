"""API v1 router composition."""

from fastapi import APIRouter

from bakery.api.v1.endpoints import admin, fulfillment

api_router: APIRouter = APIRouter()
api_router.include_router(fulfillment.router, prefix="/fulfillment", tags=["fulfillment"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
