"""
API Version 1 Router.

Aggregates all v1 endpoint routers.
"""

from fastapi import APIRouter

from wrapcommand.backend.api.v1.endpoints import organizations, products, public, quotes, vehicles

router = APIRouter()

router.include_router(vehicles.router, prefix="/vehicles", tags=["vehicles"])
router.include_router(quotes.router, prefix="/quotes", tags=["quotes"])
router.include_router(public.router, prefix="/public", tags=["public"])
router.include_router(organizations.router, prefix="/organizations", tags=["organizations"])
router.include_router(products.router, prefix="/products", tags=["products"])
