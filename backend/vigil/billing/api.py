from fastapi import APIRouter # type: ignore

from .endpoints.portal import router as portal_router
from .endpoints.webhooks import router as webhooks_router

router = APIRouter(prefix="/stripe", tags=["billing"])

router.include_router(portal_router, include_in_schema=True)
router.include_router(webhooks_router, include_in_schema=True)

__all__ = ['router']
