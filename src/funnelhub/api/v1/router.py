from fastapi import APIRouter, Depends

from src.funnelhub.api.dependencies import require_admin_key
from src.funnelhub.api.v1 import analytics, audit, content, generate, tenants

api_router = APIRouter(prefix="/api/v1", dependencies=[Depends(require_admin_key)])
api_router.include_router(tenants.router)
for content_router in content.routers:
    api_router.include_router(content_router)
api_router.include_router(analytics.router)
api_router.include_router(generate.router)
api_router.include_router(audit.router)
