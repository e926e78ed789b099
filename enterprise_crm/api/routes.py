from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response

from enterprise_crm.auth.api import router as auth_router
from enterprise_crm.core.auth import AuthUser, get_current_user
from enterprise_crm.core.config import get_settings
from enterprise_crm.core.rbac import ROLE_ADMIN
from enterprise_crm.crm.api import (
    contacts_router,
    customers_router,
    leads_router,
    opportunities_router,
    products_router,
    users_router,
    work_items_router,
)
from enterprise_crm.metrics import generate_metrics_payload, metrics_content_type
from enterprise_crm.reporting.api import router as reports_router

router = APIRouter()
for domain_router in (
    auth_router,
    customers_router,
    contacts_router,
    leads_router,
    opportunities_router,
    work_items_router,
    products_router,
    users_router,
    reports_router,
):
    router.include_router(domain_router)


@router.get("/health", tags=["system"])
def health() -> dict[str, str]:
    settings = get_settings()
    return {"status": "ok", "service": settings.app_name, "environment": settings.app_env}


@router.get("/me", tags=["auth"])
async def me(user: AuthUser = Depends(get_current_user)) -> dict[str, str | list[str]]:
    """Echo the identity the bearer token resolved to."""
    return {"sub": user.sub, "name": user.name, "roles": user.roles}


@router.get("/metrics", tags=["system"])
def metrics(user: AuthUser = Depends(get_current_user)) -> Response:
    if not get_settings().metrics_enabled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not found")
    if ROLE_ADMIN not in user.roles:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required")
    return Response(content=generate_metrics_payload(), media_type=metrics_content_type())
