from __future__ import annotations

from fastapi import APIRouter, Depends

from enterprise_crm.api.deps import get_uow
from enterprise_crm.core.auth import AuthUser
from enterprise_crm.core.rbac import read_only_or_above
from enterprise_crm.crm.unit_of_work import UnitOfWork
from enterprise_crm.reporting.schemas import CustomerMetricsRead, DashboardStatsRead, SalesForecastRead
from enterprise_crm.reporting.service import reporting_service

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/customer-metrics", response_model=CustomerMetricsRead)
def customer_metrics(
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> CustomerMetricsRead:
    return reporting_service.customer_metrics(uow)


@router.get("/sales-forecast", response_model=SalesForecastRead)
def sales_forecast(
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> SalesForecastRead:
    return reporting_service.sales_forecast(uow)


@router.get("/dashboard", response_model=DashboardStatsRead)
def dashboard(
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> DashboardStatsRead:
    return reporting_service.dashboard_stats(uow)
