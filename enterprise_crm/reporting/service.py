from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from enterprise_crm.core.types import as_utc
from enterprise_crm.crm.models import utcnow
from enterprise_crm.crm.unit_of_work import UnitOfWork
from enterprise_crm.reporting.schemas import CustomerMetricsRead, DashboardStatsRead, SalesForecastRead


NEW_CUSTOMER_WINDOW = timedelta(days=30)
_CENT = Decimal("0.01")


def _money(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


@dataclass(slots=True)
class ReportingService:
    def customer_metrics(self, uow: UnitOfWork, now: datetime | None = None) -> CustomerMetricsRead:
        cutoff = as_utc(now or utcnow()) - NEW_CUSTOMER_WINDOW
        customers = uow.customers.get_all()
        statuses = Counter(customer.status for customer in customers)
        types = Counter(customer.type for customer in customers)
        return CustomerMetricsRead(
            total_customers=len(customers),
            active_customers=statuses["Active"],
            inactive_customers=statuses["Inactive"],
            suspended_customers=statuses["Suspended"],
            individual_customers=types["Individual"],
            company_customers=types["Company"],
            new_customers_this_month=sum(1 for customer in customers if as_utc(customer.created_at) >= cutoff),
        )

    def sales_forecast(self, uow: UnitOfWork) -> SalesForecastRead:
        open_opportunities = uow.opportunities.get_by_status("Open")
        stages = Counter(opportunity.stage for opportunity in open_opportunities)
        return SalesForecastRead(
            total_pipeline_value=_money(uow.opportunities.get_total_pipeline_value()),
            forecasted_revenue=_money(uow.opportunities.get_forecasted_revenue()),
            total_opportunities=len(open_opportunities),
            prospecting_count=stages["Prospecting"],
            qualification_count=stages["Qualification"],
            proposal_count=stages["Proposal"],
            negotiation_count=stages["Negotiation"],
            closed_won_count=stages["ClosedWon"],
            closed_lost_count=stages["ClosedLost"],
        )

    def dashboard_stats(self, uow: UnitOfWork, today: datetime | None = None) -> DashboardStatsRead:
        now = as_utc(today or utcnow())
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

        leads = uow.leads.get_all()
        won = [
            opportunity
            for opportunity in uow.opportunities.get_all()
            if opportunity.stage == "ClosedWon" or opportunity.status == "Won"
        ]
        return DashboardStatsRead(
            generated_at=now,
            total_customers=uow.customers.count(),
            total_leads=len(leads),
            total_opportunities=uow.opportunities.count(),
            total_work_items=uow.work_items.count(),
            total_pipeline_value=_money(uow.opportunities.get_total_pipeline_value()),
            forecasted_revenue=_money(uow.opportunities.get_forecasted_revenue()),
            overdue_work_items=len(uow.work_items.get_overdue(now)),
            new_leads_this_month=sum(1 for lead in leads if as_utc(lead.created_at) >= month_start),
            closed_won_opportunities=len(won),
            closed_won_revenue=_money(sum((opportunity.amount for opportunity in won), Decimal("0"))),
        )


reporting_service = ReportingService()
