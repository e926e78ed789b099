from __future__ import annotations

from datetime import datetime

from enterprise_crm.crm.schemas import CRMSchema, Money


class CustomerMetricsRead(CRMSchema):
    total_customers: int
    active_customers: int
    inactive_customers: int
    suspended_customers: int
    individual_customers: int
    company_customers: int
    new_customers_this_month: int


class SalesForecastRead(CRMSchema):
    total_pipeline_value: Money
    forecasted_revenue: Money
    total_opportunities: int
    prospecting_count: int
    qualification_count: int
    proposal_count: int
    negotiation_count: int
    closed_won_count: int
    closed_lost_count: int


class DashboardStatsRead(CRMSchema):
    generated_at: datetime
    total_customers: int
    total_leads: int
    total_opportunities: int
    total_work_items: int
    total_pipeline_value: Money
    forecasted_revenue: Money
    overdue_work_items: int
    new_leads_this_month: int
    closed_won_opportunities: int
    closed_won_revenue: Money
