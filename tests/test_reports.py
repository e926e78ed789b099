from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from fastapi.testclient import TestClient

from enterprise_crm.crm.models import Customer, Lead, Opportunity, User, WorkItem
from enterprise_crm.crm.unit_of_work import UnitOfWork
from enterprise_crm.reporting.service import reporting_service


NOW = datetime(2026, 5, 20, 12, 0, tzinfo=timezone.utc)


def _seed(uow: UnitOfWork) -> None:
    uow.customers.add(Customer(company_name="Fresh", email="f@example.com", created_by="t", created_at=NOW - timedelta(days=3)))
    uow.customers.add(
        Customer(
            company_name="Old Co",
            email="o@example.com",
            type="Company",
            status="Inactive",
            created_by="t",
            created_at=NOW - timedelta(days=90),
        )
    )
    gone = uow.customers.add(Customer(company_name="Gone", email="g@example.com", created_by="t", created_at=NOW))

    uow.opportunities.add(
        Opportunity(name="A", amount=Decimal("1000.00"), probability=Decimal("33.33"), stage="Proposal", created_by="t")
    )
    uow.opportunities.add(
        Opportunity(name="B", amount=Decimal("500.00"), probability=Decimal("10"), stage="Prospecting", created_by="t")
    )
    uow.opportunities.add(
        Opportunity(
            name="Won",
            amount=Decimal("2500.00"),
            probability=Decimal("100"),
            stage="ClosedWon",
            status="Won",
            created_by="t",
        )
    )

    uow.leads.add(Lead(company_name="This month", email="l1@example.com", created_by="t", created_at=NOW - timedelta(days=2)))
    uow.leads.add(Lead(company_name="Last month", email="l2@example.com", created_by="t", created_at=NOW - timedelta(days=40)))

    owner = uow.users.add(
        User(first_name="O", last_name="W", email="ow@example.com", username="ow", password_hash="x", created_by="t")
    )
    uow.save_changes()

    uow.work_items.add(WorkItem(title="Late", assigned_to_user_id=owner.id, due_date=NOW - timedelta(days=1), created_by="t"))
    uow.customers.delete(gone.id)
    uow.save_changes()


def test_customer_metrics_counts_live_customers(uow: UnitOfWork) -> None:
    _seed(uow)

    metrics = reporting_service.customer_metrics(uow, now=NOW)

    assert metrics.total_customers == 2
    assert metrics.active_customers == 1
    assert metrics.inactive_customers == 1
    assert metrics.suspended_customers == 0
    assert metrics.individual_customers == 1
    assert metrics.company_customers == 1
    assert metrics.new_customers_this_month == 1


def test_sales_forecast_covers_open_pipeline(uow: UnitOfWork) -> None:
    _seed(uow)

    forecast = reporting_service.sales_forecast(uow)

    assert forecast.total_opportunities == 2
    assert forecast.total_pipeline_value == Decimal("1500.00")
    assert forecast.forecasted_revenue == Decimal("383.30")
    assert forecast.proposal_count == 1
    assert forecast.prospecting_count == 1
    assert forecast.closed_won_count == 0


def test_dashboard_stats(uow: UnitOfWork) -> None:
    _seed(uow)

    stats = reporting_service.dashboard_stats(uow, today=NOW)

    assert stats.total_customers == 2
    assert stats.total_leads == 2
    assert stats.total_opportunities == 3
    assert stats.total_work_items == 1
    assert stats.overdue_work_items == 1
    assert stats.new_leads_this_month == 1
    assert stats.closed_won_opportunities == 1
    assert stats.closed_won_revenue == Decimal("2500.00")


def test_report_endpoints(client: TestClient, uow: UnitOfWork, auth_headers: Callable[..., dict[str, str]]) -> None:
    _seed(uow)
    headers = auth_headers(role="ReadOnly", username="viewer")

    forecast = client.get("/api/reports/sales-forecast", headers=headers)
    assert forecast.status_code == 200
    assert forecast.json()["totalPipelineValue"] == 1500.0
    assert forecast.json()["forecastedRevenue"] == 383.3

    assert client.get("/api/reports/customer-metrics", headers=headers).json()["totalCustomers"] == 2
    assert client.get("/api/reports/dashboard", headers=headers).json()["totalOpportunities"] == 3
    assert client.get("/api/reports/dashboard").status_code == 401
