from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

import pytest

from enterprise_crm.crm.models import Contact, Customer, Lead, Opportunity, Product, User, WorkItem
from enterprise_crm.crm.unit_of_work import UnitOfWork


NOW = datetime(2026, 3, 10, 15, 0, tzinfo=timezone.utc)


def _customer(name: str, **overrides: object) -> Customer:
    values: dict[str, object] = {
        "company_name": name,
        "email": f"{name.lower().replace(' ', '.')}@example.com",
        "created_by": "tests",
    }
    values.update(overrides)
    return Customer(**values)


def _user(username: str = "owner") -> User:
    return User(
        first_name="Olive",
        last_name="Owner",
        email=f"{username}@example.com",
        username=username,
        password_hash="x",
        created_by="tests",
    )


def _seed_customers(uow: UnitOfWork, count: int) -> list[Customer]:
    customers = [uow.customers.add(_customer(f"Company {index}")) for index in range(count)]
    uow.save_changes()
    return customers


def test_soft_deleted_row_is_hidden_from_every_read_path(uow: UnitOfWork) -> None:
    kept, removed = _seed_customers(uow, 2)

    uow.customers.delete(removed.id)
    uow.save_changes()

    assert uow.customers.get_by_id(removed.id) is None
    assert [row.id for row in uow.customers.get_all()] == [kept.id]
    assert [row.id for row in uow.customers.get_paged(1, 10)] == [kept.id]
    assert uow.customers.exists(removed.id) is False
    assert uow.customers.count() == 1
    assert uow.customers.search("company") == [kept]
    assert uow.customers.get_by_email(removed.email) is None
    assert removed not in uow.customers.get_recent(10)

    uow.session.refresh(removed)
    assert removed.is_deleted is True
    assert removed.updated_at is not None


def test_delete_is_idempotent_and_ignores_unknown_ids(uow: UnitOfWork) -> None:
    (customer,) = _seed_customers(uow, 1)

    uow.customers.delete(customer.id)
    uow.save_changes()
    uow.customers.delete(customer.id)
    uow.customers.delete(999)

    assert uow.save_changes() == 0
    assert uow.customers.count() == 0


def test_get_paged_orders_by_id_and_skips_earlier_pages(uow: UnitOfWork) -> None:
    customers = _seed_customers(uow, 5)

    page = uow.customers.get_paged(2, 2)

    assert [row.id for row in page] == [customers[2].id, customers[3].id]
    assert uow.customers.get_paged(3, 2) == [customers[4]]
    assert uow.customers.get_paged(4, 2) == []


def test_search_is_case_insensitive_across_name_and_email(uow: UnitOfWork) -> None:
    uow.customers.add(_customer("Acme Widgets", first_name="Jane"))
    uow.customers.add(_customer("Globex", email="sales@initech.example"))
    uow.save_changes()

    assert [row.company_name for row in uow.customers.search("ACME")] == ["Acme Widgets"]
    assert [row.company_name for row in uow.customers.search("jane")] == ["Acme Widgets"]
    assert [row.company_name for row in uow.customers.search("initech")] == ["Globex"]
    assert uow.customers.search("nothing-matches") == []


def test_customer_filters_by_status_and_type(uow: UnitOfWork) -> None:
    uow.customers.add(_customer("Active Co", type="Company"))
    uow.customers.add(_customer("Dormant", status="Inactive"))
    uow.save_changes()

    assert [row.company_name for row in uow.customers.get_by_status("Inactive")] == ["Dormant"]
    assert [row.company_name for row in uow.customers.get_by_type("Company")] == ["Active Co"]
    assert [row.company_name for row in uow.customers.get_by_type("Individual")] == ["Dormant"]


def test_get_recent_returns_newest_first(uow: UnitOfWork) -> None:
    customers = _seed_customers(uow, 3)

    recent = uow.customers.get_recent(2)

    assert [row.id for row in recent] == [customers[2].id, customers[1].id]


def test_product_category_lookup_excludes_inactive_products(uow: UnitOfWork) -> None:
    uow.products.add(Product(name="Widget A", sku="WID-001", price=Decimal("10.00"), category="Widgets", created_by="t"))
    uow.products.add(
        Product(name="Widget Z", sku="WID-999", price=Decimal("5.00"), category="Widgets", is_active=False, created_by="t")
    )
    uow.save_changes()

    assert [row.name for row in uow.products.get_by_category("Widgets")] == ["Widget A"]
    assert [row.name for row in uow.products.get_active_products()] == ["Widget A"]
    assert uow.products.get_by_sku("WID-999") is not None
    assert uow.products.get_by_sku("missing") is None


def test_pipeline_value_and_forecast_only_count_open_opportunities(uow: UnitOfWork) -> None:
    uow.opportunities.add(Opportunity(name="Big", amount=Decimal("1000.00"), probability=Decimal("50"), created_by="t"))
    uow.opportunities.add(Opportunity(name="Small", amount=Decimal("200.00"), probability=Decimal("25"), created_by="t"))
    uow.opportunities.add(
        Opportunity(name="Done", amount=Decimal("5000.00"), probability=Decimal("100"), status="Won", created_by="t")
    )
    uow.save_changes()

    assert uow.opportunities.get_total_pipeline_value() == Decimal("1200.00")
    assert uow.opportunities.get_forecasted_revenue() == Decimal("550.00")


def test_overdue_and_due_today_skip_completed_work(uow: UnitOfWork) -> None:
    owner = uow.users.add(_user())
    uow.save_changes()

    now = datetime(2026, 3, 10, 15, 0, tzinfo=timezone.utc)
    uow.work_items.add(
        WorkItem(title="Late call", assigned_to_user_id=owner.id, due_date=now - timedelta(days=2), created_by="t")
    )
    uow.work_items.add(
        WorkItem(
            title="Late but done",
            assigned_to_user_id=owner.id,
            due_date=now - timedelta(days=2),
            status="Completed",
            created_by="t",
        )
    )
    uow.work_items.add(
        WorkItem(title="Today demo", assigned_to_user_id=owner.id, due_date=now + timedelta(hours=2), created_by="t")
    )
    uow.work_items.add(
        WorkItem(title="Next week", assigned_to_user_id=owner.id, due_date=now + timedelta(days=7), created_by="t")
    )
    uow.save_changes()

    assert [row.title for row in uow.work_items.get_overdue(now)] == ["Late call"]
    assert [row.title for row in uow.work_items.get_due_today(now)] == ["Today demo"]
    assert len(uow.work_items.get_by_assigned_user(owner.id)) == 4


def test_user_lookups_ignore_soft_deleted_users(uow: UnitOfWork) -> None:
    user = uow.users.add(_user("ghost"))
    uow.save_changes()
    assert uow.users.get_by_username("ghost") is not None

    uow.users.delete(user.id)
    uow.save_changes()

    assert uow.users.get_by_username("ghost") is None
    assert uow.users.get_by_email("ghost@example.com") is None
    assert uow.users.get_active_users() == []


def test_search_treats_wildcard_characters_literally(uow: UnitOfWork) -> None:
    uow.products.add(Product(name="Widget A", sku="WID-001", price=Decimal("10.00"), category="Widgets", created_by="t"))
    uow.products.add(Product(name="Gadget B", sku="GAD_001", price=Decimal("20.00"), category="Gadgets", created_by="t"))
    uow.products.add(Product(name="Flat 50% off", sku="SALE-50", price=Decimal("1.00"), category="Promo", created_by="t"))
    uow.save_changes()

    assert [row.name for row in uow.products.search("D_0")] == ["Gadget B"]
    assert [row.name for row in uow.products.search("%")] == ["Flat 50% off"]
    assert [row.name for row in uow.products.search("50%")] == ["Flat 50% off"]
    assert uow.products.search("\\") == []


def _seed_graph(uow: UnitOfWork) -> dict[str, Any]:
    owner = uow.users.add(_user())
    customer = uow.customers.add(_customer("Linked Co", status="Prospect", type="Company"))
    uow.save_changes()

    lead = uow.leads.add(
        Lead(company_name="Lead Co", email="lead@example.com", source="Referral", assigned_to_user_id=owner.id, created_by="t")
    )
    opportunity = uow.opportunities.add(
        Opportunity(name="Deal", stage="Negotiation", customer_id=customer.id, assigned_to_user_id=owner.id, created_by="t")
    )
    contact = uow.contacts.add(
        Contact(
            customer_id=customer.id,
            first_name="Pat",
            last_name="Primary",
            email="pat@example.com",
            role="DecisionMaker",
            is_primary=True,
            created_by="t",
        )
    )
    product = uow.products.add(Product(name="Linked Widget", sku="LNK-001", category="Linked", created_by="t"))
    uow.save_changes()

    late = uow.work_items.add(
        WorkItem(
            title="Late follow-up",
            assigned_to_user_id=owner.id,
            customer_id=customer.id,
            lead_id=lead.id,
            opportunity_id=opportunity.id,
            status="InProgress",
            due_date=NOW - timedelta(days=2),
            created_by="t",
        )
    )
    today = uow.work_items.add(
        WorkItem(title="Today call", assigned_to_user_id=owner.id, due_date=NOW + timedelta(hours=1), created_by="t")
    )
    uow.save_changes()
    return {
        "users": owner,
        "customers": customer,
        "leads": lead,
        "opportunities": opportunity,
        "contacts": contact,
        "products": product,
        "work_items": late,
        "work_items_today": today,
    }


LIVE_FILTERS: list[tuple[str, Callable[[UnitOfWork, dict[str, Any]], object]]] = [
    ("customers", lambda uow, g: uow.customers.get_by_status("Prospect")),
    ("customers", lambda uow, g: uow.customers.get_by_type("Company")),
    ("contacts", lambda uow, g: uow.contacts.get_by_customer_id(g["customers"].id)),
    ("contacts", lambda uow, g: uow.contacts.get_primary_contact(g["customers"].id)),
    ("contacts", lambda uow, g: uow.contacts.get_by_role("DecisionMaker")),
    ("leads", lambda uow, g: uow.leads.get_by_status("New")),
    ("leads", lambda uow, g: uow.leads.get_by_source("Referral")),
    ("leads", lambda uow, g: uow.leads.get_by_assigned_user(g["users"].id)),
    ("leads", lambda uow, g: uow.leads.get_recent(5)),
    ("leads", lambda uow, g: uow.leads.search("lead co")),
    ("opportunities", lambda uow, g: uow.opportunities.get_by_customer_id(g["customers"].id)),
    ("opportunities", lambda uow, g: uow.opportunities.get_by_stage("Negotiation")),
    ("opportunities", lambda uow, g: uow.opportunities.get_by_assigned_user(g["users"].id)),
    ("opportunities", lambda uow, g: uow.opportunities.get_by_status("Open")),
    ("work_items", lambda uow, g: uow.work_items.get_by_status("InProgress")),
    ("work_items", lambda uow, g: uow.work_items.get_overdue(NOW)),
    ("work_items", lambda uow, g: uow.work_items.get_by_customer_id(g["customers"].id)),
    ("work_items", lambda uow, g: uow.work_items.get_by_lead_id(g["leads"].id)),
    ("work_items", lambda uow, g: uow.work_items.get_by_opportunity_id(g["opportunities"].id)),
    ("work_items_today", lambda uow, g: uow.work_items.get_due_today(NOW)),
    ("products", lambda uow, g: uow.products.get_by_category("Linked")),
    ("products", lambda uow, g: uow.products.get_active_products()),
    ("products", lambda uow, g: uow.products.get_by_sku("LNK-001")),
    ("products", lambda uow, g: uow.products.search("lnk")),
    ("users", lambda uow, g: uow.users.get_by_role("User")),
]


@pytest.mark.parametrize(("key", "lookup"), LIVE_FILTERS)
def test_entity_filters_skip_soft_deleted_rows(
    uow: UnitOfWork, key: str, lookup: Callable[[UnitOfWork, dict[str, Any]], object]
) -> None:
    graph = _seed_graph(uow)
    target = graph[key]
    repository = getattr(uow, key.removesuffix("_today"))

    before = lookup(uow, graph)
    assert before == target or (isinstance(before, list) and target in before)

    repository.delete(target.id)
    uow.save_changes()

    after = lookup(uow, graph)
    assert after is None or (isinstance(after, list) and target not in after)
