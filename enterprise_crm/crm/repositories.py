from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, or_, select
from sqlalchemy.orm import Session

from enterprise_crm.crm.models import (
    AuditMixin,
    Contact,
    Customer,
    Lead,
    Opportunity,
    Product,
    User,
    WorkItem,
    utcnow,
)


ModelT = TypeVar("ModelT", bound=AuditMixin)


class Repository(Generic[ModelT]):
    """CRUD access for one entity type.

    Every read path starts from :meth:`_live`, so soft-deleted rows are never
    returned. Writes are staged on the session and only become durable when
    the owning unit of work saves.
    """

    model: type[ModelT]

    def __init__(self, session: Session) -> None:
        self.session = session

    def _live(self) -> Select[tuple[ModelT]]:
        return select(self.model).where(self.model.is_deleted.is_(False))

    def _list(self, stmt: Select[tuple[ModelT]]) -> list[ModelT]:
        return list(self.session.scalars(stmt).all())

    def get_by_id(self, entity_id: int) -> ModelT | None:
        return self.session.scalar(self._live().where(self.model.id == entity_id))

    def get_all(self) -> list[ModelT]:
        return self._list(self._live())

    def get_paged(self, page_number: int, page_size: int) -> list[ModelT]:
        stmt = self._live().order_by(self.model.id).offset((page_number - 1) * page_size).limit(page_size)
        return self._list(stmt)

    def add(self, entity: ModelT) -> ModelT:
        self.session.add(entity)
        return entity

    def update(self, entity: ModelT) -> None:
        self.session.add(entity)

    def delete(self, entity_id: int) -> None:
        entity = self.get_by_id(entity_id)
        if entity is None:
            return
        entity.is_deleted = True
        entity.updated_at = utcnow()
        self.update(entity)

    def exists(self, entity_id: int) -> bool:
        stmt = select(func.count()).select_from(self._live().where(self.model.id == entity_id).subquery())
        return bool(self.session.scalar(stmt))

    def count(self) -> int:
        return int(self.session.scalar(select(func.count()).select_from(self._live().subquery())) or 0)

    def _search(self, term: str, *columns: Any) -> list[ModelT]:
        # Plain substring match: wildcard characters in the term are literals.
        escaped = term.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        matches = (func.lower(column).like(pattern, escape="\\") for column in columns)
        return self._list(self._live().where(or_(*matches)))


class CustomerRepository(Repository[Customer]):
    model = Customer

    def search(self, term: str) -> list[Customer]:
        return self._search(term, Customer.company_name, Customer.first_name, Customer.last_name, Customer.email)

    def get_by_status(self, status: str) -> list[Customer]:
        return self._list(self._live().where(Customer.status == status))

    def get_by_type(self, customer_type: str) -> list[Customer]:
        return self._list(self._live().where(Customer.type == customer_type))

    def get_by_email(self, email: str) -> Customer | None:
        return self.session.scalar(self._live().where(Customer.email == email))

    def get_recent(self, count: int) -> list[Customer]:
        return self._list(self._live().order_by(Customer.created_at.desc(), Customer.id.desc()).limit(count))


class ContactRepository(Repository[Contact]):
    model = Contact

    def get_by_customer_id(self, customer_id: int) -> list[Contact]:
        return self._list(self._live().where(Contact.customer_id == customer_id))

    def get_primary_contact(self, customer_id: int) -> Contact | None:
        stmt = self._live().where(Contact.customer_id == customer_id, Contact.is_primary.is_(True))
        return self.session.scalars(stmt.order_by(Contact.id)).first()

    def get_by_role(self, role: str) -> list[Contact]:
        return self._list(self._live().where(Contact.role == role))


class LeadRepository(Repository[Lead]):
    model = Lead

    def get_by_status(self, status: str) -> list[Lead]:
        return self._list(self._live().where(Lead.status == status))

    def get_by_source(self, source: str) -> list[Lead]:
        return self._list(self._live().where(Lead.source == source))

    def get_by_assigned_user(self, user_id: int) -> list[Lead]:
        return self._list(self._live().where(Lead.assigned_to_user_id == user_id))

    def get_recent(self, count: int) -> list[Lead]:
        return self._list(self._live().order_by(Lead.created_at.desc(), Lead.id.desc()).limit(count))

    def search(self, term: str) -> list[Lead]:
        return self._search(term, Lead.company_name, Lead.first_name, Lead.last_name, Lead.email)


class OpportunityRepository(Repository[Opportunity]):
    model = Opportunity

    def get_by_customer_id(self, customer_id: int) -> list[Opportunity]:
        return self._list(self._live().where(Opportunity.customer_id == customer_id))

    def get_by_stage(self, stage: str) -> list[Opportunity]:
        return self._list(self._live().where(Opportunity.stage == stage))

    def get_by_assigned_user(self, user_id: int) -> list[Opportunity]:
        return self._list(self._live().where(Opportunity.assigned_to_user_id == user_id))

    def get_by_status(self, status: str) -> list[Opportunity]:
        return self._list(self._live().where(Opportunity.status == status))

    def get_total_pipeline_value(self) -> Decimal:
        # Summed in Python so Decimal precision survives SQLite's float aggregates.
        return sum((row.amount for row in self.get_by_status("Open")), Decimal("0"))

    def get_forecasted_revenue(self) -> Decimal:
        return sum(
            (row.amount * row.probability / Decimal("100") for row in self.get_by_status("Open")),
            Decimal("0"),
        )


def _day_bounds(today: datetime) -> tuple[datetime, datetime]:
    start = today.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


class WorkItemRepository(Repository[WorkItem]):
    model = WorkItem

    def get_by_assigned_user(self, user_id: int) -> list[WorkItem]:
        return self._list(self._live().where(WorkItem.assigned_to_user_id == user_id))

    def get_by_status(self, status: str) -> list[WorkItem]:
        return self._list(self._live().where(WorkItem.status == status))

    def get_overdue(self, now: datetime | None = None) -> list[WorkItem]:
        start, _ = _day_bounds(now or utcnow())
        stmt = self._live().where(
            WorkItem.due_date.is_not(None),
            WorkItem.due_date < start,
            WorkItem.status != "Completed",
        )
        return self._list(stmt)

    def get_due_today(self, now: datetime | None = None) -> list[WorkItem]:
        start, end = _day_bounds(now or utcnow())
        stmt = self._live().where(
            WorkItem.due_date >= start,
            WorkItem.due_date < end,
            WorkItem.status != "Completed",
        )
        return self._list(stmt)

    def get_by_customer_id(self, customer_id: int) -> list[WorkItem]:
        return self._list(self._live().where(WorkItem.customer_id == customer_id))

    def get_by_lead_id(self, lead_id: int) -> list[WorkItem]:
        return self._list(self._live().where(WorkItem.lead_id == lead_id))

    def get_by_opportunity_id(self, opportunity_id: int) -> list[WorkItem]:
        return self._list(self._live().where(WorkItem.opportunity_id == opportunity_id))


class UserRepository(Repository[User]):
    model = User

    def get_by_email(self, email: str) -> User | None:
        return self.session.scalar(self._live().where(User.email == email))

    def get_by_username(self, username: str) -> User | None:
        return self.session.scalar(self._live().where(User.username == username))

    def get_by_role(self, role: str) -> list[User]:
        return self._list(self._live().where(User.role == role))

    def get_active_users(self) -> list[User]:
        return self._list(self._live().where(User.status == "Active"))


class ProductRepository(Repository[Product]):
    model = Product

    def get_by_category(self, category: str) -> list[Product]:
        return self._list(self._live().where(Product.category == category, Product.is_active.is_(True)))

    def get_active_products(self) -> list[Product]:
        return self._list(self._live().where(Product.is_active.is_(True)))

    def get_by_sku(self, sku: str) -> Product | None:
        return self.session.scalars(self._live().where(Product.sku == sku).order_by(Product.id)).first()

    def search(self, term: str) -> list[Product]:
        return self._search(term, Product.name, Product.sku, Product.category)
