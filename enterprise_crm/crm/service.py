from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from enterprise_crm.core.security import hash_password
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
from enterprise_crm.crm.repositories import Repository
from enterprise_crm.crm.schemas import (
    ContactRead,
    CustomerRead,
    LeadRead,
    OpportunityRead,
    PagedResult,
    ProductRead,
    UserRead,
    WorkItemRead,
)
from enterprise_crm.crm.unit_of_work import UnitOfWork
from enterprise_crm.errors import EntityNotFoundError
from enterprise_crm.metrics import observe_entity_write


logger = logging.getLogger("enterprise_crm.crm.service")

ModelT = TypeVar("ModelT", bound=AuditMixin)
ReadT = TypeVar("ReadT", bound=BaseModel)


def paginate(items: Sequence[ReadT], page_number: int, page_size: int) -> PagedResult[ReadT]:
    """Slice an already materialised list into one page.

    ``total_count`` always comes from the full list, so the envelope stays
    consistent with the page even when the page itself is empty.
    """
    start = max(page_number - 1, 0) * page_size
    return PagedResult(
        data=list(items[start : start + page_size]),
        total_count=len(items),
        page_number=page_number,
        page_size=page_size,
    )


@dataclass(slots=True)
class EntityService(Generic[ModelT, ReadT]):
    entity_name: ClassVar[str]
    repository_name: ClassVar[str]
    model: ClassVar[type[AuditMixin]]
    read_model: ClassVar[type[BaseModel]]

    def _repository(self, uow: UnitOfWork) -> Repository[ModelT]:
        return getattr(uow, self.repository_name)

    def _to_read(self, entity: ModelT) -> ReadT:
        return self.read_model.model_validate(entity)  # type: ignore[return-value]

    def _to_reads(self, entities: Sequence[ModelT]) -> list[ReadT]:
        return [self._to_read(entity) for entity in entities]

    def _get_live(self, uow: UnitOfWork, entity_id: int) -> ModelT:
        entity = self._repository(uow).get_by_id(entity_id)
        if entity is None:
            raise EntityNotFoundError(self.entity_name, entity_id)
        return entity

    def _record(self, operation: str, entity_id: int, actor: str) -> None:
        observe_entity_write(self.entity_name, operation)
        logger.info(
            f"crm.entity.{operation}",
            extra={"entity": self.entity_name, "entity_id": entity_id, "actor": actor},
        )

    def _create_payload(self, dto: BaseModel) -> dict[str, Any]:
        return dto.model_dump(mode="python")

    def _update_payload(self, dto: BaseModel) -> dict[str, Any]:
        return dto.model_dump(mode="python", exclude={"id"})

    def get_by_id(self, uow: UnitOfWork, entity_id: int) -> ReadT | None:
        entity = self._repository(uow).get_by_id(entity_id)
        return self._to_read(entity) if entity is not None else None

    def get_all(self, uow: UnitOfWork, page_number: int = 1, page_size: int = 10) -> PagedResult[ReadT]:
        return paginate(self._to_reads(self._repository(uow).get_all()), page_number, page_size)

    def create(self, uow: UnitOfWork, dto: BaseModel, current_user: str) -> ReadT:
        entity = self.model(**self._create_payload(dto))
        entity.created_at = utcnow()
        entity.created_by = current_user
        entity.updated_at = None
        entity.updated_by = None
        entity.is_deleted = False
        self._repository(uow).add(entity)  # type: ignore[arg-type]
        uow.save_changes()
        self._record("created", entity.id, current_user)
        return self._to_read(entity)  # type: ignore[arg-type]

    def update(self, uow: UnitOfWork, dto: BaseModel, current_user: str) -> ReadT:
        entity_id: int = getattr(dto, "id")
        entity = self._get_live(uow, entity_id)
        for name, value in self._update_payload(dto).items():
            setattr(entity, name, value)
        self._touch(entity, current_user)
        self._repository(uow).update(entity)
        uow.save_changes()
        self._record("updated", entity.id, current_user)
        return self._to_read(entity)

    def delete(self, uow: UnitOfWork, entity_id: int, current_user: str) -> None:
        entity = self._get_live(uow, entity_id)
        entity.updated_by = current_user
        self._repository(uow).delete(entity_id)
        uow.save_changes()
        self._record("deleted", entity_id, current_user)

    def _touch(self, entity: ModelT, current_user: str) -> None:
        entity.updated_at = utcnow()
        entity.updated_by = current_user


@dataclass(slots=True)
class CustomerService(EntityService[Customer, CustomerRead]):
    entity_name: ClassVar[str] = "Customer"
    repository_name: ClassVar[str] = "customers"
    model: ClassVar[type[AuditMixin]] = Customer
    read_model: ClassVar[type[BaseModel]] = CustomerRead

    def search(self, uow: UnitOfWork, term: str, page_number: int = 1, page_size: int = 10) -> PagedResult[CustomerRead]:
        return paginate(self._to_reads(uow.customers.search(term)), page_number, page_size)

    def get_by_status(self, uow: UnitOfWork, status: str) -> list[CustomerRead]:
        return self._to_reads(uow.customers.get_by_status(status))

    def get_by_type(self, uow: UnitOfWork, customer_type: str) -> list[CustomerRead]:
        return self._to_reads(uow.customers.get_by_type(customer_type))

    def get_by_email(self, uow: UnitOfWork, email: str) -> CustomerRead | None:
        customer = uow.customers.get_by_email(email)
        return self._to_read(customer) if customer is not None else None

    def get_recent(self, uow: UnitOfWork, count: int = 10) -> list[CustomerRead]:
        return self._to_reads(uow.customers.get_recent(count))


@dataclass(slots=True)
class ContactService(EntityService[Contact, ContactRead]):
    entity_name: ClassVar[str] = "Contact"
    repository_name: ClassVar[str] = "contacts"
    model: ClassVar[type[AuditMixin]] = Contact
    read_model: ClassVar[type[BaseModel]] = ContactRead

    def get_by_customer_id(self, uow: UnitOfWork, customer_id: int) -> list[ContactRead]:
        return self._to_reads(uow.contacts.get_by_customer_id(customer_id))

    def get_primary_contact(self, uow: UnitOfWork, customer_id: int) -> ContactRead | None:
        contact = uow.contacts.get_primary_contact(customer_id)
        return self._to_read(contact) if contact is not None else None

    def get_by_role(self, uow: UnitOfWork, role: str) -> list[ContactRead]:
        return self._to_reads(uow.contacts.get_by_role(role))


@dataclass(slots=True)
class LeadService(EntityService[Lead, LeadRead]):
    entity_name: ClassVar[str] = "Lead"
    repository_name: ClassVar[str] = "leads"
    model: ClassVar[type[AuditMixin]] = Lead
    read_model: ClassVar[type[BaseModel]] = LeadRead

    def search(self, uow: UnitOfWork, term: str, page_number: int = 1, page_size: int = 10) -> PagedResult[LeadRead]:
        return paginate(self._to_reads(uow.leads.search(term)), page_number, page_size)

    def get_by_status(self, uow: UnitOfWork, status: str) -> list[LeadRead]:
        return self._to_reads(uow.leads.get_by_status(status))

    def get_by_source(self, uow: UnitOfWork, source: str) -> list[LeadRead]:
        return self._to_reads(uow.leads.get_by_source(source))

    def get_by_assigned_user(self, uow: UnitOfWork, user_id: int) -> list[LeadRead]:
        return self._to_reads(uow.leads.get_by_assigned_user(user_id))

    def get_recent(self, uow: UnitOfWork, count: int = 10) -> list[LeadRead]:
        return self._to_reads(uow.leads.get_recent(count))


@dataclass(slots=True)
class OpportunityService(EntityService[Opportunity, OpportunityRead]):
    entity_name: ClassVar[str] = "Opportunity"
    repository_name: ClassVar[str] = "opportunities"
    model: ClassVar[type[AuditMixin]] = Opportunity
    read_model: ClassVar[type[BaseModel]] = OpportunityRead

    def update_stage(self, uow: UnitOfWork, opportunity_id: int, stage: str, current_user: str) -> OpportunityRead:
        # Any stage may follow any other; no transition rules are enforced.
        opportunity = self._get_live(uow, opportunity_id)
        opportunity.stage = stage
        self._touch(opportunity, current_user)
        uow.opportunities.update(opportunity)
        uow.save_changes()
        self._record("updated", opportunity.id, current_user)
        return self._to_read(opportunity)

    def get_by_customer_id(self, uow: UnitOfWork, customer_id: int) -> list[OpportunityRead]:
        return self._to_reads(uow.opportunities.get_by_customer_id(customer_id))

    def get_by_stage(self, uow: UnitOfWork, stage: str) -> list[OpportunityRead]:
        return self._to_reads(uow.opportunities.get_by_stage(stage))

    def get_by_status(self, uow: UnitOfWork, status: str) -> list[OpportunityRead]:
        return self._to_reads(uow.opportunities.get_by_status(status))

    def get_by_assigned_user(self, uow: UnitOfWork, user_id: int) -> list[OpportunityRead]:
        return self._to_reads(uow.opportunities.get_by_assigned_user(user_id))


@dataclass(slots=True)
class WorkItemService(EntityService[WorkItem, WorkItemRead]):
    entity_name: ClassVar[str] = "WorkItem"
    repository_name: ClassVar[str] = "work_items"
    model: ClassVar[type[AuditMixin]] = WorkItem
    read_model: ClassVar[type[BaseModel]] = WorkItemRead

    def complete(self, uow: UnitOfWork, work_item_id: int, current_user: str) -> WorkItemRead:
        work_item = self._get_live(uow, work_item_id)
        work_item.status = "Completed"
        work_item.completed_date = utcnow()
        self._touch(work_item, current_user)
        uow.work_items.update(work_item)
        uow.save_changes()
        self._record("updated", work_item.id, current_user)
        return self._to_read(work_item)

    def get_by_assigned_user(self, uow: UnitOfWork, user_id: int) -> list[WorkItemRead]:
        return self._to_reads(uow.work_items.get_by_assigned_user(user_id))

    def get_by_status(self, uow: UnitOfWork, status: str) -> list[WorkItemRead]:
        return self._to_reads(uow.work_items.get_by_status(status))

    def get_overdue(self, uow: UnitOfWork, now: datetime | None = None) -> list[WorkItemRead]:
        return self._to_reads(uow.work_items.get_overdue(now))

    def get_due_today(self, uow: UnitOfWork, now: datetime | None = None) -> list[WorkItemRead]:
        return self._to_reads(uow.work_items.get_due_today(now))

    def get_by_customer_id(self, uow: UnitOfWork, customer_id: int) -> list[WorkItemRead]:
        return self._to_reads(uow.work_items.get_by_customer_id(customer_id))

    def get_by_lead_id(self, uow: UnitOfWork, lead_id: int) -> list[WorkItemRead]:
        return self._to_reads(uow.work_items.get_by_lead_id(lead_id))

    def get_by_opportunity_id(self, uow: UnitOfWork, opportunity_id: int) -> list[WorkItemRead]:
        return self._to_reads(uow.work_items.get_by_opportunity_id(opportunity_id))


@dataclass(slots=True)
class ProductService(EntityService[Product, ProductRead]):
    entity_name: ClassVar[str] = "Product"
    repository_name: ClassVar[str] = "products"
    model: ClassVar[type[AuditMixin]] = Product
    read_model: ClassVar[type[BaseModel]] = ProductRead

    def search(self, uow: UnitOfWork, term: str, page_number: int = 1, page_size: int = 10) -> PagedResult[ProductRead]:
        return paginate(self._to_reads(uow.products.search(term)), page_number, page_size)

    def get_by_category(self, uow: UnitOfWork, category: str) -> list[ProductRead]:
        return self._to_reads(uow.products.get_by_category(category))

    def get_active_products(self, uow: UnitOfWork) -> list[ProductRead]:
        return self._to_reads(uow.products.get_active_products())

    def get_by_sku(self, uow: UnitOfWork, sku: str) -> ProductRead | None:
        product = uow.products.get_by_sku(sku)
        return self._to_read(product) if product is not None else None


@dataclass(slots=True)
class UserService(EntityService[User, UserRead]):
    entity_name: ClassVar[str] = "User"
    repository_name: ClassVar[str] = "users"
    model: ClassVar[type[AuditMixin]] = User
    read_model: ClassVar[type[BaseModel]] = UserRead

    def _create_payload(self, dto: BaseModel) -> dict[str, Any]:
        payload = dto.model_dump(mode="python", exclude={"password"})
        payload["password_hash"] = hash_password(getattr(dto, "password"))
        return payload

    def get_by_email(self, uow: UnitOfWork, email: str) -> UserRead | None:
        user = uow.users.get_by_email(email)
        return self._to_read(user) if user is not None else None

    def get_by_username(self, uow: UnitOfWork, username: str) -> UserRead | None:
        user = uow.users.get_by_username(username)
        return self._to_read(user) if user is not None else None

    def get_by_role(self, uow: UnitOfWork, role: str) -> list[UserRead]:
        return self._to_reads(uow.users.get_by_role(role))

    def get_active_users(self, uow: UnitOfWork) -> list[UserRead]:
        return self._to_reads(uow.users.get_active_users())


customer_service = CustomerService()
contact_service = ContactService()
lead_service = LeadService()
opportunity_service = OpportunityService()
work_item_service = WorkItemService()
product_service = ProductService()
user_service = UserService()
