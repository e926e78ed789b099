from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import JSONResponse

from enterprise_crm.api.deps import get_uow, page_number_param, page_size_param
from enterprise_crm.api.errors import bad_request
from enterprise_crm.core.auth import AuthUser
from enterprise_crm.core.rbac import admin_only, manager_or_admin, read_only_or_above, user_or_above
from enterprise_crm.crm.schemas import (
    ContactCreate,
    ContactRead,
    ContactUpdate,
    ContactRole,
    CustomerCreate,
    CustomerRead,
    CustomerStatus,
    CustomerType,
    CustomerUpdate,
    LeadCreate,
    LeadRead,
    LeadSource,
    LeadStatus,
    LeadUpdate,
    OpportunityCreate,
    OpportunityRead,
    OpportunityStage,
    OpportunityStageUpdate,
    OpportunityStatus,
    OpportunityUpdate,
    PagedResult,
    ProductCreate,
    ProductRead,
    ProductUpdate,
    UserCreate,
    UserRead,
    UserRole,
    UserUpdate,
    WorkItemCreate,
    WorkItemRead,
    WorkItemStatus,
    WorkItemUpdate,
)
from enterprise_crm.crm.service import (
    contact_service,
    customer_service,
    lead_service,
    opportunity_service,
    product_service,
    user_service,
    work_item_service,
)
from enterprise_crm.crm.unit_of_work import UnitOfWork
from enterprise_crm.errors import EntityNotFoundError

customers_router = APIRouter(prefix="/api/customers", tags=["crm.customers"])
contacts_router = APIRouter(prefix="/api/contacts", tags=["crm.contacts"])
leads_router = APIRouter(prefix="/api/leads", tags=["crm.leads"])
opportunities_router = APIRouter(prefix="/api/opportunities", tags=["crm.opportunities"])
work_items_router = APIRouter(prefix="/api/workitems", tags=["crm.work_items"])
products_router = APIRouter(prefix="/api/products", tags=["crm.products"])
users_router = APIRouter(prefix="/api/users", tags=["crm.users"])

RECENT_LIMIT = 100


def _blank_term(request: Request, search_term: str | None) -> JSONResponse | None:
    if search_term is None or not search_term.strip():
        return bad_request(request, "Search term is required")
    return None


def _id_mismatch(request: Request, path_id: int, body_id: int) -> JSONResponse | None:
    if path_id != body_id:
        return bad_request(request, "ID mismatch", details={"path_id": path_id, "body_id": body_id})
    return None


# Customers


@customers_router.get("", response_model=PagedResult[CustomerRead])
def list_customers(
    page_number: int = Depends(page_number_param),
    page_size: int = Depends(page_size_param),
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> PagedResult[CustomerRead]:
    return customer_service.get_all(uow, page_number, page_size)


@customers_router.get("/search", response_model=PagedResult[CustomerRead])
def search_customers(
    request: Request,
    search_term: str | None = Query(default=None, alias="searchTerm"),
    page_number: int = Depends(page_number_param),
    page_size: int = Depends(page_size_param),
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> PagedResult[CustomerRead] | JSONResponse:
    invalid = _blank_term(request, search_term)
    if invalid is not None:
        return invalid
    return customer_service.search(uow, search_term.strip(), page_number, page_size)  # type: ignore[union-attr]


@customers_router.get("/by-status/{customer_status}", response_model=list[CustomerRead])
def list_customers_by_status(
    customer_status: CustomerStatus,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> list[CustomerRead]:
    return customer_service.get_by_status(uow, customer_status)


@customers_router.get("/by-type/{customer_type}", response_model=list[CustomerRead])
def list_customers_by_type(
    customer_type: CustomerType,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> list[CustomerRead]:
    return customer_service.get_by_type(uow, customer_type)


@customers_router.get("/recent", response_model=list[CustomerRead])
def list_recent_customers(
    count: int = Query(default=10, ge=1, le=RECENT_LIMIT),
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> list[CustomerRead]:
    return customer_service.get_recent(uow, count)


@customers_router.get("/{customer_id}", response_model=CustomerRead)
def get_customer(
    customer_id: int,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> CustomerRead:
    customer = customer_service.get_by_id(uow, customer_id)
    if customer is None:
        raise EntityNotFoundError("Customer", customer_id)
    return customer


@customers_router.post("", response_model=CustomerRead, status_code=status.HTTP_201_CREATED)
def create_customer(
    dto: CustomerCreate,
    uow: UnitOfWork = Depends(get_uow),
    user: AuthUser = Depends(user_or_above),
) -> CustomerRead:
    return customer_service.create(uow, dto, user.actor)


@customers_router.put("/{customer_id}", response_model=CustomerRead)
def update_customer(
    request: Request,
    customer_id: int,
    dto: CustomerUpdate,
    uow: UnitOfWork = Depends(get_uow),
    user: AuthUser = Depends(user_or_above),
) -> CustomerRead | JSONResponse:
    mismatch = _id_mismatch(request, customer_id, dto.id)
    if mismatch is not None:
        return mismatch
    return customer_service.update(uow, dto, user.actor)


@customers_router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_customer(
    customer_id: int,
    uow: UnitOfWork = Depends(get_uow),
    user: AuthUser = Depends(user_or_above),
) -> Response:
    customer_service.delete(uow, customer_id, user.actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Contacts


@contacts_router.get("", response_model=PagedResult[ContactRead])
def list_contacts(
    page_number: int = Depends(page_number_param),
    page_size: int = Depends(page_size_param),
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> PagedResult[ContactRead]:
    return contact_service.get_all(uow, page_number, page_size)


@contacts_router.get("/customer/{customer_id}", response_model=list[ContactRead])
def list_contacts_for_customer(
    customer_id: int,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> list[ContactRead]:
    return contact_service.get_by_customer_id(uow, customer_id)


@contacts_router.get("/customer/{customer_id}/primary", response_model=ContactRead)
def get_primary_contact(
    customer_id: int,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> ContactRead:
    contact = contact_service.get_primary_contact(uow, customer_id)
    if contact is None:
        raise EntityNotFoundError("Primary contact for customer", customer_id)
    return contact


@contacts_router.get("/by-role/{role}", response_model=list[ContactRead])
def list_contacts_by_role(
    role: ContactRole,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> list[ContactRead]:
    return contact_service.get_by_role(uow, role)


@contacts_router.get("/{contact_id}", response_model=ContactRead)
def get_contact(
    contact_id: int,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> ContactRead:
    contact = contact_service.get_by_id(uow, contact_id)
    if contact is None:
        raise EntityNotFoundError("Contact", contact_id)
    return contact


@contacts_router.post("", response_model=ContactRead, status_code=status.HTTP_201_CREATED)
def create_contact(
    dto: ContactCreate,
    uow: UnitOfWork = Depends(get_uow),
    user: AuthUser = Depends(user_or_above),
) -> ContactRead:
    return contact_service.create(uow, dto, user.actor)


@contacts_router.put("/{contact_id}", response_model=ContactRead)
def update_contact(
    request: Request,
    contact_id: int,
    dto: ContactUpdate,
    uow: UnitOfWork = Depends(get_uow),
    user: AuthUser = Depends(user_or_above),
) -> ContactRead | JSONResponse:
    mismatch = _id_mismatch(request, contact_id, dto.id)
    if mismatch is not None:
        return mismatch
    return contact_service.update(uow, dto, user.actor)


@contacts_router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_contact(
    contact_id: int,
    uow: UnitOfWork = Depends(get_uow),
    user: AuthUser = Depends(user_or_above),
) -> Response:
    contact_service.delete(uow, contact_id, user.actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Leads


@leads_router.get("", response_model=PagedResult[LeadRead])
def list_leads(
    page_number: int = Depends(page_number_param),
    page_size: int = Depends(page_size_param),
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> PagedResult[LeadRead]:
    return lead_service.get_all(uow, page_number, page_size)


@leads_router.get("/search", response_model=PagedResult[LeadRead])
def search_leads(
    request: Request,
    search_term: str | None = Query(default=None, alias="searchTerm"),
    page_number: int = Depends(page_number_param),
    page_size: int = Depends(page_size_param),
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> PagedResult[LeadRead] | JSONResponse:
    invalid = _blank_term(request, search_term)
    if invalid is not None:
        return invalid
    return lead_service.search(uow, search_term.strip(), page_number, page_size)  # type: ignore[union-attr]


@leads_router.get("/by-status/{lead_status}", response_model=list[LeadRead])
def list_leads_by_status(
    lead_status: LeadStatus,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> list[LeadRead]:
    return lead_service.get_by_status(uow, lead_status)


@leads_router.get("/by-source/{source}", response_model=list[LeadRead])
def list_leads_by_source(
    source: LeadSource,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> list[LeadRead]:
    return lead_service.get_by_source(uow, source)


@leads_router.get("/assigned/{user_id}", response_model=list[LeadRead])
def list_leads_by_assigned_user(
    user_id: int,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> list[LeadRead]:
    return lead_service.get_by_assigned_user(uow, user_id)


@leads_router.get("/recent", response_model=list[LeadRead])
def list_recent_leads(
    count: int = Query(default=10, ge=1, le=RECENT_LIMIT),
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> list[LeadRead]:
    return lead_service.get_recent(uow, count)


@leads_router.get("/{lead_id}", response_model=LeadRead)
def get_lead(
    lead_id: int,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> LeadRead:
    lead = lead_service.get_by_id(uow, lead_id)
    if lead is None:
        raise EntityNotFoundError("Lead", lead_id)
    return lead


@leads_router.post("", response_model=LeadRead, status_code=status.HTTP_201_CREATED)
def create_lead(
    dto: LeadCreate,
    uow: UnitOfWork = Depends(get_uow),
    user: AuthUser = Depends(user_or_above),
) -> LeadRead:
    return lead_service.create(uow, dto, user.actor)


@leads_router.put("/{lead_id}", response_model=LeadRead)
def update_lead(
    request: Request,
    lead_id: int,
    dto: LeadUpdate,
    uow: UnitOfWork = Depends(get_uow),
    user: AuthUser = Depends(user_or_above),
) -> LeadRead | JSONResponse:
    mismatch = _id_mismatch(request, lead_id, dto.id)
    if mismatch is not None:
        return mismatch
    return lead_service.update(uow, dto, user.actor)


@leads_router.delete("/{lead_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_lead(
    lead_id: int,
    uow: UnitOfWork = Depends(get_uow),
    user: AuthUser = Depends(user_or_above),
) -> Response:
    lead_service.delete(uow, lead_id, user.actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Opportunities


@opportunities_router.get("", response_model=PagedResult[OpportunityRead])
def list_opportunities(
    page_number: int = Depends(page_number_param),
    page_size: int = Depends(page_size_param),
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> PagedResult[OpportunityRead]:
    return opportunity_service.get_all(uow, page_number, page_size)


@opportunities_router.get("/customer/{customer_id}", response_model=list[OpportunityRead])
def list_opportunities_for_customer(
    customer_id: int,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> list[OpportunityRead]:
    return opportunity_service.get_by_customer_id(uow, customer_id)


@opportunities_router.get("/by-stage/{stage}", response_model=list[OpportunityRead])
def list_opportunities_by_stage(
    stage: OpportunityStage,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> list[OpportunityRead]:
    return opportunity_service.get_by_stage(uow, stage)


@opportunities_router.get("/by-status/{opportunity_status}", response_model=list[OpportunityRead])
def list_opportunities_by_status(
    opportunity_status: OpportunityStatus,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> list[OpportunityRead]:
    return opportunity_service.get_by_status(uow, opportunity_status)


@opportunities_router.get("/assigned/{user_id}", response_model=list[OpportunityRead])
def list_opportunities_by_assigned_user(
    user_id: int,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> list[OpportunityRead]:
    return opportunity_service.get_by_assigned_user(uow, user_id)


@opportunities_router.get("/{opportunity_id}", response_model=OpportunityRead)
def get_opportunity(
    opportunity_id: int,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> OpportunityRead:
    opportunity = opportunity_service.get_by_id(uow, opportunity_id)
    if opportunity is None:
        raise EntityNotFoundError("Opportunity", opportunity_id)
    return opportunity


@opportunities_router.post("", response_model=OpportunityRead, status_code=status.HTTP_201_CREATED)
def create_opportunity(
    dto: OpportunityCreate,
    uow: UnitOfWork = Depends(get_uow),
    user: AuthUser = Depends(user_or_above),
) -> OpportunityRead:
    return opportunity_service.create(uow, dto, user.actor)


@opportunities_router.put("/{opportunity_id}", response_model=OpportunityRead)
def update_opportunity(
    request: Request,
    opportunity_id: int,
    dto: OpportunityUpdate,
    uow: UnitOfWork = Depends(get_uow),
    user: AuthUser = Depends(user_or_above),
) -> OpportunityRead | JSONResponse:
    mismatch = _id_mismatch(request, opportunity_id, dto.id)
    if mismatch is not None:
        return mismatch
    return opportunity_service.update(uow, dto, user.actor)


@opportunities_router.put("/{opportunity_id}/stage", response_model=OpportunityRead)
def update_opportunity_stage(
    opportunity_id: int,
    dto: OpportunityStageUpdate,
    uow: UnitOfWork = Depends(get_uow),
    user: AuthUser = Depends(user_or_above),
) -> OpportunityRead:
    return opportunity_service.update_stage(uow, opportunity_id, dto.stage, user.actor)


@opportunities_router.delete("/{opportunity_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_opportunity(
    opportunity_id: int,
    uow: UnitOfWork = Depends(get_uow),
    user: AuthUser = Depends(user_or_above),
) -> Response:
    opportunity_service.delete(uow, opportunity_id, user.actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Work items


@work_items_router.get("", response_model=PagedResult[WorkItemRead])
def list_work_items(
    page_number: int = Depends(page_number_param),
    page_size: int = Depends(page_size_param),
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> PagedResult[WorkItemRead]:
    return work_item_service.get_all(uow, page_number, page_size)


@work_items_router.get("/overdue", response_model=list[WorkItemRead])
def list_overdue_work_items(
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> list[WorkItemRead]:
    return work_item_service.get_overdue(uow)


@work_items_router.get("/due-today", response_model=list[WorkItemRead])
def list_work_items_due_today(
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> list[WorkItemRead]:
    return work_item_service.get_due_today(uow)


@work_items_router.get("/by-status/{work_item_status}", response_model=list[WorkItemRead])
def list_work_items_by_status(
    work_item_status: WorkItemStatus,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> list[WorkItemRead]:
    return work_item_service.get_by_status(uow, work_item_status)


@work_items_router.get("/assigned/{user_id}", response_model=list[WorkItemRead])
def list_work_items_by_assigned_user(
    user_id: int,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> list[WorkItemRead]:
    return work_item_service.get_by_assigned_user(uow, user_id)


@work_items_router.get("/customer/{customer_id}", response_model=list[WorkItemRead])
def list_work_items_for_customer(
    customer_id: int,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> list[WorkItemRead]:
    return work_item_service.get_by_customer_id(uow, customer_id)


@work_items_router.get("/lead/{lead_id}", response_model=list[WorkItemRead])
def list_work_items_for_lead(
    lead_id: int,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> list[WorkItemRead]:
    return work_item_service.get_by_lead_id(uow, lead_id)


@work_items_router.get("/opportunity/{opportunity_id}", response_model=list[WorkItemRead])
def list_work_items_for_opportunity(
    opportunity_id: int,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> list[WorkItemRead]:
    return work_item_service.get_by_opportunity_id(uow, opportunity_id)


@work_items_router.get("/{work_item_id}", response_model=WorkItemRead)
def get_work_item(
    work_item_id: int,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> WorkItemRead:
    work_item = work_item_service.get_by_id(uow, work_item_id)
    if work_item is None:
        raise EntityNotFoundError("WorkItem", work_item_id)
    return work_item


@work_items_router.post("", response_model=WorkItemRead, status_code=status.HTTP_201_CREATED)
def create_work_item(
    dto: WorkItemCreate,
    uow: UnitOfWork = Depends(get_uow),
    user: AuthUser = Depends(user_or_above),
) -> WorkItemRead:
    return work_item_service.create(uow, dto, user.actor)


@work_items_router.put("/{work_item_id}", response_model=WorkItemRead)
def update_work_item(
    request: Request,
    work_item_id: int,
    dto: WorkItemUpdate,
    uow: UnitOfWork = Depends(get_uow),
    user: AuthUser = Depends(user_or_above),
) -> WorkItemRead | JSONResponse:
    mismatch = _id_mismatch(request, work_item_id, dto.id)
    if mismatch is not None:
        return mismatch
    return work_item_service.update(uow, dto, user.actor)


@work_items_router.post("/{work_item_id}/complete", response_model=WorkItemRead)
def complete_work_item(
    work_item_id: int,
    uow: UnitOfWork = Depends(get_uow),
    user: AuthUser = Depends(user_or_above),
) -> WorkItemRead:
    return work_item_service.complete(uow, work_item_id, user.actor)


@work_items_router.delete("/{work_item_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_work_item(
    work_item_id: int,
    uow: UnitOfWork = Depends(get_uow),
    user: AuthUser = Depends(user_or_above),
) -> Response:
    work_item_service.delete(uow, work_item_id, user.actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Products


@products_router.get("", response_model=PagedResult[ProductRead])
def list_products(
    page_number: int = Depends(page_number_param),
    page_size: int = Depends(page_size_param),
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> PagedResult[ProductRead]:
    return product_service.get_all(uow, page_number, page_size)


@products_router.get("/search", response_model=PagedResult[ProductRead])
def search_products(
    request: Request,
    search_term: str | None = Query(default=None, alias="searchTerm"),
    page_number: int = Depends(page_number_param),
    page_size: int = Depends(page_size_param),
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> PagedResult[ProductRead] | JSONResponse:
    invalid = _blank_term(request, search_term)
    if invalid is not None:
        return invalid
    return product_service.search(uow, search_term.strip(), page_number, page_size)  # type: ignore[union-attr]


@products_router.get("/category/{category}", response_model=list[ProductRead])
def list_products_by_category(
    category: str,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> list[ProductRead]:
    return product_service.get_by_category(uow, category)


@products_router.get("/active", response_model=list[ProductRead])
def list_active_products(
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> list[ProductRead]:
    return product_service.get_active_products(uow)


@products_router.get("/sku/{sku}", response_model=ProductRead)
def get_product_by_sku(
    sku: str,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> ProductRead:
    product = product_service.get_by_sku(uow, sku)
    if product is None:
        raise EntityNotFoundError("Product", sku)
    return product


@products_router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: int,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(read_only_or_above),
) -> ProductRead:
    product = product_service.get_by_id(uow, product_id)
    if product is None:
        raise EntityNotFoundError("Product", product_id)
    return product


@products_router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
def create_product(
    dto: ProductCreate,
    uow: UnitOfWork = Depends(get_uow),
    user: AuthUser = Depends(manager_or_admin),
) -> ProductRead:
    return product_service.create(uow, dto, user.actor)


@products_router.put("/{product_id}", response_model=ProductRead)
def update_product(
    request: Request,
    product_id: int,
    dto: ProductUpdate,
    uow: UnitOfWork = Depends(get_uow),
    user: AuthUser = Depends(manager_or_admin),
) -> ProductRead | JSONResponse:
    mismatch = _id_mismatch(request, product_id, dto.id)
    if mismatch is not None:
        return mismatch
    return product_service.update(uow, dto, user.actor)


@products_router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_product(
    product_id: int,
    uow: UnitOfWork = Depends(get_uow),
    user: AuthUser = Depends(admin_only),
) -> Response:
    product_service.delete(uow, product_id, user.actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Users


@users_router.get("", response_model=PagedResult[UserRead])
def list_users(
    page_number: int = Depends(page_number_param),
    page_size: int = Depends(page_size_param),
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(admin_only),
) -> PagedResult[UserRead]:
    return user_service.get_all(uow, page_number, page_size)


@users_router.get("/active", response_model=list[UserRead])
def list_active_users(
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(admin_only),
) -> list[UserRead]:
    return user_service.get_active_users(uow)


@users_router.get("/by-role/{role}", response_model=list[UserRead])
def list_users_by_role(
    role: UserRole,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(admin_only),
) -> list[UserRead]:
    return user_service.get_by_role(uow, role)


@users_router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: int,
    uow: UnitOfWork = Depends(get_uow),
    _: AuthUser = Depends(admin_only),
) -> UserRead:
    user = user_service.get_by_id(uow, user_id)
    if user is None:
        raise EntityNotFoundError("User", user_id)
    return user


@users_router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    dto: UserCreate,
    uow: UnitOfWork = Depends(get_uow),
    user: AuthUser = Depends(admin_only),
) -> UserRead:
    return user_service.create(uow, dto, user.actor)


@users_router.put("/{user_id}", response_model=UserRead)
def update_user(
    request: Request,
    user_id: int,
    dto: UserUpdate,
    uow: UnitOfWork = Depends(get_uow),
    user: AuthUser = Depends(admin_only),
) -> UserRead | JSONResponse:
    mismatch = _id_mismatch(request, user_id, dto.id)
    if mismatch is not None:
        return mismatch
    return user_service.update(uow, dto, user.actor)


@users_router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_user(
    user_id: int,
    uow: UnitOfWork = Depends(get_uow),
    user: AuthUser = Depends(admin_only),
) -> Response:
    user_service.delete(uow, user_id, user.actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
