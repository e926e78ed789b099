from __future__ import annotations

import math
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Generic, Literal, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, PlainSerializer, computed_field
from pydantic.alias_generators import to_camel

from enterprise_crm.core.types import as_utc


CustomerType = Literal["Individual", "Company"]
CustomerStatus = Literal["Active", "Inactive", "Suspended"]
ContactRole = Literal["General", "DecisionMaker", "Influencer", "User", "Technical"]
LeadSource = Literal["Website", "Referral", "ColdCall", "Email", "SocialMedia", "TradeShow", "Advertisement", "Other"]
LeadStatus = Literal["New", "Contacted", "Qualified", "Proposal", "Negotiation", "ClosedWon", "ClosedLost"]
Priority = Literal["Low", "Medium", "High", "Critical"]
OpportunityStage = Literal["Prospecting", "Qualification", "Proposal", "Negotiation", "ClosedWon", "ClosedLost"]
OpportunityStatus = Literal["Open", "Won", "Lost", "Cancelled"]
WorkItemType = Literal["General", "Call", "Email", "Meeting", "FollowUp", "Proposal", "Demo", "Other"]
WorkItemStatus = Literal["Pending", "InProgress", "Completed", "Cancelled", "OnHold"]
UserRole = Literal["Admin", "Manager", "User", "ReadOnly"]
UserStatus = Literal["Active", "Inactive", "Suspended"]

# Decimal in Python, plain JSON number on the wire.
Money = Annotated[Decimal, Field(max_digits=18, decimal_places=2), PlainSerializer(float, return_type=float, when_used="json")]
Percentage = Annotated[
    Decimal,
    Field(ge=0, le=100, max_digits=5, decimal_places=2),
    PlainSerializer(float, return_type=float, when_used="json"),
]
# Naive input is read as UTC so stored and returned values compare cleanly.
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class CRMSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class AuditRead(CRMSchema):
    id: int
    created_at: UtcDatetime
    updated_at: UtcDatetime | None = None
    created_by: str
    updated_by: str | None = None


ItemT = TypeVar("ItemT")


class PagedResult(CRMSchema, Generic[ItemT]):
    data: list[ItemT]
    total_count: int
    page_number: int
    page_size: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_previous_page(self) -> bool:
        return self.page_number > 1

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_next_page(self) -> bool:
        return self.page_number < self.total_pages


class CustomerFields(CRMSchema):
    company_name: str = Field(min_length=1, max_length=200)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    email: EmailStr = Field(max_length=255)
    phone: str | None = Field(default=None, max_length=20)
    address: str | None = Field(default=None, max_length=500)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=50)
    postal_code: str | None = Field(default=None, max_length=20)
    country: str | None = Field(default=None, max_length=100)
    industry: str | None = Field(default=None, max_length=50)
    type: CustomerType = "Individual"
    status: CustomerStatus = "Active"
    notes: str | None = Field(default=None, max_length=1000)


class CustomerCreate(CustomerFields):
    pass


class CustomerUpdate(CustomerFields):
    id: int


class CustomerRead(AuditRead, CustomerFields):
    email: str


class ContactFields(CRMSchema):
    customer_id: int
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr = Field(max_length=255)
    phone: str | None = Field(default=None, max_length=20)
    job_title: str | None = Field(default=None, max_length=100)
    department: str | None = Field(default=None, max_length=100)
    role: ContactRole = "General"
    is_primary: bool = False
    notes: str | None = Field(default=None, max_length=500)


class ContactCreate(ContactFields):
    pass


class ContactUpdate(ContactFields):
    id: int


class ContactRead(AuditRead, ContactFields):
    email: str


class LeadFields(CRMSchema):
    company_name: str = Field(min_length=1, max_length=200)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    email: EmailStr = Field(max_length=255)
    phone: str | None = Field(default=None, max_length=20)
    job_title: str | None = Field(default=None, max_length=100)
    industry: str | None = Field(default=None, max_length=100)
    source: LeadSource = "Website"
    status: LeadStatus = "New"
    priority: Priority = "Medium"
    estimated_value: Money = Decimal("0")
    expected_close_date: UtcDatetime | None = None
    notes: str | None = Field(default=None, max_length=1000)
    assigned_to_user_id: int | None = None
    customer_id: int | None = None


class LeadCreate(LeadFields):
    pass


class LeadUpdate(LeadFields):
    id: int


class LeadRead(AuditRead, LeadFields):
    email: str


class OpportunityFields(CRMSchema):
    customer_id: int | None = None
    name: str = Field(min_length=1, max_length=200)
    stage: OpportunityStage = "Prospecting"
    amount: Money = Decimal("0")
    probability: Percentage = Decimal("0")
    expected_close_date: UtcDatetime | None = None
    actual_close_date: UtcDatetime | None = None
    status: OpportunityStatus = "Open"
    product: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    notes: str | None = Field(default=None, max_length=1000)
    assigned_to_user_id: int | None = None


class OpportunityCreate(OpportunityFields):
    pass


class OpportunityUpdate(OpportunityFields):
    id: int


class OpportunityRead(AuditRead, OpportunityFields):
    pass


class OpportunityStageUpdate(CRMSchema):
    stage: OpportunityStage


class WorkItemFields(CRMSchema):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    type: WorkItemType = "General"
    priority: Priority = "Medium"
    status: WorkItemStatus = "Pending"
    due_date: UtcDatetime | None = None
    completed_date: UtcDatetime | None = None
    assigned_to_user_id: int
    customer_id: int | None = None
    lead_id: int | None = None
    opportunity_id: int | None = None
    notes: str | None = Field(default=None, max_length=1000)


class WorkItemCreate(WorkItemFields):
    pass


class WorkItemUpdate(WorkItemFields):
    id: int


class WorkItemRead(AuditRead, WorkItemFields):
    pass


class UserFields(CRMSchema):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr = Field(max_length=255)
    username: str = Field(min_length=1, max_length=100)
    role: UserRole = "User"
    status: UserStatus = "Active"
    phone: str | None = Field(default=None, max_length=20)
    job_title: str | None = Field(default=None, max_length=100)
    department: str | None = Field(default=None, max_length=100)


class UserCreate(UserFields):
    password: str = Field(min_length=8, max_length=128)


class UserUpdate(UserFields):
    id: int


class UserRead(AuditRead, UserFields):
    email: str
    last_login_date: UtcDatetime | None = None


class ProductFields(CRMSchema):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    sku: str | None = Field(default=None, max_length=50)
    price: Money = Decimal("0")
    cost: Money | None = None
    category: str | None = Field(default=None, max_length=100)
    is_active: bool = True


class ProductCreate(ProductFields):
    pass


class ProductUpdate(ProductFields):
    id: int


class ProductRead(AuditRead, ProductFields):
    pass
