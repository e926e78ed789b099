from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from enterprise_crm.core.database import Base
from enterprise_crm.core.types import UtcDateTime


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditMixin:
    """Identity, audit stamps and the soft-delete flag shared by every CRM table."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False, default=utcnow)
    created_by: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    updated_at: Mapped[datetime | None] = mapped_column(UtcDateTime, nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="0")


class Customer(AuditMixin, Base):
    __tablename__ = "crm_customer"

    company_name: Mapped[str] = mapped_column(String(200), nullable=False)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(50), nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True)
    industry: Mapped[str | None] = mapped_column(String(50), nullable=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False, default="Individual")
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="Active")
    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    __table_args__ = (
        Index("ix_crm_customer_email", "email"),
        Index("ix_crm_customer_company_name", "company_name"),
        Index("ix_crm_customer_status", "status"),
    )


class Contact(AuditMixin, Base):
    __tablename__ = "crm_contact"

    customer_id: Mapped[int] = mapped_column(Integer, ForeignKey("crm_customer.id"), nullable=False, index=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    job_title: Mapped[str | None] = mapped_column(String(100), nullable=True)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default="General")
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)


class User(AuditMixin, Base):
    __tablename__ = "crm_user"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default="User", index=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="Active")
    last_login_date: Mapped[datetime | None] = mapped_column(UtcDateTime, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    job_title: Mapped[str | None] = mapped_column(String(100), nullable=True)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True)


class Lead(AuditMixin, Base):
    __tablename__ = "crm_lead"

    company_name: Mapped[str] = mapped_column(String(200), nullable=False)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    job_title: Mapped[str | None] = mapped_column(String(100), nullable=True)
    industry: Mapped[str | None] = mapped_column(String(100), nullable=True)
    source: Mapped[str] = mapped_column(String(32), nullable=False, default="Website")
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="New", index=True)
    priority: Mapped[str] = mapped_column(String(32), nullable=False, default="Medium")
    estimated_value: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0"))
    expected_close_date: Mapped[datetime | None] = mapped_column(UtcDateTime, nullable=True)
    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    assigned_to_user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("crm_user.id"), nullable=True, index=True
    )
    customer_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("crm_customer.id"), nullable=True)


class Opportunity(AuditMixin, Base):
    __tablename__ = "crm_opportunity"

    customer_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("crm_customer.id"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    stage: Mapped[str] = mapped_column(String(32), nullable=False, default="Prospecting", index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0"))
    probability: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=Decimal("0"))
    expected_close_date: Mapped[datetime | None] = mapped_column(UtcDateTime, nullable=True)
    actual_close_date: Mapped[datetime | None] = mapped_column(UtcDateTime, nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="Open", index=True)
    product: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    assigned_to_user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("crm_user.id"), nullable=True, index=True
    )


class WorkItem(AuditMixin, Base):
    __tablename__ = "crm_work_item"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False, default="General")
    priority: Mapped[str] = mapped_column(String(32), nullable=False, default="Medium")
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="Pending", index=True)
    due_date: Mapped[datetime | None] = mapped_column(UtcDateTime, nullable=True, index=True)
    completed_date: Mapped[datetime | None] = mapped_column(UtcDateTime, nullable=True)
    assigned_to_user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("crm_user.id"), nullable=False, index=True
    )
    customer_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("crm_customer.id"), nullable=True)
    lead_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("crm_lead.id"), nullable=True)
    opportunity_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("crm_opportunity.id"), nullable=True)
    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)


class Product(AuditMixin, Base):
    __tablename__ = "crm_product"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    sku: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0"))
    cost: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
