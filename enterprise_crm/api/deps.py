from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from enterprise_crm.core.config import get_settings
from enterprise_crm.core.database import get_db
from enterprise_crm.crm.unit_of_work import UnitOfWork


MAX_PAGE_SIZE = 100


def get_uow(db: Session = Depends(get_db)) -> Iterator[UnitOfWork]:
    with UnitOfWork(db) as uow:
        yield uow


def page_number_param(page_number: int = Query(default=1, ge=1, alias="pageNumber")) -> int:
    return page_number


def page_size_param(page_size: int | None = Query(default=None, ge=1, le=MAX_PAGE_SIZE, alias="pageSize")) -> int:
    return page_size or get_settings().default_page_size
