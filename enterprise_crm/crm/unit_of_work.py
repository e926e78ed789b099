from __future__ import annotations

import logging
from types import TracebackType

from sqlalchemy.orm import Session, SessionTransaction

from enterprise_crm.crm.repositories import (
    ContactRepository,
    CustomerRepository,
    LeadRepository,
    OpportunityRepository,
    ProductRepository,
    UserRepository,
    WorkItemRepository,
)


logger = logging.getLogger("enterprise_crm.crm.uow")


class UnitOfWork:
    """One repository per entity type over a single request-scoped session.

    Nothing written through a repository is durable until :meth:`save_changes`
    commits. A failed save rolls the whole batch back before re-raising.
    """

    def __init__(self, session: Session) -> None:
        self.session = session
        self._transaction: SessionTransaction | None = None
        self.customers = CustomerRepository(session)
        self.contacts = ContactRepository(session)
        self.leads = LeadRepository(session)
        self.opportunities = OpportunityRepository(session)
        self.work_items = WorkItemRepository(session)
        self.users = UserRepository(session)
        self.products = ProductRepository(session)

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            self.rollback_transaction()
            if self.session.in_transaction():
                self.session.rollback()

    @property
    def in_explicit_transaction(self) -> bool:
        return self._transaction is not None

    def pending_count(self) -> int:
        dirty = [entity for entity in self.session.dirty if self.session.is_modified(entity)]
        return len(self.session.new) + len(dirty) + len(self.session.deleted)

    def save_changes(self) -> int:
        """Persist every pending add/update/soft-delete; returns the number of rows written."""
        written = self.pending_count()
        try:
            if self._transaction is not None:
                # Inside an explicit transaction the commit is deferred to commit_transaction().
                self.session.flush()
            else:
                self.session.commit()
        except Exception:
            logger.exception("uow.save_failed")
            self.rollback_transaction()
            self.session.rollback()
            raise
        return written

    def begin_transaction(self) -> None:
        if self._transaction is not None:
            return
        if self.session.in_transaction():
            self.session.commit()
        self._transaction = self.session.begin()

    def commit_transaction(self) -> None:
        if self._transaction is None:
            return
        transaction, self._transaction = self._transaction, None
        transaction.commit()

    def rollback_transaction(self) -> None:
        if self._transaction is None:
            return
        transaction, self._transaction = self._transaction, None
        transaction.rollback()
