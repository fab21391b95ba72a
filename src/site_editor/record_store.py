from __future__ import annotations

import threading
import time
from datetime import date, timedelta
from typing import Callable, Iterable, List, Protocol

from .errors import RecordStoreUnavailable
from .models.records import ContactDraft, CrmContact, Invoice, InvoiceDraft

INVOICE_TERM_DAYS = 30


class RecordStore(Protocol):
    def list_contacts(self) -> list[CrmContact]:
        ...

    def add_contact(self, draft: ContactDraft) -> CrmContact:
        ...

    def list_invoices(self) -> list[Invoice]:
        ...

    def add_invoice(self, draft: InvoiceDraft) -> Invoice:
        ...


def new_invoice_id() -> str:
    return f"INV-{time.time_ns() // 1_000_000}"


def build_invoice(draft: InvoiceDraft, *, invoice_id: str, issue_date: date) -> Invoice:
    return Invoice(
        id=invoice_id,
        customer_name=draft.customer_name,
        customer_email=draft.customer_email,
        items=list(draft.items),
        total=draft.calculate_total(),
        issue_date=issue_date,
        due_date=issue_date + timedelta(days=INVOICE_TERM_DAYS),
    )


class InMemoryRecordStore:
    """Process-local record store used in development and tests."""

    def __init__(
        self,
        *,
        contacts: Iterable[CrmContact] = (),
        invoices: Iterable[Invoice] = (),
        today: Callable[[], date] = date.today,
        invoice_id_factory: Callable[[], str] = new_invoice_id,
    ) -> None:
        self._contacts: List[CrmContact] = list(contacts)
        self._invoices: List[Invoice] = list(invoices)
        self._today = today
        self._invoice_id_factory = invoice_id_factory
        self._lock = threading.Lock()

    def list_contacts(self) -> list[CrmContact]:
        with self._lock:
            return list(reversed(self._contacts))

    def add_contact(self, draft: ContactDraft) -> CrmContact:
        with self._lock:
            next_id = max((contact.id for contact in self._contacts), default=0) + 1
            contact = CrmContact(
                id=next_id,
                name=draft.name,
                email=draft.email,
                status=draft.status,
                last_contacted=self._today(),
            )
            self._contacts.append(contact)
            return contact

    def list_invoices(self) -> list[Invoice]:
        with self._lock:
            return list(reversed(self._invoices))

    def add_invoice(self, draft: InvoiceDraft) -> Invoice:
        with self._lock:
            invoice_id = self._invoice_id_factory()
            taken = {invoice.id for invoice in self._invoices}
            while invoice_id in taken:
                invoice_id = self._invoice_id_factory()
            invoice = build_invoice(draft, invoice_id=invoice_id, issue_date=self._today())
            self._invoices.append(invoice)
            return invoice


class UnconfiguredRecordStore:
    """Stand-in used when no record store backend is configured."""

    def __init__(self, message: str = "The record store is not configured") -> None:
        self._message = message

    def _fail(self) -> RecordStoreUnavailable:
        return RecordStoreUnavailable(self._message)

    def list_contacts(self) -> list[CrmContact]:
        raise self._fail()

    def add_contact(self, draft: ContactDraft) -> CrmContact:
        raise self._fail()

    def list_invoices(self) -> list[Invoice]:
        raise self._fail()

    def add_invoice(self, draft: InvoiceDraft) -> Invoice:
        raise self._fail()


__all__ = [
    "INVOICE_TERM_DAYS",
    "InMemoryRecordStore",
    "RecordStore",
    "UnconfiguredRecordStore",
    "build_invoice",
    "new_invoice_id",
]
