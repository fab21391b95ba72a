from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Sequence

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class ContactStatus(str, Enum):
    lead = "Lead"
    contacted = "Contacted"
    customer = "Customer"
    lost = "Lost"


class ContactDraft(_Record):
    name: str = Field(min_length=1)
    email: EmailStr
    status: ContactStatus = ContactStatus.lead


class CrmContact(ContactDraft):
    id: int
    last_contacted: date


class InvoiceItem(_Record):
    description: str
    quantity: float = Field(default=1, ge=0)
    price: float = Field(default=0, ge=0)

    @property
    def amount(self) -> float:
        return round(self.quantity * self.price, 2)


class InvoiceDraft(_Record):
    customer_name: str = Field(min_length=1)
    customer_email: EmailStr
    items: Sequence[InvoiceItem] = Field(default_factory=list)

    def calculate_total(self) -> float:
        return round(sum(item.amount for item in self.items), 2)


class Invoice(_Record):
    id: str
    customer_name: str
    customer_email: EmailStr
    items: Sequence[InvoiceItem] = Field(default_factory=list)
    total: float
    issue_date: date
    due_date: date


__all__ = [
    "ContactDraft",
    "ContactStatus",
    "CrmContact",
    "Invoice",
    "InvoiceDraft",
    "InvoiceItem",
]
