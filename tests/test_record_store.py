from datetime import date

import pytest
from google.api_core.exceptions import AlreadyExists, ServiceUnavailable
from pydantic import ValidationError

from site_editor.errors import RecordStoreUnavailable
from site_editor.firestore_record_store import FirestoreRecordStore
from site_editor.models.records import ContactDraft, ContactStatus, InvoiceDraft, InvoiceItem
from site_editor.record_store import InMemoryRecordStore, UnconfiguredRecordStore

TODAY = date(2026, 3, 1)


def test_contacts_get_increasing_ids_and_newest_first():
    store = InMemoryRecordStore(today=lambda: TODAY)

    first = store.add_contact(ContactDraft(name="Marta", email="marta@example.com"))
    second = store.add_contact(
        ContactDraft(name="Jordi", email="jordi@example.com", status=ContactStatus.customer)
    )

    assert (first.id, second.id) == (1, 2)
    assert first.status is ContactStatus.lead
    assert first.last_contacted == TODAY
    assert [contact.name for contact in store.list_contacts()] == ["Jordi", "Marta"]


def test_contact_draft_validates_email():
    with pytest.raises(ValidationError):
        ContactDraft(name="Marta", email="not-an-email")


def test_invoice_total_and_due_date():
    ids = iter(["INV-1", "INV-1", "INV-2"])
    store = InMemoryRecordStore(today=lambda: TODAY, invoice_id_factory=lambda: next(ids))
    draft = InvoiceDraft(
        customer_name="Café Estelar",
        customer_email="hola@cafeestelar.example",
        items=[
            InvoiceItem(description="Website", quantity=1, price=450),
            InvoiceItem(description="Hosting", quantity=12, price=9.99),
        ],
    )

    first = store.add_invoice(draft)
    second = store.add_invoice(draft)

    assert first.total == pytest.approx(569.88)
    assert first.issue_date == TODAY
    assert first.due_date == date(2026, 3, 31)
    assert (first.id, second.id) == ("INV-1", "INV-2")
    assert [invoice.id for invoice in store.list_invoices()] == ["INV-2", "INV-1"]


def test_invoice_wire_shape_is_camel_case():
    store = InMemoryRecordStore(today=lambda: TODAY, invoice_id_factory=lambda: "INV-9")
    invoice = store.add_invoice(
        InvoiceDraft.model_validate(
            {"customerName": "Ana", "customerEmail": "ana@example.com", "items": []}
        )
    )

    dumped = invoice.model_dump(mode="json", by_alias=True)
    assert dumped["dueDate"] == "2026-03-31"
    assert dumped["customerName"] == "Ana"
    assert dumped["total"] == 0


def test_unconfigured_store_raises():
    store = UnconfiguredRecordStore()

    with pytest.raises(RecordStoreUnavailable):
        store.list_contacts()
    with pytest.raises(RecordStoreUnavailable):
        store.add_invoice(InvoiceDraft(customer_name="Ana", customer_email="ana@example.com"))


class FakeSnapshot:
    def __init__(self, data):
        self._data = data

    def to_dict(self):
        return dict(self._data)


class FakeQuery:
    def __init__(self, db, rows, key=None, reverse=False, limit=None):
        self._db = db
        self._rows = rows
        self._key = key
        self._reverse = reverse
        self._limit = limit

    def order_by(self, field, direction=None):
        return FakeQuery(self._db, self._rows, field, direction == "DESCENDING")

    def limit(self, count):
        return FakeQuery(self._db, self._rows, self._key, self._reverse, count)

    def stream(self):
        if self._db.error:
            raise self._db.error
        if self._db.stale_reads:
            self._db.stale_reads -= 1
            return []
        rows = sorted(self._rows.values(), key=lambda row: row[self._key], reverse=self._reverse)
        return [FakeSnapshot(row) for row in rows[: self._limit]]


class FakeDocument:
    def __init__(self, rows, doc_id):
        self._rows = rows
        self._doc_id = doc_id

    def set(self, data):
        self._rows[self._doc_id] = data

    def create(self, data):
        if self._doc_id in self._rows:
            raise AlreadyExists(f"Document {self._doc_id} already exists")
        self._rows[self._doc_id] = data


class FakeCollection(FakeQuery):
    def document(self, doc_id):
        return FakeDocument(self._rows, doc_id)


class FakeFirestore:
    def __init__(self, error=None, stale_reads=0):
        self.collections: dict[str, dict] = {}
        self.error = error
        self.stale_reads = stale_reads

    def collection(self, name):
        return FakeCollection(self, self.collections.setdefault(name, {}))


def test_firestore_store_round_trip():
    client = FakeFirestore()
    store = FirestoreRecordStore("demo-project", client=client, today=lambda: TODAY)

    store.add_contact(ContactDraft(name="Marta", email="marta@example.com"))
    contact = store.add_contact(ContactDraft(name="Jordi", email="jordi@example.com"))
    invoice = store.add_invoice(
        InvoiceDraft(
            customer_name="Ana",
            customer_email="ana@example.com",
            items=[InvoiceItem(description="Logo", quantity=2, price=50)],
        )
    )

    assert contact.id == 2
    assert set(client.collections["contacts"]) == {"1", "2"}
    assert {contact.name for contact in store.list_contacts()} == {"Marta", "Jordi"}
    stored = store.list_invoices()
    assert [item.id for item in stored] == [invoice.id]
    assert stored[0].total == 100
    assert stored[0].due_date == date(2026, 3, 31)


def test_firestore_errors_become_unavailable():
    store = FirestoreRecordStore("demo-project", client=FakeFirestore(error=ServiceUnavailable("down")))

    with pytest.raises(RecordStoreUnavailable):
        store.list_contacts()
    with pytest.raises(RecordStoreUnavailable):
        store.add_contact(ContactDraft(name="Marta", email="marta@example.com"))


def test_firestore_contact_id_taken_concurrently_is_retried():
    client = FakeFirestore()
    store = FirestoreRecordStore("demo-project", client=client, today=lambda: TODAY)
    store.add_contact(ContactDraft(name="Marta", email="marta@example.com"))
    # The next id lookup misses Marta, as if her write landed after the read.
    client.stale_reads = 1

    contact = store.add_contact(ContactDraft(name="Jordi", email="jordi@example.com"))

    assert contact.id == 2
    assert client.collections["contacts"]["1"]["name"] == "Marta"
    assert client.collections["contacts"]["2"]["name"] == "Jordi"


def test_firestore_gives_up_after_repeated_id_conflicts():
    client = FakeFirestore()
    store = FirestoreRecordStore("demo-project", client=client, today=lambda: TODAY)
    store.add_contact(ContactDraft(name="Marta", email="marta@example.com"))
    client.stale_reads = FirestoreRecordStore.MAX_ID_ATTEMPTS

    with pytest.raises(RecordStoreUnavailable):
        store.add_contact(ContactDraft(name="Jordi", email="jordi@example.com"))
    assert list(client.collections["contacts"]) == ["1"]
