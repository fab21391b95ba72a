from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable

from google.api_core.exceptions import AlreadyExists, GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import firestore

from .errors import RecordStoreUnavailable
from .models.records import ContactDraft, CrmContact, Invoice, InvoiceDraft
from .record_store import build_invoice, new_invoice_id

logger = logging.getLogger(__name__)


class FirestoreRecordStore:
    """Firestore-backed CRM contacts and invoices for production use."""

    CONTACTS_COLLECTION = "contacts"
    INVOICES_COLLECTION = "invoices"
    MAX_ID_ATTEMPTS = 5

    def __init__(
        self,
        project_id: str | None = None,
        *,
        client: Any | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._project_id = project_id
        self._db = client
        self._today = today

    def list_contacts(self) -> list[CrmContact]:
        docs = self._query_newest(self.CONTACTS_COLLECTION)
        return [CrmContact.model_validate(data) for data in docs]

    def add_contact(self, draft: ContactDraft) -> CrmContact:
        for attempt in range(1, self.MAX_ID_ATTEMPTS + 1):
            try:
                contact = CrmContact(
                    id=self._next_contact_id(),
                    name=draft.name,
                    email=draft.email,
                    status=draft.status,
                    last_contacted=self._today(),
                )
                # create() fails when the id is already taken.
                self._collection(self.CONTACTS_COLLECTION).document(str(contact.id)).create(
                    self._to_firestore_dict(contact)
                )
            except AlreadyExists:
                logger.warning(
                    "Contact id taken by a concurrent write, retrying",
                    extra={"contact_id": contact.id, "attempt": attempt},
                )
                continue
            except GoogleAPIError as exc:
                raise self._unavailable("add contact", exc) from exc

            logger.info("Created contact", extra={"contact_id": contact.id, "status": contact.status.value})
            return contact

        logger.error("Gave up allocating a contact id", extra={"attempts": self.MAX_ID_ATTEMPTS})
        raise RecordStoreUnavailable("Could not add contact: no free contact id after repeated conflicts")

    def _next_contact_id(self) -> int:
        latest = (
            self._collection(self.CONTACTS_COLLECTION)
            .order_by("id", direction=firestore.Query.DESCENDING)
            .limit(1)
            .stream()
        )
        return max((doc.to_dict().get("id", 0) for doc in latest), default=0) + 1

    def list_invoices(self) -> list[Invoice]:
        docs = self._query_newest(self.INVOICES_COLLECTION)
        return [Invoice.model_validate(data) for data in docs]

    def add_invoice(self, draft: InvoiceDraft) -> Invoice:
        invoice = build_invoice(draft, invoice_id=new_invoice_id(), issue_date=self._today())
        try:
            self._collection(self.INVOICES_COLLECTION).document(invoice.id).set(
                self._to_firestore_dict(invoice)
            )
        except GoogleAPIError as exc:
            raise self._unavailable("add invoice", exc) from exc

        logger.info("Created invoice", extra={"invoice_id": invoice.id, "total": invoice.total})
        return invoice

    def _collection(self, name: str):
        if self._db is None:
            try:
                self._db = firestore.Client(project=self._project_id)
            except GoogleAuthError as exc:
                raise self._unavailable("connect", exc) from exc
        return self._db.collection(name)

    def _query_newest(self, collection: str) -> list[dict[str, Any]]:
        try:
            query = self._collection(collection).order_by(
                "created_at", direction=firestore.Query.DESCENDING
            )
            return [doc.to_dict() for doc in query.stream()]
        except GoogleAPIError as exc:
            raise self._unavailable(f"list {collection}", exc) from exc

    def _to_firestore_dict(self, record: CrmContact | Invoice) -> dict[str, Any]:
        data = record.model_dump(mode="json", by_alias=True)
        data["created_at"] = datetime.utcnow()
        return data

    def _unavailable(self, action: str, exc: Exception) -> RecordStoreUnavailable:
        logger.error(
            "Record store call failed",
            exc_info=True,
            extra={"action": action, "project_id": self._project_id},
        )
        return RecordStoreUnavailable(f"Could not {action}: {exc}")


__all__ = ["FirestoreRecordStore"]
