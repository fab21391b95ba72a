from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Any

from fastapi import BackgroundTasks, Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from site_editor.content_generator import ContentGenerator
from site_editor.document_repository import LocalDocumentRepository
from site_editor.errors import (
    GenerationFailure,
    InvalidPath,
    RecordStoreUnavailable,
    SessionNotLoadedError,
    StructuralViolation,
)
from site_editor.logging_config import set_session_id, setup_logging
from site_editor.models.business import BusinessInfo
from site_editor.models.document import SectionKind
from site_editor.models.marketing import MarketingCampaign
from site_editor.models.records import ContactDraft, CrmContact, Invoice, InvoiceDraft
from site_editor.record_store import InMemoryRecordStore, RecordStore, UnconfiguredRecordStore
from site_editor.registry import (
    ADDABLE_KINDS,
    DEFAULT_THEME,
    FONT_FAMILIES,
    display_name,
    editors_for,
    get_definition,
)
from site_editor.sections import MoveDirection
from site_editor.session import EditingSession, SessionState
from site_editor.session_store import SessionStore


class ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel, str_strip_whitespace=True)


class EditFieldRequest(ApiModel):
    path: str = Field(min_length=1, description="Dotted path, e.g. sections.1.content.title")
    value: Any = None


class SelectSectionRequest(ApiModel):
    section_id: str | None = None


class AddSectionRequest(ApiModel):
    kind: SectionKind


class MoveSectionRequest(ApiModel):
    index: int
    direction: MoveDirection


class PanelRequest(ApiModel):
    open: bool


class LoadSiteRequest(ApiModel):
    site_id: str = Field(min_length=1)


class CampaignRequest(ApiModel):
    business_info: BusinessInfo
    campaign_goal: str = Field(min_length=1)


# Environment configuration
ENVIRONMENT = os.getenv("ENVIRONMENT", "dev")
PROJECT_ID = os.getenv("PROJECT_ID")
VERTEX_LOCATION = os.getenv("VERTEX_LOCATION", "us-central1")
VERTEX_MODEL = os.getenv("VERTEX_MODEL", "gemini-2.5-flash")
RECORD_STORE = os.getenv("RECORD_STORE", "memory" if ENVIRONMENT == "dev" else "firestore")
SITES_DIR = os.getenv("SITES_DIR", "data/sites")

# Setup logging
setup_logging(environment=ENVIRONMENT, project_id=PROJECT_ID)
logger = logging.getLogger(__name__)

app = FastAPI(title="Site Content Editor API", version="0.1.0")


def _build_content_generator() -> ContentGenerator:
    if not PROJECT_ID:
        return ContentGenerator()
    from site_editor.vertex_ai_adapter import VertexAIAdapter

    return ContentGenerator(
        model=VertexAIAdapter(project_id=PROJECT_ID, location=VERTEX_LOCATION, model_name=VERTEX_MODEL)
    )


def _build_record_store() -> RecordStore:
    if RECORD_STORE == "memory":
        return InMemoryRecordStore()
    if RECORD_STORE == "firestore":
        from site_editor.firestore_record_store import FirestoreRecordStore

        return FirestoreRecordStore(project_id=PROJECT_ID)
    return UnconfiguredRecordStore()


content_generator = _build_content_generator()
record_store = _build_record_store()
session_store = SessionStore()
repository = LocalDocumentRepository(base_path=Path(SITES_DIR).resolve())
generation_notices: dict[str, str] = {}
_ABSENT = object()


def _session_payload(session: EditingSession) -> dict[str, Any]:
    loaded = session.state is SessionState.editing
    return {
        "id": session.session_id,
        "state": session.state.value,
        "generating": session.generating,
        "revision": session.revision,
        "selectedSectionId": session.selected_section_id,
        "panelOpen": session.panel_open,
        "notice": generation_notices.get(session.session_id or ""),
        "document": session.document.to_tree() if loaded else None,
        "palette": session.palette().model_dump() if loaded else None,
    }


async def get_session(session_id: str) -> EditingSession:
    session = session_store.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    set_session_id(session_id)
    return session


@app.exception_handler(InvalidPath)
async def _invalid_path(request: Request, exc: InvalidPath) -> JSONResponse:
    return JSONResponse({"detail": str(exc), "path": exc.path}, status_code=422)


@app.exception_handler(SessionNotLoadedError)
async def _not_loaded(request: Request, exc: SessionNotLoadedError) -> JSONResponse:
    return JSONResponse({"detail": str(exc)}, status_code=409)


@app.exception_handler(StructuralViolation)
async def _structural(request: Request, exc: StructuralViolation) -> JSONResponse:
    return JSONResponse({"detail": str(exc)}, status_code=409)


@app.exception_handler(RecordStoreUnavailable)
async def _store_unavailable(request: Request, exc: RecordStoreUnavailable) -> JSONResponse:
    return JSONResponse({"detail": str(exc)}, status_code=503)


@app.exception_handler(GenerationFailure)
async def _generation_failed(request: Request, exc: GenerationFailure) -> JSONResponse:
    return JSONResponse({"detail": str(exc)}, status_code=502)


@app.post("/v1/sites:generate", status_code=202)
async def generate_site(info: BusinessInfo, background_tasks: BackgroundTasks) -> JSONResponse:
    session = session_store.create_session(label=info.name)
    session.begin_generation()
    background_tasks.add_task(_run_generation, session.session_id, info)
    return JSONResponse(_session_payload(session), status_code=202)


async def _run_generation(session_id: str, info: BusinessInfo) -> None:
    set_session_id(session_id)
    session = session_store.get_session(session_id)
    if session is None:
        return
    draft = await asyncio.to_thread(content_generator.generate_site, info)
    with session.lock:
        session.load(draft.document)
    if draft.used_fallback and draft.error:
        generation_notices[session_id] = draft.error


@app.post("/v1/sessions:load")
async def load_site(request: LoadSiteRequest) -> dict[str, Any]:
    try:
        document = repository.get(request.site_id)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    session = session_store.create_session(label=request.site_id)
    session.load(document)
    return _session_payload(session)


@app.get("/v1/sessions/{session_id}")
async def read_session(session: EditingSession = Depends(get_session)) -> dict[str, Any]:
    return _session_payload(session)


@app.delete("/v1/sessions/{session_id}", status_code=204)
async def close_session(session: EditingSession = Depends(get_session)) -> None:
    session_store.drop_session(session.session_id)
    generation_notices.pop(session.session_id, None)
    logger.info("Closed editing session")


@app.get("/v1/sessions/{session_id}/fields")
async def read_field(
    path: str = Query(min_length=1), session: EditingSession = Depends(get_session)
) -> dict[str, Any]:
    with session.lock:
        value = session.read_field(path, _ABSENT)
    if value is _ABSENT:
        raise HTTPException(status_code=404, detail=f"Nothing stored at {path!r}")
    return {"path": path, "value": value}


@app.post("/v1/sessions/{session_id}/fields")
async def edit_field(
    request: EditFieldRequest, session: EditingSession = Depends(get_session)
) -> dict[str, Any]:
    with session.lock:
        session.edit_field(request.path, request.value)
        return _session_payload(session)


@app.put("/v1/sessions/{session_id}/selection")
async def select_section(
    request: SelectSectionRequest, session: EditingSession = Depends(get_session)
) -> dict[str, Any]:
    with session.lock:
        session.select_section(request.section_id)
        return _session_payload(session)


@app.put("/v1/sessions/{session_id}/panel")
async def set_panel(request: PanelRequest, session: EditingSession = Depends(get_session)) -> dict[str, Any]:
    with session.lock:
        session.set_panel_open(request.open)
        return _session_payload(session)


@app.post("/v1/sessions/{session_id}/sections")
async def add_section(
    request: AddSectionRequest, session: EditingSession = Depends(get_session)
) -> dict[str, Any]:
    with session.lock:
        session.add_section(request.kind)
        return _session_payload(session)


@app.delete("/v1/sessions/{session_id}/sections/{section_id}")
async def remove_section(section_id: str, session: EditingSession = Depends(get_session)) -> dict[str, Any]:
    with session.lock:
        session.remove_section(section_id)
        return _session_payload(session)


@app.post("/v1/sessions/{session_id}/sections:move")
async def move_section(
    request: MoveSectionRequest, session: EditingSession = Depends(get_session)
) -> dict[str, Any]:
    with session.lock:
        session.move_section(request.index, request.direction)
        return _session_payload(session)


@app.post("/v1/sessions/{session_id}/sections/{section_id}/items")
async def add_list_item(section_id: str, session: EditingSession = Depends(get_session)) -> dict[str, Any]:
    with session.lock:
        session.add_list_item(section_id)
        return _session_payload(session)


@app.delete("/v1/sessions/{session_id}/sections/{section_id}/items/{item_index}")
async def remove_list_item(
    section_id: str, item_index: int, session: EditingSession = Depends(get_session)
) -> dict[str, Any]:
    with session.lock:
        session.remove_list_item(section_id, item_index)
        return _session_payload(session)


@app.get("/v1/sessions/{session_id}/theme")
async def read_theme(session: EditingSession = Depends(get_session)) -> dict[str, Any]:
    return session.palette().model_dump()


@app.post("/v1/sessions/{session_id}:save")
async def save_site(session: EditingSession = Depends(get_session)) -> dict[str, Any]:
    with session.lock:
        document = session.document
        revision = session.revision
    await asyncio.to_thread(repository.save, session.session_id, document)
    logger.info("Saved site document", extra={"revision": revision})
    return {"siteId": session.session_id, "revision": revision}


@app.get("/v1/section-kinds")
async def list_section_kinds() -> list[dict[str, Any]]:
    return [
        {
            "kind": kind.value,
            "displayName": display_name(kind),
            "addable": kind in ADDABLE_KINDS,
            "usesItems": get_definition(kind).uses_items,
            "editors": {field: shape.value for field, shape in editors_for(kind).items()},
        }
        for kind in SectionKind
    ]


@app.get("/v1/theme-options")
async def theme_options() -> dict[str, Any]:
    return {
        "fontFamilies": list(FONT_FAMILIES),
        "defaults": DEFAULT_THEME.model_dump(by_alias=True),
    }


@app.post("/v1/marketing:generate", response_model=MarketingCampaign)
async def generate_campaign(request: CampaignRequest) -> MarketingCampaign:
    return await asyncio.to_thread(
        content_generator.generate_campaign, request.business_info, request.campaign_goal
    )


@app.get("/v1/contacts", response_model=list[CrmContact])
async def list_contacts() -> list[CrmContact]:
    return await asyncio.to_thread(record_store.list_contacts)


@app.post("/v1/contacts", response_model=CrmContact, status_code=201)
async def add_contact(draft: ContactDraft) -> CrmContact:
    return await asyncio.to_thread(record_store.add_contact, draft)


@app.get("/v1/invoices", response_model=list[Invoice])
async def list_invoices() -> list[Invoice]:
    return await asyncio.to_thread(record_store.list_invoices)


@app.post("/v1/invoices", response_model=Invoice, status_code=201)
async def add_invoice(draft: InvoiceDraft) -> Invoice:
    return await asyncio.to_thread(record_store.add_invoice, draft)


@app.get("/health")
async def healthcheck() -> JSONResponse:
    return JSONResponse({"status": "ok", "generator": content_generator.configured})
