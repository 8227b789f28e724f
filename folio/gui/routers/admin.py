"""Admin routes: the papers panel, its dialogs and mutations.

Every action swaps the whole ``#admin-panel`` fragment, so the list, the
edit dialog, the delete confirmation and pending toasts always render
from one consistent controller state.
"""

import asyncio
import logging
from typing import Optional

import requests
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from folio.gui.state import state, templates
from folio.models.paper import Paper, PaperDraft
from folio.services.rpc import RpcError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/papers")


async def _panel(request: Request, template: str = "partials/admin_panel.html"):
    """Render the panel from the controller's current state."""
    admin = state.paper_admin
    papers: list[Paper] = []
    load_error: Optional[str] = None
    try:
        papers = await admin.refresh()
    except RpcError as e:
        load_error = e.message
        papers = admin.cached_items or []
    stats = {
        "total": len(papers),
        "published": sum(1 for p in papers if p.published),
        "draft": sum(1 for p in papers if not p.published),
        "featured": sum(1 for p in papers if p.featured),
    }
    pending_delete = None
    if admin.confirm.open:
        pending_delete = next((p for p in papers if p.id == admin.confirm.pending_id), None)
    return templates.TemplateResponse(
        request,
        template,
        {
            "settings": state.settings,
            "papers": papers,
            "stats": stats,
            "load_error": load_error,
            "dialog": admin.dialog,
            "confirm": admin.confirm,
            "pending_delete": pending_delete,
            "toasts": state.toasts.drain(),
        },
    )


async def _find(paper_id: int) -> Optional[Paper]:
    try:
        papers = await state.paper_admin.refresh()
    except RpcError as e:
        state.toasts.error(e.message)
        return None
    paper = next((p for p in papers if p.id == paper_id), None)
    if paper is None:
        state.toasts.error(f"Paper {paper_id} not found")
    return paper


# ============================================================================
# Panel
# ============================================================================


@router.get("", response_class=HTMLResponse)
async def papers_admin(request: Request):
    """Full admin page."""
    return await _panel(request, "admin/papers.html")


@router.get("/panel", response_class=HTMLResponse)
async def papers_panel(request: Request):
    return await _panel(request)


# ============================================================================
# Create / Edit dialog
# ============================================================================


@router.post("/dialog/new", response_class=HTMLResponse)
async def dialog_new(request: Request):
    state.paper_admin.open_create()
    return await _panel(request)


@router.post("/{paper_id}/edit", response_class=HTMLResponse)
async def dialog_edit(request: Request, paper_id: int):
    paper = await _find(paper_id)
    if paper is not None:
        state.paper_admin.open_edit(paper)
    return await _panel(request)


@router.post("/dialog/close", response_class=HTMLResponse)
async def dialog_close(request: Request):
    state.paper_admin.close_dialog()
    return await _panel(request)


@router.post("/dialog/submit", response_class=HTMLResponse)
async def dialog_submit(request: Request):
    """Save the dialog; on failure it stays open with the submitted values."""
    form = await request.form()
    state.paper_admin.replace_draft(PaperDraft.from_form(form))
    await state.paper_admin.submit()
    return await _panel(request)


@router.post("/dialog/lookup", response_class=HTMLResponse)
async def dialog_lookup(request: Request):
    """Fill the draft's bibliographic fields from Crossref by DOI."""
    admin = state.paper_admin
    form = await request.form()
    admin.replace_draft(PaperDraft.from_form(form))
    doi = str(form.get("doi") or "").strip()
    if not doi:
        state.toasts.error("Enter a DOI to look up")
        return await _panel(request)

    try:
        meta = await asyncio.to_thread(state.crossref.lookup, doi)
    except (ValueError, requests.RequestException) as e:
        logger.warning("Crossref lookup failed for %s: %s", doi, e)
        state.toasts.error(f"DOI lookup failed: {e}")
        return await _panel(request)

    admin.merge_into_draft(state.crossref.draft_fields(meta))
    state.toasts.info("Fields filled from Crossref")
    return await _panel(request)


# ============================================================================
# Publish toggle
# ============================================================================


@router.post("/{paper_id}/toggle", response_class=HTMLResponse)
async def toggle_published(request: Request, paper_id: int):
    paper = await _find(paper_id)
    if paper is not None:
        await state.paper_admin.toggle_published(paper)
    return await _panel(request)


# ============================================================================
# Delete with confirmation
# ============================================================================


@router.post("/{paper_id}/delete", response_class=HTMLResponse)
async def delete_intent(request: Request, paper_id: int):
    """Open the confirmation; nothing is deleted here."""
    state.paper_admin.request_delete(paper_id)
    return await _panel(request)


@router.post("/delete/cancel", response_class=HTMLResponse)
async def delete_cancel(request: Request):
    state.paper_admin.cancel_delete()
    return await _panel(request)


@router.post("/delete/confirm", response_class=HTMLResponse)
async def delete_confirm(request: Request):
    await state.paper_admin.confirm_delete()
    return await _panel(request)


# ============================================================================
# Export
# ============================================================================


@router.post("/export", response_class=HTMLResponse)
async def export_published(request: Request):
    """Write the published papers to a markdown publication list."""
    try:
        papers = await state.paper_admin.refresh()
    except RpcError as e:
        state.toasts.error(e.message)
        return await _panel(request)
    published = [p for p in papers if p.published]
    if not published:
        state.toasts.error("No published papers to export")
        return await _panel(request)
    owner = state.settings.owner
    filepath = state.exporter.export(published, title=f"Publications of {owner}" if owner else "Publications")
    state.toasts.success(f"Exported {len(published)} papers to {filepath.name}")
    return await _panel(request)
