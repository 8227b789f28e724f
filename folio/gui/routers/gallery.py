"""Photography routes: page, lazy grid, lightbox and its navigation."""

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from folio.config import load_sample_photos
from folio.controllers.collections import photo_card, resolve_collection
from folio.controllers.navigation import Direction
from folio.gui.helpers import load_cards, open_detail, set_scroll_lock, step_detail
from folio.gui.state import state, templates

router = APIRouter(prefix="/photography")


# ============================================================================
# Page & Grid
# ============================================================================


@router.get("", response_class=HTMLResponse)
async def photography(request: Request):
    """Gallery page; the grid loads lazily behind a skeleton."""
    return templates.TemplateResponse(
        request,
        "photography.html",
        {
            "settings": state.settings,
            "view": resolve_collection(None, [], loading=True),
        },
    )


@router.get("/grid", response_class=HTMLResponse)
async def photo_grid(request: Request):
    view = await load_cards(state.photos, photo_card, load_sample_photos())
    return templates.TemplateResponse(
        request,
        "partials/photo_grid.html",
        {"view": view},
    )


# ============================================================================
# Lightbox
# ============================================================================


@router.get("/close", response_class=HTMLResponse)
async def close_lightbox():
    """Empty the lightbox container and resume page scrolling."""
    return set_scroll_lock(HTMLResponse(""), locked=False)


@router.get("/{photo_id}", response_class=HTMLResponse)
async def open_lightbox(request: Request, photo_id: int):
    view = await load_cards(state.photos, photo_card, load_sample_photos())
    navigator = open_detail(view.items, photo_id)
    if navigator is None:
        return set_scroll_lock(HTMLResponse("", status_code=404), locked=False)
    response = templates.TemplateResponse(
        request,
        "partials/lightbox.html",
        {"photo": navigator.selected, "count": len(view.items)},
    )
    return set_scroll_lock(response, locked=navigator.scroll_locked)


@router.get("/{photo_id}/{direction}", response_class=HTMLResponse)
async def navigate_lightbox(request: Request, photo_id: int, direction: Direction):
    """Show the previous/next photo, wrapping around the ends."""
    view = await load_cards(state.photos, photo_card, load_sample_photos())
    navigator = step_detail(view.items, photo_id, direction)
    if not navigator.is_open:
        return set_scroll_lock(HTMLResponse(""), locked=False)
    response = templates.TemplateResponse(
        request,
        "partials/lightbox.html",
        {"photo": navigator.selected, "count": len(view.items)},
    )
    return set_scroll_lock(response, locked=navigator.scroll_locked)
