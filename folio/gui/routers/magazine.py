"""Magazine routes: page, category grid, reader and its navigation."""

from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse

from folio.config import load_sample_essays
from folio.controllers.collections import (
    ALL_CATEGORIES,
    categories_of,
    essay_card,
    filter_by_category,
    resolve_collection,
)
from folio.controllers.navigation import Direction
from folio.gui.helpers import load_cards, open_detail, set_scroll_lock, step_detail
from folio.gui.state import state, templates

router = APIRouter(prefix="/magazine")


async def _cards(category: Optional[str]):
    """All cards (for the category bar) and the cards in *category*."""
    view = await load_cards(state.essays, essay_card, load_sample_essays())
    return view, filter_by_category(view.items, category)


# ============================================================================
# Page & Grid
# ============================================================================


@router.get("", response_class=HTMLResponse)
async def magazine(request: Request, category: str = Query(ALL_CATEGORIES)):
    """Magazine page; the grid loads lazily behind a skeleton."""
    return templates.TemplateResponse(
        request,
        "magazine.html",
        {
            "settings": state.settings,
            "category": category,
            "view": resolve_collection(None, [], loading=True, placeholder_slots=4),
        },
    )


@router.get("/grid", response_class=HTMLResponse)
async def essay_grid(request: Request, category: str = Query(ALL_CATEGORIES)):
    view, essays = await _cards(category)
    return templates.TemplateResponse(
        request,
        "partials/essay_grid.html",
        {
            "view": view,
            "essays": essays,
            "categories": categories_of(view.items),
            "category": category,
        },
    )


# ============================================================================
# Reader
# ============================================================================


@router.get("/close", response_class=HTMLResponse)
async def close_reader():
    """Empty the reader container and resume page scrolling."""
    return set_scroll_lock(HTMLResponse(""), locked=False)


@router.get("/{essay_id}", response_class=HTMLResponse)
async def open_reader(request: Request, essay_id: int, category: str = Query(ALL_CATEGORIES)):
    _, essays = await _cards(category)
    navigator = open_detail(essays, essay_id)
    if navigator is None:
        return set_scroll_lock(HTMLResponse("", status_code=404), locked=False)
    response = templates.TemplateResponse(
        request,
        "partials/reader.html",
        {"essay": navigator.selected, "category": category, "count": len(essays)},
    )
    return set_scroll_lock(response, locked=navigator.scroll_locked)


@router.get("/{essay_id}/{direction}", response_class=HTMLResponse)
async def navigate_reader(
    request: Request,
    essay_id: int,
    direction: Direction,
    category: str = Query(ALL_CATEGORIES),
):
    """Show the previous/next essay within the current category."""
    _, essays = await _cards(category)
    navigator = step_detail(essays, essay_id, direction)
    if not navigator.is_open:
        return set_scroll_lock(HTMLResponse(""), locked=False)
    response = templates.TemplateResponse(
        request,
        "partials/reader.html",
        {"essay": navigator.selected, "category": category, "count": len(essays)},
    )
    return set_scroll_lock(response, locked=navigator.scroll_locked)
