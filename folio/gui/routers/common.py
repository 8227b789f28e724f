"""Common routes: landing page."""

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from folio.config import load_sample_essays, load_sample_photos
from folio.controllers.collections import essay_card, photo_card
from folio.gui.helpers import load_cards
from folio.gui.state import state, templates

router = APIRouter()


# ============================================================================
# Main Page
# ============================================================================


@router.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Landing page linking the gallery, the magazine and the papers."""
    photos = await load_cards(state.photos, photo_card, load_sample_photos())
    essays = await load_cards(state.essays, essay_card, load_sample_essays())
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "settings": state.settings,
            "photos": photos.items[:3],
            "essays": essays.items[:2],
        },
    )
