"""Application state, templates, and filters."""

import logging
import os
from typing import Any

from fastapi.templating import Jinja2Templates

from folio import __version__
from folio.config import Settings
from folio.controllers.collections import DEFAULT_READ_TIME, is_featured_slot
from folio.controllers.crud import PAPER_SPEC, CrudController
from folio.controllers.notifications import ToastQueue
from folio.services.crossref_service import CrossrefService
from folio.services.export_service import MarkdownExporter
from folio.services.query_cache import QueryCache
from folio.services.rpc import Collection, open_collection
from folio.utils.text import estimate_read_time, format_read_date, parse_tags, strip_markup

logger = logging.getLogger(__name__)


# ============================================================================
# Global State
# ============================================================================


class AppState:
    """Mutable singleton holding all runtime services.

    The admin panel controller lives here for the life of the process: the
    site has a single administrator, so one dialog and one delete
    confirmation are shared by every admin request.
    """

    settings: Settings
    photos: Collection
    essays: Collection
    papers: Collection
    cache: QueryCache
    toasts: ToastQueue
    paper_admin: CrudController
    crossref: CrossrefService
    exporter: MarkdownExporter


state = AppState()


def init_state(settings: Settings) -> AppState:
    """(Re)build every service on :data:`state` from *settings*."""
    state.settings = settings
    state.photos = open_collection("photos", settings)
    state.essays = open_collection("essays", settings)
    state.papers = open_collection("papers", settings)
    state.cache = QueryCache()
    state.toasts = ToastQueue()
    state.paper_admin = CrudController(state.papers, state.cache, state.toasts, PAPER_SPEC)
    state.crossref = CrossrefService(settings.contact_email)
    state.exporter = MarkdownExporter(settings.export_dir)
    logger.info(
        "Serving %s from %s",
        settings.site_title,
        settings.api_base_url or settings.db_path,
    )
    return state


# ============================================================================
# Templates & Filters
# ============================================================================

base_dir = os.path.dirname(__file__)
templates = Jinja2Templates(directory=os.path.join(base_dir, "templates"))


def read_time(content: Any) -> str:
    """Read-time label for essay content; the default label when empty."""
    return estimate_read_time(content) if content else DEFAULT_READ_TIME


def paragraphs(content: Any) -> list[str]:
    """Split essay text on blank lines."""
    if not content:
        return []
    return [p.strip() for p in str(content).split("\n\n") if p.strip()]


templates.env.filters["format_read_date"] = format_read_date
templates.env.filters["tags"] = parse_tags
templates.env.filters["read_time"] = read_time
templates.env.filters["paragraphs"] = paragraphs
templates.env.filters["plain"] = strip_markup
templates.env.tests["featured_slot"] = is_featured_slot
templates.env.globals["version"] = __version__
