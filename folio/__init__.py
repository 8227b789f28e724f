"""Folio - personal portfolio site.

A photography gallery, an essay magazine and an admin panel for
academic papers, served with FastAPI + HTMX over a SQLite store.
"""

__version__ = "1.0.0"
__author__ = "wonjunchoii"

from folio.config import Settings
from folio.models.media import Essay, Photo
from folio.models.paper import Paper

__all__ = ["Essay", "Paper", "Photo", "Settings", "__version__"]
