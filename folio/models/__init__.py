"""Data models."""

from folio.models.media import Essay, EssayCard, Photo, PhotoCard
from folio.models.paper import Paper, PaperDraft

__all__ = ["Essay", "EssayCard", "Paper", "PaperDraft", "Photo", "PhotoCard"]
