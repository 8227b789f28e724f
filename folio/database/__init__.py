"""SQLite persistence."""

from folio.database.repository import (
    EssayRepository,
    PaperRepository,
    PhotoRepository,
    RecordNotFoundError,
)

__all__ = ["EssayRepository", "PaperRepository", "PhotoRepository", "RecordNotFoundError"]
