"""Paper data model and the editable form draft."""

from dataclasses import asdict, dataclass, fields
from datetime import datetime
from typing import Any, Mapping, Optional


def _current_year() -> int:
    return datetime.now().year


@dataclass
class Paper:
    """Represents an academic paper managed from the admin panel."""

    title: str
    authors: str
    abstract: str = ""
    journal: str = ""
    year: Optional[int] = None
    volume: str = ""
    issue: str = ""
    pages: str = ""
    doi: str = ""
    pdf_url: str = ""
    pdf_key: str = ""
    category: str = ""
    tags: str = ""
    citations: int = 0
    featured: bool = False
    published: bool = False
    published_at: Optional[str] = None

    # Database fields (set after persistence)
    id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# Columns a client may write; everything else is owned by the store.
PAPER_FIELDS: tuple[str, ...] = (
    "title",
    "authors",
    "abstract",
    "journal",
    "year",
    "volume",
    "issue",
    "pages",
    "doi",
    "pdf_url",
    "pdf_key",
    "category",
    "tags",
    "citations",
    "featured",
    "published",
    "published_at",
)


@dataclass
class PaperDraft:
    """Client-local copy of a paper's editable fields while a dialog is open.

    A draft is replaced wholesale when a dialog opens and discarded when it
    closes; it is never persisted field by field.
    """

    title: str = ""
    authors: str = ""
    abstract: str = ""
    journal: str = ""
    year: int = 0
    volume: str = ""
    issue: str = ""
    pages: str = ""
    doi: str = ""
    pdf_url: str = ""
    pdf_key: str = ""
    category: str = ""
    tags: str = ""
    citations: int = 0
    featured: bool = False
    published: bool = False

    def __post_init__(self) -> None:
        if not self.year:
            self.year = _current_year()

    @classmethod
    def from_paper(cls, paper: Paper) -> "PaperDraft":
        """Build a draft from a stored paper, filling blanks with defaults."""
        return cls(
            title=paper.title,
            authors=paper.authors,
            abstract=paper.abstract or "",
            journal=paper.journal or "",
            year=paper.year or _current_year(),
            volume=paper.volume or "",
            issue=paper.issue or "",
            pages=paper.pages or "",
            doi=paper.doi or "",
            pdf_url=paper.pdf_url or "",
            pdf_key=paper.pdf_key or "",
            category=paper.category or "",
            tags=paper.tags or "",
            citations=paper.citations or 0,
            featured=bool(paper.featured),
            published=bool(paper.published),
        )

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "PaperDraft":
        """Parse a submitted HTML form.

        Unchecked checkboxes are absent from the form. A year that does not
        parse falls back to the current year, citations fall back to 0.
        """
        def text(name: str) -> str:
            value = form.get(name)
            return str(value) if value is not None else ""

        return cls(
            title=text("title"),
            authors=text("authors"),
            abstract=text("abstract"),
            journal=text("journal"),
            year=_parse_int(form.get("year"), _current_year()),
            volume=text("volume"),
            issue=text("issue"),
            pages=text("pages"),
            doi=text("doi"),
            pdf_url=text("pdf_url"),
            pdf_key=text("pdf_key"),
            category=text("category"),
            tags=text("tags"),
            citations=_parse_int(form.get("citations"), 0),
            featured=_parse_bool(form.get("featured")),
            published=_parse_bool(form.get("published")),
        )

    def to_fields(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _parse_int(value: Any, default: int) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in ("1", "true", "on", "yes")
