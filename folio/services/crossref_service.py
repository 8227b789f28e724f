"""Crossref API service for DOI lookup and paper draft prefill."""

import logging
from typing import Any, Optional

import requests

from folio.utils.text import normalize_doi, strip_markup

logger = logging.getLogger(__name__)

CROSSREF_API_BASE = "https://api.crossref.org/works"


class CrossrefService:
    """Service for interacting with the Crossref API."""

    def __init__(self, contact_email: Optional[str] = None):
        """Initialize Crossref service.

        Args:
            contact_email: Email for polite pool access (recommended by Crossref)
        """
        self.contact_email = contact_email

    @property
    def headers(self) -> dict[str, str]:
        """HTTP headers with a polite-pool user agent when an email is set."""
        if self.contact_email:
            return {"User-Agent": f"folio/1.0 (mailto:{self.contact_email})"}
        return {}

    def lookup(self, doi: str, timeout: int = 20) -> dict[str, Any]:
        """Look up paper metadata by DOI.

        Args:
            doi: DOI to look up (URL prefixes are stripped)
            timeout: Request timeout in seconds

        Returns:
            Crossref work metadata dictionary

        Raises:
            ValueError: If the DOI is empty
            requests.RequestException: On API errors
        """
        doi = normalize_doi(doi)
        if not doi:
            raise ValueError("DOI is empty")
        url = f"{CROSSREF_API_BASE}/{requests.utils.quote(doi)}"
        logger.info("Crossref lookup %s", doi)
        response = requests.get(url, headers=self.headers, timeout=timeout)
        response.raise_for_status()
        return response.json().get("message", {})

    @staticmethod
    def draft_fields(meta: dict[str, Any]) -> dict[str, Any]:
        """Map a Crossref work to :class:`~folio.models.paper.PaperDraft` fields.

        Only fields Crossref actually provides are returned, so callers can
        merge the result over an existing draft.
        """
        result: dict[str, Any] = {}

        titles = meta.get("title")
        if isinstance(titles, list) and titles:
            result["title"] = strip_markup(titles[0])
        elif isinstance(titles, str) and titles:
            result["title"] = strip_markup(titles)

        # Authors as "Given Family, Given Family"
        author_list = meta.get("author")
        if isinstance(author_list, list):
            names = []
            for author in author_list[:20]:  # Limit to avoid huge lists
                full = " ".join([author.get("given", ""), author.get("family", "")]).strip()
                if not full:
                    full = author.get("name", "").strip()
                if full:
                    names.append(full)
            if names:
                result["authors"] = ", ".join(names)

        container = meta.get("container-title")
        if isinstance(container, list) and container:
            result["journal"] = container[0]
        elif isinstance(container, str) and container:
            result["journal"] = container

        for key in ["published-print", "published-online", "issued", "created"]:
            parts = (meta.get(key) or {}).get("date-parts")
            if isinstance(parts, list) and parts and isinstance(parts[0], list) and parts[0]:
                try:
                    result["year"] = int(parts[0][0])
                    break
                except (TypeError, ValueError):
                    continue

        for source, target in (("volume", "volume"), ("issue", "issue"), ("page", "pages")):
            value = meta.get(source)
            if value:
                result[target] = str(value)

        if isinstance(meta.get("is-referenced-by-count"), int):
            result["citations"] = meta["is-referenced-by-count"]

        if isinstance(meta.get("abstract"), str):
            abstract = strip_markup(meta["abstract"])
            if abstract:
                result["abstract"] = abstract

        if meta.get("DOI"):
            result["doi"] = normalize_doi(meta["DOI"])

        subjects = meta.get("subject")
        if isinstance(subjects, list) and subjects:
            result["category"] = str(subjects[0])

        return result
