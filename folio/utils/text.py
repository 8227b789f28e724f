"""Text helpers: reading time, dates, DOIs, tags and markup stripping."""

import math
import re
from datetime import datetime
from typing import Optional

from bs4 import BeautifulSoup

WORDS_PER_MINUTE = 200

# DOI regex pattern: 10.XXXX/... format
DOI_RE = re.compile(r"\b10\.\d{4,9}/[-._;()/:A-Z0-9]+\b", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Reading time
# ---------------------------------------------------------------------------


def read_minutes(content: Optional[str], words_per_minute: int = WORDS_PER_MINUTE) -> int:
    """Whole minutes needed to read *content*, rounded up.

    Empty or whitespace-only text counts as one minute so a label never
    reads "0 min read".
    """
    words = len((content or "").split())
    return max(1, math.ceil(words / words_per_minute))


def estimate_read_time(content: Optional[str], words_per_minute: int = WORDS_PER_MINUTE) -> str:
    """Format :func:`read_minutes` as ``"N min read"``.

    >>> estimate_read_time("word " * 400)
    '2 min read'
    """
    return f"{read_minutes(content, words_per_minute)} min read"


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO timestamp (``Z`` suffix allowed); None when unparsable."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def display_year(value: Optional[str], now: Optional[datetime] = None) -> str:
    """Year of *value*, or the current year when it is missing."""
    dt = parse_timestamp(value) or now or datetime.now()
    return str(dt.year)


def format_month_year(value: Optional[str], now: Optional[datetime] = None) -> str:
    """Format a timestamp as ``'December 2024'`` (current month when missing)."""
    dt = parse_timestamp(value) or now or datetime.now()
    return dt.strftime("%B %Y")


def format_read_date(date_str: Optional[str]) -> str:
    """Format date string to 'Feb 11, 2026' style."""
    dt = parse_timestamp(date_str)
    if dt is None:
        return date_str[:10] if date_str else ""
    return dt.strftime("%b %d, %Y")


# ---------------------------------------------------------------------------
# Bibliographic fields
# ---------------------------------------------------------------------------


def normalize_doi(doi: str) -> str:
    """Normalize DOI by removing URL prefixes and converting to lowercase."""
    doi = doi.strip()
    doi = doi.replace("https://doi.org/", "").replace("http://doi.org/", "")
    doi = doi.replace("https://dx.doi.org/", "").replace("http://dx.doi.org/", "")
    doi = re.sub(r"^doi:\s*", "", doi, flags=re.IGNORECASE)
    return doi.strip().lower()


def extract_doi(text: Optional[str]) -> Optional[str]:
    """Find the first DOI in free text, normalized."""
    if not text:
        return None
    match = DOI_RE.search(text)
    return normalize_doi(match.group(0)) if match else None


def parse_tags(tags: Optional[str]) -> list[str]:
    """Split comma-delimited tags, dropping blanks and duplicates."""
    if not tags or not tags.strip():
        return []
    seen: list[str] = []
    for tag in tags.replace(";", ",").split(","):
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


def strip_markup(text: Optional[str]) -> str:
    """Reduce a JATS/HTML abstract to plain text.

    Drops MathML blocks, strips a leading "Abstract" heading and
    normalises whitespace.
    """
    if not text:
        return ""
    soup = BeautifulSoup(text, "html.parser")
    for math_tag in soup.find_all(["math", "mml:math"]):
        math_tag.decompose()
    plain = soup.get_text(" ")
    plain = re.sub(r"^\s*abstract[\s.:;—–-]*", "", plain, flags=re.IGNORECASE)
    return " ".join(plain.split())
