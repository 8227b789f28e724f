"""Utility functions."""

from folio.utils.text import estimate_read_time, normalize_doi, parse_tags, strip_markup

__all__ = ["estimate_read_time", "normalize_doi", "parse_tags", "strip_markup"]
