"""Folio test suite."""
