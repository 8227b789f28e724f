"""Tests for Crossref metadata mapping (no network)."""

import pytest

from folio.services.crossref_service import CrossrefService

WORK = {
    "DOI": "10.1038/NATURE12373",
    "title": ["Nanometre-scale <i>thermometry</i> in a living cell"],
    "author": [
        {"given": "G.", "family": "Kucsko"},
        {"name": "Lukin Group"},
        {"given": "", "family": ""},
    ],
    "container-title": ["Nature"],
    "published-print": {"date-parts": [[2013, 8, 1]]},
    "volume": "500",
    "issue": 7460,
    "page": "54-58",
    "is-referenced-by-count": 1200,
    "abstract": "<jats:p>Abstract We demonstrate <mml:math>x</mml:math> sensing.</jats:p>",
    "subject": ["Multidisciplinary"],
}


def test_draft_fields_maps_work():
    fields = CrossrefService.draft_fields(WORK)
    assert fields["title"] == "Nanometre-scale thermometry in a living cell"
    assert fields["authors"] == "G. Kucsko, Lukin Group"
    assert fields["journal"] == "Nature"
    assert fields["year"] == 2013
    assert fields["volume"] == "500"
    assert fields["issue"] == "7460"
    assert fields["pages"] == "54-58"
    assert fields["citations"] == 1200
    assert fields["abstract"] == "We demonstrate sensing."
    assert fields["doi"] == "10.1038/nature12373"
    assert fields["category"] == "Multidisciplinary"


def test_draft_fields_only_returns_present_fields():
    assert CrossrefService.draft_fields({"title": ["Just a title"]}) == {"title": "Just a title"}


def test_year_falls_back_to_issued():
    fields = CrossrefService.draft_fields({"issued": {"date-parts": [[2019]]}})
    assert fields["year"] == 2019


def test_lookup_rejects_empty_doi():
    with pytest.raises(ValueError):
        CrossrefService().lookup("   ")


def test_polite_pool_header():
    assert "mailto:me@example.org" in CrossrefService("me@example.org").headers["User-Agent"]
