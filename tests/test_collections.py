"""Tests for the fallback policy, display cards and category helpers."""

from datetime import datetime

from folio.config import load_sample_essays, load_sample_photos
from folio.controllers.collections import (
    ALL_CATEGORIES,
    DEFAULT_COVER_IMAGE,
    DEFAULT_READ_TIME,
    Source,
    categories_of,
    essay_card,
    filter_by_category,
    is_featured_slot,
    photo_card,
    resolve_collection,
)
from folio.models.media import Essay, Photo

NOW = datetime(2025, 7, 15)


class TestResolveCollection:

    def test_loading_yields_placeholder(self):
        view = resolve_collection([1, 2], [9], loading=True, placeholder_slots=4)
        assert view.source is Source.PLACEHOLDER
        assert view.is_loading
        assert view.items == []
        assert view.placeholder_slots == 4

    def test_empty_remote_yields_exact_fallback(self):
        fallback = ["a", "b", "c"]
        view = resolve_collection([], fallback)
        assert view.source is Source.FALLBACK
        assert view.items == fallback

    def test_missing_remote_yields_fallback(self):
        assert resolve_collection(None, ["a"]).is_fallback

    def test_remote_items_are_never_mixed_with_fallback(self):
        view = resolve_collection(["r1"], ["f1", "f2"])
        assert view.source is Source.REMOTE
        assert view.items == ["r1"]


def test_featured_slots():
    assert [i for i in range(8) if is_featured_slot(i)] == [0, 3]


class TestPhotoCard:

    def test_year_from_published_at(self):
        photo = Photo(title="Dunes", image_url="/x.jpg", id=7, published_at="2021-04-02T10:00:00Z")
        card = photo_card(photo, now=NOW)
        assert card.id == 7
        assert card.src == "/x.jpg"
        assert card.year == "2021"

    def test_year_defaults_to_current(self):
        card = photo_card(Photo(title="Dunes", image_url="/x.jpg", id=1), now=NOW)
        assert card.year == "2025"
        assert card.location == ""
        assert card.camera is None


class TestEssayCard:

    def test_defaults(self):
        card = essay_card(Essay(title="Notes", id=3), now=NOW)
        assert card.read_time == DEFAULT_READ_TIME
        assert card.category == "Uncategorized"
        assert card.cover_image == DEFAULT_COVER_IMAGE
        assert card.date == "July 2025"

    def test_read_time_from_content(self):
        essay = Essay(title="Long", id=4, content="word " * 401, published_at="2024-12-03T00:00:00+00:00")
        card = essay_card(essay, now=NOW)
        assert card.read_time == "3 min read"
        assert card.date == "December 2024"


class TestCategories:

    def test_categories_in_first_seen_order(self):
        cards = load_sample_essays()
        assert categories_of(cards) == [ALL_CATEGORIES, "Photography", "Travel"]

    def test_filter(self):
        cards = load_sample_essays()
        assert len(filter_by_category(cards, ALL_CATEGORIES)) == 4
        assert {c.id for c in filter_by_category(cards, "Travel")} == {2, 3}
        assert filter_by_category(cards, "Poetry") == []


def test_sample_sets_ship_with_package():
    assert len(load_sample_photos()) == 6
    assert len(load_sample_essays()) == 4
