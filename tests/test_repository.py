"""Tests for the SQLite repositories."""

import pytest

from folio.database.repository import RecordNotFoundError


class TestPaperRepository:

    def test_insert_assigns_id_and_timestamps(self, paper_repo):
        paper = paper_repo.insert({"title": "T", "authors": "A", "year": 2023})
        assert paper.id is not None
        assert paper.created_at and paper.updated_at
        assert paper.published is False
        assert paper.published_at is None

    def test_insert_requires_title_and_authors(self, paper_repo):
        with pytest.raises(ValueError, match="authors"):
            paper_repo.insert({"title": "T", "authors": "  "})

    def test_insert_published_without_timestamp_is_stamped(self, paper_repo):
        paper = paper_repo.insert({"title": "T", "authors": "A", "published": True})
        assert paper.published_at is not None

    def test_unknown_field_rejected(self, paper_repo):
        with pytest.raises(ValueError, match="Unknown field"):
            paper_repo.insert({"title": "T", "authors": "A", "colour": "red"})

    def test_bad_integer_rejected(self, paper_repo):
        with pytest.raises(ValueError, match="year"):
            paper_repo.insert({"title": "T", "authors": "A", "year": "soon"})

    def test_empty_year_stored_as_null(self, paper_repo):
        assert paper_repo.insert({"title": "T", "authors": "A", "year": ""}).year is None

    def test_partial_update(self, paper_repo):
        paper = paper_repo.insert({"title": "T", "authors": "A", "journal": "J"})
        updated = paper_repo.update(paper.id, {"title": "T2"})
        assert updated.title == "T2"
        assert updated.journal == "J"

    def test_unpublish_clears_timestamp(self, paper_repo):
        paper = paper_repo.insert({"title": "T", "authors": "A", "published": True})
        updated = paper_repo.update(paper.id, {"published": False, "published_at": "2024-01-01"})
        assert updated.published_at is None

    def test_publishing_update_stamps_timestamp(self, paper_repo):
        paper = paper_repo.insert({"title": "T", "authors": "A"})
        assert paper.published_at is None
        updated = paper_repo.update(paper.id, {"published": True})
        assert updated.published
        assert updated.published_at

    def test_republishing_keeps_timestamp(self, paper_repo):
        paper = paper_repo.insert(
            {"title": "T", "authors": "A", "published": True, "published_at": "2024-05-01T00:00:00+00:00"}
        )
        updated = paper_repo.update(paper.id, {"published": True, "title": "T2"})
        assert updated.published_at == "2024-05-01T00:00:00+00:00"

    def test_update_missing_raises(self, paper_repo):
        with pytest.raises(RecordNotFoundError, match="Paper 404 not found"):
            paper_repo.update(404, {"title": "x"})

    def test_delete(self, paper_repo):
        paper = paper_repo.insert({"title": "T", "authors": "A"})
        paper_repo.delete(paper.id)
        assert paper_repo.find_by_id(paper.id) is None
        with pytest.raises(RecordNotFoundError):
            paper_repo.delete(paper.id)

    def test_order_year_desc(self, paper_repo):
        paper_repo.insert({"title": "old", "authors": "A", "year": 2001})
        paper_repo.insert({"title": "new", "authors": "A", "year": 2024})
        paper_repo.insert({"title": "undated", "authors": "A"})
        assert [p.title for p in paper_repo.find_all()] == ["new", "old", "undated"]

    def test_published_only_and_filters(self, paper_repo):
        paper_repo.insert({"title": "a", "authors": "A", "published": True, "category": "ml"})
        paper_repo.insert({"title": "b", "authors": "A", "category": "ml"})
        assert [p.title for p in paper_repo.find_all(published_only=True)] == ["a"]
        assert len(paper_repo.find_all(category="ml")) == 2
        with pytest.raises(ValueError, match="Unknown filter"):
            paper_repo.find_all(colour="red")

    def test_status_counts(self, paper_repo):
        paper_repo.insert({"title": "a", "authors": "A", "published": True, "featured": True})
        paper_repo.insert({"title": "b", "authors": "A"})
        assert paper_repo.get_status_counts() == {"published": 1, "draft": 1, "featured": 1}


class TestPhotoAndEssayRepositories:

    def test_photos_default_published(self, photo_repo):
        photo = photo_repo.insert({"title": "Dunes", "image_url": "/d.jpg"})
        assert photo.published is True
        assert photo.published_at is not None

    def test_photo_requires_image(self, photo_repo):
        with pytest.raises(ValueError, match="image_url"):
            photo_repo.insert({"title": "Dunes"})

    def test_newest_first(self, photo_repo):
        photo_repo.insert({"title": "first", "image_url": "/1.jpg", "published_at": "2020-01-01T00:00:00+00:00"})
        photo_repo.insert({"title": "second", "image_url": "/2.jpg", "published_at": "2023-01-01T00:00:00+00:00"})
        assert [p.title for p in photo_repo.find_all()] == ["second", "first"]

    def test_find_all_is_not_truncated(self, photo_repo):
        for i in range(3):
            photo_repo.insert({"title": f"p{i}", "image_url": f"/{i}.jpg"})
        assert len(photo_repo.find_all()) == 3
        assert len(photo_repo.find_all(limit=2)) == 2

    def test_essay_categories(self, essay_repo):
        essay_repo.insert({"title": "a", "category": "Travel"})
        essay_repo.insert({"title": "b", "category": "Photography"})
        essay_repo.insert({"title": "c", "category": "Travel", "published": False})
        assert essay_repo.get_distinct_categories() == ["Photography", "Travel"]

    def test_tables_share_one_database(self, photo_repo, essay_repo, paper_repo):
        photo_repo.insert({"title": "p", "image_url": "/p.jpg"})
        assert essay_repo.find_all() == []
        assert paper_repo.find_all() == []
