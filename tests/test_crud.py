"""Tests for the admin CRUD controller."""

import pytest

from folio.models.paper import PaperDraft
from folio.controllers.crud import PHOTO_SPEC, CrudController
from folio.services.query_cache import QueryCache
from tests.conftest import FIXED_NOW, make_paper


def messages(toasts, level):
    return [t.message for t in toasts.peek() if t.level == level]


# ============================================
# Dialog lifecycle
# ============================================

class TestDialog:

    def test_entity_without_dialog(self, collection, toasts):
        controller = CrudController(collection, QueryCache(), toasts, PHOTO_SPEC)
        controller.open_create()
        assert controller.dialog.open
        assert controller.dialog.draft is None
        with pytest.raises(ValueError, match="Photo records have no edit dialog"):
            controller.open_edit(make_paper(1))

    def test_open_create_uses_defaults(self, controller):
        controller.open_create()
        assert controller.dialog.open
        assert controller.dialog.editing_id is None
        draft = controller.dialog.draft
        assert draft.title == ""
        assert draft.citations == 0
        assert draft.year > 2000
        assert not draft.published and not draft.featured

    def test_open_edit_copies_record(self, controller, collection):
        controller.open_edit(collection.records[2])
        assert controller.dialog.editing_id == 2
        assert controller.dialog.draft.title == "Paper 2"
        assert controller.dialog.draft.published

    def test_close_resets(self, controller, collection):
        controller.open_edit(collection.records[1])
        controller.close_dialog()
        assert not controller.dialog.open
        assert controller.dialog.editing_id is None
        assert controller.dialog.draft == PaperDraft()

    def test_merge_into_draft_ignores_unknown_keys(self, controller):
        controller.open_create()
        controller.merge_into_draft({"title": "From DOI", "bogus": 1})
        assert controller.dialog.draft.title == "From DOI"
        assert not hasattr(controller.dialog.draft, "bogus")


# ============================================
# Validation
# ============================================

class TestValidation:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("title, authors, expected", [
        ("", "Someone", "Please enter a title"),
        ("   ", "Someone", "Please enter a title"),
        ("A title", "", "Please enter the authors"),
    ])
    async def test_blank_required_field_never_calls_remote(
        self, controller, collection, toasts, title, authors, expected
    ):
        controller.open_create()
        controller.replace_draft(PaperDraft(title=title, authors=authors))
        assert await controller.submit() is False
        assert collection.calls["create"] == 0
        assert messages(toasts, "error") == [expected]
        assert controller.dialog.open

    @pytest.mark.asyncio
    async def test_direct_create_validates(self, controller, collection, toasts):
        assert await controller.create({"title": "", "authors": "x"}) is False
        assert collection.calls["create"] == 0


# ============================================
# Create / update
# ============================================

class TestSubmit:

    @pytest.mark.asyncio
    async def test_create_then_list_contains_new_item(self, controller, collection, toasts):
        await controller.refresh()
        controller.open_create()
        controller.replace_draft(PaperDraft(title="X", authors="Y"))

        assert await controller.submit() is True

        assert collection.calls["create"] == 1
        assert "X" in [p.title for p in controller.cached_items]
        assert not controller.is_stale
        assert not controller.dialog.open
        assert messages(toasts, "success") == ["Paper created"]

    @pytest.mark.asyncio
    async def test_create_published_stamps_now(self, controller, collection):
        controller.open_create()
        controller.replace_draft(PaperDraft(title="X", authors="Y", published=True))
        await controller.submit()
        created = collection.records[3]
        assert created.published_at == FIXED_NOW

    @pytest.mark.asyncio
    async def test_update_sends_only_changes(self, controller, collection):
        sent = {}
        original_update = collection.update

        async def spy(record_id, fields):
            sent.update(fields)
            return await original_update(record_id, fields)

        collection.update = spy
        controller.open_edit(collection.records[1])
        controller.dialog.draft.title = "Renamed"
        assert await controller.submit() is True
        assert sent == {"title": "Renamed"}
        assert collection.records[1].title == "Renamed"

    @pytest.mark.asyncio
    async def test_update_without_changes_skips_remote(self, controller, collection):
        controller.open_edit(collection.records[1])
        assert await controller.submit() is True
        assert collection.calls["update"] == 0
        assert not controller.dialog.open

    @pytest.mark.asyncio
    async def test_keeps_timestamp_when_already_published(self, controller, collection):
        controller.open_edit(collection.records[2])
        controller.dialog.draft.journal = "Nature"
        await controller.submit()
        assert collection.records[2].published_at == "2024-05-01T00:00:00+00:00"

    @pytest.mark.asyncio
    async def test_unpublish_through_dialog_clears_timestamp(self, controller, collection):
        controller.open_edit(collection.records[2])
        controller.dialog.draft.published = False
        await controller.submit()
        assert collection.records[2].published_at is None

    @pytest.mark.asyncio
    async def test_failure_keeps_dialog_and_draft(self, controller, collection, toasts):
        collection.fail_on["create"] = "disk full"
        controller.open_create()
        draft = PaperDraft(title="X", authors="Y")
        controller.replace_draft(draft)

        assert await controller.submit() is False

        assert controller.dialog.open
        assert controller.dialog.draft is draft
        assert not controller.dialog.pending
        assert messages(toasts, "error") == ["Create failed: disk full"]

    @pytest.mark.asyncio
    async def test_submit_ignored_while_pending(self, controller, collection):
        controller.open_create()
        controller.replace_draft(PaperDraft(title="X", authors="Y"))
        controller.dialog.pending = True
        assert await controller.submit() is False
        assert collection.calls["create"] == 0

    @pytest.mark.asyncio
    async def test_refetch_failure_still_reports_success(self, controller, collection, toasts):
        collection.fail_on["list_all"] = "offline"
        controller.open_create()
        controller.replace_draft(PaperDraft(title="X", authors="Y"))
        assert await controller.submit() is True
        assert controller.is_stale
        assert "Could not reload the list: offline" in messages(toasts, "error")
        assert messages(toasts, "success") == ["Paper created"]


# ============================================
# Publish toggle
# ============================================

class TestTogglePublished:

    @pytest.mark.asyncio
    async def test_publish_sets_timestamp(self, controller, collection, toasts):
        assert await controller.toggle_published(collection.records[1]) is True
        paper = collection.records[1]
        assert paper.published
        assert paper.published_at == FIXED_NOW
        assert messages(toasts, "success") == ["Paper published"]

    @pytest.mark.asyncio
    async def test_unpublish_clears_timestamp(self, controller, collection, toasts):
        await controller.toggle_published(collection.records[2])
        paper = collection.records[2]
        assert not paper.published
        assert paper.published_at is None
        assert messages(toasts, "success") == ["Paper unpublished"]

    @pytest.mark.asyncio
    async def test_failure_notifies(self, controller, collection, toasts):
        collection.fail_on["update"] = "locked"
        assert await controller.toggle_published(collection.records[1]) is False
        assert messages(toasts, "error") == ["Update failed: locked"]
        assert not collection.records[1].published


# ============================================
# Delete with confirmation
# ============================================

class TestDelete:

    @pytest.mark.asyncio
    async def test_intent_alone_never_deletes(self, controller, collection):
        controller.request_delete(1)
        assert controller.confirm.open
        assert controller.confirm.pending_id == 1
        controller.cancel_delete()
        assert not controller.confirm.open
        assert controller.confirm.pending_id is None
        assert collection.calls["delete"] == 0
        assert 1 in collection.records

    @pytest.mark.asyncio
    async def test_confirm_deletes_and_refetches(self, controller, collection, toasts):
        await controller.refresh()
        controller.request_delete(1)
        assert await controller.confirm_delete() is True
        assert 1 not in collection.records
        assert [p.id for p in controller.cached_items] == [2]
        assert not controller.confirm.open
        assert messages(toasts, "success") == ["Paper deleted"]

    @pytest.mark.asyncio
    async def test_failure_keeps_confirmation_open(self, controller, collection, toasts):
        collection.fail_on["delete"] = "constraint"
        controller.request_delete(1)
        assert await controller.confirm_delete() is False
        assert controller.confirm.open
        assert controller.confirm.pending_id == 1
        assert messages(toasts, "error") == ["Delete failed: constraint"]

    @pytest.mark.asyncio
    async def test_confirm_without_intent_is_noop(self, controller, collection):
        assert await controller.confirm_delete() is False
        assert collection.calls["delete"] == 0


# ============================================
# Toasts
# ============================================

class TestToastQueue:

    def test_drain_returns_in_order_and_empties(self, toasts):
        toasts.success("saved")
        toasts.info("filled")
        toasts.error("failed")

        drained = toasts.drain()

        assert [(t.level, t.message) for t in drained] == [
            ("success", "saved"),
            ("info", "filled"),
            ("error", "failed"),
        ]
        assert len(toasts) == 0
        assert toasts.drain() == []

    def test_peek_leaves_queue_intact(self, toasts):
        toasts.success("saved")
        assert len(toasts.peek()) == 1
        assert len(toasts) == 1
