"""Admin CRUD controller: dialogs, validation, mutations and refetch.

The controller never edits its cached list in place. Every successful write
invalidates the cached ``list_all`` query and refetches it, so what the
panel shows is always what the store returned after the last round trip.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Generic, Mapping, Optional, TypeVar

from folio.controllers.notifications import Notifier
from folio.models.paper import PaperDraft
from folio.services.query_cache import QueryCache
from folio.services.rpc import Collection, RpcError

logger = logging.getLogger(__name__)

R = TypeVar("R")
D = TypeVar("D")


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class EntitySpec(Generic[R, D]):
    """How the controller handles one entity type."""

    cache_key: str
    label: str
    # None for entities managed without the edit dialog
    new_draft: Optional[Callable[[], D]] = None
    draft_from: Optional[Callable[[R], D]] = None
    # (field, message shown when the field is blank)
    required: tuple[tuple[str, str], ...] = ()
    list_filters: Mapping[str, Any] = field(default_factory=dict)


PAPER_SPEC: EntitySpec = EntitySpec(
    cache_key="papers.list_all",
    label="Paper",
    new_draft=PaperDraft,
    draft_from=PaperDraft.from_paper,
    required=(
        ("title", "Please enter a title"),
        ("authors", "Please enter the authors"),
    ),
)

PHOTO_SPEC: EntitySpec = EntitySpec(
    cache_key="photos.list_all",
    label="Photo",
    required=(
        ("title", "Please enter a title"),
        ("image_url", "Please enter an image URL"),
    ),
)

ESSAY_SPEC: EntitySpec = EntitySpec(
    cache_key="essays.list_all",
    label="Essay",
    required=(("title", "Please enter a title"),),
)

SPECS: dict[str, EntitySpec] = {
    "papers": PAPER_SPEC,
    "photos": PHOTO_SPEC,
    "essays": ESSAY_SPEC,
}


@dataclass
class DialogState(Generic[D]):
    """The create/edit modal."""

    open: bool = False
    editing_id: Optional[int] = None
    draft: Optional[D] = None
    # Draft fields as loaded, to send only what changed on update
    original: Optional[dict[str, Any]] = None
    was_published: bool = False
    pending: bool = False

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None


@dataclass
class DeleteConfirmation:
    """The second modal that gates every delete."""

    open: bool = False
    pending_id: Optional[int] = None
    pending: bool = False


class CrudController(Generic[R, D]):
    """Create / update / delete / publish-toggle against a remote collection."""

    def __init__(
        self,
        collection: Collection[R],
        cache: QueryCache,
        notifier: Notifier,
        spec: EntitySpec[R, D],
        clock: Callable[[], str] = utc_now_iso,
    ):
        self.collection = collection
        self.cache = cache
        self.notifier = notifier
        self.spec = spec
        self.clock = clock
        self.dialog: DialogState[D] = DialogState(draft=self._blank_draft())
        self.confirm = DeleteConfirmation()

    # ── Reads ─────────────────────────────────────────────────────────

    async def refresh(self) -> list[R]:
        """The full collection, refetched when missing or stale.

        Raises:
            RpcError: If the collection cannot be loaded
        """
        return await self.cache.fetch(
            self.spec.cache_key,
            lambda: self.collection.list_all(self.spec.list_filters),
        )

    @property
    def cached_items(self) -> Optional[list[R]]:
        return self.cache.peek(self.spec.cache_key)

    @property
    def is_stale(self) -> bool:
        return self.cache.is_stale(self.spec.cache_key)

    # ── Create / edit dialog ──────────────────────────────────────────

    def open_create(self) -> None:
        self.dialog = DialogState(open=True, draft=self._blank_draft())

    def open_edit(self, record: R) -> None:
        if self.spec.draft_from is None:
            raise ValueError(f"{self.spec.label} records have no edit dialog")
        draft = self.spec.draft_from(record)
        self.dialog = DialogState(
            open=True,
            editing_id=getattr(record, "id"),
            draft=draft,
            original=_draft_fields(draft),
            was_published=bool(getattr(record, "published", False)),
        )

    def close_dialog(self) -> None:
        """Close the dialog and discard the draft."""
        self.dialog = DialogState(draft=self._blank_draft())

    def replace_draft(self, draft: D) -> None:
        """Swap in the whole draft (e.g. a submitted form) while open."""
        if self.dialog.open:
            self.dialog.draft = draft

    def merge_into_draft(self, values: Mapping[str, Any]) -> None:
        """Overwrite draft fields from *values* (e.g. a DOI lookup)."""
        draft = self.dialog.draft
        if not self.dialog.open or draft is None:
            return
        for key, value in values.items():
            if hasattr(draft, key):
                setattr(draft, key, value)

    def validate(self, fields: Mapping[str, Any], partial: bool = False) -> Optional[str]:
        """First validation message for *fields*, or None when valid.

        With ``partial`` only the required fields present are checked.
        """
        for name, message in self.spec.required:
            if partial and name not in fields:
                continue
            if not str(fields.get(name) or "").strip():
                return message
        return None

    async def submit(self) -> bool:
        """Save the open dialog's draft.

        Returns True when the draft was saved (or nothing changed) and the
        dialog closed. Re-entry while a save is pending is ignored.
        """
        dialog = self.dialog
        if not dialog.open or dialog.draft is None:
            return False
        if dialog.pending:
            logger.debug("Ignoring submit while a save is pending")
            return False

        fields = _draft_fields(dialog.draft)
        error = self.validate(fields)
        if error:
            self.notifier.error(error)
            return False

        if dialog.is_editing:
            changes = {
                k: v for k, v in fields.items()
                if dialog.original is None or dialog.original.get(k) != v
            }
            if not changes:
                self.close_dialog()
                return True
            payload = self._stamp_publication(changes, dialog.was_published)
            record_id = dialog.editing_id
            call: Callable[[], Awaitable[Any]] = lambda: self.collection.update(record_id, payload)
            verb = "updated"
        else:
            payload = self._stamp_publication(fields, False)
            call = lambda: self.collection.create(payload)
            verb = "created"

        dialog.pending = True
        try:
            ok = await self._mutate(call, f"{self.spec.label} {verb}", _failure(verb))
        finally:
            dialog.pending = False
        if ok:
            self.close_dialog()
        return ok

    # ── Direct mutations (no dialog) ──────────────────────────────────

    async def create(self, fields: Mapping[str, Any]) -> bool:
        """Create a record from *fields* with the dialog's rules."""
        payload = dict(fields)
        error = self.validate(payload)
        if error:
            self.notifier.error(error)
            return False
        payload = self._stamp_publication(payload, False)
        return await self._mutate(
            lambda: self.collection.create(payload),
            f"{self.spec.label} created",
            _failure("created"),
        )

    async def update(self, record_id: int, fields: Mapping[str, Any]) -> bool:
        """Apply a partial update with the dialog's rules."""
        payload = dict(fields)
        error = self.validate(payload, partial=True)
        if error:
            self.notifier.error(error)
            return False
        return await self._mutate(
            lambda: self.collection.update(record_id, payload),
            f"{self.spec.label} updated",
            _failure("updated"),
        )

    async def toggle_published(self, record: R) -> bool:
        """Flip ``published``; stamp the time when publishing, clear it otherwise."""
        publish = not bool(getattr(record, "published", False))
        record_id = getattr(record, "id")
        payload = {
            "published": publish,
            "published_at": self.clock() if publish else None,
        }
        return await self._mutate(
            lambda: self.collection.update(record_id, payload),
            f"{self.spec.label} {'published' if publish else 'unpublished'}",
            _failure("updated"),
        )

    # ── Delete with confirmation ──────────────────────────────────────

    def request_delete(self, record_id: int) -> None:
        """Ask for confirmation; nothing is deleted yet."""
        self.confirm = DeleteConfirmation(open=True, pending_id=record_id)

    def cancel_delete(self) -> None:
        self.confirm = DeleteConfirmation()

    async def confirm_delete(self) -> bool:
        """Delete the record awaiting confirmation.

        On failure the confirmation stays open so the user can retry.
        """
        confirm = self.confirm
        if not confirm.open or confirm.pending_id is None or confirm.pending:
            return False
        record_id = confirm.pending_id
        confirm.pending = True
        try:
            ok = await self._mutate(
                lambda: self.collection.delete(record_id),
                f"{self.spec.label} deleted",
                _failure("deleted"),
            )
        finally:
            confirm.pending = False
        if ok:
            self.cancel_delete()
        return ok

    # ── Private ───────────────────────────────────────────────────────

    def _blank_draft(self) -> Optional[D]:
        return self.spec.new_draft() if self.spec.new_draft is not None else None

    async def _mutate(
        self,
        call: Callable[[], Awaitable[Any]],
        success_message: str,
        failure_prefix: str,
    ) -> bool:
        """Run a write; on success invalidate, refetch and notify."""
        try:
            await call()
        except RpcError as e:
            logger.warning("%s %s", failure_prefix, e.message)
            self.notifier.error(f"{failure_prefix}: {e.message}")
            return False

        self.cache.invalidate(self.spec.cache_key)
        try:
            await self.refresh()
        except RpcError as e:
            # The write landed; the list stays stale and reloads next read.
            logger.warning("Refetch after write failed: %s", e.message)
            self.notifier.error(f"Could not reload the list: {e.message}")
        self.notifier.success(success_message)
        logger.info(success_message)
        return True

    def _stamp_publication(self, fields: Mapping[str, Any], was_published: bool) -> dict[str, Any]:
        """Set ``published_at`` to match the ``published`` flag in *fields*.

        Turning publication on stamps now; staying published keeps the
        stored timestamp; turning it off clears it.
        """
        payload = dict(fields)
        if "published" not in payload:
            return payload
        if not payload["published"]:
            payload["published_at"] = None
        elif not was_published:
            payload["published_at"] = self.clock()
        return payload


def _draft_fields(draft: Any) -> dict[str, Any]:
    return draft.to_fields()


def _failure(verb: str) -> str:
    return {
        "created": "Create failed",
        "updated": "Update failed",
        "deleted": "Delete failed",
    }[verb]
