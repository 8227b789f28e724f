"""Framework-independent controllers driven by the web layer and the CLI."""

from folio.controllers.collections import CollectionView, Source, resolve_collection
from folio.controllers.crud import ESSAY_SPEC, PAPER_SPEC, PHOTO_SPEC, CrudController, EntitySpec
from folio.controllers.navigation import DetailNavigator, Direction, ScrollLock
from folio.controllers.notifications import Notifier, Toast, ToastQueue

__all__ = [
    "CollectionView",
    "CrudController",
    "DetailNavigator",
    "Direction",
    "ESSAY_SPEC",
    "EntitySpec",
    "Notifier",
    "PAPER_SPEC",
    "PHOTO_SPEC",
    "ScrollLock",
    "Source",
    "Toast",
    "ToastQueue",
    "resolve_collection",
]
