"""Shared helpers for the page routers: card loading, navigation, HTMX headers."""

import json
import logging
from types import SimpleNamespace
from typing import Any, Callable, Optional, Sequence, TypeVar

from fastapi.responses import Response

from folio.controllers.collections import CollectionView, resolve_collection
from folio.controllers.navigation import DetailNavigator, Direction
from folio.services.rpc import Collection, RpcError

logger = logging.getLogger(__name__)

C = TypeVar("C")


async def load_cards(
    collection: Collection[Any],
    shape: Callable[[Any], C],
    fallback: Sequence[C],
    **filters: Any,
) -> CollectionView[C]:
    """Published records shaped as cards, or the fallback set.

    A failed fetch is treated like an empty collection: the page still
    renders with the built-in samples.
    """
    try:
        records = await collection.list(filters or None)
    except RpcError as e:
        logger.warning("Loading %s failed, showing samples: %s", collection.entity, e.message)
        records = []
    return resolve_collection([shape(r) for r in records], fallback)


def open_detail(items: Sequence[C], item_id: int) -> Optional[DetailNavigator[C]]:
    """A navigator with *item_id* open, or None when it is not in *items*."""
    navigator: DetailNavigator[C] = DetailNavigator(items)
    item = navigator.find(item_id)
    if item is None:
        return None
    navigator.open(item)
    return navigator


def step_detail(items: Sequence[C], item_id: int, direction: Direction) -> DetailNavigator[C]:
    """A navigator moved one step from *item_id* in *direction*.

    *item_id* need not be in *items* (the collection may have changed
    since the page was rendered); the move then restarts at an end.
    """
    navigator: DetailNavigator[C] = DetailNavigator(items)
    current = navigator.find(item_id)
    navigator.open(current if current is not None else SimpleNamespace(id=item_id))  # type: ignore[arg-type]
    navigator.navigate(direction)
    return navigator


def set_scroll_lock(response: Response, locked: bool) -> Response:
    """Tell the page to suspend or resume scrolling via an HX-Trigger event."""
    response.headers["HX-Trigger"] = json.dumps({"scroll-lock": {"locked": locked}})
    return response
