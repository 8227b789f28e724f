"""List-with-fallback policy and record → display card shaping."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Generic, Optional, Sequence, TypeVar

from folio.models.media import Essay, EssayCard, Photo, PhotoCard
from folio.utils.text import display_year, estimate_read_time, format_month_year

T = TypeVar("T")

DEFAULT_READ_TIME = "5 min read"
DEFAULT_COVER_IMAGE = "/static/images/image7.jpg"
UNCATEGORIZED = "Uncategorized"
ALL_CATEGORIES = "All"

# Grid positions rendered as wide cells
FEATURED_SLOTS = (0, 3)


class Source(str, Enum):
    """Where a :class:`CollectionView`'s items came from."""

    REMOTE = "remote"
    FALLBACK = "fallback"
    PLACEHOLDER = "placeholder"


@dataclass
class CollectionView(Generic[T]):
    """Items to render plus the policy decision that produced them."""

    items: list[T] = field(default_factory=list)
    source: Source = Source.REMOTE
    placeholder_slots: int = 0

    @property
    def is_fallback(self) -> bool:
        return self.source is Source.FALLBACK

    @property
    def is_loading(self) -> bool:
        return self.source is Source.PLACEHOLDER


def resolve_collection(
    remote: Optional[Sequence[T]],
    fallback: Sequence[T],
    loading: bool = False,
    placeholder_slots: int = 6,
) -> CollectionView[T]:
    """Decide what a list view shows.

    * still loading → skeleton placeholder, no items
    * remote missing or empty → the fallback collection, wholesale
    * otherwise → the remote items, in fetch order

    Remote and fallback items are never mixed.
    """
    if loading:
        return CollectionView([], Source.PLACEHOLDER, placeholder_slots)
    if not remote:
        return CollectionView(list(fallback), Source.FALLBACK)
    return CollectionView(list(remote), Source.REMOTE)


def is_featured_slot(index: int) -> bool:
    return index in FEATURED_SLOTS


# ---------------------------------------------------------------------------
# Display shaping
# ---------------------------------------------------------------------------


def photo_card(photo: Photo, now: Optional[datetime] = None) -> PhotoCard:
    """Shape a stored photo for the gallery grid and lightbox."""
    return PhotoCard(
        id=photo.id or 0,
        src=photo.image_url,
        title=photo.title,
        location=photo.location or "",
        year=display_year(photo.published_at, now),
        description=photo.description or "",
        camera=photo.camera or None,
        lens=photo.lens or None,
        settings=photo.settings or None,
    )


def essay_card(essay: Essay, now: Optional[datetime] = None) -> EssayCard:
    """Shape a stored essay for the magazine grid and reader."""
    return EssayCard(
        id=essay.id or 0,
        title=essay.title,
        subtitle=essay.subtitle or "",
        excerpt=essay.excerpt or "",
        date=format_month_year(essay.published_at, now),
        read_time=estimate_read_time(essay.content) if essay.content else DEFAULT_READ_TIME,
        category=essay.category or UNCATEGORIZED,
        cover_image=essay.cover_image_url or DEFAULT_COVER_IMAGE,
        content=essay.content or "",
    )


def categories_of(cards: Sequence[EssayCard]) -> list[str]:
    """``["All", ...]`` followed by distinct categories in first-seen order."""
    seen: list[str] = []
    for card in cards:
        if card.category not in seen:
            seen.append(card.category)
    return [ALL_CATEGORIES, *seen]


def filter_by_category(cards: Sequence[EssayCard], category: Optional[str]) -> list[EssayCard]:
    """Cards in *category*; every card for ``"All"`` or an empty category."""
    if not category or category == ALL_CATEGORIES:
        return list(cards)
    return [c for c in cards if c.category == category]
