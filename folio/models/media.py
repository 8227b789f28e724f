"""Photo and essay data models plus their display cards."""

from dataclasses import asdict, dataclass
from typing import Any, Optional


@dataclass
class Photo:
    """A gallery photograph as stored."""

    title: str
    image_url: str
    location: Optional[str] = None
    description: Optional[str] = None
    camera: Optional[str] = None
    lens: Optional[str] = None
    settings: Optional[str] = None
    featured: bool = False
    published: bool = True
    published_at: Optional[str] = None

    # Database fields (set after persistence)
    id: Optional[int] = None
    created_at: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


PHOTO_FIELDS: tuple[str, ...] = (
    "title",
    "image_url",
    "location",
    "description",
    "camera",
    "lens",
    "settings",
    "featured",
    "published",
    "published_at",
)


@dataclass
class Essay:
    """A magazine essay as stored."""

    title: str
    subtitle: Optional[str] = None
    excerpt: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    cover_image_url: Optional[str] = None
    featured: bool = False
    published: bool = True
    published_at: Optional[str] = None

    # Database fields (set after persistence)
    id: Optional[int] = None
    created_at: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


ESSAY_FIELDS: tuple[str, ...] = (
    "title",
    "subtitle",
    "excerpt",
    "content",
    "category",
    "cover_image_url",
    "featured",
    "published",
    "published_at",
)


@dataclass
class PhotoCard:
    """What the gallery grid and lightbox render for one photo."""

    id: int
    src: str
    title: str
    location: str
    year: str
    description: str
    camera: Optional[str] = None
    lens: Optional[str] = None
    settings: Optional[str] = None


@dataclass
class EssayCard:
    """What the magazine grid and reader render for one essay."""

    id: int
    title: str
    subtitle: str
    excerpt: str
    date: str
    read_time: str
    category: str
    cover_image: str
    content: str = ""
