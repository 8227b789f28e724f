"""Configuration management.

``Settings`` is a **metaclass-based singleton**: the first call to
``Settings.load()`` creates the instance; every later call returns
the same object.  Use ``update()`` to change values at runtime, or
``reload()`` to re-read everything from disk.

All user-editable configuration lives in ``.metadata/site.yaml``:

* ``site_title`` / ``owner`` / ``tagline`` – shown in page headers
* ``contact_email``  – Crossref polite-pool email for DOI lookups
* ``api_base_url``   – drive the admin panel through another folio
  instance's JSON API instead of the local database

On first run, missing files are copied from ``.metadata.example/``.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from folio.models.media import EssayCard, PhotoCard

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"


# ---------------------------------------------------------------------------
# Singleton metaclass
# ---------------------------------------------------------------------------

class _SettingsMeta(type):
    """Metaclass that enforces a process-wide singleton for *Settings*.

    * First ``Settings(...)`` creates and caches the instance.
    * Later ``Settings(...)`` calls return the cached instance (args ignored).
    """

    _instances: dict[type, Any] = {}

    def __call__(cls, *args: Any, **kwargs: Any) -> Any:
        if cls not in cls._instances:
            cls._instances[cls] = super().__call__(*args, **kwargs)
        return cls._instances[cls]


# ---------------------------------------------------------------------------
# Settings dataclass (singleton)
# ---------------------------------------------------------------------------

@dataclass
class Settings(metaclass=_SettingsMeta):
    """Application settings: singleton with runtime-mutable fields.

    Usage::

        settings = Settings.load()          # first call → create
        settings = Settings.load()          # later → same object
        settings.update(db_path=Path(...))  # runtime change
        settings = Settings.reload()        # re-read from disk
    """

    site_title: str = "Folio"
    owner: str = ""
    tagline: str = ""
    contact_email: Optional[str] = None
    api_base_url: Optional[str] = None
    db_path: Path = Path("folio.db")
    metadata_dir: Path = Path(".metadata")
    export_dir: Path = Path("exports")

    # ── Computed properties ────────────────────────────────────────────

    @property
    def site_path(self) -> Path:
        return self.metadata_dir / "site.yaml"

    # ── Runtime helpers ───────────────────────────────────────────────

    def update(self, **kwargs: Any) -> None:
        """Mutate settings fields at runtime.

        >>> Settings.load().update(db_path=Path("/tmp/test.db"))
        """
        for key, value in kwargs.items():
            if not hasattr(self, key):
                raise AttributeError(f"Settings has no field '{key}'")
            setattr(self, key, value)

    # ── Factory / lifecycle ───────────────────────────────────────────

    @classmethod
    def load(cls, base_dir: Optional[Path] = None) -> "Settings":
        """Load or return the singleton Settings instance.

        On first call the singleton is created; subsequent calls return
        the cached instance.  Pass *base_dir* to override the project
        root (defaults to the repository root one level above ``folio/``).
        """
        if cls in _SettingsMeta._instances:
            return _SettingsMeta._instances[cls]  # type: ignore[return-value]

        if base_dir is None:
            base_dir = Path(__file__).resolve().parent.parent

        metadata_dir = base_dir / ".metadata"
        cls._ensure_default_files(base_dir, metadata_dir)

        site = _load_site(metadata_dir / "site.yaml")

        return cls(
            site_title=site.get("site_title") or "Folio",
            owner=site.get("owner") or "",
            tagline=site.get("tagline") or "",
            contact_email=site.get("contact_email") or None,
            api_base_url=site.get("api_base_url") or None,
            db_path=base_dir / "folio.db",
            metadata_dir=metadata_dir,
            export_dir=base_dir / "exports",
        )

    @classmethod
    def reload(cls, base_dir: Optional[Path] = None) -> "Settings":
        """Discard the current singleton and re-load from disk."""
        cls.reset()
        return cls.load(base_dir)

    @classmethod
    def reset(cls) -> None:
        """Discard the singleton so the next ``load()`` re-creates it."""
        _SettingsMeta._instances.pop(cls, None)

    # ── Private ───────────────────────────────────────────────────────

    @staticmethod
    def _ensure_default_files(base_dir: Path, metadata_dir: Path) -> None:
        """Copy ``.metadata.example/`` templates when real files are missing."""
        metadata_dir.mkdir(parents=True, exist_ok=True)

        example_dir = base_dir / ".metadata.example"
        if not example_dir.exists():
            return

        for example_file in example_dir.iterdir():
            if example_file.is_file():
                target = metadata_dir / example_file.name
                if not target.exists():
                    shutil.copy2(example_file, target)
                    logger.info("Created .metadata/%s from template", example_file.name)


# ---------------------------------------------------------------------------
# YAML loaders
# ---------------------------------------------------------------------------

def _load_site(path: Path) -> dict[str, Any]:
    """Load site settings from ``site.yaml``; empty dict when unusable."""
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable %s: %s", path, e)
        return {}
    return data if isinstance(data, dict) else {}


def save_site(path: Path, settings: Settings) -> None:
    """Persist the user-editable site fields to ``site.yaml``."""
    data = {
        "site_title": settings.site_title,
        "owner": settings.owner,
        "tagline": settings.tagline,
        "contact_email": settings.contact_email or "",
        "api_base_url": settings.api_base_url or "",
    }
    with open(path, "w", encoding="utf-8") as f:
        f.write("# Folio site settings\n")
        f.write("# api_base_url: leave empty to manage the local database\n\n")
        yaml.dump(
            data,
            f,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )


def _load_samples() -> dict[str, Any]:
    path = DATA_DIR / "samples.yaml"
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


def load_sample_photos() -> list[PhotoCard]:
    """Load the built-in sample gallery from ``folio/data/samples.yaml``.

    This is **application data** (ships with the package), not user config.
    The gallery shows it whenever the photo collection is empty.
    """
    return [
        PhotoCard(
            id=int(p["id"]),
            src=str(p["src"]),
            title=str(p["title"]),
            location=str(p.get("location", "")),
            year=str(p.get("year", "")),
            description=str(p.get("description", "")),
            camera=p.get("camera"),
            lens=p.get("lens"),
            settings=p.get("settings"),
        )
        for p in _load_samples().get("photos") or []
    ]


def load_sample_essays() -> list[EssayCard]:
    """Load the built-in sample essays from ``folio/data/samples.yaml``."""
    return [
        EssayCard(
            id=int(e["id"]),
            title=str(e["title"]),
            subtitle=str(e.get("subtitle", "")),
            excerpt=str(e.get("excerpt", "")),
            date=str(e.get("date", "")),
            read_time=str(e.get("read_time", "")),
            category=str(e.get("category", "Uncategorized")),
            cover_image=str(e.get("cover_image", "")),
        )
        for e in _load_samples().get("essays") or []
    ]
