"""SQLite repositories for photos, essays and papers."""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generic, Iterator, Mapping, Optional, TypeVar

from folio.models.media import ESSAY_FIELDS, PHOTO_FIELDS, Essay, Photo
from folio.models.paper import PAPER_FIELDS, Paper

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RecordNotFoundError(LookupError):
    """Raised when an id does not exist in the table."""

    def __init__(self, label: str, record_id: int):
        super().__init__(f"{label} {record_id} not found")
        self.record_id = record_id


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class _Repository(Generic[T]):
    """Shared CRUD plumbing; subclasses describe the table."""

    table: str
    label: str
    columns: tuple[str, ...]
    required: tuple[str, ...] = ("title",)
    bool_columns: tuple[str, ...] = ("featured", "published")
    int_columns: tuple[str, ...] = ()
    filter_columns: tuple[str, ...] = ("featured",)
    order_sql: str = "id DESC"
    touch_column: Optional[str] = None
    # Value of the published column when an insert omits it
    published_default: bool = False
    schema: str

    def __init__(self, db_path: Path):
        """Initialize repository with database path.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self._init_db()

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def _init_db(self) -> None:
        """Initialize database schema."""
        with self._connection() as conn:
            conn.executescript(self.schema)
            conn.commit()

    def _to_model(self, row: sqlite3.Row) -> T:
        raise NotImplementedError

    # ── Reads ─────────────────────────────────────────────────────────

    def find_all(
        self,
        published_only: bool = False,
        limit: Optional[int] = None,
        **filters: Any,
    ) -> list[T]:
        """Find records in display order.

        Args:
            published_only: Only return published records
            limit: Maximum number of records to return (all when None)
            **filters: Equality filters on ``filter_columns``; ``None`` and
                empty strings are ignored.

        Returns:
            List of model objects

        Raises:
            ValueError: On a filter this table does not support
        """
        clauses: list[str] = []
        params: list[Any] = []
        if published_only:
            clauses.append("published = 1")
        for key, value in filters.items():
            if value is None or value == "":
                continue
            if key not in self.filter_columns:
                raise ValueError(f"Unknown filter '{key}' for {self.table}")
            clauses.append(f"{key} = ?")
            params.append(int(bool(value)) if key in self.bool_columns else value)
        where_sql = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT * FROM {self.table}
                {where_sql}
                ORDER BY {self.order_sql}
                LIMIT ?
                """,
                (*params, -1 if limit is None else limit),
            )
            rows = cursor.fetchall()
        return [self._to_model(row) for row in rows]

    def find_by_id(self, record_id: int) -> Optional[T]:
        """Find a single record by ID, or None."""
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT * FROM {self.table} WHERE id = ?", (record_id,))
            row = cursor.fetchone()
        return self._to_model(row) if row is not None else None

    def get(self, record_id: int) -> T:
        """Like :meth:`find_by_id` but raises :class:`RecordNotFoundError`."""
        record = self.find_by_id(record_id)
        if record is None:
            raise RecordNotFoundError(self.label, record_id)
        return record

    # ── Writes ────────────────────────────────────────────────────────

    def insert(self, values: Mapping[str, Any]) -> T:
        """Insert a record and return it with its store-assigned id.

        A record inserted as published without a timestamp is stamped now.

        Raises:
            ValueError: On unknown fields or a blank required field
        """
        data = self._clean(values)
        missing = [c for c in self.required if not str(data.get(c) or "").strip()]
        if missing:
            raise ValueError(f"{self.label} requires: {', '.join(missing)}")
        if data.get("published", self.published_default) and not data.get("published_at"):
            data["published_at"] = _now()

        now = _now()
        data["created_at"] = now
        if self.touch_column:
            data[self.touch_column] = now

        names = list(data)
        placeholders = ", ".join("?" for _ in names)
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"INSERT INTO {self.table} ({', '.join(names)}) VALUES ({placeholders})",
                [data[n] for n in names],
            )
            conn.commit()
            record_id = cursor.lastrowid

        logger.debug("Inserted %s %s", self.label, record_id)
        return self.get(record_id)

    def update(self, record_id: int, values: Mapping[str, Any]) -> T:
        """Apply a partial update and return the updated record.

        Publishing a record that has no timestamp stamps it now.

        Raises:
            RecordNotFoundError: If the id does not exist
            ValueError: On unknown fields or blanking a required field
        """
        data = self._clean(values)
        blanked = [c for c in self.required if c in data and not str(data[c] or "").strip()]
        if blanked:
            raise ValueError(f"{self.label} requires: {', '.join(blanked)}")
        if not data:
            return self.get(record_id)
        if data.get("published") and not data.get("published_at"):
            # Publishing a draft stamps now; an already published record keeps its time
            if not self.get(record_id).published_at:
                data["published_at"] = _now()
        if self.touch_column:
            data[self.touch_column] = _now()

        assignments = ", ".join(f"{name} = ?" for name in data)
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"UPDATE {self.table} SET {assignments} WHERE id = ?",
                (*data.values(), record_id),
            )
            conn.commit()
            if cursor.rowcount == 0:
                raise RecordNotFoundError(self.label, record_id)

        logger.debug("Updated %s %s: %s", self.label, record_id, sorted(data))
        return self.get(record_id)

    def delete(self, record_id: int) -> None:
        """Delete a record.

        Raises:
            RecordNotFoundError: If the id does not exist
        """
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"DELETE FROM {self.table} WHERE id = ?", (record_id,))
            conn.commit()
            if cursor.rowcount == 0:
                raise RecordNotFoundError(self.label, record_id)
        logger.debug("Deleted %s %s", self.label, record_id)

    def _clean(self, values: Mapping[str, Any]) -> dict[str, Any]:
        """Validate field names and coerce values to column types.

        Unpublishing always clears the publication timestamp.
        """
        unknown = [k for k in values if k not in self.columns]
        if unknown:
            raise ValueError(f"Unknown field(s) for {self.label}: {', '.join(sorted(unknown))}")

        data: dict[str, Any] = {}
        for key, value in values.items():
            if key in self.bool_columns:
                value = int(bool(value))
            elif key in self.int_columns and value == "":
                value = None
            elif key in self.int_columns and value is not None:
                try:
                    value = int(value)
                except (TypeError, ValueError):
                    raise ValueError(f"{key} must be an integer") from None
            data[key] = value

        if "published" in data and not data["published"]:
            data["published_at"] = None
        return data


# ---------------------------------------------------------------------------
# Concrete repositories
# ---------------------------------------------------------------------------


class PhotoRepository(_Repository[Photo]):
    """Repository for gallery photos."""

    table = "photos"
    label = "Photo"
    columns = PHOTO_FIELDS
    required = ("title", "image_url")
    published_default = True
    order_sql = "COALESCE(published_at, created_at) DESC, id DESC"
    schema = """
        CREATE TABLE IF NOT EXISTS photos (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            created_at TEXT NOT NULL,
            title TEXT NOT NULL,
            image_url TEXT NOT NULL,
            location TEXT,
            description TEXT,
            camera TEXT,
            lens TEXT,
            settings TEXT,
            featured INTEGER NOT NULL DEFAULT 0,
            published INTEGER NOT NULL DEFAULT 1,
            published_at TEXT
        );
        CREATE INDEX IF NOT EXISTS idx_photos_published ON photos(published);
    """

    def _to_model(self, row: sqlite3.Row) -> Photo:
        return Photo(
            id=row["id"],
            created_at=row["created_at"],
            title=row["title"],
            image_url=row["image_url"],
            location=row["location"],
            description=row["description"],
            camera=row["camera"],
            lens=row["lens"],
            settings=row["settings"],
            featured=bool(row["featured"]),
            published=bool(row["published"]),
            published_at=row["published_at"],
        )


class EssayRepository(_Repository[Essay]):
    """Repository for magazine essays."""

    table = "essays"
    label = "Essay"
    columns = ESSAY_FIELDS
    published_default = True
    filter_columns = ("featured", "category")
    order_sql = "COALESCE(published_at, created_at) DESC, id DESC"
    schema = """
        CREATE TABLE IF NOT EXISTS essays (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            created_at TEXT NOT NULL,
            title TEXT NOT NULL,
            subtitle TEXT,
            excerpt TEXT,
            content TEXT,
            category TEXT,
            cover_image_url TEXT,
            featured INTEGER NOT NULL DEFAULT 0,
            published INTEGER NOT NULL DEFAULT 1,
            published_at TEXT
        );
        CREATE INDEX IF NOT EXISTS idx_essays_published ON essays(published);
        CREATE INDEX IF NOT EXISTS idx_essays_category ON essays(category);
    """

    def _to_model(self, row: sqlite3.Row) -> Essay:
        return Essay(
            id=row["id"],
            created_at=row["created_at"],
            title=row["title"],
            subtitle=row["subtitle"],
            excerpt=row["excerpt"],
            content=row["content"],
            category=row["category"],
            cover_image_url=row["cover_image_url"],
            featured=bool(row["featured"]),
            published=bool(row["published"]),
            published_at=row["published_at"],
        )

    def get_distinct_categories(self) -> list[str]:
        """Return distinct non-empty categories of published essays, sorted."""
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT DISTINCT category FROM essays
                WHERE published = 1 AND category IS NOT NULL AND category != ''
                ORDER BY category ASC
                """
            )
            return [row["category"] for row in cursor.fetchall()]


class PaperRepository(_Repository[Paper]):
    """Repository for paper CRUD operations using SQLite."""

    table = "papers"
    label = "Paper"
    columns = PAPER_FIELDS
    required = ("title", "authors")
    int_columns = ("year", "citations")
    filter_columns = ("featured", "category", "year")
    order_sql = "COALESCE(year, 0) DESC, id DESC"
    touch_column = "updated_at"
    schema = """
        CREATE TABLE IF NOT EXISTS papers (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            title TEXT NOT NULL,
            authors TEXT NOT NULL,
            abstract TEXT NOT NULL DEFAULT '',
            journal TEXT NOT NULL DEFAULT '',
            year INTEGER,
            volume TEXT NOT NULL DEFAULT '',
            issue TEXT NOT NULL DEFAULT '',
            pages TEXT NOT NULL DEFAULT '',
            doi TEXT NOT NULL DEFAULT '',
            pdf_url TEXT NOT NULL DEFAULT '',
            pdf_key TEXT NOT NULL DEFAULT '',
            category TEXT NOT NULL DEFAULT '',
            tags TEXT NOT NULL DEFAULT '',
            citations INTEGER NOT NULL DEFAULT 0,
            featured INTEGER NOT NULL DEFAULT 0,
            published INTEGER NOT NULL DEFAULT 0,
            published_at TEXT
        );
        CREATE INDEX IF NOT EXISTS idx_papers_published ON papers(published);
    """

    def _to_model(self, row: sqlite3.Row) -> Paper:
        return Paper(
            id=row["id"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            title=row["title"],
            authors=row["authors"],
            abstract=row["abstract"],
            journal=row["journal"],
            year=row["year"],
            volume=row["volume"],
            issue=row["issue"],
            pages=row["pages"],
            doi=row["doi"],
            pdf_url=row["pdf_url"],
            pdf_key=row["pdf_key"],
            category=row["category"],
            tags=row["tags"],
            citations=row["citations"],
            featured=bool(row["featured"]),
            published=bool(row["published"]),
            published_at=row["published_at"],
        )

    def get_status_counts(self) -> dict[str, int]:
        """Return counts of published, draft and featured papers."""
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT
                    COALESCE(SUM(published = 1), 0) AS published,
                    COALESCE(SUM(published = 0), 0) AS draft,
                    COALESCE(SUM(featured = 1), 0) AS featured
                FROM papers
                """
            )
            row = cursor.fetchone()
        return {
            "published": row["published"],
            "draft": row["draft"],
            "featured": row["featured"],
        }
