"""JSON API: the collection contract over HTTP.

``RemoteCollection`` is the client of these routes, so the two must agree
on paths, payloads and the ``{"error": message}`` failure body.
"""

from typing import Any, Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, ValidationError

from folio.gui.state import state
from folio.services.rpc import Collection, RpcError

router = APIRouter(prefix="/api")


# ============================================================================
# Payloads
# ============================================================================


class PhotoPayload(BaseModel):
    """Writable photo fields; omitted fields are left unchanged on update."""
    model_config = ConfigDict(extra="forbid")

    title: str = ""
    image_url: str = ""
    location: str | None = None
    description: str | None = None
    camera: str | None = None
    lens: str | None = None
    settings: str | None = None
    featured: bool = False
    published: bool = True
    published_at: str | None = None


class EssayPayload(BaseModel):
    """Writable essay fields."""
    model_config = ConfigDict(extra="forbid")

    title: str = ""
    subtitle: str | None = None
    excerpt: str | None = None
    content: str | None = None
    category: str | None = None
    cover_image_url: str | None = None
    featured: bool = False
    published: bool = True
    published_at: str | None = None


class PaperPayload(BaseModel):
    """Writable paper fields."""
    model_config = ConfigDict(extra="forbid")

    title: str = ""
    authors: str = ""
    abstract: str = ""
    journal: str = ""
    year: int | None = None
    volume: str = ""
    issue: str = ""
    pages: str = ""
    doi: str = ""
    pdf_url: str = ""
    pdf_key: str = ""
    category: str = ""
    tags: str = ""
    citations: int = 0
    featured: bool = False
    published: bool = False
    published_at: str | None = None


PAYLOADS: dict[str, type[BaseModel]] = {
    "photos": PhotoPayload,
    "essays": EssayPayload,
    "papers": PaperPayload,
}


# ============================================================================
# Helpers
# ============================================================================


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _collection(entity: str) -> Optional[Collection[Any]]:
    return {
        "photos": state.photos,
        "essays": state.essays,
        "papers": state.papers,
    }.get(entity)


def _parse(entity: str, body: dict[str, Any]) -> dict[str, Any]:
    """Validate *body* against the entity payload; only keys the client sent."""
    return PAYLOADS[entity].model_validate(body).model_dump(exclude_unset=True)


def validation_message(e: ValidationError) -> str:
    """First complaint of a pydantic error as one line."""
    first = e.errors()[0]
    where = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    return f"{where}: {message}" if where else message


async def _run(call) -> tuple[Any, Optional[JSONResponse]]:
    try:
        return await call, None
    except RpcError as e:
        return None, _error(e.message, e.status or 500)


def _unknown(entity: str) -> JSONResponse:
    return _error(f"Unknown collection '{entity}'", 404)


# ============================================================================
# Routes
# ============================================================================


@router.get("/{entity}")
async def list_published(
    entity: str,
    category: str | None = None,
    featured: bool | None = None,
    year: int | None = None,
):
    """Published records, newest first."""
    collection = _collection(entity)
    if collection is None:
        return _unknown(entity)
    filters = {k: v for k, v in (("category", category), ("featured", featured), ("year", year)) if v is not None}
    records, error = await _run(collection.list(filters))
    if error:
        return error
    return JSONResponse([r.to_dict() for r in records])


@router.get("/{entity}/all")
async def list_everything(
    entity: str,
    category: str | None = None,
    featured: bool | None = None,
    year: int | None = None,
):
    """Every record, including unpublished ones."""
    collection = _collection(entity)
    if collection is None:
        return _unknown(entity)
    filters = {k: v for k, v in (("category", category), ("featured", featured), ("year", year)) if v is not None}
    records, error = await _run(collection.list_all(filters))
    if error:
        return error
    return JSONResponse([r.to_dict() for r in records])


@router.post("/{entity}")
async def create_record(entity: str, body: dict[str, Any]):
    collection = _collection(entity)
    if collection is None:
        return _unknown(entity)
    try:
        fields = _parse(entity, body)
    except ValidationError as e:
        return _error(validation_message(e), 422)
    record, error = await _run(collection.create(fields))
    if error:
        return error
    state.cache.invalidate()
    return JSONResponse(record.to_dict(), status_code=201)


@router.patch("/{entity}/{record_id}")
async def update_record(entity: str, record_id: int, body: dict[str, Any]):
    """Partial update: only the fields present in the body change."""
    collection = _collection(entity)
    if collection is None:
        return _unknown(entity)
    try:
        fields = _parse(entity, body)
    except ValidationError as e:
        return _error(validation_message(e), 422)
    record, error = await _run(collection.update(record_id, fields))
    if error:
        return error
    state.cache.invalidate()
    return JSONResponse(record.to_dict())


@router.delete("/{entity}/{record_id}")
async def delete_record(entity: str, record_id: int):
    collection = _collection(entity)
    if collection is None:
        return _unknown(entity)
    _, error = await _run(collection.delete(record_id))
    if error:
        return error
    state.cache.invalidate()
    return JSONResponse({"ok": True})

