"""Typed collection layer shared by the web pages, the admin panel and the CLI.

Every entity (photos, essays, papers) is reached through the same five
operations::

    list(filters)        published records only
    list_all(filters)    everything, for the admin panel
    create(fields)       -> record
    update(id, fields)   -> record
    delete(id)

Failures of any kind surface as :class:`RpcError` whose ``message`` is safe
to show to the user verbatim.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import fields as dataclass_fields
from typing import Any, Callable, Generic, Mapping, Optional, Protocol, TypeVar

import httpx

from folio.database.repository import RecordNotFoundError, _Repository
from folio.models.media import Essay, Photo
from folio.models.paper import Paper

logger = logging.getLogger(__name__)

T = TypeVar("T")

# entity name -> model class
ENTITIES: dict[str, type] = {
    "photos": Photo,
    "essays": Essay,
    "papers": Paper,
}


class RpcError(Exception):
    """A failed collection call, carrying a human readable message."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


class Collection(Protocol[T]):
    """What controllers need from an entity collection."""

    entity: str

    async def list(self, filters: Optional[Mapping[str, Any]] = None) -> list[T]: ...

    async def list_all(self, filters: Optional[Mapping[str, Any]] = None) -> list[T]: ...

    async def create(self, fields: Mapping[str, Any]) -> T: ...

    async def update(self, record_id: int, fields: Mapping[str, Any]) -> T: ...

    async def delete(self, record_id: int) -> None: ...


def model_from_dict(entity: str, data: Mapping[str, Any]) -> Any:
    """Build the entity's model from a JSON object, ignoring unknown keys."""
    model_cls = ENTITIES[entity]
    names = {f.name for f in dataclass_fields(model_cls)}
    return model_cls(**{k: v for k, v in data.items() if k in names})


# ---------------------------------------------------------------------------
# In-process collection (SQLite repositories)
# ---------------------------------------------------------------------------


class RepositoryCollection(Generic[T]):
    """Collection backed directly by a repository in this process."""

    def __init__(self, entity: str, repo: _Repository[T]):
        self.entity = entity
        self.repo = repo

    async def list(self, filters: Optional[Mapping[str, Any]] = None) -> list[T]:
        return self._call(self.repo.find_all, published_only=True, **dict(filters or {}))

    async def list_all(self, filters: Optional[Mapping[str, Any]] = None) -> list[T]:
        return self._call(self.repo.find_all, **dict(filters or {}))

    async def get(self, record_id: int) -> T:
        return self._call(self.repo.get, record_id)

    async def create(self, fields: Mapping[str, Any]) -> T:
        return self._call(self.repo.insert, fields)

    async def update(self, record_id: int, fields: Mapping[str, Any]) -> T:
        return self._call(self.repo.update, record_id, fields)

    async def delete(self, record_id: int) -> None:
        self._call(self.repo.delete, record_id)

    def _call(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Run a repository call, translating its errors to :class:`RpcError`."""
        try:
            return fn(*args, **kwargs)
        except RecordNotFoundError as e:
            raise RpcError(str(e), status=404) from e
        except ValueError as e:
            raise RpcError(str(e), status=422) from e
        except sqlite3.Error as e:
            logger.exception("%s store call failed", self.entity)
            raise RpcError(f"Database error: {e}", status=500) from e


# ---------------------------------------------------------------------------
# Remote collection (JSON API over HTTP)
# ---------------------------------------------------------------------------


class RemoteCollection(Generic[T]):
    """Collection served by another folio instance's JSON API."""

    def __init__(
        self,
        base_url: str,
        entity: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the remote collection.

        Args:
            base_url: Root URL of the folio server (e.g. ``http://127.0.0.1:8000``)
            entity: ``photos``, ``essays`` or ``papers``
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use ``MockTransport``)
        """
        if entity not in ENTITIES:
            raise ValueError(f"Unknown entity '{entity}'")
        self.base_url = base_url.rstrip("/")
        self.entity = entity
        self.timeout = timeout
        self._transport = transport

    async def list(self, filters: Optional[Mapping[str, Any]] = None) -> list[T]:
        data = await self._request("GET", f"/api/{self.entity}", params=_query_params(filters))
        return self._decode_many(data)

    async def list_all(self, filters: Optional[Mapping[str, Any]] = None) -> list[T]:
        data = await self._request("GET", f"/api/{self.entity}/all", params=_query_params(filters))
        return self._decode_many(data)

    async def create(self, fields: Mapping[str, Any]) -> T:
        data = await self._request("POST", f"/api/{self.entity}", json=dict(fields))
        return self._decode(data)

    async def update(self, record_id: int, fields: Mapping[str, Any]) -> T:
        data = await self._request("PATCH", f"/api/{self.entity}/{record_id}", json=dict(fields))
        return self._decode(data)

    async def delete(self, record_id: int) -> None:
        await self._request("DELETE", f"/api/{self.entity}/{record_id}")

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send one request and decode the JSON body.

        Raises:
            RpcError: On transport failures, non-2xx responses and bodies
                that are not JSON
        """
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise RpcError("Request timed out") from e
        except httpx.HTTPError as e:
            raise RpcError(f"Request failed: {e}") from e

        if response.status_code >= 400:
            raise RpcError(_error_message(response), status=response.status_code)
        logger.debug("%s %s -> %s", method, path, response.status_code)
        try:
            return response.json()
        except ValueError as e:
            raise RpcError("Invalid response from server", status=response.status_code) from e

    def _decode(self, data: Any) -> T:
        try:
            return model_from_dict(self.entity, data)
        except (AttributeError, TypeError, ValueError) as e:
            raise RpcError("Invalid response from server") from e

    def _decode_many(self, data: Any) -> list[T]:
        if not isinstance(data, list):
            raise RpcError("Invalid response from server")
        return [self._decode(item) for item in data]


def _query_params(filters: Optional[Mapping[str, Any]]) -> dict[str, str]:
    params: dict[str, str] = {}
    for key, value in (filters or {}).items():
        if value is None or value == "":
            continue
        params[key] = ("true" if value else "false") if isinstance(value, bool) else str(value)
    return params


def _error_message(response: httpx.Response) -> str:
    """Pull the ``error`` string out of an error response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error") or body.get("detail")
        if isinstance(error, str) and error:
            return error
    return f"Server returned {response.status_code}"


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def open_collection(entity: str, settings: Any) -> Collection[Any]:
    """Collection for *entity* as configured.

    Uses the remote JSON API when ``settings.api_base_url`` is set and the
    local SQLite database otherwise.
    """
    from folio.database.repository import EssayRepository, PaperRepository, PhotoRepository

    if entity not in ENTITIES:
        raise ValueError(f"Unknown entity '{entity}'")
    if settings.api_base_url:
        return RemoteCollection(settings.api_base_url, entity)
    repo_cls = {
        "photos": PhotoRepository,
        "essays": EssayRepository,
        "papers": PaperRepository,
    }[entity]
    return RepositoryCollection(entity, repo_cls(settings.db_path))
