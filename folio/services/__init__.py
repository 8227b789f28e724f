"""Service layer."""

from folio.services.crossref_service import CrossrefService
from folio.services.export_service import MarkdownExporter
from folio.services.query_cache import QueryCache
from folio.services.rpc import RemoteCollection, RepositoryCollection, RpcError

__all__ = [
    "CrossrefService",
    "MarkdownExporter",
    "QueryCache",
    "RemoteCollection",
    "RepositoryCollection",
    "RpcError",
]
