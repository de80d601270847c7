from .rest_client import RestClient, RemoteError, RemoteErrorCategory
from .repository import SupabaseRepository
from .schema import SCHEMA_SQL, render_schema

__all__ = [
    "RestClient",
    "RemoteError",
    "RemoteErrorCategory",
    "SupabaseRepository",
    "SCHEMA_SQL",
    "render_schema",
]
