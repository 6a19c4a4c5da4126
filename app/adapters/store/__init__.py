"""Content store adapters.

The services talk to the hosted relational store through a narrow async
interface (point lookup, insert-returning, update-by-key, ordered scan) so
the PostgREST client can be swapped for the in-memory store in development
and tests.
"""

from app.adapters.store.base import AbstractContentStore
from app.adapters.store.factory import create_content_store
from app.adapters.store.in_memory import InMemoryContentStore
from app.adapters.store.postgrest import PostgrestContentStore

__all__ = [
    "AbstractContentStore",
    "InMemoryContentStore",
    "PostgrestContentStore",
    "create_content_store",
]
