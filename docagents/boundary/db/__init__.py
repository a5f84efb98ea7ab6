"""Document store implementations and database plumbing."""

from docagents.boundary.db.memory_store import InMemoryStore
from docagents.boundary.db.postgres_store import PostgresStore
from docagents.boundary.db.store import DocumentStore

__all__ = ["DocumentStore", "InMemoryStore", "PostgresStore"]
