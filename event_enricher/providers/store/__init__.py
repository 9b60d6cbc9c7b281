"""Persistent document store implementations."""

from event_enricher.providers.store.sqlite_document_store import SQLiteDocumentStore

__all__ = ["SQLiteDocumentStore"]
