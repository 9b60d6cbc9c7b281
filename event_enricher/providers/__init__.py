"""Concrete adapters for caches, the document store and external authorities."""
