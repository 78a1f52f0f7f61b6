"""Paged file storage, an LRU buffer pool, catalogue metadata and transaction records."""

__version__ = "0.1.0"