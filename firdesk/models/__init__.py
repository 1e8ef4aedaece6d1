"""Database models."""

from firdesk.models.kv_entry import KeyValueEntry

__all__ = ["KeyValueEntry"]
