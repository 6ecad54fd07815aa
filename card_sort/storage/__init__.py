"""
Storage implementations.

Provides implementations of the Storage interface for persisting sort
session snapshots and the comparison log.

Available implementations:
- JSONStorage: Latest snapshot as JSON, comparisons as append-only JSONL
"""

from .json_storage import JSONStorage

__all__ = ["JSONStorage"]
