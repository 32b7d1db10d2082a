"""Paged disk files, an LRU buffer pool, catalog metadata and transaction records for a small relational database."""

__version__ = "0.1.0"

__all__ = [
    "buffer_pool_manager",
    "config",
    "defs",
    "disk_manager",
    "errors",
    "page",
    "replacer",
    "sm_manager",
    "sm_meta",
    "transaction",
    "txn_defs",
]