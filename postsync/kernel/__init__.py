"""
postsync Kernel — the pure core.

Three components:
  reducer      — (post store, record) → post store  (pure, reference-stable)
  app_reducer  — combines the post store with users, preferences, requests, errors
  store        — holds state, folds dispatched records, notifies subscribers

Records are built with the factories in records.
"""

from postsync.kernel.app_reducer import empty_app_state, reduce_app
from postsync.kernel.records import batch, make_record
from postsync.kernel.reducer import empty_state, reduce, reduce_all
from postsync.kernel.store import Store
from postsync.kernel.types import Record, RequestTypes

__all__ = [
    "reduce",
    "reduce_all",
    "empty_state",
    "reduce_app",
    "empty_app_state",
    "make_record",
    "batch",
    "Record",
    "RequestTypes",
    "Store",
]
