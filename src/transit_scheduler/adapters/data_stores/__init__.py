"""Data store adapters implementing the TransitDataStore port."""

from src.transit_scheduler.adapters.data_stores.in_memory_store import (
    DEMO_ROUTES,
    InMemoryTransitDataStore,
)
from src.transit_scheduler.adapters.data_stores.sqlite_store import (
    SQLiteTransitDataStore,
)
from src.transit_scheduler.adapters.data_stores.supabase_store import (
    SupabaseTransitDataStore,
)

__all__ = [
    "DEMO_ROUTES",
    "InMemoryTransitDataStore",
    "SQLiteTransitDataStore",
    "SupabaseTransitDataStore",
]
