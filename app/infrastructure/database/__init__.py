from .client import NIL_UUID, DataStore
from .supabase import SupabaseDataStore

__all__ = ["DataStore", "NIL_UUID", "SupabaseDataStore"]
