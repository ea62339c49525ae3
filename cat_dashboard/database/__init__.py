"""Database module for Supabase integration."""

from .supabase import SupabaseClient, get_supabase_client
from .models import AddressRound, AddressStats, Last7DStats, SwapRecord

__all__ = [
    "SupabaseClient",
    "get_supabase_client",
    "AddressRound",
    "AddressStats",
    "Last7DStats",
    "SwapRecord",
]
