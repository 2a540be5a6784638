import logging
import os
from typing import Optional, List, Dict, Any

import httpx
from dotenv import load_dotenv
from supabase import Client, PostgrestAPIError, create_client

from gemify.errors import ConfigurationError, PreferenceStoreError

# Load environment variables
load_dotenv()

LOGGER = logging.getLogger(__name__)


class SupabaseService:
    """Supabase access for preferences, interactions and places"""

    def __init__(self, client: Optional[Client] = None):
        if client is None:
            url = os.getenv("SUPABASE_URL")
            # Use service role key for full access
            key = os.getenv("SUPABASE_SERVICE_ROLE_KEY")

            if not url or not key:
                raise ConfigurationError(
                    "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set in environment"
                )
            client = create_client(url, key)

        self.client: Client = client

    def _execute(self, query, failure: str):
        try:
            return query.execute()
        except (PostgrestAPIError, httpx.HTTPError) as exc:
            LOGGER.error("%s: %s", failure, exc)
            raise PreferenceStoreError(failure) from exc

    # ==================== USER_PREFERENCES ====================

    def get_preferences(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Get the stored preference row for a user"""
        response = self._execute(
            self.client.table("user_preferences").select("*").eq("user_id", user_id).limit(1),
            "DB read error",
        )
        return response.data[0] if response.data else None

    def get_preferences_updated_at(self, user_id: str) -> Optional[str]:
        """Get the last recompute timestamp for a user, if any"""
        response = self._execute(
            self.client.table("user_preferences").select("updated_at").eq("user_id", user_id).limit(1),
            "DB read error",
        )
        return response.data[0].get("updated_at") if response.data else None

    def upsert_preferences(self, user_id: str, vector: Dict[str, float],
                           updated_at: str) -> Optional[Dict[str, Any]]:
        """Overwrite a user's preference row, keyed on user_id"""
        data = {"user_id": user_id, **vector, "updated_at": updated_at}
        response = self._execute(
            self.client.table("user_preferences").upsert(data, on_conflict="user_id"),
            "DB write error",
        )
        return response.data[0] if response.data else None

    # ==================== USER_INTERACTIONS ====================

    def get_recent_interactions(self, user_id: str, limit: int = 50) -> List[Dict[str, Any]]:
        """Latest interactions for a user joined with the place's price and ambiance"""
        query = (self.client.table("user_interactions")
                 .select("action, count, places:place_id (price, ambiance)")
                 .eq("user_id", user_id)
                 .order("created_at", desc=True)
                 .limit(limit))
        response = self._execute(query, "DB join error")
        return response.data or []

    def get_interaction(self, user_id: str, place_id: int, action: str) -> Optional[Dict[str, Any]]:
        """Get the aggregated interaction row for one user, place and action"""
        query = (self.client.table("user_interactions")
                 .select("id, count")
                 .eq("user_id", user_id)
                 .eq("place_id", place_id)
                 .eq("action", action)
                 .limit(1))
        response = self._execute(query, "DB read error")
        return response.data[0] if response.data else None

    def insert_interaction(self, user_id: str, place_id: int, action: str,
                           count: int = 1) -> Optional[Dict[str, Any]]:
        """Create an interaction row"""
        data = {
            "user_id": user_id,
            "place_id": place_id,
            "action": action,
            "count": count,
        }
        response = self._execute(
            self.client.table("user_interactions").insert(data),
            "DB write error",
        )
        return response.data[0] if response.data else None

    def update_interaction_count(self, interaction_id: int, count: int) -> Optional[Dict[str, Any]]:
        """Set the count of an existing interaction row"""
        response = self._execute(
            self.client.table("user_interactions").update({"count": count}).eq("id", interaction_id),
            "DB write error",
        )
        return response.data[0] if response.data else None

    # ==================== PLACES ====================

    def get_place(self, place_id: int) -> Optional[Dict[str, Any]]:
        """Get a place by ID"""
        response = self._execute(
            self.client.table("places").select("*").eq("id", place_id).limit(1),
            "DB read error",
        )
        return response.data[0] if response.data else None


# Singleton instance
_supabase_service = None


def get_supabase_service() -> SupabaseService:
    """Get or create the singleton SupabaseService instance"""
    global _supabase_service
    if _supabase_service is None:
        _supabase_service = SupabaseService()
    return _supabase_service
