from __future__ import annotations

from types import SimpleNamespace


class FakeQuery:
    """Chainable stand-in for a postgrest request builder."""

    def __init__(self, data=None, error=None):
        self.data = data
        self.error = error
        self.calls = []

    def __getattr__(self, name):
        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return method

    def execute(self):
        if self.error is not None:
            raise self.error
        return SimpleNamespace(data=self.data)


class FakeStore:
    """In-memory store with the SupabaseService methods the services call."""

    def __init__(self, updated_at=None, interactions=None, preferences=None):
        self.updated_at = updated_at
        self.interactions = list(interactions or [])
        self.preferences = preferences
        self.upserts = []
        self.interaction_rows = {}
        self.next_id = 1
        self.requested_limit = None

    def get_preferences_updated_at(self, user_id):
        return self.updated_at

    def get_preferences(self, user_id):
        return self.preferences

    def get_recent_interactions(self, user_id, limit=50):
        self.requested_limit = limit
        return self.interactions[:limit]

    def upsert_preferences(self, user_id, vector, updated_at):
        self.upserts.append((user_id, dict(vector), updated_at))
        self.updated_at = updated_at
        return {"user_id": user_id, **vector, "updated_at": updated_at}

    def get_interaction(self, user_id, place_id, action):
        return self.interaction_rows.get((user_id, place_id, action))

    def insert_interaction(self, user_id, place_id, action, count=1):
        row = {"id": self.next_id, "count": count}
        self.next_id += 1
        self.interaction_rows[(user_id, place_id, action)] = row
        return row

    def update_interaction_count(self, interaction_id, count):
        for row in self.interaction_rows.values():
            if row["id"] == interaction_id:
                row["count"] = count
                return row
        return None
