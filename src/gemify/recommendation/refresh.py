"""
Debounced recomputation of stored user preference vectors.

Reads the user's latest interactions from the store, scores them and
overwrites the ``user_preferences`` row. Recomputes are skipped while the
stored row is younger than the configured debounce window.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from gemify.config import PersonalizationConfig
from gemify.errors import InvalidRequestError, PreferenceStoreError
from gemify.recommendation.preferences import compute_preference_vector

LOGGER = logging.getLogger(__name__)

EPOCH = pd.Timestamp(0, tz="UTC")


@dataclass
class RefreshResult:
    status: str
    reason: Optional[str] = None
    vector: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        if self.status == "updated":
            return {"status": self.status, "vector": self.vector}
        return {"status": self.status, "reason": self.reason}


def _to_utc(value: Any) -> pd.Timestamp:
    if value is None:
        return EPOCH
    stamp = pd.to_datetime(value, errors="coerce", utc=True)
    if pd.isna(stamp):
        return EPOCH
    return stamp


def clean_interactions(rows: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Flatten joined interaction rows, dropping those without a place."""
    cleaned = []
    for row in rows:
        place = row.get("places")
        if not place:
            continue
        if isinstance(place, list):
            raise PreferenceStoreError("Expected joined place to be an object, got a list")
        cleaned.append(
            {
                "action": row.get("action"),
                "count": row.get("count"),
                "price": place.get("price"),
                "ambiance": place.get("ambiance"),
            }
        )
    return cleaned


def refresh_user_preferences(
    store,
    user_id: Optional[str],
    now: Optional[datetime] = None,
    config: Optional[PersonalizationConfig] = None,
) -> RefreshResult:
    """
    Recompute and persist a user's preference vector.

    Args:
        store: Object exposing ``get_preferences_updated_at``,
            ``get_recent_interactions`` and ``upsert_preferences``
            (see ``SupabaseService``).
        user_id: User whose vector is refreshed.
        now: Current time; defaults to the wall clock in UTC.
        config: Debounce window and interaction limit.

    Returns:
        ``RefreshResult`` with status ``skipped`` or ``updated``.
    """
    if not user_id or not str(user_id).strip():
        raise InvalidRequestError("Missing user_id")

    config = config or PersonalizationConfig()
    current = _to_utc(now) if now is not None else pd.Timestamp.now(tz="UTC")

    last_updated = _to_utc(store.get_preferences_updated_at(user_id))
    age_seconds = (current - last_updated).total_seconds()
    if age_seconds < config.debounce_seconds:
        LOGGER.debug("Skipping preference refresh for %s (age %.1fs)", user_id, age_seconds)
        return RefreshResult(status="skipped", reason="updated <1min ago")

    rows = store.get_recent_interactions(user_id, limit=config.interaction_limit)
    if not rows:
        return RefreshResult(status="skipped", reason="no interactions")

    interactions = clean_interactions(rows)
    vector = compute_preference_vector(interactions, config.action_weights)

    store.upsert_preferences(user_id, vector, current.isoformat())
    LOGGER.info("Updated preferences for %s from %d interactions", user_id, len(interactions))
    return RefreshResult(status="updated", vector=vector)
