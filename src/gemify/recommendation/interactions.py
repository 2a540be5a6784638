from __future__ import annotations

import logging

from gemify.config import DEFAULT_ACTION_WEIGHTS
from gemify.errors import InvalidRequestError

LOGGER = logging.getLogger(__name__)


def record_interaction(store, user_id: str, place_id: int, action: str = "view") -> int:
    """Increment the user's aggregated count for ``action`` on a place, creating the row if needed."""
    if not user_id or not str(user_id).strip():
        raise InvalidRequestError("Missing user_id")
    action = str(action).lower()
    if action not in DEFAULT_ACTION_WEIGHTS:
        raise InvalidRequestError(f"Unknown interaction action '{action}'")

    existing = store.get_interaction(user_id, place_id, action)
    if existing:
        count = int(existing.get("count") or 0) + 1
        store.update_interaction_count(existing["id"], count)
    else:
        count = 1
        store.insert_interaction(user_id, place_id, action, count=count)

    LOGGER.debug("Recorded %s on place %s for %s (count=%d)", action, place_id, user_id, count)
    return count


def record_view(store, user_id: str, place_id: int) -> int:
    return record_interaction(store, user_id, place_id, "view")
