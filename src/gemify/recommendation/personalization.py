"""Place-level preference vectors and the personalized place banner text."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Tuple

from gemify.config import AMBIANCE_KEYS, MAX_PRICE_TIER
from gemify.recommendation.preferences import ambiance_key

AMBIANCE_LABELS: Dict[str, str] = {key: key.replace("_", "-") for key in AMBIANCE_KEYS}


def _place_field(place: Any, name: str) -> Any:
    if isinstance(place, Mapping):
        return place.get(name)
    return getattr(place, name, None)


def place_to_preferences(place: Any) -> Dict[str, float]:
    """1.0 for each ambiance the place carries, plus price scaled to [0, 1]."""
    preferences = {key: 0.0 for key in AMBIANCE_KEYS}
    price = _place_field(place, "price") or 0
    preferences["price"] = float(price) / MAX_PRICE_TIER

    for tag in _place_field(place, "ambiance") or []:
        key = ambiance_key(tag)
        if key is not None:
            preferences[key] = 1.0
    return preferences


def _ambiance_entries(vector: Mapping) -> List[Tuple[str, float]]:
    entries = []
    for key in AMBIANCE_KEYS:
        value = vector.get(key)
        if value is None:
            continue
        entries.append((key, float(value)))
    return entries


def strongest_trait(vector: Mapping) -> Optional[Tuple[str, float]]:
    """Highest-scoring ambiance entry; ties go to the later key."""
    entries = _ambiance_entries(vector)
    if not entries:
        return None
    best = entries[0]
    for entry in entries[1:]:
        if entry[1] >= best[1]:
            best = entry
    return best


def weakest_trait(vector: Mapping) -> Optional[Tuple[str, float]]:
    """Lowest-scoring ambiance entry; ties go to the later key."""
    entries = _ambiance_entries(vector)
    if not entries:
        return None
    worst = entries[0]
    for entry in entries[1:]:
        if entry[1] <= worst[1]:
            worst = entry
    return worst


def personalization_message(place: Any, user_preferences: Optional[Mapping] = None) -> str:
    """
    Short banner comparing a place's strongest ambiance with the user's taste.

    ``user_preferences`` is the stored preference row (extra columns such as
    ``user_id`` or ``updated_at`` are ignored) or None for anonymous users.
    """
    place_vector = place_to_preferences(place)
    place_trait = strongest_trait(place_vector)
    if place_trait is None or place_trait[1] <= 0:
        return "Want to give this place a spin?"

    ambiance_name = AMBIANCE_LABELS[place_trait[0]]
    user_strongest = strongest_trait(user_preferences) if user_preferences else None
    user_weakest = weakest_trait(user_preferences) if user_preferences else None

    if user_strongest is None or user_weakest is None:
        return f"This place is quite {ambiance_name}. Want to give it a spin?"
    if place_trait[0] == user_strongest[0]:
        return f"You love {ambiance_name} places, and this is one. Definitely try it!"
    if place_trait[0] == user_weakest[0]:
        return (
            f"This place is more {ambiance_name} than your usual picks, "
            "but it's still worth a try!"
        )
    favourite = AMBIANCE_LABELS[user_strongest[0]]
    return (
        f"This place is quite {ambiance_name}, while you tend to prefer "
        f"{favourite} places. Still, try it out?"
    )
