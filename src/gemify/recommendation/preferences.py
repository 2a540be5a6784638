"""
User preference scoring.

Turns a user's recent place interactions into a preference vector: one
frequency score per ambiance category plus a weighted mean price tier, all
clamped into [0, 1].
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from gemify.config import (
    AMBIANCE_KEYS,
    DEFAULT_ACTION_WEIGHTS,
    NEUTRAL_PREFERENCE,
    PREFERENCE_KEYS,
)

_TAG_SEPARATORS = re.compile(r"[-_\s]+")

# Normalized tag -> output key ("workfriendly" -> "work_friendly").
AMBIANCE_TAG_TO_KEY: Dict[str, str] = {
    _TAG_SEPARATORS.sub("", key): key for key in AMBIANCE_KEYS
}

INTERACTION_COLUMNS = ["action", "count", "price", "ambiance"]


def normalize_ambiance_tag(tag: Any) -> str:
    """Lowercase a tag and strip hyphens, underscores and whitespace."""
    return _TAG_SEPARATORS.sub("", str(tag).lower())


def ambiance_key(tag: Any) -> Optional[str]:
    """Output key for a free-text ambiance tag, or None when unrecognized."""
    return AMBIANCE_TAG_TO_KEY.get(normalize_ambiance_tag(tag))


def action_weight(action: Any, weights: Optional[Dict[str, float]] = None) -> float:
    table = weights if weights is not None else DEFAULT_ACTION_WEIGHTS
    return float(table.get(str(action).lower(), 0.0))


def neutral_preference_vector() -> Dict[str, float]:
    return {key: NEUTRAL_PREFERENCE for key in PREFERENCE_KEYS}


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _as_tag_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    try:
        return [tag for tag in value if tag is not None]
    except TypeError:
        return []


def _as_number(value: Any) -> float:
    """Float value of a count or price; unparseable values count as 0."""
    if value is None:
        return 0.0
    try:
        number = float(value)
    except OverflowError:
        return float("-inf") if value < 0 else float("inf")
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if np.isnan(number) else number


def interactions_frame(interactions: Iterable[Any]) -> pd.DataFrame:
    """Load interaction records (mappings or objects) into a typed DataFrame."""
    rows = [
        {
            "action": str(_field(record, "action") or "").lower(),
            "count": _as_number(_field(record, "count")),
            "price": _as_number(_field(record, "price")),
            "ambiance": _as_tag_list(_field(record, "ambiance")),
        }
        for record in interactions
    ]
    df = pd.DataFrame(rows, columns=INTERACTION_COLUMNS)
    df["count"] = df["count"].astype(float)
    df["price"] = df["price"].astype(float)
    return df


def _ambiance_counts(df: pd.DataFrame) -> pd.Series:
    """Sum of raw ``count`` per output key over interactions carrying the tag."""
    exploded = df[["count", "ambiance"]].explode("ambiance").dropna(subset=["ambiance"])
    if exploded.empty:
        return pd.Series(dtype=float)
    exploded = exploded.assign(key=exploded["ambiance"].map(ambiance_key)).dropna(subset=["key"])
    return exploded.groupby("key")["count"].sum()


def compute_preference_vector(
    interactions: Iterable[Any],
    action_weights: Optional[Dict[str, float]] = None,
) -> Dict[str, float]:
    """
    Compute a user's preference vector from interaction records.

    Each record carries ``action`` (view/share/try), ``count``, the place's
    ``price`` tier and its ``ambiance`` tags. An interaction weighs
    ``action_weight * count``. ``price`` is the weight-averaged price tier;
    each ambiance category scores ``sum(count) / total_weight`` over the
    interactions tagged with it, capped at 1. With no positive total weight
    every field is the neutral 0.5.

    Returns:
        Dict with the six ambiance keys and ``price``, every value in [0, 1].
    """
    weights = action_weights if action_weights is not None else DEFAULT_ACTION_WEIGHTS
    df = interactions_frame(interactions)
    df["weight"] = df["action"].map(weights).fillna(0.0).astype(float) * df["count"]

    total_weight = float(df["weight"].sum())
    if not total_weight > 0:
        return neutral_preference_vector()

    preferences = {key: 0.0 for key in PREFERENCE_KEYS}
    preferences["price"] = float((df["price"] * df["weight"]).sum()) / total_weight

    counts = _ambiance_counts(df)
    for key, count in counts.items():
        preferences[key] = min(1.0, float(count) / total_weight)

    values = np.array([preferences[key] for key in PREFERENCE_KEYS], dtype=float)
    values = np.where(np.isnan(values), NEUTRAL_PREFERENCE, values)
    values = np.clip(values, 0.0, 1.0)
    return {key: float(value) for key, value in zip(PREFERENCE_KEYS, values)}
