"""
Gemify personalization backend.

The package provides utilities for:
    * scoring user preference vectors from place interaction history,
    * personalized place banners comparing a place with a user's taste,
    * debounced recompute-and-upsert of preferences in Supabase,
    * a FastAPI service exposing the above.
"""

from __future__ import annotations

from typing import Any

__all__ = ["compute_preference_vector"]


def compute_preference_vector(*args: Any, **kwargs: Any):
    """Lazy wrapper so importing gemify doesn't pull pandas immediately."""

    from .recommendation.preferences import compute_preference_vector as _compute

    return _compute(*args, **kwargs)
