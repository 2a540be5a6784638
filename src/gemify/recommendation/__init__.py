"""
Personalization logic for Gemify.

    * scoring user preference vectors from interaction history,
    * turning places into comparable vectors and banner messages,
    * debounced recompute-and-store of preference rows,
    * logging place interactions.
"""

from .preferences import compute_preference_vector
from .refresh import refresh_user_preferences

__all__ = ["compute_preference_vector", "refresh_user_preferences"]
