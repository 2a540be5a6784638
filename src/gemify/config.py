from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from dotenv import load_dotenv

load_dotenv()


DEFAULT_ACTION_WEIGHTS: Dict[str, float] = {
    "view": 1.0,
    "share": 3.0,
    "try": 5.0,
}

# Output keys in canonical order; price is handled separately.
AMBIANCE_KEYS: Tuple[str, ...] = (
    "cozy",
    "lively",
    "work_friendly",
    "trendy",
    "traditional",
    "romantic",
)

PREFERENCE_KEYS: Tuple[str, ...] = AMBIANCE_KEYS + ("price",)

NEUTRAL_PREFERENCE = 0.5
MAX_PRICE_TIER = 4


@dataclass
class PersonalizationConfig:
    """Parameters controlling when and how preference vectors are recomputed."""

    debounce_seconds: float = 60.0
    interaction_limit: int = 50
    action_weights: Dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_ACTION_WEIGHTS)
    )


@dataclass
class ClassifierSettings:
    """Connection details for the Whetdata review classifier."""

    url: str = "https://www.whetdata.com/api/classify"
    criterion: str = "specific-dish-mentioned"
    max_text_length: int = 5000
    timeout_seconds: float = 10.0


@dataclass
class ServiceSettings:
    whetdata_api_key: Optional[str] = None
    personalization: PersonalizationConfig = field(default_factory=PersonalizationConfig)
    classifier: ClassifierSettings = field(default_factory=ClassifierSettings)

    @classmethod
    def from_env(cls) -> "ServiceSettings":
        return cls(
            whetdata_api_key=os.getenv("WHETDATA_API_KEY"),
        )
