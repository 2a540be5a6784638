from __future__ import annotations

from typing import Optional

# Visitors from Vietnam default to Ho Chi Minh City; everyone else to San Francisco.
CITY_BY_COUNTRY = {"VN": "hcmc"}
DEFAULT_CITY = "sf"


def default_city(country_code: Optional[str]) -> str:
    if not country_code:
        return DEFAULT_CITY
    return CITY_BY_COUNTRY.get(country_code.strip().upper(), DEFAULT_CITY)
