"""Review text classification through the Whetdata classify API."""

import logging
import os
from typing import Optional

import requests

from gemify.config import ClassifierSettings
from gemify.errors import ConfigurationError, InvalidRequestError, UpstreamError

LOGGER = logging.getLogger(__name__)


def _error_details(payload, fallback: str) -> str:
    if isinstance(payload, dict):
        return payload.get("error") or payload.get("message") or fallback
    return fallback


def classify_text(text, api_key: Optional[str] = None,
                  settings: Optional[ClassifierSettings] = None,
                  session: Optional[requests.Session] = None) -> float:
    """
    Score how strongly a review mentions a specific dish.

    Returns:
        The criterion score reported by Whetdata.
    """
    settings = settings or ClassifierSettings()
    api_key = api_key or os.getenv("WHETDATA_API_KEY")
    if not api_key:
        raise ConfigurationError("Whetdata API key is not configured")

    if not text or not isinstance(text, str):
        raise InvalidRequestError("Text is required and must be a string")
    if len(text) > settings.max_text_length:
        raise InvalidRequestError(
            f"Text exceeds maximum length of {settings.max_text_length} characters"
        )

    headers = {
        "Content-Type": "application/json",
        "x-api-key": api_key,
    }
    body = {"text": text, "criteria": [settings.criterion]}

    http = session or requests
    try:
        response = http.post(settings.url, json=body, headers=headers,
                             timeout=settings.timeout_seconds)
    except requests.RequestException as exc:
        LOGGER.error("Whetdata classify internal error: %s", exc)
        raise UpstreamError("Internal server error", status_code=500,
                            extra={"message": str(exc)}) from exc

    raw_body = response.text or ""
    try:
        payload = response.json() if raw_body else None
    except ValueError:
        payload = None

    if not response.ok:
        LOGGER.error("Whetdata classify failed status=%s body=%s",
                     response.status_code, raw_body[:500])
        raise UpstreamError(
            "Whetdata classify failed",
            status_code=response.status_code,
            extra={"details": _error_details(payload, response.reason or "")},
        )

    scores = payload.get("scores") if isinstance(payload, dict) else None
    score = scores.get(settings.criterion) if isinstance(scores, dict) else None
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        LOGGER.error("Whetdata classify invalid response body=%s", raw_body[:500])
        raise UpstreamError("Invalid classify response", extra={"raw": raw_body[:300]})

    return float(score)
