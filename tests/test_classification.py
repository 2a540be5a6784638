from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from gemify.classification import classify_text
from gemify.errors import ConfigurationError, InvalidRequestError, UpstreamError


def _session(status=200, payload=None, text=None, reason="OK"):
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.reason = reason
    response.text = text if text is not None else ("{}" if payload is None else "payload")
    response.json.return_value = payload
    session = MagicMock()
    session.post.return_value = response
    return session


def test_returns_score():
    session = _session(payload={"scores": {"specific-dish-mentioned": 0.82}})
    assert classify_text("Get the pho", api_key="key", session=session) == pytest.approx(0.82)
    _, kwargs = session.post.call_args
    assert kwargs["json"] == {"text": "Get the pho", "criteria": ["specific-dish-mentioned"]}
    assert kwargs["headers"]["x-api-key"] == "key"


def test_missing_api_key(monkeypatch):
    monkeypatch.delenv("WHETDATA_API_KEY", raising=False)
    with pytest.raises(ConfigurationError):
        classify_text("text")


@pytest.mark.parametrize("text", [None, "", 42, "x" * 5001])
def test_rejects_bad_text(text):
    with pytest.raises(InvalidRequestError):
        classify_text(text, api_key="key", session=_session())


def test_upstream_failure_keeps_status():
    session = _session(status=429, payload={"error": "rate limited"}, reason="Too Many Requests")
    with pytest.raises(UpstreamError) as excinfo:
        classify_text("text", api_key="key", session=session)
    assert excinfo.value.status_code == 429
    assert excinfo.value.extra == {"details": "rate limited"}


def test_missing_score_is_bad_gateway():
    session = _session(payload={"scores": {}})
    with pytest.raises(UpstreamError) as excinfo:
        classify_text("text", api_key="key", session=session)
    assert excinfo.value.status_code == 502
    assert excinfo.value.extra == {"raw": "payload"}


def test_network_error():
    session = MagicMock()
    session.post.side_effect = requests.ConnectionError("down")
    with pytest.raises(UpstreamError) as excinfo:
        classify_text("text", api_key="key", session=session)
    assert excinfo.value.status_code == 500
    assert excinfo.value.extra == {"message": "down"}
