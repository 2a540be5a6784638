from __future__ import annotations

import pytest

from fakes import FakeStore


@pytest.fixture
def fake_store():
    return FakeStore()
