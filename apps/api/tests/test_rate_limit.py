"""Tests for the default API rate limit."""

import pytest
from slowapi import Limiter
from slowapi.util import get_remote_address

from library_cms.main import app


@pytest.mark.asyncio
async def test_default_limit_applies_to_undecorated_routes(client, monkeypatch):
    strict = Limiter(key_func=get_remote_address, default_limits=["2/minute"], storage_uri="memory://")
    monkeypatch.setattr(app.state, "limiter", strict)

    statuses = [(await client.get("/health")).status_code for _ in range(3)]

    assert statuses == [200, 200, 429]


@pytest.mark.asyncio
async def test_disabled_limiter_lets_everything_through(client):
    statuses = [(await client.get("/health")).status_code for _ in range(5)]

    assert statuses == [200] * 5
