"""Pytest configuration for campera (flat layout; pyproject puts the repo root on sys.path)."""

from __future__ import annotations

import asyncio

import pytest

from campera.services.status_store import StatusStore


@pytest.fixture
def status() -> StatusStore:
    return StatusStore()


async def wait_until(predicate, timeout: float = 3.0, step: float = 0.01) -> bool:
    """Poll predicate on the running loop until it is true or timeout expires."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while loop.time() < deadline:
        if predicate():
            return True
        await asyncio.sleep(step)
    return predicate()


@pytest.fixture
def until():
    return wait_until
