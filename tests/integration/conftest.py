"""Shared fixtures for integration tests."""

import os

import pytest


@pytest.fixture
def api_key() -> str:
    key = os.environ.get("ALTADATA_API_KEY")
    if not key:
        pytest.skip("ALTADATA_API_KEY is not set")
    return key
