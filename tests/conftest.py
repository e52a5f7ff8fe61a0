"""
Project-wide pytest fixtures.

Use these across test modules. Helpers live in tests.common.
"""
from __future__ import annotations

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

# Ensure project root on path before any local imports
from tests.common import (
    TOKEN_ADDRESS,
    build_mock_chain_client,
    build_mock_contract,
    ensure_project_root,
)

ensure_project_root()

from protocol.models import RandomnessConfig  # noqa: E402

logger = logging.getLogger(__name__)


@pytest.fixture
def randomness_config() -> RandomnessConfig:
    """One stream paying 0.001 token per preimage over 12 blocks."""
    return RandomnessConfig.model_validate(
        {
            "streams": [
                {
                    "info": {
                        "token": TOKEN_ADDRESS,
                        "price": "0.001",
                        "duration": 12,
                        "durationIsTimestamp": False,
                    }
                }
            ]
        }
    )


@pytest.fixture
def chain_client() -> MagicMock:
    return build_mock_chain_client()


@pytest.fixture
def contract() -> MagicMock:
    return build_mock_contract()


@pytest.fixture
def indexer() -> MagicMock:
    """Indexer double; tests set return values on the query coroutines."""
    mock = MagicMock()
    mock.pointers_ordered_by_self = AsyncMock(return_value=[])
    mock.unlinked_secrets = AsyncMock(return_value=[])
    mock.unfinished_starts = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def fixed_rng() -> MagicMock:
    """Random source that always draws 0xab."""
    rng = MagicMock()
    rng.randrange.return_value = 0xAB
    return rng
