"""Unit tests for the fail-open RateLimiter service.

Test coverage includes:

1. Pass-through
   - Ensures backend decisions are returned unchanged.
   - Ensures rejections are logged.

2. Fail-open
   - Ensures backend failures admit the request with full capacity.
   - Ensures the failure is logged with its traceback.
"""

import logging
from datetime import datetime, timedelta, UTC
from unittest.mock import MagicMock

import pytest
from freezegun import freeze_time

from shortlink.constants import LogEvent
from shortlink.dao.base import RateLimitBaseDAO
from shortlink.dao.exceptions import DataStoreError
from shortlink.models import RateLimitDecision
from shortlink.services import RateLimiter


NOW = datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def rate_limit_dao():
    dao = MagicMock(spec=RateLimitBaseDAO)
    dao.backend = 'redis'
    dao.limit = 20
    dao.window_seconds = 60
    return dao


@pytest.fixture
def rate_limiter(rate_limit_dao):
    return RateLimiter(rate_limit_dao)


def events(caplog, event):
    return [record for record in caplog.records if getattr(record, 'event', None) == event]


# -------------------------------
# 1. Pass-through
# -------------------------------


def test_admit_returns_backend_decision(rate_limiter, rate_limit_dao):
    """Ensure the backend's decision is returned unchanged."""
    decision = RateLimitDecision(allowed=True, limit=20, remaining=12, reset_at=NOW)
    rate_limit_dao.admit.return_value = decision

    assert rate_limiter.admit('203.0.113.7') is decision
    rate_limit_dao.admit.assert_called_once_with('203.0.113.7')


def test_admit_logs_rejection(rate_limiter, rate_limit_dao, caplog):
    """Ensure rejected requests are logged."""
    rate_limit_dao.admit.return_value = RateLimitDecision(allowed=False, limit=20, remaining=0, reset_at=NOW)

    with caplog.at_level(logging.INFO, logger='shortlink.services.rate_limiter'):
        decision = rate_limiter.admit('203.0.113.7')

    assert not decision.allowed
    [record] = events(caplog, LogEvent.RATE_LIMIT_EXCEEDED)
    assert record.clientKey == '203.0.113.7'


# -------------------------------
# 2. Fail-open
# -------------------------------


@freeze_time(NOW)
def test_admit_fails_open(rate_limiter, rate_limit_dao, caplog):
    """Ensure backend failures admit the request and log the error."""
    rate_limit_dao.admit.side_effect = DataStoreError("Can't connect to Redis at redis.test:6379/0.")

    with caplog.at_level(logging.ERROR, logger='shortlink.services.rate_limiter'):
        decision = rate_limiter.admit('203.0.113.7')

    assert decision == RateLimitDecision(allowed=True, limit=20, remaining=20, reset_at=NOW + timedelta(seconds=60))

    [record] = events(caplog, LogEvent.RATE_LIMITER_FAILURE)
    assert record.levelno == logging.ERROR
    assert record.exc_info is not None
    assert record.backend == 'redis'
