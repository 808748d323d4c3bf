"""Unit tests for the UrlRecordModel and RateLimitDecision dataclasses.

Test coverage includes:

1. UrlRecordModel creation
   - Ensures created_at defaults to the current UTC time.
   - Verifies expires_at defaults to None.

2. Serialization
   - Ensures to_dict() uses camelCase keys and ISO 8601 'Z' timestamps.
   - Ensures expiresAt is only written when set.
   - Ensures from_dict() restores timezone-aware datetimes.
   - Confirms malformed documents raise KeyError / ValueError.

3. Immutability
   - Verifies that both models are frozen.
"""

from dataclasses import FrozenInstanceError
from datetime import datetime, UTC

import pytest
from freezegun import freeze_time

from shortlink.models import UrlRecordModel, RateLimitDecision


# -------------------------------
# 1. UrlRecordModel creation
# -------------------------------


@freeze_time('2025-10-15 12:00:00')
def test_created_at_defaults_to_now():
    """Ensure created_at defaults to the current UTC time."""
    record = UrlRecordModel(url='https://example.com/a')

    assert record.created_at == datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)
    assert record.expires_at is None


# -------------------------------
# 2. Serialization
# -------------------------------


def test_to_dict():
    """Ensure to_dict() writes camelCase keys and millisecond 'Z' timestamps."""
    record = UrlRecordModel(url='https://example.com/a', created_at=datetime(2025, 10, 15, 12, 0, 0, 123456, tzinfo=UTC))

    assert record.to_dict() == {'url': 'https://example.com/a', 'createdAt': '2025-10-15T12:00:00.123Z'}


def test_to_dict_with_expires_at():
    """Ensure expiresAt is written when the record has an expiry."""
    record = UrlRecordModel(
        url='https://example.com/a',
        created_at=datetime(2025, 10, 15, tzinfo=UTC),
        expires_at=datetime(2026, 1, 1, tzinfo=UTC),
    )

    assert record.to_dict()['expiresAt'] == '2026-01-01T00:00:00.000Z'


def test_from_dict():
    """Ensure from_dict() restores a timezone-aware record."""
    record = UrlRecordModel.from_dict({'url': 'https://example.com/a', 'createdAt': '2025-10-15T12:00:00.000Z'})

    assert record.url == 'https://example.com/a'
    assert record.created_at == datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)
    assert record.expires_at is None


def test_from_dict_restores_serialized_record():
    """Ensure a record with millisecond timestamps survives serialization unchanged."""
    record = UrlRecordModel(
        url='https://example.com/a',
        created_at=datetime(2025, 10, 15, 12, 0, 0, 500000, tzinfo=UTC),
        expires_at=datetime(2026, 1, 1, tzinfo=UTC),
    )

    assert UrlRecordModel.from_dict(record.to_dict()) == record


@pytest.mark.parametrize(
    'document, error',
    [
        ({'createdAt': '2025-10-15T12:00:00.000Z'}, KeyError),
        ({'url': 'https://example.com/a'}, KeyError),
        ({'url': 'https://example.com/a', 'createdAt': 'yesterday'}, ValueError),
    ],
)
def test_from_dict_with_malformed_document(document, error):
    """Ensure malformed documents raise KeyError or ValueError."""
    with pytest.raises(error):
        UrlRecordModel.from_dict(document)


# -------------------------------
# 3. Immutability
# -------------------------------


def test_models_are_frozen():
    """Verify that both models reject attribute assignment."""
    record = UrlRecordModel(url='https://example.com/a')
    decision = RateLimitDecision(allowed=True, limit=20, remaining=19, reset_at=datetime.now(UTC))

    with pytest.raises(FrozenInstanceError):
        record.url = 'https://example.com/b'
    with pytest.raises(FrozenInstanceError):
        decision.allowed = False
