"""Unit tests for the ShortURLJsonDAO

Test coverage includes:

1. Save behavior
   - Ensures the first save creates the file (and its directories).
   - Ensures the document is pretty-printed with two-space indentation.
   - Confirms taken shortcodes raise ShortURLAlreadyExistsError and keep the original record.

2. Retrieval behavior
   - Ensures saved records are returned by get() and exists().
   - Confirms a missing file behaves as an empty mapping.
   - Confirms corrupt documents and records raise DataStoreError.

3. Write failures
   - Confirms unwritable locations raise DataStoreError.
"""

import json

import pytest
from beartype.roar import BeartypeCallHintParamViolation

from shortlink.models import UrlRecordModel
from shortlink.dao.local import ShortURLJsonDAO
from shortlink.dao.exceptions import DataStoreError, ShortURLAlreadyExistsError


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def path(tmp_path):
    return tmp_path / 'data' / 'urls.json'


@pytest.fixture
def dao(path):
    return ShortURLJsonDAO(path=path)


# -------------------------------
# 1. Save behavior
# -------------------------------


def test_save_creates_file(dao, path):
    """Ensure the first save creates the data directory and file."""
    record = UrlRecordModel(url='https://example.com/a')

    assert dao.save('abc123', record) is dao
    assert path.is_file()
    assert json.loads(path.read_text()) == {'abc123': record.to_dict()}


def test_save_pretty_prints(dao, path):
    """Ensure the JSON document uses two-space indentation."""
    dao.save('abc123', UrlRecordModel(url='https://example.com/a'))

    assert path.read_text().startswith('{\n  "abc123": {\n    "url": ')


def test_save_keeps_existing_records(dao):
    """Ensure saving a new shortcode keeps earlier records."""
    dao.save('abc123', UrlRecordModel(url='https://example.com/a'))
    dao.save('xyz789', UrlRecordModel(url='https://example.com/b'))

    assert dao.get('abc123').url == 'https://example.com/a'
    assert dao.get('xyz789').url == 'https://example.com/b'


def test_save_taken_shortcode(dao):
    """Confirm a taken shortcode is rejected and the original record survives."""
    dao.save('abc123', UrlRecordModel(url='https://example.com/a'))

    with pytest.raises(ShortURLAlreadyExistsError):
        dao.save('abc123', UrlRecordModel(url='https://example.com/b'))

    assert dao.get('abc123').url == 'https://example.com/a'


def test_save_with_invalid_type(dao):
    """Ensure saving anything but a UrlRecordModel raises a Beartype error."""
    with pytest.raises(BeartypeCallHintParamViolation):
        dao.save('abc123', {'url': 'https://example.com/a'})


# -------------------------------
# 2. Retrieval behavior
# -------------------------------


def test_get_and_exists(dao):
    """Ensure saved records can be read back."""
    record = UrlRecordModel(url='https://example.com/a')
    dao.save('abc123', record)

    assert dao.exists('abc123')
    assert not dao.exists('zzz999')
    assert dao.get('abc123').url == record.url
    assert dao.get('zzz999') is None


def test_missing_file_is_empty(dao, path):
    """Confirm a missing file reads as an empty mapping without being created."""
    assert dao.get('abc123') is None
    assert not dao.exists('abc123')
    assert not path.exists()


@pytest.mark.parametrize('content', ['{not json', '["abc123"]'])
def test_corrupt_document(dao, path, content):
    """Confirm unreadable documents raise DataStoreError instead of being overwritten."""
    path.parent.mkdir(parents=True)
    path.write_text(content)

    with pytest.raises(DataStoreError):
        dao.exists('abc123')
    with pytest.raises(DataStoreError):
        dao.save('abc123', UrlRecordModel(url='https://example.com/a'))

    assert path.read_text() == content


def test_corrupt_record(dao, path):
    """Confirm a record missing its fields raises DataStoreError."""
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps({'abc123': {'url': 'https://example.com/a'}}))

    with pytest.raises(DataStoreError, match="Short URL record with code 'abc123' is corrupt."):
        dao.get('abc123')


# -------------------------------
# 3. Write failures
# -------------------------------


def test_unwritable_location(tmp_path):
    """Confirm write failures surface as DataStoreError."""
    blocker = tmp_path / 'blocker'
    blocker.write_text('')
    dao = ShortURLJsonDAO(path=blocker / 'urls.json')

    with pytest.raises(DataStoreError, match="Can't"):
        dao.save('abc123', UrlRecordModel(url='https://example.com/a'))
