from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Any


def _isoformat(dt: datetime) -> str:
    return dt.astimezone(UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass(frozen=True)
class UrlRecordModel:
    """Represent a persisted shortcode -> URL mapping.

    Records are immutable: once created they are only ever read back.

    Attributes:
        url (str):
            Normalized absolute http(s) URL the shortcode redirects to.
        created_at (datetime):
            Timezone-aware creation time. Defaults to now (UTC).
        expires_at (datetime | None):
            Reserved. Persisted when set but never enforced.

    Example:
        >>> record = UrlRecordModel(url='https://example.com/a')
        >>> record.to_dict()
        {'url': 'https://example.com/a', 'createdAt': '2025-10-15T00:00:00.000Z'}
        >>> UrlRecordModel.from_dict(record.to_dict()) == record
        True
    """

    url: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    expires_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize into the persisted layout (camelCase keys, ISO 8601 timestamps)."""
        data = {'url': self.url, 'createdAt': _isoformat(self.created_at)}
        if self.expires_at is not None:
            data['expiresAt'] = _isoformat(self.expires_at)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'UrlRecordModel':
        """Deserialize from the persisted layout.

        Raises:
            KeyError: If `url` or `createdAt` is missing.
            ValueError: If a timestamp is not valid ISO 8601.
        """
        expires_at = data.get('expiresAt')
        return cls(
            url=data['url'],
            created_at=datetime.fromisoformat(data['createdAt']),
            expires_at=datetime.fromisoformat(expires_at) if expires_at else None,
        )
