from shortlink.models.url_record_model import UrlRecordModel
from shortlink.models.rate_limit_model import RateLimitDecision


__all__ = [
    'UrlRecordModel',
    'RateLimitDecision',
]
