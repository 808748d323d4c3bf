import logging
from datetime import datetime, timedelta, UTC

from shortlink.constants import LogEvent
from shortlink.models import RateLimitDecision
from shortlink.dao.base import RateLimitBaseDAO
from shortlink.dao.exceptions import DAOError


logger = logging.getLogger(__name__)


class RateLimiter:
    """Fail-open front for a rate limiter DAO.

    If the backend can't be reached the request is admitted and the failure is
    logged: a broken limiter must not take the creation endpoint down with it.
    Only used on the creation path, never on redirects.
    """

    def __init__(self, rate_limit_dao: RateLimitBaseDAO):
        self.rate_limit_dao = rate_limit_dao

    @property
    def limit(self) -> int:
        return self.rate_limit_dao.limit

    def admit(self, client_key: str) -> RateLimitDecision:
        try:
            decision = self.rate_limit_dao.admit(client_key)
        except DAOError:
            logger.exception(
                'Rate limiter backend failed. Admitting request.',
                extra={'event': LogEvent.RATE_LIMITER_FAILURE, 'clientKey': client_key, 'backend': self.rate_limit_dao.backend},
            )
            return RateLimitDecision(
                allowed=True,
                limit=self.limit,
                remaining=self.limit,
                reset_at=datetime.now(UTC) + timedelta(seconds=self.rate_limit_dao.window_seconds),
            )

        if not decision.allowed:
            logger.info(
                'Rate limit exceeded.',
                extra={'event': LogEvent.RATE_LIMIT_EXCEEDED, 'clientKey': client_key, 'resetAt': decision.reset_at},
            )
        return decision
