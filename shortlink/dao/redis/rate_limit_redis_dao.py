"""Redis-backed sliding-window rate limiter

Each client key owns one sorted set whose members are the requests admitted
inside the trailing window, scored by their arrival time in milliseconds:

    [<prefix>:]ratelimit:<client key>  ->  ZSET { '<ms>:<nonce>': <ms>, ... }

Every call trims members older than the window, adds the current request,
counts the set and refreshes the key's expiry to one window, all inside a
single MULTI/EXEC transaction. Idle keys therefore disappear on their own
once the window has elapsed.
"""

import secrets
from datetime import datetime, UTC

from beartype import beartype

from shortlink.models import RateLimitDecision
from shortlink.dao.base import RateLimitBaseDAO
from shortlink.dao.redis.mixins import RedisClientMixin
from shortlink.dao.redis.helpers import handle_redis_errors


class RateLimitRedisDAO(RedisClientMixin, RateLimitBaseDAO):
    """Sliding-window rate limiter stored in Redis sorted sets.

    Example:
        >>> dao = RateLimitRedisDAO(redis_host='localhost', limit=20, window_seconds=60)
        >>> dao.admit('203.0.113.7').remaining
        19
    """

    @handle_redis_errors
    @beartype
    def admit(self, client_key: str, **kwargs) -> RateLimitDecision:
        key = self.keys.rate_limit_key(client_key)
        now_ms = int(datetime.now(UTC).timestamp() * 1000)
        window_ms = int(self.window_seconds * 1000)
        member = f'{now_ms}:{secrets.token_hex(4)}'

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.zremrangebyscore(key, '-inf', now_ms - window_ms)
            pipe.zadd(key, {member: now_ms})
            pipe.zcard(key)
            pipe.zrange(key, 0, 0, withscores=True)
            pipe.pexpire(key, window_ms)
            _, _, count, oldest, _ = pipe.execute()

        allowed = count <= self.limit
        if not allowed:
            # Rejected requests don't consume the window
            self.redis.zrem(key, member)
            count -= 1

        oldest_ms = int(oldest[0][1]) if oldest else now_ms
        return RateLimitDecision(
            allowed=allowed,
            limit=self.limit,
            remaining=max(self.limit - count, 0),
            reset_at=datetime.fromtimestamp((oldest_ms + window_ms) / 1000, tz=UTC),
        )
