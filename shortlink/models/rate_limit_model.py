from dataclasses import dataclass
from datetime import datetime


# fmt: off
@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool       # True if the request may proceed
    limit: int          # Maximum requests per window
    remaining: int      # Requests left in the current window
    reset_at: datetime  # When the oldest counted request leaves the window
# fmt: on
