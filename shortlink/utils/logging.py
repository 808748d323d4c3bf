"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` in the lambda handler's `__init__.py` file
before any other logging is done.

Logging format (one JSON object per line):
{
    "timestamp": "2025-10-15T12:00:00.000Z",
    "level": "WARNING",
    "logger": "shortlink.utils.shortener",
    "message": "Shortcode collision detected.",
    "event": "CODE_COLLISION",
    "shortcode": "abc123",
    "attempt": 1
}

Records logged with exc_info (e.g. `logger.exception(...)`) carry the formatted
traceback under "exception".
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from shortlink.constants import ENV


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras"""

    STANDARD_ATTRS = frozenset(vars(logging.LogRecord('', 0, '', 0, '', None, None))) | {'message', 'asctime', 'taskName'}

    def format(self, record: logging.LogRecord) -> str:
        # fmt: off
        timestamp = datetime.fromtimestamp(record.created, tz=UTC) \
                            .isoformat(timespec='milliseconds') \
                            .replace('+00:00', 'Z')
        # fmt: on

        log = {
            'timestamp': timestamp,
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        # Attach `extra` fields
        for key, value in record.__dict__.items():
            if key not in self.STANDARD_ATTRS:
                log[key] = value

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        # Extras may hold datetimes, enums, paths...
        return json.dumps(log, default=str)


def initialize_logging(stream: str = 'ext://sys.stdout') -> None:
    """Route every logger through a single JSON stream handler.

    The level comes from LOG_LEVEL (default INFO).
    """
    log_level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                }
            },
            'handlers': {
                'stream': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': stream,
                }
            },
            'root': {
                'level': log_level,
                'handlers': ['stream'],
            },
        }
    )
