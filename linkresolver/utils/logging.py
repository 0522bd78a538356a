"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` in the lambda handler's `__init__.py` file
before any other logging is done.

Every record is one JSON object per line on stdout. Besides the four base
fields, each `extra` key passed by the caller becomes a top-level field.

Logging format:
{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "INFO",
    "logger": "linkresolver.services.resolution_service",
    "message": "Created short link.",
    "shortcode": "V1StGXR8_Z",
    "event": "LINK_CREATED",
    "ttl": 3600
}

A degraded cache write (the link is still created):
{
    "timestamp": "2025-12-26T12:00:00.004Z",
    "level": "WARNING",
    "logger": "linkresolver.services.resolution_service",
    "message": "Failed to populate resolution cache.",
    "shortcode": "V1StGXR8_Z",
    "event": "CACHE_UNAVAILABLE",
    "error": "DataStoreError"
}

Extra fields in use:
    shortcode     shortcode the record is about (absent for create rejections)
    event         event code, from linkresolver.services.constants
                  (LINK_*, CACHE_*, FILTER_*, SHORTCODE_*, STORE_UNAVAILABLE)
                  or a lambda's constants (CREATE_*, REDIRECT_*, UPDATE_*, DELETE_*)
    errorCode     LinkResolverError.error_code of a rejected request
    error         exception class name on degraded or failed data store calls
    ttl           requested link lifetime in seconds (create, update)
    attempt(s)    shortcode generation attempt counters
    filter, filterCreated, capacity
                  existence filter key and reservation outcome at startup
    lambdaName, build, agentUrl
                  AppConfig loading (debug)
    exception     formatted traceback, when logged with exc_info

NOTE: extra keys must not collide with LogRecord attributes (e.g. 'created',
      'name', 'module'); logging raises KeyError for those.
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from linkresolver.utils.constants import LOG_LEVEL_ENV


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras"""

    STANDARD_ATTRS = frozenset(
        {
            'args',
            'asctime',
            'created',
            'exc_info',
            'exc_text',
            'filename',
            'funcName',
            'levelname',
            'levelno',
            'lineno',
            'module',
            'msecs',
            'msg',
            'name',
            'pathname',
            'process',
            'processName',
            'relativeCreated',
            'stack_info',
            'thread',
            'threadName',
            'taskName',
        }
    )

    def format(self, record: logging.LogRecord) -> str:
        # fmt: off
        timestamp = datetime.fromtimestamp(record.created, tz=UTC) \
                            .isoformat(timespec="milliseconds") \
                            .replace("+00:00", "Z")
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

        return json.dumps(log, default=str)


def initialize_logging() -> None:
    log_level = os.getenv(LOG_LEVEL_ENV, 'INFO').upper()
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
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'root': {
                'level': log_level,
                'handlers': ['stdout'],
            },
        }
    )
