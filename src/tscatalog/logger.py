import logging
import sys

import structlog

LOGGER_NAME = "tscatalog"

structlog.configure(
    wrapper_class=structlog.make_filtering_bound_logger(logging.NOTSET),
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False),
        structlog.dev.ConsoleRenderer(),
    ],
)

# Records reach whatever handlers the host application installs on the root logger.
_std_logger = logging.getLogger(LOGGER_NAME)
_std_logger.setLevel(logging.NOTSET)
_std_logger.propagate = True

logger: structlog.BoundLogger = structlog.get_logger(LOGGER_NAME)


def setup_logging(debug: bool = False, stream=None) -> None:
    """
    Route extraction logs to ``stream`` (stderr by default).

    Library callers normally leave this alone and configure the root logger
    themselves; the command line entry point calls it once at startup.
    """
    level = logging.DEBUG if debug else logging.INFO
    root = logging.getLogger()
    root.setLevel(level)
    if root.handlers:
        for handler in root.handlers:
            handler.setLevel(level)
        return

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    # ConsoleRenderer already formats the line
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
