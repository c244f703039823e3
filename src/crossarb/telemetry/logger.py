"""
Queue-based logging setup.

Records from the "crossarb" logger tree are put on a queue and written by
a QueueListener thread, so console and file output never blocks the
event loop while venue requests are in flight.
"""

import logging
import sys
from datetime import datetime
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from queue import Queue

from crossarb.config.constants import LOG_DATE_FORMAT, LOG_FORMAT, MAX_LOG_QUEUE_SIZE


APP_LOGGER = "crossarb"

# Third-party loggers that are too chatty below WARNING
NOISY_LOGGERS = ("aiohttp", "asyncio", "ccxt", "urllib3", "uvicorn.access")


class MicrosecondFormatter(logging.Formatter):
    """Formatter with microsecond precision timestamps."""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        created = datetime.fromtimestamp(record.created)
        return f"{created.strftime(datefmt or LOG_DATE_FORMAT)}.{created.microsecond:06d}"


def build_handlers(level: int, log_file: Path | None = None) -> list[logging.Handler]:
    """
    Create the output handlers fed by the queue.

    The console gets the configured level; the optional file gets
    everything down to DEBUG.
    """
    formatter = MicrosecondFormatter(LOG_FORMAT, LOG_DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(formatter)
    handlers: list[logging.Handler] = [console]

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    return handlers


class AsyncLogger:
    """
    Owns the queue, its handler and the background listener.

    start() and stop() are idempotent.
    """

    def __init__(
        self,
        name: str = APP_LOGGER,
        level: int = logging.INFO,
        log_file: Path | None = None,
    ) -> None:
        self._logger = logging.getLogger(name)
        self._level = level
        self._log_file = log_file
        self._queue: Queue[logging.LogRecord] = Queue(maxsize=MAX_LOG_QUEUE_SIZE)
        self._handler: QueueHandler | None = None
        self._listener: QueueListener | None = None

    def start(self) -> None:
        if self._listener is not None:
            return

        self._handler = QueueHandler(self._queue)
        self._logger.addHandler(self._handler)
        # File output wants DEBUG records even when the console does not.
        self._logger.setLevel(logging.DEBUG if self._log_file else self._level)
        self._logger.propagate = False

        self._listener = QueueListener(
            self._queue,
            *build_handlers(self._level, self._log_file),
            respect_handler_level=True,
        )
        self._listener.start()

    def stop(self) -> None:
        """Flush queued records and detach from the logger."""
        if self._listener is not None:
            self._listener.stop()
            for handler in self._listener.handlers:
                handler.close()
            self._listener = None
        if self._handler is not None:
            self._logger.removeHandler(self._handler)
            self._logger.propagate = True
            self._handler = None

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def running(self) -> bool:
        return self._listener is not None

    def __enter__(self) -> "AsyncLogger":
        self.start()
        return self

    def __exit__(self, *args: object) -> None:
        self.stop()


def setup_logging(level: str = "INFO", log_file: Path | None = None) -> AsyncLogger:
    """
    Configure logging for the scanner process.

    Args:
        level: Console log level name.
        log_file: Optional file receiving DEBUG output.

    Returns:
        Started AsyncLogger; call stop() on shutdown to flush it.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, force=True)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    async_logger = AsyncLogger(APP_LOGGER, level=numeric_level, log_file=log_file)
    async_logger.start()
    return async_logger
