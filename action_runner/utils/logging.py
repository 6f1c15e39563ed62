"""Structured logging setup."""

import io
import logging
import sys
from collections import deque
from typing import Any, Deque, Optional

import structlog


def setup_logging(log_level: str = "INFO", log_format: str = "json") -> Any:
    """Configure structlog and the standard library root logger.

    Args:
        log_level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format, ``json`` or ``plain``

    Returns:
        Logger for the action runner
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    renderer: Any
    if log_format == "plain":
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger("action_runner")


class LogStream(io.TextIOBase):
    """Write-only text stream that forwards complete lines to a logger.

    Actions write free-form text (command output, progress messages) here;
    every finished line becomes one ``info`` event.
    """

    def __init__(
        self,
        logger: Optional[Any] = None,
        event: str = "Action log",
        max_lines: int = 1000,
    ) -> None:
        super().__init__()
        self._logger = logger or structlog.get_logger("action_runner.log_stream")
        self._event = event
        self._buffer = ""
        self.lines: Deque[str] = deque(maxlen=max_lines)

    def writable(self) -> bool:
        return True

    def readable(self) -> bool:
        return False

    def write(self, text: str) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed log stream")
        self._buffer += text
        *complete, self._buffer = self._buffer.split("\n")
        for line in complete:
            self._emit(line)
        return len(text)

    def flush(self) -> None:
        if self._buffer:
            self._emit(self._buffer)
            self._buffer = ""

    def close(self) -> None:
        if not self.closed:
            self.flush()
        super().close()

    def _emit(self, line: str) -> None:
        self.lines.append(line)
        self._logger.info(self._event, line=line)
