from __future__ import annotations

import logging
import sys
from typing import Any, Protocol, TextIO


class DotenvLogger(Protocol):
    def info(self, message: str, **context: Any) -> None: ...

    def error(self, message: str, **context: Any) -> None: ...


def _render(message: str, context: dict[str, Any]) -> str:
    if not context:
        return message
    extras = " ".join(f"{key}={value!r}" for key, value in context.items())
    return f"{message} {extras}"


class StreamLogger:
    """Default logger: info to stdout, errors to stderr."""

    def __init__(
        self,
        *,
        out: TextIO | None = None,
        err: TextIO | None = None,
        tag: str = "dotenv",
    ):
        self._out = out
        self._err = err
        self._tag = tag

    def _write(self, stream: TextIO, message: str) -> None:
        stream.write(f"[{self._tag}] {message}\n")
        stream.flush()

    def info(self, message: str, **context: Any) -> None:
        # Resolved per call so redirected/captured streams are honoured.
        self._write(self._out or sys.stdout, _render(message, context))

    def error(self, message: str, **context: Any) -> None:
        # env snapshots stay out of console output.
        context = {k: v for k, v in context.items() if k != "env"}
        self._write(self._err or sys.stderr, _render(message, context))


class LoggingLogger:
    """Adapter for hosts that configure the stdlib logging module."""

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger("layered_dotenv")

    def info(self, message: str, **context: Any) -> None:
        self._logger.info(message, extra={"dotenv": context} if context else None)

    def error(self, message: str, **context: Any) -> None:
        cause = context.get("cause")
        exc_info = cause if isinstance(cause, BaseException) else None
        self._logger.error(message, exc_info=exc_info, extra={"dotenv": context})
