from __future__ import annotations

import logging
from typing import Mapping, Protocol

logger = logging.getLogger(__name__)

DEBUG = "debug"
ERROR = "error"


class LogSink(Protocol):
    def event(self, message: str, severity: str) -> None: ...


class LoggingLogSink:
    _LEVELS: Mapping[str, int] = {DEBUG: logging.DEBUG, ERROR: logging.ERROR}

    def __init__(self, target: logging.Logger | None = None):
        self._logger = target or logger

    def event(self, message: str, severity: str) -> None:
        self._logger.log(self._LEVELS.get(severity, logging.INFO), message)


def format_sent_message(recipient_count: int) -> str:
    noun = "person" if recipient_count == 1 else "people"
    return f"Sent e-mail to {recipient_count} {noun}"


class DispatchLogReporter:
    def __init__(self, sink: LogSink):
        self._sink = sink

    def report(self, recipient_count: int) -> None:
        try:
            self._sink.event(format_sent_message(recipient_count), DEBUG)
        except Exception:  # noqa: BLE001
            logger.exception("Log sink failed while reporting %s recipients", recipient_count)
