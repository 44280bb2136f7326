from __future__ import annotations

import logging

from build_notifier.log_reporter import DispatchLogReporter, LoggingLogSink, format_sent_message


class RecordingSink:
    def __init__(self):
        self.events = []

    def event(self, message, severity):
        self.events.append((message, severity))


class BrokenSink:
    def event(self, message, severity):
        raise RuntimeError("sink down")


def test_format_sent_message_pluralizes():
    assert format_sent_message(1) == "Sent e-mail to 1 person"
    assert format_sent_message(2) == "Sent e-mail to 2 people"
    assert format_sent_message(17) == "Sent e-mail to 17 people"


def test_report_emits_debug_event():
    sink = RecordingSink()
    DispatchLogReporter(sink).report(3)
    assert sink.events == [("Sent e-mail to 3 people", "debug")]


def test_report_does_not_raise_when_sink_fails():
    DispatchLogReporter(BrokenSink()).report(1)


def test_logging_log_sink_maps_severity(caplog):
    sink = LoggingLogSink(logging.getLogger("build_notifier.test"))
    with caplog.at_level(logging.DEBUG, logger="build_notifier.test"):
        sink.event("Sent e-mail to 1 person", "debug")
        sink.event("Error sending e-mail", "error")

    assert [(r.levelno, r.getMessage()) for r in caplog.records] == [
        (logging.DEBUG, "Sent e-mail to 1 person"),
        (logging.ERROR, "Error sending e-mail"),
    ]
