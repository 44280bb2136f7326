from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional

from .config import DEFAULT_DASHBOARD_NOTE, PRODUCT_TAG, SiteConfiguration, StaticSiteConfiguration
from .email_formatter import compose, resolve_from_address
from .log_reporter import ERROR, DispatchLogReporter, LoggingLogSink, LogSink
from .mailer import MailSender
from .models import Build, BuildEvent, BuildFinished, BuildFixed, ComposedMessage
from .policy import has_recipients, should_notify
from .recipients import RecipientList

logger = logging.getLogger(__name__)


def format_send_error(settings: Mapping[str, object]) -> str:
    lines = [f"  :{key} = {value}" for key, value in settings.items()]
    return "Error sending e-mail - current server settings are :\n" + "\n".join(lines)


class EmailNotifier:
    """Sends a build report e-mail when a build fails or gets fixed.

    Recipients, the from-address and the site configuration are all read when
    an event is handled, so reconfiguring between builds needs no restart.
    """

    def __init__(
        self,
        mailer: MailSender,
        *,
        emails: Iterable[str] = (),
        from_email: Optional[str] = None,
        site_config: Optional[SiteConfiguration] = None,
        log_sink: Optional[LogSink] = None,
        product_tag: str = PRODUCT_TAG,
        dashboard_note: str = DEFAULT_DASHBOARD_NOTE,
    ):
        self._mailer = mailer
        self.recipients = RecipientList(emails)
        self.from_email = from_email
        self.site_config = site_config or StaticSiteConfiguration()
        self.log_sink = log_sink or LoggingLogSink()
        self.product_tag = product_tag
        self.dashboard_note = dashboard_note

    @property
    def emails(self) -> list[str]:
        return self.recipients.snapshot()

    @emails.setter
    def emails(self, addresses: Iterable[str]) -> None:
        self.recipients.replace(addresses)

    def build_finished(self, build: Build) -> Optional[ComposedMessage]:
        return self.handle(BuildFinished(build))

    def build_fixed(self, build: Build, previous_build: Optional[Build] = None) -> Optional[ComposedMessage]:
        return self.handle(BuildFixed(build, previous_build))

    def handle(self, event: BuildEvent) -> Optional[ComposedMessage]:
        """Notify for event; returns the sent message, or None when nothing was sent."""
        if not should_notify(event):
            return None
        if not has_recipients(self.recipients):
            return None

        message = compose(
            event,
            self.recipients.snapshot(),
            resolve_from_address(self.from_email, self.site_config),
            self.site_config.dashboard_url(),
            product_tag=self.product_tag,
            dashboard_note=self.dashboard_note,
        )
        self._deliver(message)
        DispatchLogReporter(self.log_sink).report(len(message.recipients))
        return message

    def _deliver(self, message: ComposedMessage) -> None:
        try:
            self._mailer.send(
                list(message.recipients),
                message.from_email,
                message.subject,
                message.body,
                message.html_body,
            )
        except Exception:
            try:
                self.log_sink.event(format_send_error(self._mailer.settings), ERROR)
            except Exception:  # noqa: BLE001
                logger.exception("Could not report the failed send to the log sink")
            raise
