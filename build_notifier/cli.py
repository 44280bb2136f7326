from __future__ import annotations

import argparse
import logging

from .config import EnvSiteConfiguration, Settings
from .mailer import MailError, build_mailer
from .models import Build, BuildEvent, BuildFinished, BuildFixed, Project
from .notifier import EmailNotifier

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Send a build report e-mail for a finished or fixed build.")
    parser.add_argument("--project", required=True, help="project name")
    parser.add_argument("--label", type=int, required=True, help="build label (number)")
    parser.add_argument("--status", choices=["passed", "failed", "fixed"], required=True)
    parser.add_argument("--previous-label", type=int, default=None, help="label of the previous build (fixed only)")
    parser.add_argument("--log-file", default=None, help="build output to embed when no dashboard URL is set")
    parser.add_argument("--to", action="append", default=None, help="recipient; repeat for several (default: NOTIFY_EMAILS)")
    parser.add_argument("--from", dest="from_email", default=None, help="from-address (default: FROM_EMAIL)")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def _build_event(args: argparse.Namespace) -> BuildEvent:
    project = Project(name=args.project)
    failed = args.status == "failed"
    if args.log_file:
        build = Build.from_log_file(project, args.label, args.log_file, failed=failed)
    else:
        build = Build(project=project, label=args.label, failed=failed)
    if args.status == "fixed":
        previous = None
        if args.previous_label is not None:
            previous = Build(project=project, label=args.previous_label, failed=True)
        return BuildFixed(build, previous)
    return BuildFinished(build)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    try:
        settings = Settings.from_env()
        mailer = build_mailer(
            brevo_api_key=settings.brevo_api_key,
            sendgrid_api_key=settings.sendgrid_api_key,
            aws_region=settings.aws_region,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            aws_session_token=settings.aws_session_token,
            from_name=settings.from_name,
        )
    except (ValueError, MailError) as exc:
        logger.error("Missing configuration: %s", exc)
        return 1

    notifier = EmailNotifier(
        mailer,
        emails=args.to if args.to else settings.recipients,
        from_email=args.from_email or settings.from_email,
        site_config=EnvSiteConfiguration(),
        product_tag=settings.product_tag,
        dashboard_note=settings.dashboard_note,
    )
    logger.info("Using mail provider=%s", mailer.provider)

    try:
        event = _build_event(args)
    except OSError as exc:
        logger.error("Could not read build log: %s", exc)
        return 1

    try:
        message = notifier.handle(event)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Notification failed: %s", exc)
        return 1

    if message is None:
        logger.info("No notification sent for %s build %s", args.project, args.label)
    return 0
