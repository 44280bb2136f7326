from __future__ import annotations

from typing import Iterable, Optional, Tuple

from .config import DEFAULT_DASHBOARD_NOTE, PRODUCT_TAG, ConfigurationError, SiteConfiguration
from .html_email import escape_html, render_build_report
from .models import Build, BuildEvent, BuildFinished, BuildFixed, ComposedMessage

FAILED_STATUS_LINE = "The build failed."
FIXED_STATUS_LINE = "The build has been fixed."


def _outcome(event: BuildEvent) -> Tuple[str, str]:
    if isinstance(event, BuildFinished):
        return "failed", FAILED_STATUS_LINE
    if isinstance(event, BuildFixed):
        return "fixed", FIXED_STATUS_LINE
    raise TypeError(f"Unsupported build event: {type(event).__name__}")


def build_email_subject(build: Build, outcome: str, product_tag: str = PRODUCT_TAG) -> str:
    return f"[{product_tag}] {build.project.name} build {build.label} {outcome}"


def build_url(dashboard_url: str, build: Build) -> str:
    return f"{dashboard_url.rstrip('/')}/builds/{build.project.name}/{build.label}"


def build_email_body(
    build: Build,
    status_line: str,
    dashboard_url: Optional[str],
    dashboard_note: str = DEFAULT_DASHBOARD_NOTE,
) -> Tuple[str, str]:
    """Return (text_body, html_body) for a build report.

    With a dashboard URL the body links to the build page. Without one the
    build output is embedded inline, followed by the configuration note.
    """
    lines = [status_line, ""]
    html_parts = [f"<p>{escape_html(status_line)}</p>"]

    if dashboard_url and dashboard_url.strip():
        url = build_url(dashboard_url.strip(), build)
        lines.append(f"See {url} for details.")
        html_parts.append(f'<p>See <a href="{escape_html(url)}">{escape_html(url)}</a> for details.</p>')
    else:
        lines.append("Build output:")
        lines.append(build.output.rstrip("\n"))
        lines.append("")
        lines.append(dashboard_note)
        html_parts.append(
            '<pre style="white-space:pre-wrap;font-size:12px;background:#f3f4f6;padding:12px;border-radius:8px;">'
            f"{escape_html(build.output)}</pre>"
        )
        html_parts.append(f'<p style="color:#6b7280;font-size:12px;">{escape_html(dashboard_note)}</p>')

    return "\n".join(lines), "\n".join(html_parts)


def resolve_from_address(from_email: Optional[str], site_config: SiteConfiguration) -> str:
    if from_email and from_email.strip():
        return from_email.strip()
    default = site_config.default_from_address()
    if default and default.strip():
        return default.strip()
    raise ConfigurationError("No from-address configured on the notifier or in the site configuration.")


def compose(
    event: BuildEvent,
    recipients: Iterable[str],
    from_email: str,
    dashboard_url: Optional[str],
    *,
    product_tag: str = PRODUCT_TAG,
    dashboard_note: str = DEFAULT_DASHBOARD_NOTE,
) -> ComposedMessage:
    outcome, status_line = _outcome(event)
    build = event.build
    subject = build_email_subject(build, outcome, product_tag)
    text_body, body_html = build_email_body(build, status_line, dashboard_url, dashboard_note)
    return ComposedMessage(
        subject=subject,
        body=text_body,
        recipients=tuple(recipients),
        from_email=from_email,
        html_body=render_build_report(
            subject=subject,
            project=build.project.name,
            label=build.label,
            outcome=outcome,
            body_html=body_html,
        ),
    )
