from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

# --------------------------------
# Settings

# Tag prepended to every subject line
PRODUCT_TAG = "CruiseControl"

# Shown in place of a build link when no dashboard URL is configured
DEFAULT_DASHBOARD_NOTE = (
    "Note: if you set DASHBOARD_URL in the site configuration, "
    "you'd see a link to the build page here instead of the build log."
)

DEFAULT_FROM_NAME = "Build Notifier"

BREVO_ENDPOINT = "https://api.brevo.com/v3/smtp/email"
# --------------------------------


class ConfigurationError(ValueError):
    """Raised when the notifier cannot resolve a required setting."""


class SiteConfiguration(Protocol):
    def default_from_address(self) -> Optional[str]: ...

    def dashboard_url(self) -> Optional[str]: ...


def _env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


class EnvSiteConfiguration:
    """Site-wide defaults read from the environment on every call.

    Nothing is cached, so changing DEFAULT_FROM_EMAIL or DASHBOARD_URL takes
    effect on the next notification without rebuilding the notifier.
    """

    def default_from_address(self) -> Optional[str]:
        return _env("DEFAULT_FROM_EMAIL")

    def dashboard_url(self) -> Optional[str]:
        return _env("DASHBOARD_URL")


@dataclass
class StaticSiteConfiguration:
    from_address: Optional[str] = None
    dashboard: Optional[str] = None

    def default_from_address(self) -> Optional[str]:
        return self.from_address

    def dashboard_url(self) -> Optional[str]:
        return self.dashboard


@dataclass
class Settings:
    recipients: List[str] = field(default_factory=list)
    from_email: Optional[str] = None
    from_name: str = DEFAULT_FROM_NAME
    product_tag: str = PRODUCT_TAG
    dashboard_note: str = DEFAULT_DASHBOARD_NOTE
    brevo_api_key: Optional[str] = None
    sendgrid_api_key: Optional[str] = None
    aws_region: Optional[str] = None
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_session_token: Optional[str] = None

    @staticmethod
    def from_env(from_name_default: str = DEFAULT_FROM_NAME) -> "Settings":
        def optional_with_default(name: str, default: str) -> str:
            value = _env(name)
            return default if value is None else value

        brevo_api_key = _env("BREVO_API_KEY")
        sendgrid_api_key = _env("SENDGRID_API_KEY")
        aws_region = _env("AWS_REGION") or _env("AWS_DEFAULT_REGION")
        if brevo_api_key is None and sendgrid_api_key is None and aws_region is None:
            raise ValueError("One of BREVO_API_KEY, SENDGRID_API_KEY or AWS_REGION is required.")

        return Settings(
            recipients=parse_recipients(os.getenv("NOTIFY_EMAILS", "")),
            from_email=_env("FROM_EMAIL"),
            from_name=optional_with_default("FROM_NAME", from_name_default),
            product_tag=optional_with_default("PRODUCT_TAG", PRODUCT_TAG),
            dashboard_note=optional_with_default("DASHBOARD_NOTE", DEFAULT_DASHBOARD_NOTE),
            brevo_api_key=brevo_api_key,
            sendgrid_api_key=sendgrid_api_key,
            aws_region=aws_region,
            aws_access_key_id=_env("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=_env("AWS_SECRET_ACCESS_KEY"),
            aws_session_token=_env("AWS_SESSION_TOKEN"),
        )


def parse_recipients(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]
