"""Build failure and fix e-mail notifications for a CI server."""

__all__ = [
    "config",
    "models",
    "recipients",
    "policy",
    "email_formatter",
    "html_email",
    "log_reporter",
    "mailer",
    "notifier",
    "cli",
]
