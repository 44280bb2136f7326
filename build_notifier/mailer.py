from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Protocol, Sequence

import boto3
import httpx
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionClosedError,
    EndpointConnectionError,
    ReadTimeoutError,
)
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Email, Mail, To

from .config import BREVO_ENDPOINT, DEFAULT_FROM_NAME

logger = logging.getLogger(__name__)

TRANSIENT_STATUSES = {502, 503, 504}


class MailError(Exception):
    """Raised when mail sending fails."""


class MailSender(Protocol):
    provider: str

    @property
    def settings(self) -> Mapping[str, object]: ...

    def send(
        self,
        to: Sequence[str],
        from_email: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
    ) -> None: ...


def mask_secret(value: str) -> str:
    if len(value) <= 4:
        return "****"
    return "****" + value[-4:]


class SendGridMailer:
    provider = "sendgrid"

    def __init__(self, api_key: str, from_name: str = DEFAULT_FROM_NAME, client: Optional[SendGridAPIClient] = None):
        self._api_key = api_key
        self._from_name = from_name
        self._client = client or SendGridAPIClient(api_key)

    @property
    def settings(self) -> Dict[str, object]:
        return {
            "provider": self.provider,
            "api_key": mask_secret(self._api_key),
            "from_name": self._from_name,
        }

    def send(
        self,
        to: Sequence[str],
        from_email: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
    ) -> None:
        mail = Mail(
            from_email=Email(email=from_email, name=self._from_name),
            to_emails=[To(address) for address in to],
            subject=subject,
            plain_text_content=text_body,
            html_content=html_body,
        )
        last_exc: Exception | None = None
        for attempt in range(2):
            try:
                response = self._client.send(mail)
                if response.status_code in TRANSIENT_STATUSES and attempt == 0:
                    logger.warning("SendGrid transient error (status=%s); retrying once", response.status_code)
                    continue
                if response.status_code >= 400:
                    raise MailError(f"SendGrid returned error status: {response.status_code}")
                logger.info("Mail sent with status %s", response.status_code)
                return
            except MailError:
                raise
            except Exception as exc:  # noqa: BLE001
                last_exc = exc
                status_code = getattr(exc, "status_code", None)
                if isinstance(status_code, int) and status_code in TRANSIENT_STATUSES and attempt == 0:
                    logger.warning("SendGrid transient exception (status=%s); retrying once", status_code)
                    continue
                break
        raise MailError(f"Failed to send email: {last_exc}") from last_exc


class BrevoMailer:
    provider = "brevo"

    def __init__(
        self,
        api_key: str,
        from_name: str = DEFAULT_FROM_NAME,
        endpoint: str = BREVO_ENDPOINT,
        timeout: float = 20.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self._api_key = api_key
        self._from_name = from_name
        self._endpoint = endpoint
        self._timeout = timeout
        self._transport = transport

    @property
    def settings(self) -> Dict[str, object]:
        return {
            "provider": self.provider,
            "endpoint": self._endpoint,
            "timeout": self._timeout,
            "api_key": mask_secret(self._api_key),
            "from_name": self._from_name,
        }

    def send(
        self,
        to: Sequence[str],
        from_email: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
    ) -> None:
        payload = {
            "sender": {"name": self._from_name, "email": from_email},
            "to": [{"email": address} for address in to],
            "subject": subject,
            "textContent": text_body,
        }
        if html_body:
            payload["htmlContent"] = html_body

        headers = {"api-key": self._api_key, "content-type": "application/json"}
        last_exc: Exception | None = None
        for attempt in range(2):
            try:
                with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                    response = client.post(self._endpoint, json=payload, headers=headers)
                if response.status_code in TRANSIENT_STATUSES and attempt == 0:
                    logger.warning("Brevo transient error (status=%s); retrying once", response.status_code)
                    continue
                response.raise_for_status()
                logger.info("Mail sent with status %s", response.status_code)
                return
            except httpx.RequestError as exc:
                last_exc = exc
                if attempt == 0:
                    continue
                break
            except httpx.HTTPStatusError as exc:
                last_exc = exc
                break
        raise MailError(f"Failed to send email: {last_exc}") from last_exc


class SESMailer:
    provider = "ses"

    def __init__(
        self,
        *,
        aws_region: str,
        from_name: str = DEFAULT_FROM_NAME,
        aws_access_key_id: str | None = None,
        aws_secret_access_key: str | None = None,
        aws_session_token: str | None = None,
        client=None,
    ) -> None:
        self._region = aws_region
        self._from_name = from_name
        self._uses_explicit_credentials = bool(aws_access_key_id and aws_secret_access_key)
        if client is None:
            client_kwargs = {"region_name": aws_region}
            if aws_access_key_id and aws_secret_access_key:
                client_kwargs["aws_access_key_id"] = aws_access_key_id
                client_kwargs["aws_secret_access_key"] = aws_secret_access_key
                if aws_session_token:
                    client_kwargs["aws_session_token"] = aws_session_token
            client = boto3.client("sesv2", **client_kwargs)
        self._client = client

    @property
    def settings(self) -> Dict[str, object]:
        return {
            "provider": self.provider,
            "region": self._region,
            "credentials": "explicit" if self._uses_explicit_credentials else "default chain",
            "from_name": self._from_name,
        }

    def send(
        self,
        to: Sequence[str],
        from_email: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
    ) -> None:
        body: dict[str, dict[str, str]] = {"Text": {"Data": text_body, "Charset": "UTF-8"}}
        if html_body:
            body["Html"] = {"Data": html_body, "Charset": "UTF-8"}

        request = {
            "FromEmailAddress": f"{self._from_name} <{from_email}>",
            "Destination": {"ToAddresses": list(to)},
            "Content": {
                "Simple": {
                    "Subject": {"Data": subject, "Charset": "UTF-8"},
                    "Body": body,
                }
            },
        }

        last_exc: Exception | None = None
        for attempt in range(2):
            try:
                response = self._client.send_email(**request)
                status_code = response.get("ResponseMetadata", {}).get("HTTPStatusCode")
                if status_code in TRANSIENT_STATUSES and attempt == 0:
                    logger.warning("SES transient error (status=%s); retrying once", status_code)
                    continue
                if isinstance(status_code, int) and status_code >= 400:
                    raise MailError(f"SES returned error status: {status_code}")
                logger.info("Mail sent with status %s", status_code)
                return
            except (EndpointConnectionError, ConnectionClosedError, ReadTimeoutError) as exc:
                last_exc = exc
                if attempt == 0:
                    continue
                break
            except ClientError as exc:
                last_exc = exc
                status_code = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
                if status_code in TRANSIENT_STATUSES and attempt == 0:
                    logger.warning("SES transient error (status=%s); retrying once", status_code)
                    continue
                break
            except BotoCoreError as exc:
                last_exc = exc
                break
        raise MailError(f"Failed to send email: {last_exc}") from last_exc


def build_mailer(
    *,
    brevo_api_key: Optional[str],
    sendgrid_api_key: Optional[str],
    aws_region: Optional[str] = None,
    aws_access_key_id: Optional[str] = None,
    aws_secret_access_key: Optional[str] = None,
    aws_session_token: Optional[str] = None,
    from_name: str = DEFAULT_FROM_NAME,
) -> MailSender:
    """
    Provider selection:
    - Brevo is default.
    - SendGrid when only its key is set.
    - SES when neither key is set but an AWS region is.
    """
    if brevo_api_key and brevo_api_key.strip():
        return BrevoMailer(brevo_api_key.strip(), from_name=from_name)
    if sendgrid_api_key and sendgrid_api_key.strip():
        return SendGridMailer(sendgrid_api_key.strip(), from_name=from_name)
    if aws_region and aws_region.strip():
        return SESMailer(
            aws_region=aws_region.strip(),
            from_name=from_name,
            aws_access_key_id=aws_access_key_id.strip() if aws_access_key_id else None,
            aws_secret_access_key=aws_secret_access_key.strip() if aws_secret_access_key else None,
            aws_session_token=aws_session_token.strip() if aws_session_token else None,
        )
    raise MailError("No mail provider configured: set BREVO_API_KEY, SENDGRID_API_KEY or AWS_REGION.")
