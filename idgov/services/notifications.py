"""Email notifications for thread activity."""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx
from sqlalchemy import select
from sqlalchemy.orm import Session

from idgov.core.config import Settings, get_settings
from idgov.models import User
from idgov.obs import NOTIFICATION_COUNTER

logger = logging.getLogger(__name__)

_SUBJECT_PREFIX = "[IdGov Platform]"


class NotificationKind(str, enum.Enum):
    QUESTION_UPDATED = "QuestionUpdated"
    RESPONSE_ADDED = "ResponseAdded"
    FILE_UPLOADED = "FileUploaded"


@dataclass(slots=True, frozen=True)
class EmailMessage:
    recipient: str
    subject: str
    body: str


class Notifier(Protocol):
    def notify(
        self,
        recipient: User,
        kind: NotificationKind,
        question_title: str,
        tenant_question_id: int,
        extra: dict[str, Any] | None = None,
    ) -> None: ...


def render_message(
    *,
    recipient: User,
    kind: NotificationKind,
    question_title: str,
    tenant_question_id: int,
    base_url: str,
    extra: dict[str, Any] | None = None,
) -> EmailMessage:
    link = f"{base_url.rstrip('/')}/question/{tenant_question_id}"
    if kind is NotificationKind.QUESTION_UPDATED:
        subject = f"{_SUBJECT_PREFIX} Question Updated: {question_title}"
        body = f'A question has been updated: "{question_title}". Click here to view: {link}'
    elif kind is NotificationKind.RESPONSE_ADDED:
        subject = f"{_SUBJECT_PREFIX} New Response to: {question_title}"
        body = f'A new response has been added to question: "{question_title}". Click here to view: {link}'
    else:
        file_name = (extra or {}).get("file_name", "")
        subject = f"{_SUBJECT_PREFIX} New File Uploaded: {question_title}"
        body = (
            f'A new file "{file_name}" has been uploaded to question: "{question_title}". '
            f"Click here to view: {link}"
        )
    return EmailMessage(recipient=recipient.email, subject=subject, body=body)


class LoggingNotifier:
    """Writes rendered notifications to the application log."""

    def __init__(self, *, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    def notify(
        self,
        recipient: User,
        kind: NotificationKind,
        question_title: str,
        tenant_question_id: int,
        extra: dict[str, Any] | None = None,
    ) -> None:
        message = render_message(
            recipient=recipient,
            kind=kind,
            question_title=question_title,
            tenant_question_id=tenant_question_id,
            base_url=self._settings.app_base_url,
            extra=extra,
        )
        logger.info(
            "email notification",
            extra={"recipient": message.recipient, "subject": message.subject, "body": message.body},
        )


class MailgunNotifier:
    """Delivers notifications through the Mailgun messages API."""

    def __init__(self, *, settings: Settings | None = None, client: httpx.Client | None = None) -> None:
        self._settings = settings or get_settings()
        if not self._settings.mailgun_domain or not self._settings.mailgun_api_key:
            raise ValueError("mailgun_domain and mailgun_api_key are required for Mailgun delivery")
        self._client = client or httpx.Client()
        self._owns_client = client is None

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def notify(
        self,
        recipient: User,
        kind: NotificationKind,
        question_title: str,
        tenant_question_id: int,
        extra: dict[str, Any] | None = None,
    ) -> None:
        message = render_message(
            recipient=recipient,
            kind=kind,
            question_title=question_title,
            tenant_question_id=tenant_question_id,
            base_url=self._settings.app_base_url,
            extra=extra,
        )
        url = f"{self._settings.mailgun_base_url.rstrip('/')}/{self._settings.mailgun_domain}/messages"
        response = self._client.post(
            url,
            auth=("api", self._settings.mailgun_api_key or ""),
            data={
                "from": self._settings.mail_sender,
                "to": message.recipient,
                "subject": message.subject,
                "text": message.body,
            },
            timeout=self._settings.mailgun_timeout_seconds,
        )
        response.raise_for_status()


class NotificationDispatcher:
    """Fans notifications out to tenant users without failing the caller."""

    def __init__(self, notifier: Notifier) -> None:
        self._notifier = notifier

    def notify_tenant(
        self,
        session: Session,
        *,
        tenant_id: int,
        kind: NotificationKind,
        actor_id: int,
        question_title: str,
        tenant_question_id: int,
        extra: dict[str, Any] | None = None,
    ) -> int:
        """Notify every user of ``tenant_id`` except the actor; return the number delivered."""

        try:
            recipients = session.scalars(
                select(User).where(User.tenant_id == tenant_id, User.id != actor_id).order_by(User.id)
            ).all()
        except Exception as exc:
            logger.error(
                "failed to resolve notification recipients",
                extra={"tenant_id": tenant_id, "kind": kind.value, "error": str(exc)},
            )
            return 0

        delivered = 0
        for recipient in recipients:
            try:
                self._notifier.notify(recipient, kind, question_title, tenant_question_id, extra)
            except Exception as exc:
                NOTIFICATION_COUNTER.labels(kind=kind.value, outcome="failed").inc()
                logger.error(
                    "failed to send notification",
                    extra={
                        "recipient_id": recipient.id,
                        "kind": kind.value,
                        "tenant_question_id": tenant_question_id,
                        "error": str(exc),
                    },
                )
                continue
            NOTIFICATION_COUNTER.labels(kind=kind.value, outcome="sent").inc()
            delivered += 1
        return delivered


def build_notifier(settings: Settings | None = None) -> Notifier:
    settings = settings or get_settings()
    backend = settings.notification_backend.lower()
    if backend == "log":
        return LoggingNotifier(settings=settings)
    if backend == "mailgun":
        return MailgunNotifier(settings=settings)
    raise ValueError(f"Unsupported notification backend '{settings.notification_backend}'")


__all__ = [
    "EmailMessage",
    "LoggingNotifier",
    "MailgunNotifier",
    "NotificationDispatcher",
    "NotificationKind",
    "Notifier",
    "build_notifier",
    "render_message",
]
