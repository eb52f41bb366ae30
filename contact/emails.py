"""
Contact Form Emails

Builds the operator notification and the submitter confirmation, and hands
them to Django's email backend. Dispatch reports its outcome as a
DispatchResult instead of raising, so the caller decides how to respond.
"""
import logging
import smtplib
import time
import uuid
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from django.core.mail import EmailMultiAlternatives, get_connection
from django.template.loader import render_to_string
from django.utils import timezone

from .exceptions import DispatchError

logger = logging.getLogger(__name__)


def generate_reference(clock=time.time) -> str:
    """Readable reference id, e.g. ``JBR-1760790000123-4F2A``."""
    return f"JBR-{int(clock() * 1000)}-{uuid.uuid4().hex[:4].upper()}"


def format_submitted_at(now=None) -> str:
    """Human-readable local time, e.g. ``18 October 2026, 02:30 PM IST``."""
    local = timezone.localtime(now or timezone.now())
    return local.strftime('%d %B %Y, %I:%M %p %Z')


@dataclass(frozen=True)
class OutboundEmail:
    sender: str
    recipient: str
    subject: str
    html_body: str
    text_body: str
    reply_to: Tuple[str, ...] = ()

    def as_django_message(self, connection=None):
        message = EmailMultiAlternatives(
            subject=self.subject,
            body=self.text_body,
            from_email=self.sender,
            to=[self.recipient],
            reply_to=list(self.reply_to),
            connection=connection,
        )
        message.attach_alternative(self.html_body, "text/html")
        return message


@dataclass(frozen=True)
class SubmissionContext:
    """Request details embedded in the emails alongside the form fields."""
    reference: str
    submitted_at: str
    ip_address: str = 'Unknown'
    user_agent: str = 'Unknown'


@dataclass(frozen=True)
class DispatchResult:
    sent: int = 0
    error: Optional[Exception] = field(default=None)

    @property
    def ok(self):
        return self.error is None

    def raise_for_error(self):
        if self.error is not None:
            raise DispatchError(str(self.error), original=self.error)
        return self


def _header_value(value):
    """Collapse line breaks and runs of whitespace so the value fits on one header line."""
    return ' '.join(str(value).split())


def _template_context(submission, context, contact_settings):
    return {
        'name': submission.get('name', ''),
        'phone': submission.get('phone', ''),
        'email': submission.get('email', ''),
        'reason': submission.get('reason', ''),
        'description': submission.get('description', ''),
        'reference': context.reference,
        'submitted_at': context.submitted_at,
        'ip_address': context.ip_address,
        'user_agent': context.user_agent,
        'company_name': contact_settings.company_name,
        'company_short_name': contact_settings.company_short_name,
    }


def compose_operator_notification(submission, context, contact_settings) -> OutboundEmail:
    """Email to the company inbox describing a new submission."""
    template_context = _template_context(submission, context, contact_settings)
    return OutboundEmail(
        sender=contact_settings.email_from,
        recipient=contact_settings.email_to,
        subject=f"🔔 New Contact Form Submission - {_header_value(submission.get('reason', ''))}",
        html_body=render_to_string('contact/emails/operator_notification.html', template_context),
        text_body=render_to_string('contact/emails/operator_notification.txt', template_context),
        reply_to=(submission.get('email', ''),),
    )


def compose_confirmation(submission, context, contact_settings) -> OutboundEmail:
    """Thank-you copy sent back to the person who filled in the form."""
    template_context = _template_context(submission, context, contact_settings)
    return OutboundEmail(
        sender=contact_settings.email_from,
        recipient=submission.get('email', ''),
        subject=f"✅ Thank you for contacting {contact_settings.company_short_name}",
        html_body=render_to_string('contact/emails/confirmation.html', template_context),
        text_body=render_to_string('contact/emails/confirmation.txt', template_context),
    )


def compose_messages(submission, context, contact_settings) -> List[OutboundEmail]:
    messages = [compose_operator_notification(submission, context, contact_settings)]
    if contact_settings.send_confirmation:
        messages.append(compose_confirmation(submission, context, contact_settings))
    return messages


class ContactMailer:
    """
    Sends composed emails through Django's email backend.

    A connection is opened for each dispatch and closed when it finishes.
    ``backend`` defaults to ``settings.EMAIL_BACKEND`` at send time.
    """

    def __init__(self, backend=None):
        self.backend = backend

    def dispatch(self, messages) -> DispatchResult:
        """
        Send every message over one connection.

        Transport errors and messages Django refuses to build (header
        injection, bad addresses) come back as a failed DispatchResult.
        """
        if not messages:
            return DispatchResult(sent=0)

        try:
            with get_connection(backend=self.backend, fail_silently=False) as connection:
                sent = connection.send_messages(
                    [message.as_django_message(connection) for message in messages]
                )
        except (smtplib.SMTPException, OSError, ValueError) as exc:
            logger.exception(f"Failed to send {len(messages)} contact email(s): {exc}")
            return DispatchResult(sent=0, error=exc)

        sent = sent or 0
        logger.info(f"Sent {sent} contact email(s)")
        return DispatchResult(sent=sent)
