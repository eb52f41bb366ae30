"""
Contact Submission Handler

One submission, start to finish: sanitize, validate, compose, dispatch and
turn the outcome into a response payload. Rate limiting happens before this
runs (see rate_limiting.rate_limit_contact_form).
"""
import logging
from dataclasses import dataclass

from rest_framework import status

from .emails import (
    SubmissionContext,
    compose_messages,
    format_submitted_at,
    generate_reference,
)
from .exceptions import DispatchError
from .signals import contact_submitted
from .validation import sanitize_submission, validate_contact_form

logger = logging.getLogger(__name__)


SUCCESS_MESSAGE = 'Your message has been sent successfully! We will get back to you within 24 hours.'
VALIDATION_MESSAGE = 'Please fix the following errors:'
DISPATCH_FAILED_MESSAGE = (
    'Sorry, there was an error sending your message. '
    'Please try again or contact us directly.'
)


@dataclass(frozen=True)
class SubmissionResult:
    status_code: int
    payload: dict

    @property
    def success(self):
        return self.payload.get('success', False)


def handle_submission(raw_data, services, ip_address='Unknown', user_agent='Unknown') -> SubmissionResult:
    """
    Process one contact form submission.

    Returns 400 with every validation message, 500 when the email backend
    fails (error detail only when the services expose it), or 200 with the
    reference id of the sent notification.
    """
    contact_settings = services.settings
    submission = sanitize_submission(raw_data, max_length=contact_settings.max_field_length)
    logger.info(
        f"Contact form submission received from {ip_address} "
        f"(reason: {submission.get('reason') or 'n/a'})"
    )

    errors = validate_contact_form(submission)
    if errors:
        logger.info(f"Contact form validation errors from {ip_address}: {errors}")
        return SubmissionResult(
            status.HTTP_400_BAD_REQUEST,
            {
                'success': False,
                'message': VALIDATION_MESSAGE,
                'errors': errors,
            }
        )

    context = SubmissionContext(
        reference=generate_reference(),
        submitted_at=format_submitted_at(),
        ip_address=ip_address or 'Unknown',
        user_agent=(user_agent or 'Unknown')[:500],
    )
    messages = compose_messages(submission, context, contact_settings)

    try:
        services.mailer.dispatch(messages).raise_for_error()
    except DispatchError as exc:
        logger.error(f"Error sending contact form emails for {context.reference}: {exc}")
        payload = {
            'success': False,
            'message': DISPATCH_FAILED_MESSAGE,
        }
        if contact_settings.expose_error_details:
            payload['error'] = str(exc)
        return SubmissionResult(status.HTTP_500_INTERNAL_SERVER_ERROR, payload)

    logger.info(f"Contact form emails sent ({len(messages)}), reference {context.reference}")
    contact_submitted.send(
        sender=handle_submission,
        reference=context.reference,
        submission=submission,
    )

    return SubmissionResult(
        status.HTTP_200_OK,
        {
            'success': True,
            'message': SUCCESS_MESSAGE,
            'reference': context.reference,
        }
    )
