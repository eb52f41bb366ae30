"""
Contact Management Signals

``contact_submitted`` fires after a submission's emails were sent. The
setting_changed receiver keeps the app's services in step with settings
overrides (used by the test suite).
"""
import logging

from django.apps import apps
from django.core.signals import setting_changed
from django.dispatch import Signal, receiver

logger = logging.getLogger(__name__)


# Sent with: reference, submission
contact_submitted = Signal()


SERVICE_SETTINGS = {
    'CONTACT_EMAIL_FROM',
    'CONTACT_EMAIL_TO',
    'CONTACT_SEND_CONFIRMATION',
    'CONTACT_MAX_FIELD_LENGTH',
    'CONTACT_RATE_LIMIT_MAX',
    'CONTACT_RATE_LIMIT_WINDOW_SECONDS',
    'CONTACT_TRUST_X_FORWARDED_FOR',
    'COMPANY_NAME',
    'COMPANY_SHORT_NAME',
    'DEFAULT_FROM_EMAIL',
    'ENVIRONMENT',
    'CACHES',
}


@receiver(contact_submitted)
def log_contact_submission(sender, reference, submission, **kwargs):
    """
    Signal handler for successful contact submissions.

    Can be used for additional logging, notifications, or integrations.
    """
    logger.info(f"New contact submission: {reference} ({submission.get('reason')})")


@receiver(setting_changed)
def rebuild_contact_services(sender, setting, **kwargs):
    if setting in SERVICE_SETTINGS and apps.ready:
        apps.get_app_config('contact').reload_services()
