"""
Contact Services

The dependencies the contact endpoint needs, built once per process by
ContactConfig.ready() and handed to the view. Tests may build their own
container and pass it to ``ContactFormSubmitView.as_view(services=...)``.
"""
import logging
from dataclasses import dataclass

from django.conf import settings as django_settings
from django.core.cache import caches

from .emails import ContactMailer
from .rate_limiting import FixedWindowRateLimiter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContactSettings:
    email_from: str
    email_to: str
    send_confirmation: bool = True
    max_field_length: int = 1000
    rate_limit_max: int = 3
    rate_limit_window_seconds: int = 15 * 60
    trust_forwarded_for: bool = False
    expose_error_details: bool = False
    company_name: str = 'JourneyBeyondResults Private Limited'
    company_short_name: str = 'JBR Private Limited'

    @classmethod
    def from_django_settings(cls, source=None):
        source = source or django_settings
        return cls(
            email_from=getattr(source, 'CONTACT_EMAIL_FROM', source.DEFAULT_FROM_EMAIL),
            email_to=source.CONTACT_EMAIL_TO,
            send_confirmation=getattr(source, 'CONTACT_SEND_CONFIRMATION', True),
            max_field_length=getattr(source, 'CONTACT_MAX_FIELD_LENGTH', 1000),
            rate_limit_max=getattr(source, 'CONTACT_RATE_LIMIT_MAX', 3),
            rate_limit_window_seconds=getattr(source, 'CONTACT_RATE_LIMIT_WINDOW_SECONDS', 15 * 60),
            trust_forwarded_for=getattr(source, 'CONTACT_TRUST_X_FORWARDED_FOR', False),
            expose_error_details=getattr(source, 'ENVIRONMENT', 'production') == 'development',
            company_name=getattr(source, 'COMPANY_NAME', cls.company_name),
            company_short_name=getattr(source, 'COMPANY_SHORT_NAME', cls.company_short_name),
        )


class ContactServices:
    """Settings snapshot, rate limiter and mailer for one process."""

    def __init__(self, settings, rate_limiter, mailer):
        self.settings = settings
        self.rate_limiter = rate_limiter
        self.mailer = mailer

    def close(self):
        """Release the rate limiter's cache client at worker shutdown."""
        close_cache = getattr(self.rate_limiter.cache, 'close', None)
        if close_cache is not None:
            close_cache()


def build_contact_services(source=None, cache=None, mailer=None) -> ContactServices:
    contact_settings = ContactSettings.from_django_settings(source)
    rate_limiter = FixedWindowRateLimiter(
        cache if cache is not None else caches['default'],
        limit=contact_settings.rate_limit_max,
        window_seconds=contact_settings.rate_limit_window_seconds,
    )
    logger.debug(
        f"Contact services ready: {contact_settings.rate_limit_max} submissions per "
        f"{contact_settings.rate_limit_window_seconds}s, confirmation="
        f"{contact_settings.send_confirmation}"
    )
    return ContactServices(contact_settings, rate_limiter, mailer or ContactMailer())
