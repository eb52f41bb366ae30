"""
Integration tests for the submission handler with injected services.

The handler is exercised directly and through ContactFormSubmitView with a
services container passed to as_view(), so no app-level state is involved.
"""
from unittest import mock

import pytest
from django.core.cache import cache
from rest_framework.test import APIRequestFactory

from contact.emails import DispatchResult
from contact.handler import handle_submission
from contact.rate_limiting import FixedWindowRateLimiter
from contact.services import ContactServices, ContactSettings
from contact.signals import contact_submitted
from contact.views import ContactFormSubmitView


class RecordingMailer:
    """Stands in for ContactMailer and remembers what it was asked to send."""

    def __init__(self, error=None):
        self.error = error
        self.batches = []

    def dispatch(self, messages):
        self.batches.append(list(messages))
        if self.error is not None:
            return DispatchResult(error=self.error)
        return DispatchResult(sent=len(messages))


def make_services(mailer=None, limit=3, **overrides):
    contact_settings = ContactSettings(
        email_from='website@jbr.example.com',
        email_to='inbox@jbr.example.com',
        **overrides
    )
    limiter = FixedWindowRateLimiter(cache, limit=limit, window_seconds=900, key_prefix='test-rl')
    return ContactServices(contact_settings, limiter, mailer or RecordingMailer())


class TestHandleSubmission:

    def test_success_dispatches_both_messages(self, valid_submission):
        services = make_services(send_confirmation=True)

        result = handle_submission(valid_submission, services, ip_address='203.0.113.7')

        assert result.status_code == 200
        assert result.success is True
        assert result.payload['reference'].startswith('JBR-')
        assert len(services.mailer.batches) == 1
        recipients = [m.recipient for m in services.mailer.batches[0]]
        assert recipients == ['inbox@jbr.example.com', 'jane@example.com']

    def test_success_without_confirmation(self, valid_submission):
        services = make_services(send_confirmation=False)

        handle_submission(valid_submission, services)

        assert [m.recipient for m in services.mailer.batches[0]] == ['inbox@jbr.example.com']

    def test_invalid_submission_sends_nothing(self):
        services = make_services()

        result = handle_submission({'name': 'J'}, services)

        assert result.status_code == 400
        assert len(result.payload['errors']) == 6
        assert services.mailer.batches == []

    def test_fields_are_sanitized_before_validation(self, valid_submission):
        services = make_services(max_field_length=20)
        data = dict(valid_submission, name='   Jane Doe   ', description='d' * 40)

        result = handle_submission(data, services)

        assert result.status_code == 200
        notification = services.mailer.batches[0][0]
        assert 'd' * 20 in notification.text_body
        assert 'd' * 21 not in notification.text_body

    def test_dispatch_failure_hides_detail_in_production(self, valid_submission):
        services = make_services(mailer=RecordingMailer(error=OSError('network unreachable')))

        result = handle_submission(valid_submission, services)

        assert result.status_code == 500
        assert result.payload == {
            'success': False,
            'message': 'Sorry, there was an error sending your message. Please try again or contact us directly.',
        }

    def test_dispatch_failure_shows_detail_in_development(self, valid_submission):
        services = make_services(
            mailer=RecordingMailer(error=OSError('network unreachable')),
            expose_error_details=True,
        )

        result = handle_submission(valid_submission, services)

        assert result.status_code == 500
        assert result.payload['error'] == 'network unreachable'
        assert 'reference' not in result.payload

    def test_signal_sent_only_on_success(self, valid_submission):
        received = []

        def listener(sender, reference, submission, **kwargs):
            received.append(reference)

        contact_submitted.connect(listener)
        try:
            ok = handle_submission(valid_submission, make_services())
            handle_submission(valid_submission, make_services(mailer=RecordingMailer(error=OSError('down'))))
        finally:
            contact_submitted.disconnect(listener)

        assert received == [ok.payload['reference']]

    def test_multiline_reason_stays_on_one_subject_line(self, valid_submission):
        services = make_services()
        data = dict(valid_submission, reason='Sales\nBcc: victim@example.com')

        result = handle_submission(data, services)

        assert result.status_code == 200
        notification = services.mailer.batches[0][0]
        assert notification.subject.endswith('Sales Bcc: victim@example.com')
        assert '\n' not in notification.subject


class TestContactServicesClose:

    def test_close_releases_cache_client(self):
        cache_client = mock.Mock()
        limiter = FixedWindowRateLimiter(cache_client, limit=3, window_seconds=900)
        services = ContactServices(
            ContactSettings(email_from='website@jbr.example.com', email_to='inbox@jbr.example.com'),
            limiter,
            RecordingMailer(),
        )

        services.close()

        cache_client.close.assert_called_once_with()


class TestInjectedView:

    @pytest.fixture
    def factory(self):
        return APIRequestFactory()

    def test_view_uses_injected_services(self, factory, valid_submission):
        services = make_services()
        view = ContactFormSubmitView.as_view(services=services)

        response = view(factory.post('/api/contact', valid_submission, format='json'))

        assert response.status_code == 200
        assert len(services.mailer.batches) == 1

    def test_injected_rate_limiter_short_circuits(self, factory, valid_submission):
        services = make_services(limit=1)
        view = ContactFormSubmitView.as_view(services=services)

        view(factory.post('/api/contact', valid_submission, format='json'))
        response = view(factory.post('/api/contact', valid_submission, format='json'))

        assert response.status_code == 429
        assert len(services.mailer.batches) == 1
