"""
Tests for the public contact form endpoint.
"""
import smtplib
from unittest import mock

import pytest
from rest_framework import status


CONTACT_URL = '/api/contact'
SEND_MESSAGES = 'django.core.mail.backends.locmem.EmailBackend.send_messages'


class TestContactFormSubmission:
    """Test public contact form submission."""

    def test_submit_valid_contact_form(self, api_client, valid_submission, mailoutbox, settings):
        """Test successful submission sends notification and confirmation."""
        settings.CONTACT_SEND_CONFIRMATION = True

        response = api_client.post(CONTACT_URL, valid_submission, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True
        assert response.data['reference'].startswith('JBR-')
        assert len(mailoutbox) == 2

        notification, confirmation = mailoutbox
        assert notification.to == [settings.CONTACT_EMAIL_TO]
        assert notification.reply_to == ['jane@example.com']
        assert 'Sales' in notification.subject
        assert response.data['reference'] in notification.body
        assert confirmation.to == ['jane@example.com']
        assert response.data['reference'] in confirmation.body

    def test_confirmation_disabled_sends_one_email(self, api_client, valid_submission, mailoutbox, settings):
        settings.CONTACT_SEND_CONFIRMATION = False

        response = api_client.post(CONTACT_URL, valid_submission, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert len(mailoutbox) == 1
        assert mailoutbox[0].to == [settings.CONTACT_EMAIL_TO]

    def test_form_encoded_submission(self, api_client, valid_submission, mailoutbox):
        """HTML forms post the checkbox as 'on'."""
        data = dict(valid_submission, consent='on')

        response = api_client.post(CONTACT_URL, data)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True

    def test_multiline_reason_cannot_inject_headers(self, api_client, valid_submission, mailoutbox):
        """Line breaks in the reason are folded into the subject line."""
        data = dict(valid_submission, reason='Sales\nBcc: victim@example.com')

        response = api_client.post(CONTACT_URL, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        notification = mailoutbox[0]
        assert notification.subject.endswith('New Contact Form Submission - Sales Bcc: victim@example.com')
        assert notification.bcc == []
        assert 'victim@example.com' not in notification.to

    def test_submit_missing_required_fields(self, api_client, mailoutbox):
        """Test submission with missing fields."""
        response = api_client.post(CONTACT_URL, {'name': 'Test User'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['success'] is False
        assert response.data['message'] == 'Please fix the following errors:'
        assert response.data['errors'] == [
            'Phone number is required',
            'Email address is required',
            'Please select a reason for contact',
            'Message must be at least 10 characters long',
            'You must agree to be contacted',
        ]
        assert mailoutbox == []

    @pytest.mark.parametrize('field', ['name', 'phone', 'email', 'reason', 'description', 'consent'])
    def test_blank_field_is_rejected(self, api_client, valid_submission, mailoutbox, field):
        data = dict(valid_submission, **{field: ''})

        response = api_client.post(CONTACT_URL, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert len(response.data['errors']) == 1
        assert mailoutbox == []

    def test_submit_invalid_email(self, api_client, valid_submission):
        data = dict(valid_submission, email='invalid-email')

        response = api_client.post(CONTACT_URL, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['errors'] == ['Please enter a valid email address']

    def test_submit_message_too_short(self, api_client, valid_submission):
        data = dict(valid_submission, description='Short')

        response = api_client.post(CONTACT_URL, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['errors'] == ['Message must be at least 10 characters long']

    def test_malformed_json_is_reported_as_validation_errors(self, api_client, mailoutbox):
        response = api_client.post(
            CONTACT_URL, '{"name": "Jane', content_type='application/json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert len(response.data['errors']) == 6
        assert mailoutbox == []

    def test_long_fields_are_truncated_before_sending(self, api_client, valid_submission, mailoutbox, settings):
        settings.CONTACT_MAX_FIELD_LENGTH = 50
        data = dict(valid_submission, description='x' * 200)

        response = api_client.post(CONTACT_URL, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert 'x' * 50 in mailoutbox[0].body
        assert 'x' * 51 not in mailoutbox[0].body

    def test_get_not_allowed(self, api_client):
        response = api_client.get(CONTACT_URL)

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert response.data['success'] is False


class TestDispatchFailure:
    """Email backend failures become a 500 without a reference id."""

    def test_production_hides_error_detail(self, api_client, valid_submission, settings):
        settings.ENVIRONMENT = 'production'

        with mock.patch(SEND_MESSAGES, side_effect=smtplib.SMTPException('relay refused')):
            response = api_client.post(CONTACT_URL, valid_submission, format='json')

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data['success'] is False
        assert 'reference' not in response.data
        assert 'error' not in response.data

    def test_development_exposes_error_detail(self, api_client, valid_submission, settings):
        settings.ENVIRONMENT = 'development'

        with mock.patch(SEND_MESSAGES, side_effect=smtplib.SMTPException('relay refused')):
            response = api_client.post(CONTACT_URL, valid_submission, format='json')

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data['error'] == 'relay refused'
        assert 'reference' not in response.data

    def test_timeout_is_a_dispatch_failure(self, api_client, valid_submission, settings):
        settings.ENVIRONMENT = 'production'

        with mock.patch(SEND_MESSAGES, side_effect=TimeoutError('timed out')):
            response = api_client.post(CONTACT_URL, valid_submission, format='json')

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR


class TestRateLimiting:
    """Test rate limiting for contact form."""

    def test_rate_limit_per_window(self, api_client, valid_submission, mailoutbox, settings):
        """Test IP-based rate limiting."""
        settings.CONTACT_RATE_LIMIT_MAX = 3

        for _ in range(3):
            response = api_client.post(CONTACT_URL, valid_submission, format='json')
            assert response.status_code == status.HTTP_200_OK

        response = api_client.post(CONTACT_URL, valid_submission, format='json')

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response.data == {
            'success': False,
            'message': 'Too many contact form submissions. Please try again in 15 minutes.',
        }
        assert int(response['Retry-After']) > 0

    def test_invalid_submissions_count_towards_limit(self, api_client, settings):
        settings.CONTACT_RATE_LIMIT_MAX = 2

        for _ in range(2):
            response = api_client.post(CONTACT_URL, {}, format='json')
            assert response.status_code == status.HTTP_400_BAD_REQUEST

        response = api_client.post(CONTACT_URL, {}, format='json')
        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS

    def test_rejected_request_skips_validation(self, api_client, valid_submission, settings):
        settings.CONTACT_RATE_LIMIT_MAX = 1
        api_client.post(CONTACT_URL, valid_submission, format='json')

        with mock.patch('contact.handler.validate_contact_form') as validate:
            response = api_client.post(CONTACT_URL, valid_submission, format='json')

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        validate.assert_not_called()

    def test_limit_is_per_client_address(self, api_client, valid_submission, settings):
        settings.CONTACT_RATE_LIMIT_MAX = 1

        first = api_client.post(CONTACT_URL, valid_submission, format='json', REMOTE_ADDR='10.0.0.1')
        second = api_client.post(CONTACT_URL, valid_submission, format='json', REMOTE_ADDR='10.0.0.2')

        assert first.status_code == status.HTTP_200_OK
        assert second.status_code == status.HTTP_200_OK

    def test_rate_limit_headers_on_success(self, api_client, valid_submission, settings):
        settings.CONTACT_RATE_LIMIT_MAX = 3

        response = api_client.post(CONTACT_URL, valid_submission, format='json')

        assert response['RateLimit-Limit'] == '3'
        assert response['RateLimit-Remaining'] == '2'
