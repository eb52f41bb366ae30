"""
Tests for pages, health check and error handlers.
"""
from datetime import datetime

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from unittest import mock
from rest_framework import status


class TestHealthCheck:

    def test_health(self, api_client):
        response = api_client.get('/api/health')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'OK'
        assert response.data['server'] == 'JBR Website Backend'
        datetime.fromisoformat(response.data['timestamp'])


class TestPages:

    @pytest.mark.parametrize('path', ['/', '/about', '/contact'])
    def test_pages_render(self, client, path):
        response = client.get(path)

        assert response.status_code == status.HTTP_200_OK
        assert 'JourneyBeyondResults' in response.content.decode()

    def test_contact_page_posts_to_api(self, client):
        response = client.get('/contact')

        assert 'action="/api/contact"' in response.content.decode()


class TestErrorHandlers:

    def test_unknown_route_returns_json_404(self, client):
        response = client.get('/api/does-not-exist')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {'success': False, 'message': 'Route not found'}


class TestCheckContactEmailCommand:

    def test_sends_test_email(self, mailoutbox, capsys):
        call_command('check_contact_email', '--to', 'ops@jbr.example.com')

        assert len(mailoutbox) == 1
        assert mailoutbox[0].to == ['ops@jbr.example.com']
        assert 'Test email sent' in capsys.readouterr().out

    def test_dry_run_sends_nothing(self, mailoutbox):
        call_command('check_contact_email', '--dry-run')

        assert mailoutbox == []

    def test_failure_raises_command_error(self):
        with mock.patch(
            'django.core.mail.backends.locmem.EmailBackend.send_messages',
            side_effect=ConnectionRefusedError('connection refused'),
        ):
            with pytest.raises(CommandError):
                call_command('check_contact_email')
