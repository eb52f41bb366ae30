"""
Management command to test the contact form email configuration.
"""
from django.apps import apps
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from contact.emails import OutboundEmail, generate_reference, format_submitted_at
from contact.exceptions import DispatchError


class Command(BaseCommand):
    help = 'Show contact email configuration and send a test message through the contact mailer'

    def add_arguments(self, parser):
        parser.add_argument(
            '--to',
            type=str,
            help='Recipient for the test email (defaults to CONTACT_EMAIL_TO)',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Only display the configuration',
        )

    def handle(self, *args, **options):
        services = apps.get_app_config('contact').services
        contact_settings = services.settings

        self.stdout.write(self.style.SUCCESS('\n=== CONTACT EMAIL CHECK ===\n'))
        self.show_configuration(contact_settings)

        if options['dry_run']:
            return

        recipient = options.get('to') or contact_settings.email_to
        reference = generate_reference()
        message = OutboundEmail(
            sender=contact_settings.email_from,
            recipient=recipient,
            subject=f'Test Email - {contact_settings.company_short_name} contact form',
            html_body=f'<p>Contact form email test.</p><p>Reference: {reference}</p>',
            text_body=(
                f'Contact form email test.\n'
                f'Reference: {reference}\n'
                f'Sent: {format_submitted_at()}\n'
            ),
        )

        try:
            services.mailer.dispatch([message]).raise_for_error()
        except DispatchError as exc:
            raise CommandError(f'Failed to send test email to {recipient}: {exc}')

        self.stdout.write(self.style.SUCCESS(f'Test email sent to {recipient} ({reference})'))

    def show_configuration(self, contact_settings):
        """Display current email configuration."""
        self.stdout.write(self.style.NOTICE('Configuration:'))
        self.stdout.write(f'  EMAIL_BACKEND: {settings.EMAIL_BACKEND}')
        self.stdout.write(f'  EMAIL_HOST: {settings.EMAIL_HOST}:{settings.EMAIL_PORT}')
        if settings.EMAIL_HOST_USER:
            self.stdout.write(f'  EMAIL_HOST_USER: {settings.EMAIL_HOST_USER}')
        else:
            self.stdout.write(self.style.WARNING('  EMAIL_HOST_USER: Not configured'))
        self.stdout.write(f'  Sender: {contact_settings.email_from}')
        self.stdout.write(f'  Operator inbox: {contact_settings.email_to}')
        self.stdout.write(f'  Confirmation emails: {contact_settings.send_confirmation}')
        self.stdout.write(f'  Environment: {settings.ENVIRONMENT}')
        self.stdout.write(
            f'  Rate limit: {contact_settings.rate_limit_max} per '
            f'{contact_settings.rate_limit_window_seconds}s'
        )
