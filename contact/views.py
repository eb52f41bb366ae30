"""
Contact Form Views

Public API endpoint for contact form submissions.
"""
import logging

from django.apps import apps
from rest_framework.exceptions import ParseError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .handler import handle_submission
from .rate_limiting import get_client_ip, rate_limit_contact_form

logger = logging.getLogger(__name__)


class ContactFormSubmitView(APIView):
    """
    Public endpoint for contact form submissions.

    POST /api/contact

    No authentication required. Rate limited per client address.
    Accepts JSON, form-encoded or multipart bodies.
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    # Injected with as_view(services=...); falls back to the app's container
    services = None

    def get_services(self):
        if self.services is not None:
            return self.services
        return apps.get_app_config('contact').services

    @rate_limit_contact_form
    def post(self, request):
        """Submit a contact form."""
        services = self.get_services()

        try:
            data = request.data
        except ParseError as exc:
            # Unreadable bodies are reported as missing fields
            logger.info(f"Unparseable contact form body: {exc}")
            data = {}

        result = handle_submission(
            data,
            services,
            ip_address=get_client_ip(request, services.settings.trust_forwarded_for),
            user_agent=request.META.get('HTTP_USER_AGENT', ''),
        )
        return Response(result.payload, status=result.status_code)
