"""
Site-wide views: health check and JSON error handlers.
"""
import logging

from django.http import JsonResponse
from django.utils import timezone
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

logger = logging.getLogger(__name__)


SERVER_NAME = 'JBR Website Backend'


class HealthCheckView(APIView):
    """
    Liveness probe.

    GET /api/health
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request):
        return Response({
            'status': 'OK',
            'timestamp': timezone.now().isoformat(),
            'server': SERVER_NAME,
        })


def route_not_found(request, exception=None):
    return JsonResponse(
        {'success': False, 'message': 'Route not found'},
        status=404
    )


def server_error(request):
    logger.error(f"Unhandled server error on {request.method} {request.path}")
    return JsonResponse(
        {'success': False, 'message': 'Internal server error'},
        status=500
    )
