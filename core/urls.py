"""
URL configuration for the JBR website.

Pages are rendered from templates/pages; the API lives under /api/.
"""
from django.urls import path, include
from django.views.generic import TemplateView

from core.views import HealthCheckView

urlpatterns = [
    path('', TemplateView.as_view(template_name='pages/index.html'), name='home'),
    path('about', TemplateView.as_view(template_name='pages/about.html'), name='about'),
    path('contact', TemplateView.as_view(template_name='pages/contact.html'), name='contact-page'),
    path('api/health', HealthCheckView.as_view(), name='health'),
    path('api/', include('contact.urls')),  # Contact form submission
]

handler404 = 'core.views.route_not_found'
handler500 = 'core.views.server_error'
