"""
URL configuration for the agenta project.
"""

from django.urls import path, include
from django.http import JsonResponse
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView, SpectacularSwaggerView


def home_view(request):
    """Root endpoint with API information."""
    return JsonResponse({
        'message': 'Welcome to the Agenta prioritization API',
        'version': '1.0.0',
        'endpoints': {
            'API Root': '/api/',
            'Task Metrics': 'POST /api/tasks/metrics/',
            'Calibration': 'POST /api/tasks/calibrate/',
            'Schedule': 'POST /api/tasks/schedule/',
            'Profiles': '/api/profiles/<user_id>/',
            'API Documentation': '/api/docs/',
            'OpenAPI Schema': '/api/schema/',
        },
    })


urlpatterns = [
    path('', home_view, name='home'),
    path('api/', include('prioritization.urls')),
    # OpenAPI/Swagger Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),
]
