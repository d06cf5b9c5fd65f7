"""
WSGI config for the agenta project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'agenta.settings')

application = get_wsgi_application()
