"""
WSGI config for security_hub project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'security_hub.settings.prod')

application = get_wsgi_application()
