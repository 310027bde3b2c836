"""
WSGI config for the Reservo booking engine.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'reservo.settings.production')

application = get_wsgi_application()
