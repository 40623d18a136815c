"""
WSGI config for the StoreDesk backend.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'storedesk.config.settings')

application = get_wsgi_application()
