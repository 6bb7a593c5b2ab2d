"""WSGI entry point for the Mood Tracker project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "moodtracker.settings")

application = get_wsgi_application()
