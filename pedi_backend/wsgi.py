"""
WSGI config for pedi_backend project.

It exposes the WSGI callable as a module-level variable named ``application``.
"""

import os

from django.core.wsgi import get_wsgi_application

# Deployments should set DJANGO_SETTINGS_MODULE.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "pedi_backend.settings_dev")

application = get_wsgi_application()

# Vercel serverless handler
app = application
