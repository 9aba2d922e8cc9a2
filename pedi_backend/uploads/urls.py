"""Uploads App URLs.

Prefix: /api/
Routes:
    POST /api/upload/ - Publish a profile photo, returns {"url"}
"""

from django.urls import path

from pedi_backend.uploads.views import UploadView

app_name = 'uploads'

urlpatterns = [
    path('upload/', UploadView.as_view(), name='upload'),
]
