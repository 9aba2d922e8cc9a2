"""URL Configuration.

API routes:
    /api/health/    - Health check (core)
    /api/auth/      - Authentication (core)
    /api/patients/  - Patient records (patients)
    /api/upload/    - Profile photo upload (uploads)
"""

import re

from django.conf import settings
from django.contrib import admin
from django.http import HttpResponse
from django.urls import include, path, re_path
from django.views.static import serve as static_serve


def root(request):
    """Plain-text root endpoint, doubles as a trivial liveness check."""
    return HttpResponse("Pediatric records backend is running.")


urlpatterns = [
    path("", root, name="root"),
    path("admin/", admin.site.urls),

    path("api/", include("pedi_backend.core.urls")),
    path("api/", include("pedi_backend.patients.urls")),
    path("api/", include("pedi_backend.uploads.urls")),
]

# Locally stored uploads (DEBUG or explicitly via SERVE_UPLOADS)
if settings.DEBUG or getattr(settings, "SERVE_UPLOADS", False):
    _upload_prefix = settings.UPLOAD_URL.strip("/")
    urlpatterns += [
        re_path(
            rf"^{re.escape(_upload_prefix)}/(?P<path>[^/]+)$",
            static_serve,
            {"document_root": settings.UPLOAD_ROOT},
        ),
    ]
