import logging

from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from pedi_backend.core.exceptions import ConfigurationError, PediError
from pedi_backend.core.utils import error_response
from pedi_backend.uploads.backends import get_storage_backend
from pedi_backend.uploads.config import UploadSettings
from pedi_backend.uploads.handlers import MaxSizeUploadHandler
from pedi_backend.uploads.services import publish_image, too_large

logger = logging.getLogger(__name__)


class UploadView(APIView):
    """Publish a profile photo.

    POST /api/upload/  (multipart, field "image")
    Returns: {"url": "...", "downloadUrl": "..."?}

    The storage backend is resolved before the body is parsed, so a
    misconfigured deployment fails without reading the upload. That holds
    with JWT authentication only: SessionAuthentication (settings_dev)
    runs a CSRF check that reads request.POST during authentication, which
    parses the multipart body first. The size limit still applies in that
    case because MaxSizeUploadHandler is installed before authentication.
    """

    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    def initial(self, request, *args, **kwargs):
        django_request = request._request
        self.size_guard = MaxSizeUploadHandler(django_request, UploadSettings.from_django().max_bytes)
        if not hasattr(django_request, '_files'):
            # Handlers can only be replaced before the body is parsed
            django_request.upload_handlers = [self.size_guard, *django_request.upload_handlers]
        super().initial(request, *args, **kwargs)

    def post(self, request, *args, **kwargs):
        # Resolve the backend before the body is parsed.
        try:
            backend = get_storage_backend()
        except ConfigurationError as e:
            logger.error('Upload rejected: %s (%s)', e.message, e.details)
            return error_response(e)

        upload = request.FILES.get('image')
        if self.size_guard.exceeded:
            return error_response(too_large(self.size_guard.max_bytes))
        if upload is None:
            return Response({'error': 'No file provided'}, status=status.HTTP_400_BAD_REQUEST)

        try:
            stored = publish_image(
                upload,
                upload.content_type,
                upload.name,
                backend=backend,
                max_bytes=self.size_guard.max_bytes,
            )
        except PediError as e:
            return error_response(e)

        return Response(stored.to_dict(), status=status.HTTP_200_OK)
