"""Upload handlers that run while Django parses the multipart body."""

from __future__ import annotations

import logging

from django.core.files.uploadhandler import FileUploadHandler, StopUpload

from pedi_backend.uploads.config import DEFAULT_MAX_BYTES

logger = logging.getLogger(__name__)


class MaxSizeUploadHandler(FileUploadHandler):
    """Stops reading the request body as soon as one file passes ``max_bytes``.

    Placed ahead of Django's default handlers, it passes chunks through
    untouched and never builds a file itself. When the limit is crossed the
    upload is aborted with StopUpload, the partial file is dropped and
    ``exceeded`` is set for the view to report.
    """

    def __init__(self, request=None, max_bytes: int = DEFAULT_MAX_BYTES):
        super().__init__(request)
        self.max_bytes = max_bytes
        self.exceeded = False

    def receive_data_chunk(self, raw_data, start):
        if start + len(raw_data) > self.max_bytes:
            self.exceeded = True
            logger.info('Upload %s exceeds %d bytes, aborting', self.file_name, self.max_bytes)
            raise StopUpload(connection_reset=True)
        return raw_data

    def file_complete(self, file_size):
        return None
