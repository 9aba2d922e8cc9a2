"""
Profile photo publishing.

publish_image turns an untrusted upload into a stored object and returns
its reference. It never touches patient records: the caller attaches the
returned URL to a record in a separate request.
"""

from __future__ import annotations

import logging
import os
import re
import secrets
import time

from pedi_backend.core.exceptions import ValidationError
from pedi_backend.uploads.backends import (
    MediaMetadata,
    StorageBackend,
    StoredMedia,
    get_storage_backend,
)
from pedi_backend.uploads.config import DEFAULT_MAX_BYTES

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
DEFAULT_FILENAME = 'image.jpg'
FILENAME_PREFIX = 'patient-'

_EXTENSION_RE = re.compile(r'\.[a-z0-9]{1,10}')


def is_image_content_type(content_type: str | None) -> bool:
    if not content_type:
        return False
    main_type = content_type.split(';', 1)[0].strip().lower()
    return main_type.startswith('image/') and len(main_type) > len('image/')


def build_filename(original_filename: str | None) -> str:
    """``patient-<millis>-<random hex><ext>``; unsafe extensions are dropped."""
    name = os.path.basename(original_filename or '') or DEFAULT_FILENAME
    ext = os.path.splitext(name)[1].lower()
    if not _EXTENSION_RE.fullmatch(ext):
        ext = ''
    token = f'{time.time_ns() // 1_000_000}-{secrets.token_hex(4)}'
    return f'{FILENAME_PREFIX}{token}{ext}'


def read_limited(stream, max_bytes: int) -> bytes:
    """Read ``stream`` fully, failing as soon as it exceeds ``max_bytes``."""
    if isinstance(stream, (bytes, bytearray)):
        chunks = [bytes(stream)]
    elif hasattr(stream, 'chunks'):
        # Django UploadedFile
        if getattr(stream, 'size', None) is not None and stream.size > max_bytes:
            raise too_large(max_bytes)
        chunks = stream.chunks(CHUNK_SIZE)
    else:
        chunks = iter(lambda: stream.read(CHUNK_SIZE), b'')

    data = bytearray()
    for chunk in chunks:
        data.extend(chunk)
        if len(data) > max_bytes:
            raise too_large(max_bytes)
    return bytes(data)


def too_large(max_bytes: int) -> ValidationError:
    return ValidationError('too large', details={'maxBytes': max_bytes})


def publish_image(
    stream,
    content_type: str | None,
    original_filename: str | None,
    *,
    backend: StorageBackend | None = None,
    max_bytes: int = DEFAULT_MAX_BYTES,
) -> StoredMedia:
    """Validate an uploaded image and store it.

    Raises:
        ConfigurationError: no usable backend (raised before reading any bytes).
        ValidationError: not an image, or larger than ``max_bytes``.
        StorageError: the backend did not confirm the write.
    """
    if backend is None:
        backend = get_storage_backend()

    if not is_image_content_type(content_type):
        raise ValidationError('not an image', details={'contentType': content_type})

    data = read_limited(stream, max_bytes)
    metadata = MediaMetadata(
        filename=build_filename(original_filename),
        content_type=content_type,
        size=len(data),
    )

    stored = backend.store(data, metadata)
    logger.info('Published %s (%d bytes) via %s: %s', metadata.filename, metadata.size, backend.name, stored.url)
    return stored
