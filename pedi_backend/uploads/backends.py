"""
Storage backends for uploaded profile photos.

A backend exposes ``store(data, metadata) -> StoredMedia`` and only
returns once the object is durably stored:
- LocalStorageBackend: temp file in the uploads directory, fsync, then an
  atomic rename into the final name.
- BlobStorageBackend: HTTP PUT to Vercel Blob; the reference is the URL
  from the acknowledged response.

The backend is selected once per process from settings
(get_storage_backend). Operations never look at the environment.
"""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import requests
from django.core.signals import setting_changed
from django.dispatch import receiver

from pedi_backend.core.exceptions import ConfigurationError, StorageError
from pedi_backend.uploads.config import DEFAULT_FILE_PERMISSIONS, UploadSettings

logger = logging.getLogger(__name__)

BACKEND_LOCAL = 'local'
BACKEND_BLOB = 'blob'


@dataclass(frozen=True)
class MediaMetadata:
    filename: str
    content_type: str
    size: int


@dataclass(frozen=True)
class StoredMedia:
    url: str
    download_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result = {'url': self.url}
        if self.download_url:
            result['downloadUrl'] = self.download_url
        return result


class StorageBackend:
    """Base class for upload storage backends."""

    name = 'base'

    def store(self, data: bytes, metadata: MediaMetadata) -> StoredMedia:
        raise NotImplementedError


class LocalStorageBackend(StorageBackend):
    """Writes files into a flat local directory served under ``base_url``."""

    name = BACKEND_LOCAL

    def __init__(
        self,
        root: Path,
        base_url: str = '/uploads/',
        file_permissions: int = DEFAULT_FILE_PERMISSIONS,
    ):
        self.root = Path(root)
        self.base_url = base_url if base_url.endswith('/') else base_url + '/'
        self.file_permissions = file_permissions

    def store(self, data: bytes, metadata: MediaMetadata) -> StoredMedia:
        try:
            # exist_ok: concurrent first uploads may race to create it
            os.makedirs(self.root, exist_ok=True)
        except OSError as exc:
            logger.exception('Could not create uploads directory %s', self.root)
            raise StorageError('Upload failed', details=str(exc)) from exc

        final_path = self.root / metadata.filename
        fd, tmp_path = tempfile.mkstemp(dir=self.root, prefix='.upload-', suffix='.part')
        try:
            with os.fdopen(fd, 'wb') as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            # mkstemp creates files as 0600
            os.chmod(tmp_path, self.file_permissions)
            os.replace(tmp_path, final_path)
        except OSError as exc:
            with contextlib.suppress(OSError):
                os.unlink(tmp_path)
            logger.exception('Writing upload %s failed', metadata.filename)
            raise StorageError('Upload failed', details=str(exc)) from exc

        return StoredMedia(url=f'{self.base_url}{metadata.filename}')


class BlobStorageBackend(StorageBackend):
    """Uploads to Vercel Blob through its HTTP API."""

    name = BACKEND_BLOB
    api_version = '7'

    def __init__(
        self,
        token: str,
        *,
        api_url: str = 'https://blob.vercel-storage.com',
        path_prefix: str = 'patients',
        timeout: float = 30,
        session: requests.Session | None = None,
    ):
        self.token = token
        self.api_url = api_url.rstrip('/')
        self.path_prefix = path_prefix.strip('/')
        self.timeout = timeout
        # None: module-level requests.put, one connection per upload
        self.session = session

    def pathname_for(self, filename: str) -> str:
        if self.path_prefix:
            return f'{self.path_prefix}/{filename}'
        return filename

    def store(self, data: bytes, metadata: MediaMetadata) -> StoredMedia:
        pathname = self.pathname_for(metadata.filename)
        headers = {
            'Authorization': f'Bearer {self.token}',
            'x-api-version': self.api_version,
            'x-content-type': metadata.content_type,
            'x-add-random-suffix': '0',
        }

        try:
            put = self.session.put if self.session is not None else requests.put
            response = put(
                f'{self.api_url}/{pathname}',
                data=data,
                headers=headers,
                timeout=self.timeout,
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            logger.exception('Blob upload of %s failed', pathname)
            raise StorageError('Upload failed', details=str(exc), transient=True) from exc
        except requests.RequestException as exc:
            logger.exception('Blob upload of %s failed', pathname)
            raise StorageError('Upload failed', details=str(exc)) from exc

        if response.status_code >= 400:
            transient = response.status_code == 429 or response.status_code >= 500
            logger.error('Blob upload of %s rejected with HTTP %s', pathname, response.status_code)
            raise StorageError(
                'Upload failed',
                details=_error_detail(response),
                transient=transient,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise StorageError('Upload failed', details='Malformed response from blob storage') from exc

        url = body.get('url') if isinstance(body, dict) else None
        if not url:
            raise StorageError('Upload failed', details='Blob storage response has no url')

        return StoredMedia(url=url, download_url=body.get('downloadUrl'))


def _error_detail(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f'HTTP {response.status_code}'
    error = body.get('error') if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get('message'):
        return f"HTTP {response.status_code}: {error['message']}"
    return f'HTTP {response.status_code}'


def select_backend(config: UploadSettings) -> StorageBackend:
    """Pick the storage backend for this deployment.

    - blob when selected explicitly or when a token is configured
    - ConfigurationError when the filesystem is ephemeral and no remote
      backend is configured
    - local otherwise
    """
    selector = config.backend
    if selector not in ('', BACKEND_LOCAL, BACKEND_BLOB):
        raise ConfigurationError(
            'File uploads are not configured for this deployment',
            details=f'Unknown UPLOAD_STORAGE_BACKEND {selector!r}',
        )

    if selector == BACKEND_BLOB or (not selector and config.blob_token):
        if not config.blob_token:
            raise ConfigurationError(
                'File uploads are not configured for this deployment',
                details='BLOB_READ_WRITE_TOKEN is not set',
            )
        return BlobStorageBackend(
            config.blob_token,
            api_url=config.blob_api_url,
            path_prefix=config.blob_path_prefix,
            timeout=config.blob_timeout,
        )

    if config.ephemeral_fs:
        raise ConfigurationError(
            'File uploads are not configured for this deployment',
            details='The local filesystem is ephemeral; set BLOB_READ_WRITE_TOKEN to store uploads remotely',
        )

    return LocalStorageBackend(config.upload_root, config.upload_url, config.file_permissions)


@lru_cache(maxsize=None)
def get_storage_backend() -> StorageBackend:
    """The process-wide backend. Configuration errors are not cached."""
    backend = select_backend(UploadSettings.from_django())
    logger.info('Upload storage backend: %s', backend.name)
    return backend


@receiver(setting_changed)
def _reset_storage_backend(*, setting, **kwargs):
    if setting.startswith(('UPLOAD_', 'BLOB_', 'FILE_UPLOAD_')):
        get_storage_backend.cache_clear()
