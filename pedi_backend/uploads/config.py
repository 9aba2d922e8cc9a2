"""Upload configuration, read from Django settings."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from django.conf import settings

DEFAULT_MAX_BYTES = 5 * 1024 * 1024
DEFAULT_FILE_PERMISSIONS = 0o644


@dataclass(frozen=True)
class UploadSettings:
    ephemeral_fs: bool
    backend: str
    blob_token: str
    blob_api_url: str
    blob_path_prefix: str
    blob_timeout: float
    upload_root: Path
    upload_url: str
    max_bytes: int
    file_permissions: int = DEFAULT_FILE_PERMISSIONS

    @classmethod
    def from_django(cls) -> UploadSettings:
        return cls(
            ephemeral_fs=bool(getattr(settings, 'UPLOAD_EPHEMERAL_FS', False)),
            backend=(getattr(settings, 'UPLOAD_STORAGE_BACKEND', '') or '').strip().lower(),
            blob_token=getattr(settings, 'BLOB_READ_WRITE_TOKEN', '') or '',
            blob_api_url=getattr(settings, 'BLOB_API_URL', 'https://blob.vercel-storage.com').rstrip('/'),
            blob_path_prefix=(getattr(settings, 'BLOB_PATH_PREFIX', 'patients') or '').strip('/'),
            blob_timeout=float(getattr(settings, 'BLOB_TIMEOUT', 30)),
            upload_root=Path(settings.UPLOAD_ROOT),
            upload_url=getattr(settings, 'UPLOAD_URL', '/uploads/'),
            max_bytes=int(getattr(settings, 'UPLOAD_MAX_BYTES', DEFAULT_MAX_BYTES)),
            file_permissions=getattr(settings, 'FILE_UPLOAD_PERMISSIONS', None) or DEFAULT_FILE_PERMISSIONS,
        )
