from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path
from unittest.mock import Mock, patch

import requests
from django.test import SimpleTestCase

from pedi_backend.core.exceptions import ConfigurationError, StorageError
from pedi_backend.uploads.backends import (
    BlobStorageBackend,
    LocalStorageBackend,
    MediaMetadata,
    StoredMedia,
    select_backend,
)
from pedi_backend.uploads.config import UploadSettings


def make_config(**overrides) -> UploadSettings:
    values = {
        "ephemeral_fs": False,
        "backend": "",
        "blob_token": "",
        "blob_api_url": "https://blob.example.test",
        "blob_path_prefix": "patients",
        "blob_timeout": 5.0,
        "upload_root": Path("/tmp/pedi-uploads-unused"),
        "upload_url": "/uploads/",
        "max_bytes": 5 * 1024 * 1024,
        "file_permissions": 0o644,
    }
    values.update(overrides)
    return UploadSettings(**values)


META = MediaMetadata(filename="patient-1-abcdef01.png", content_type="image/png", size=4)


class SelectBackendTest(SimpleTestCase):

    def test_defaults_to_local(self):
        backend = select_backend(make_config())

        self.assertIsInstance(backend, LocalStorageBackend)

    def test_token_selects_blob(self):
        backend = select_backend(make_config(blob_token="vercel_blob_rw_x"))

        self.assertIsInstance(backend, BlobStorageBackend)

    def test_explicit_local_wins_over_token(self):
        backend = select_backend(make_config(backend="local", blob_token="vercel_blob_rw_x"))

        self.assertIsInstance(backend, LocalStorageBackend)

    def test_ephemeral_without_remote_fails_fast(self):
        with self.assertRaises(ConfigurationError):
            select_backend(make_config(ephemeral_fs=True))
        with self.assertRaises(ConfigurationError):
            select_backend(make_config(ephemeral_fs=True, backend="local"))

    def test_ephemeral_with_token_uses_blob(self):
        backend = select_backend(make_config(ephemeral_fs=True, blob_token="vercel_blob_rw_x"))

        self.assertIsInstance(backend, BlobStorageBackend)

    def test_blob_selected_without_token(self):
        with self.assertRaises(ConfigurationError):
            select_backend(make_config(backend="blob"))

    def test_unknown_selector(self):
        with self.assertRaises(ConfigurationError):
            select_backend(make_config(backend="s3"))

    def test_local_backend_receives_file_permissions(self):
        backend = select_backend(make_config(file_permissions=0o640))

        self.assertEqual(backend.file_permissions, 0o640)


class LocalStorageBackendTest(SimpleTestCase):

    def setUp(self):
        self.tmp = Path(tempfile.mkdtemp())
        self.addCleanup(shutil.rmtree, self.tmp, ignore_errors=True)
        self.root = self.tmp / "public" / "uploads"

    def test_creates_directory_on_demand_and_writes_file(self):
        backend = LocalStorageBackend(self.root, "/uploads/")

        stored = backend.store(b"\x89PNG", META)

        self.assertEqual(stored, StoredMedia(url="/uploads/patient-1-abcdef01.png"))
        self.assertEqual((self.root / META.filename).read_bytes(), b"\x89PNG")
        self.assertEqual(os.listdir(self.root), [META.filename])

    def test_stored_file_is_world_readable(self):
        backend = LocalStorageBackend(self.root)

        backend.store(b"data", META)

        mode = os.stat(self.root / META.filename).st_mode & 0o777
        self.assertEqual(mode, 0o644)

    def test_stored_file_uses_configured_permissions(self):
        backend = LocalStorageBackend(self.root, file_permissions=0o640)

        backend.store(b"data", META)

        mode = os.stat(self.root / META.filename).st_mode & 0o777
        self.assertEqual(mode, 0o640)

    def test_existing_directory_is_tolerated(self):
        self.root.mkdir(parents=True)
        backend = LocalStorageBackend(self.root, "/uploads")

        stored = backend.store(b"data", META)

        self.assertEqual(stored.url, "/uploads/patient-1-abcdef01.png")

    def test_failed_rename_leaves_no_files_and_raises(self):
        backend = LocalStorageBackend(self.root)

        with patch("pedi_backend.uploads.backends.os.replace", side_effect=OSError("disk full")):
            with self.assertRaises(StorageError) as ctx:
                backend.store(b"data", META)

        self.assertEqual(ctx.exception.details, "disk full")
        self.assertEqual(os.listdir(self.root), [])

    def test_unwritable_root_raises_storage_error(self):
        blocker = self.tmp / "blocker"
        blocker.write_bytes(b"")
        backend = LocalStorageBackend(blocker / "uploads")

        with self.assertRaises(StorageError):
            backend.store(b"data", META)


def _response(status_code=200, body=None, json_error=False):
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    if json_error:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = body if body is not None else {}
    return response


class BlobStorageBackendTest(SimpleTestCase):

    def setUp(self):
        self.session = Mock(spec=requests.Session)
        self.backend = BlobStorageBackend(
            "vercel_blob_rw_x",
            api_url="https://blob.example.test/",
            path_prefix="patients",
            timeout=5,
            session=self.session,
        )

    def test_put_returns_public_and_download_urls(self):
        self.session.put.return_value = _response(body={
            "url": "https://store.public.blob.vercel-storage.com/patients/patient-1-abcdef01.png",
            "downloadUrl": "https://store.public.blob.vercel-storage.com/patients/patient-1-abcdef01.png?download=1",
        })

        stored = self.backend.store(b"data", META)

        self.assertEqual(stored.url, "https://store.public.blob.vercel-storage.com/patients/patient-1-abcdef01.png")
        self.assertTrue(stored.download_url.endswith("?download=1"))
        self.assertIn("downloadUrl", stored.to_dict())

        args, kwargs = self.session.put.call_args
        self.assertEqual(args[0], "https://blob.example.test/patients/patient-1-abcdef01.png")
        self.assertEqual(kwargs["data"], b"data")
        self.assertEqual(kwargs["timeout"], 5)
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer vercel_blob_rw_x")
        self.assertEqual(kwargs["headers"]["x-content-type"], "image/png")

    def test_server_error_is_transient(self):
        self.session.put.return_value = _response(503, {"error": {"message": "unavailable"}})

        with self.assertRaises(StorageError) as ctx:
            self.backend.store(b"data", META)

        self.assertTrue(ctx.exception.transient)
        self.assertEqual(ctx.exception.details, "HTTP 503: unavailable")

    def test_client_error_is_permanent(self):
        self.session.put.return_value = _response(403, json_error=True)

        with self.assertRaises(StorageError) as ctx:
            self.backend.store(b"data", META)

        self.assertFalse(ctx.exception.transient)
        self.assertEqual(ctx.exception.details, "HTTP 403")

    def test_connection_error_is_transient(self):
        self.session.put.side_effect = requests.ConnectionError("reset")

        with self.assertRaises(StorageError) as ctx:
            self.backend.store(b"data", META)

        self.assertTrue(ctx.exception.transient)

    def test_response_without_url_is_rejected(self):
        self.session.put.return_value = _response(body={"pathname": "patients/x.png"})

        with self.assertRaises(StorageError):
            self.backend.store(b"data", META)

    def test_no_prefix(self):
        backend = BlobStorageBackend("t", path_prefix="", session=self.session)

        self.assertEqual(backend.pathname_for("a.png"), "a.png")

    def test_without_session_each_upload_uses_requests_put(self):
        backend = BlobStorageBackend("vercel_blob_rw_x", api_url="https://blob.example.test")
        ok = _response(body={"url": "https://store.example.test/patients/patient-1-abcdef01.png"})

        with patch("pedi_backend.uploads.backends.requests.put", return_value=ok) as put:
            stored = backend.store(b"data", META)

        self.assertEqual(stored.url, "https://store.example.test/patients/patient-1-abcdef01.png")
        put.assert_called_once()
        self.assertEqual(put.call_args[0][0], "https://blob.example.test/patients/patient-1-abcdef01.png")
        self.assertIsNone(backend.session)
