"""
Test settings (in-memory SQLite, throwaway upload directory).

Used by `python manage.py test` and by pytest (see pyproject.toml).
"""

import tempfile

from .settings import *  # noqa: F403,F405

DEBUG = False

ALLOWED_HOSTS = ['localhost', 'testserver']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    },
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

UPLOAD_EPHEMERAL_FS = False
UPLOAD_STORAGE_BACKEND = 'local'
UPLOAD_ROOT = Path(tempfile.mkdtemp(prefix='pedi-uploads-'))
BLOB_READ_WRITE_TOKEN = ''

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'null': {'class': 'logging.NullHandler'},
    },
    'root': {
        'handlers': ['null'],
    },
    'loggers': {
        'pedi_backend': {
            'handlers': ['null'],
            'level': 'DEBUG',
            'propagate': False,
        },
    },
}
