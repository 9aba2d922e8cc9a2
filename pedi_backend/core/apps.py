"""
Core App Configuration
"""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Shared error types, health check and authentication endpoints."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'pedi_backend.core'
    verbose_name = 'Core'
