from django.apps import AppConfig


class UploadsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'pedi_backend.uploads'
    verbose_name = 'Profile photo uploads'

    def ready(self):
        # Connects the setting_changed receiver that drops the cached backend.
        from pedi_backend.uploads import backends  # noqa: F401
