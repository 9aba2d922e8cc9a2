from django.apps import AppConfig


class PatientsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'pedi_backend.patients'
    verbose_name = 'Patients'
