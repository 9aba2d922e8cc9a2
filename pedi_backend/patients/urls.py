"""Patients App URLs.

Prefix: /api/
Routes:
    GET/POST              /api/patients/       - List/Create patients
    GET/PUT/PATCH/DELETE  /api/patients/<pk>/  - Retrieve/Update/Delete patient
"""

from django.urls import path

from pedi_backend.patients.views import (
    PatientDetailView,
    PatientListCreateView,
)

app_name = 'patients'

urlpatterns = [
    path('patients/', PatientListCreateView.as_view(), name='list'),
    path('patients/<str:pk>/', PatientDetailView.as_view(), name='detail'),
]
