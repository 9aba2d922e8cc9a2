from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from pedi_backend.core.exceptions import PediError
from pedi_backend.core.utils import error_response
from pedi_backend.patients.serializers import PatientReadSerializer
from pedi_backend.patients.services import (
    create_patient,
    delete_patient,
    get_patient,
    list_patients,
    update_patient,
)


class PatientListCreateView(APIView):
    """List all patients (newest first) or create a new patient."""

    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        try:
            patients = list_patients(user=request.user)
        except PediError as e:
            return error_response(e)
        return Response(PatientReadSerializer(patients, many=True).data, status=status.HTTP_200_OK)

    def post(self, request, *args, **kwargs):
        try:
            patient = create_patient(request.data, user=request.user)
        except PediError as e:
            return error_response(e)
        return Response(PatientReadSerializer(patient).data, status=status.HTTP_201_CREATED)


class PatientDetailView(APIView):
    """Retrieve, update (PUT and PATCH both merge) or delete a patient."""

    permission_classes = [IsAuthenticated]

    def get(self, request, pk, *args, **kwargs):
        try:
            patient = get_patient(pk, user=request.user)
        except PediError as e:
            return error_response(e)
        return Response(PatientReadSerializer(patient).data, status=status.HTTP_200_OK)

    def put(self, request, pk, *args, **kwargs):
        try:
            patient = update_patient(pk, request.data, user=request.user)
        except PediError as e:
            return error_response(e)
        return Response(PatientReadSerializer(patient).data, status=status.HTTP_200_OK)

    def patch(self, request, pk, *args, **kwargs):
        return self.put(request, pk, *args, **kwargs)

    def delete(self, request, pk, *args, **kwargs):
        try:
            delete_patient(pk, user=request.user)
        except PediError as e:
            return error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)
