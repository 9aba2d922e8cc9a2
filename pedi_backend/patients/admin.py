"""
Patients App - Admin
"""

from django.contrib import admin
from django.utils import timezone

from pedi_backend.patients.models import Patient


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = (
        "full_name",
        "date_of_birth",
        "parent_name",
        "phone_number",
        "last_visit",
        "created_at",
    )
    list_filter = ("created_at", "last_visit")
    search_fields = ("first_name", "last_name", "parent_name", "phone_number")
    ordering = ("-created_at",)
    list_per_page = 50

    readonly_fields = ("id", "created_at", "updated_at")

    fieldsets = (
        ("Patient", {
            "fields": ("first_name", "last_name", "date_of_birth", "profile_image")
        }),
        ("Guardian & Contact", {
            "fields": ("parent_name", "phone_number", "email", "address")
        }),
        ("Medical", {
            "fields": ("medical_notes", "last_visit")
        }),
        ("System", {
            "fields": ("id", "created_at", "updated_at"),
            "classes": ("collapse",)
        }),
    )

    @admin.display(description="Name")
    def full_name(self, obj):
        return f"{obj.last_name}, {obj.first_name}"

    def save_model(self, request, obj, form, change):
        now = timezone.now()
        if not change:
            obj.created_at = now
        obj.updated_at = now
        super().save_model(request, obj, form, change)
