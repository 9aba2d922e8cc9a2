import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Patient",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("first_name", models.CharField(max_length=100)),
                ("last_name", models.CharField(max_length=100)),
                ("date_of_birth", models.DateTimeField()),
                ("parent_name", models.CharField(max_length=200)),
                ("phone_number", models.CharField(max_length=50)),
                ("email", models.CharField(blank=True, max_length=254, null=True)),
                ("address", models.TextField(blank=True, null=True)),
                ("profile_image", models.TextField(blank=True, null=True)),
                ("medical_notes", models.TextField(blank=True, null=True)),
                ("last_visit", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(editable=False)),
                ("updated_at", models.DateTimeField()),
            ],
            options={
                "verbose_name": "Patient",
                "verbose_name_plural": "Patients",
                "db_table": "patients_patient",
                "ordering": ["-created_at"],
            },
        ),
    ]
