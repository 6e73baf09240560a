# apps/domains/students/migrations/0001_initial.py

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("academics", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Student",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("registration_number", models.CharField(max_length=50, unique=True)),
                ("name", models.CharField(max_length=100)),
                (
                    "admission_type",
                    models.CharField(
                        choices=[
                            ("normal", "일반"),
                            ("transfer", "편입"),
                            ("direct", "직접 입학"),
                            ("equivalence", "학력 인정"),
                        ],
                        default="normal",
                        max_length=20,
                    ),
                ),
                ("transfer_credits", models.PositiveIntegerField(default=0)),
                ("transfer_institution", models.CharField(blank=True, max_length=255, null=True)),
                ("transfer_level", models.CharField(blank=True, max_length=50, null=True)),
                (
                    "school_class",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="students",
                        to="academics.schoolclass",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
            },
        ),
    ]
