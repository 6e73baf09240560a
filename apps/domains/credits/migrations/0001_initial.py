# apps/domains/credits/migrations/0001_initial.py

import apps.domains.credits.models
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("academics", "0001_initial"),
        ("students", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="StudentCreditLedger",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("credits_earned", models.IntegerField(default=0)),
                ("credits_in_progress", models.IntegerField(default=0)),
                (
                    "required_credits",
                    models.PositiveIntegerField(
                        default=apps.domains.credits.models.default_required_credits,
                    ),
                ),
                (
                    "academic_year",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="credit_ledgers",
                        to="academics.academicyear",
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="credit_ledgers",
                        to="students.student",
                    ),
                ),
            ],
            options={
                "ordering": ["academic_year__start_date", "id"],
            },
        ),
        migrations.AddConstraint(
            model_name="studentcreditledger",
            constraint=models.UniqueConstraint(
                fields=("student", "academic_year"),
                name="unique_credit_ledger_per_year",
            ),
        ),
    ]
