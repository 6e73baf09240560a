# apps/domains/promotion/migrations/0001_initial.py

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("academics", "0001_initial"),
        ("students", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="PromotionRule",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("ruleset", models.JSONField()),
                ("is_active", models.BooleanField(default=True)),
                (
                    "cycle_level",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="promotion_rules",
                        to="academics.cyclelevel",
                    ),
                ),
                (
                    "program",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="promotion_rules",
                        to="academics.program",
                    ),
                ),
                (
                    "source_class",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="promotion_rules",
                        to="academics.schoolclass",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="StudentPromotionSummary",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("overall_average", models.FloatField(default=0)),
                ("credits_earned", models.IntegerField(default=0)),
                ("credits_in_progress", models.IntegerField(default=0)),
                ("required_credits", models.IntegerField(default=0)),
                ("success_rate", models.FloatField(default=0)),
                ("eliminatory_failures", models.IntegerField(default=0)),
                ("performance_index", models.FloatField(default=0)),
                ("is_on_track", models.BooleanField(default=False)),
                ("facts", models.JSONField(default=dict)),
                ("refreshed_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "academic_year",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="promotion_summaries",
                        to="academics.academicyear",
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="promotion_summaries",
                        to="students.student",
                    ),
                ),
            ],
            options={
                "ordering": ["-refreshed_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="PromotionExecution",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("students_evaluated", models.PositiveIntegerField(default=0)),
                ("students_promoted", models.PositiveIntegerField(default=0)),
                ("metadata", models.JSONField(default=dict)),
                ("executed_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "academic_year",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="promotion_executions",
                        to="academics.academicyear",
                    ),
                ),
                (
                    "executed_by",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="promotion_executions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "rule",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="executions",
                        to="promotion.promotionrule",
                    ),
                ),
                (
                    "source_class",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="promotion_executions_from",
                        to="academics.schoolclass",
                    ),
                ),
                (
                    "target_class",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="promotion_executions_to",
                        to="academics.schoolclass",
                    ),
                ),
            ],
            options={
                "ordering": ["-executed_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="PromotionExecutionResult",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("requested_student_id", models.BigIntegerField()),
                ("was_promoted", models.BooleanField(default=False)),
                ("evaluation_data", models.JSONField(blank=True, null=True)),
                ("rules_matched", models.JSONField(default=list)),
                ("reasons", models.JSONField(default=list)),
                (
                    "execution",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="results",
                        to="promotion.promotionexecution",
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="promotion_results",
                        to="students.student",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.AddConstraint(
            model_name="studentpromotionsummary",
            constraint=models.UniqueConstraint(
                fields=("student", "academic_year"),
                name="unique_promotion_summary_per_year",
            ),
        ),
        migrations.AddConstraint(
            model_name="promotionexecutionresult",
            constraint=models.UniqueConstraint(
                fields=("execution", "requested_student_id"),
                name="unique_result_per_execution_student",
            ),
        ),
    ]
