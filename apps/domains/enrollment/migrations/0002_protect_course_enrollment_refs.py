# apps/domains/enrollment/migrations/0002_protect_course_enrollment_refs.py

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("academics", "0001_initial"),
        ("enrollment", "0001_initial"),
    ]

    operations = [
        migrations.AlterField(
            model_name="courseenrollment",
            name="class_course",
            field=models.ForeignKey(
                on_delete=django.db.models.deletion.PROTECT,
                related_name="course_enrollments",
                to="academics.classcourse",
            ),
        ),
        migrations.AlterField(
            model_name="courseenrollment",
            name="course",
            field=models.ForeignKey(
                on_delete=django.db.models.deletion.PROTECT,
                related_name="course_enrollments",
                to="academics.course",
            ),
        ),
        migrations.AlterField(
            model_name="courseenrollment",
            name="source_class",
            field=models.ForeignKey(
                on_delete=django.db.models.deletion.PROTECT,
                related_name="course_enrollments",
                to="academics.schoolclass",
            ),
        ),
    ]
