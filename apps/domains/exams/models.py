from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from apps.api.common.models import TimestampModel


class Exam(TimestampModel):
    """
    ClassCourse 단위 평가. percentage 는 과목 점수에서 차지하는 비중(0~100).
    """

    class_course = models.ForeignKey(
        "academics.ClassCourse",
        on_delete=models.CASCADE,
        related_name="exams",
    )
    name = models.CharField(max_length=255)
    percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.name} ({self.percentage}%)"


class Grade(TimestampModel):
    student = models.ForeignKey(
        "students.Student",
        on_delete=models.CASCADE,
        related_name="grades",
    )
    exam = models.ForeignKey(
        Exam,
        on_delete=models.CASCADE,
        related_name="grades",
    )
    # 0~20 점수 체계
    score = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(0), MaxValueValidator(20)],
    )

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["student", "exam"],
                name="unique_grade_per_exam",
            )
        ]

    def __str__(self):
        return f"{self.student_id} / {self.exam_id}: {self.score}"
