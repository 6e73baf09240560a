# PATH: apps/domains/academics/models.py
from django.db import models

from apps.api.common.models import TimestampModel


# ========================================================
# AcademicYear (학사 연도, 예: 2024–2025)
# ========================================================

class AcademicYear(TimestampModel):
    name = models.CharField(max_length=50, unique=True)
    start_date = models.DateField()
    end_date = models.DateField()
    is_active = models.BooleanField(default=False)

    class Meta:
        ordering = ["-start_date", "-id"]

    def __str__(self):
        return self.name


# ========================================================
# Program / CycleLevel
# ========================================================

class Program(TimestampModel):
    code = models.CharField(max_length=30, unique=True)
    name = models.CharField(max_length=255)

    class Meta:
        ordering = ["code"]

    def __str__(self):
        return f"{self.code} - {self.name}"


class CycleLevel(TimestampModel):
    """
    학위 과정 내 단계 (예: L1, L2, L3)
    """

    code = models.CharField(max_length=30, unique=True)
    name = models.CharField(max_length=100)
    order_index = models.PositiveSmallIntegerField(default=1)

    class Meta:
        ordering = ["order_index", "id"]

    def __str__(self):
        return self.code


# ========================================================
# TeachingUnit (UE) / Course (EC)
# ========================================================

class TeachingUnit(TimestampModel):
    """
    학점이 부여되는 과목 묶음 (UE). 평균 가중치의 기준이 되는 credits를 가진다.
    """

    program = models.ForeignKey(
        Program,
        on_delete=models.CASCADE,
        related_name="teaching_units",
    )
    code = models.CharField(max_length=30)
    name = models.CharField(max_length=255)
    credits = models.PositiveIntegerField(default=0)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["program", "code"],
                name="unique_teaching_unit_code_per_program",
            )
        ]
        ordering = ["code"]

    def __str__(self):
        return f"{self.code} ({self.credits} cr)"


class Course(TimestampModel):
    program = models.ForeignKey(
        Program,
        on_delete=models.CASCADE,
        related_name="courses",
    )
    teaching_unit = models.ForeignKey(
        TeachingUnit,
        on_delete=models.CASCADE,
        related_name="courses",
    )
    code = models.CharField(max_length=30)
    name = models.CharField(max_length=255)

    # 수강 등록(CourseEnrollment) 시 credits_attempted 로 복사된다
    credits = models.PositiveIntegerField(default=0)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["program", "code"],
                name="unique_course_code_per_program",
            )
        ]
        ordering = ["code"]

    def __str__(self):
        return self.code


# ========================================================
# SchoolClass (반/코호트) / ClassCourse
# ========================================================

class SchoolClass(TimestampModel):
    program = models.ForeignKey(
        Program,
        on_delete=models.CASCADE,
        related_name="classes",
    )
    academic_year = models.ForeignKey(
        AcademicYear,
        on_delete=models.PROTECT,
        related_name="classes",
    )
    cycle_level = models.ForeignKey(
        CycleLevel,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="classes",
    )
    code = models.CharField(max_length=30)
    name = models.CharField(max_length=255)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["code", "academic_year"],
                name="unique_class_code_per_year",
            )
        ]
        ordering = ["-id"]

    def __str__(self):
        return self.name


class ClassCourse(TimestampModel):
    """
    과목을 특정 반에 배정 (시험은 ClassCourse 단위로 편성된다).
    """

    school_class = models.ForeignKey(
        SchoolClass,
        on_delete=models.CASCADE,
        related_name="class_courses",
    )
    course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name="class_courses",
    )
    code = models.CharField(max_length=50, unique=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["school_class", "course"],
                name="unique_course_per_class",
            )
        ]

    def __str__(self):
        return self.code
