from django.db import models
from django.utils import timezone

from apps.api.common.models import TimestampModel


# ========================================================
# Enrollment (학년도 단위 반 등록)
# ========================================================

class Enrollment(TimestampModel):
    """
    학생이 특정 학년도에 특정 반에 소속된 기간.
    학생의 학적 이력(enrollment history)은 이 row 들의 시간순 나열이다.
    """

    STATUS_PENDING = "pending"
    STATUS_ACTIVE = "active"
    STATUS_COMPLETED = "completed"
    STATUS_WITHDRAWN = "withdrawn"

    STATUS_CHOICES = [
        (STATUS_PENDING, "대기"),
        (STATUS_ACTIVE, "활성"),
        (STATUS_COMPLETED, "수료"),
        (STATUS_WITHDRAWN, "중도 이탈"),
    ]

    student = models.ForeignKey(
        "students.Student",
        on_delete=models.CASCADE,
        related_name="enrollments",
    )
    school_class = models.ForeignKey(
        "academics.SchoolClass",
        on_delete=models.CASCADE,
        related_name="enrollments",
    )
    academic_year = models.ForeignKey(
        "academics.AcademicYear",
        on_delete=models.PROTECT,
        related_name="enrollments",
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
    )

    enrolled_at = models.DateTimeField(default=timezone.now)
    exited_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["enrolled_at", "id"]

    def __str__(self):
        return f"{self.student_id} -> {self.school_class_id} ({self.status})"


# ========================================================
# CourseEnrollment (과목 수강 시도)
# ========================================================

class CourseEnrollment(TimestampModel):
    """
    학생의 과목 수강 1회 시도.
    재수강은 attempt 를 올려 새 row 로 남긴다.

    status 전이는 enrollment.services 를 통해서만 하고,
    그때마다 학점 원장(credits)에 기여분 차이가 반영된다.
    """

    STATUS_PLANNED = "planned"
    STATUS_ACTIVE = "active"
    STATUS_COMPLETED = "completed"
    STATUS_FAILED = "failed"
    STATUS_WITHDRAWN = "withdrawn"

    STATUS_CHOICES = [
        (STATUS_PLANNED, "예정"),
        (STATUS_ACTIVE, "수강 중"),
        (STATUS_COMPLETED, "이수"),
        (STATUS_FAILED, "미이수"),
        (STATUS_WITHDRAWN, "철회"),
    ]

    OPEN_STATUSES = (STATUS_PLANNED, STATUS_ACTIVE)
    FINAL_STATUSES = (STATUS_COMPLETED, STATUS_FAILED, STATUS_WITHDRAWN)

    student = models.ForeignKey(
        "students.Student",
        on_delete=models.CASCADE,
        related_name="course_enrollments",
    )
    # 참조 삭제로 수강 row 가 사라지면 원장 기여분이 남는다 → PROTECT
    class_course = models.ForeignKey(
        "academics.ClassCourse",
        on_delete=models.PROTECT,
        related_name="course_enrollments",
    )
    course = models.ForeignKey(
        "academics.Course",
        on_delete=models.PROTECT,
        related_name="course_enrollments",
    )
    source_class = models.ForeignKey(
        "academics.SchoolClass",
        on_delete=models.PROTECT,
        related_name="course_enrollments",
    )
    academic_year = models.ForeignKey(
        "academics.AcademicYear",
        on_delete=models.PROTECT,
        related_name="course_enrollments",
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_PLANNED,
    )
    attempt = models.PositiveSmallIntegerField(default=1)

    credits_attempted = models.PositiveIntegerField(default=0)
    credits_earned = models.PositiveIntegerField(default=0)

    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["student", "course", "academic_year", "attempt"],
                name="unique_course_attempt_per_year",
            )
        ]
        ordering = ["id"]

    def __str__(self):
        return f"{self.student_id} / {self.course_id} #{self.attempt} ({self.status})"
