from django.db import models

from apps.api.common.models import TimestampModel


class Student(TimestampModel):
    # =========================
    # 입학 유형
    # =========================
    ADMISSION_NORMAL = "normal"
    ADMISSION_TRANSFER = "transfer"
    ADMISSION_DIRECT = "direct"
    ADMISSION_EQUIVALENCE = "equivalence"

    ADMISSION_TYPE_CHOICES = (
        (ADMISSION_NORMAL, "일반"),
        (ADMISSION_TRANSFER, "편입"),
        (ADMISSION_DIRECT, "직접 입학"),
        (ADMISSION_EQUIVALENCE, "학력 인정"),
    )

    # =========================
    # 기본 정보
    # =========================
    registration_number = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=100)

    # 현재 소속 반 (승급 실행 시 target 반으로 이동)
    school_class = models.ForeignKey(
        "academics.SchoolClass",
        on_delete=models.PROTECT,
        related_name="students",
    )

    admission_type = models.CharField(
        max_length=20,
        choices=ADMISSION_TYPE_CHOICES,
        default=ADMISSION_NORMAL,
    )

    # =========================
    # 편입 정보 (transfer 일 때만 의미 있음)
    # =========================
    transfer_credits = models.PositiveIntegerField(default=0)
    transfer_institution = models.CharField(max_length=255, null=True, blank=True)
    transfer_level = models.CharField(max_length=50, null=True, blank=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.registration_number} {self.name}"
