from django.conf import settings
from django.db import models

from apps.api.common.models import TimestampModel


def default_required_credits():
    return getattr(settings, "PROMOTION_DEFAULT_REQUIRED_CREDITS", 60)


# ========================================================
# StudentCreditLedger (학년도별 학점 누계)
# ========================================================

class StudentCreditLedger(TimestampModel):
    """
    (학생, 학년도) 당 1 row.

    credits_earned / credits_in_progress 는 누적 카운터다.
    직접 대입하지 않고 services.ledger.apply_delta 의 F() UPDATE 로만 변경한다.
    """

    student = models.ForeignKey(
        "students.Student",
        on_delete=models.CASCADE,
        related_name="credit_ledgers",
    )
    academic_year = models.ForeignKey(
        "academics.AcademicYear",
        on_delete=models.CASCADE,
        related_name="credit_ledgers",
    )

    credits_earned = models.IntegerField(default=0)
    credits_in_progress = models.IntegerField(default=0)
    required_credits = models.PositiveIntegerField(default=default_required_credits)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["student", "academic_year"],
                name="unique_credit_ledger_per_year",
            )
        ]
        ordering = ["academic_year__start_date", "id"]

    def __str__(self):
        return (
            f"{self.student_id} / {self.academic_year_id}: "
            f"{self.credits_earned}+{self.credits_in_progress}/{self.required_credits}"
        )
