# PATH: apps/domains/promotion/models.py
from django.conf import settings
from django.db import models
from django.utils import timezone

from apps.api.common.models import AppendOnlyModel, TimestampModel


# ========================================================
# PromotionRule
# ========================================================

class PromotionRule(TimestampModel):
    """
    승급 규칙.

    ruleset = {
        "conditions": {"all": [ {"fact": "overallAverage", "operator": "greaterThanInclusive", "value": 10}, ... ]},
        "event": {"type": "promotion-eligible", "params": {"message": "..."}},
    }

    source_class / program / cycle_level 는 적용 범위 제한(선택).
    """

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")

    source_class = models.ForeignKey(
        "academics.SchoolClass",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="promotion_rules",
    )
    program = models.ForeignKey(
        "academics.Program",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="promotion_rules",
    )
    cycle_level = models.ForeignKey(
        "academics.CycleLevel",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="promotion_rules",
    )

    ruleset = models.JSONField()
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return self.name


# ========================================================
# StudentPromotionSummary (facts 캐시)
# ========================================================

class StudentPromotionSummary(TimestampModel):
    """
    (학생, 학년도) facts 캐시. summary_cache.refresh_* 만 쓴다.
    규칙 평가는 이 테이블만 읽는다 (없으면 "summary missing").
    """

    student = models.ForeignKey(
        "students.Student",
        on_delete=models.CASCADE,
        related_name="promotion_summaries",
    )
    academic_year = models.ForeignKey(
        "academics.AcademicYear",
        on_delete=models.CASCADE,
        related_name="promotion_summaries",
    )

    # 목록/정렬용 비정규화 컬럼
    overall_average = models.FloatField(default=0)
    credits_earned = models.IntegerField(default=0)
    credits_in_progress = models.IntegerField(default=0)
    required_credits = models.IntegerField(default=0)
    success_rate = models.FloatField(default=0)
    eliminatory_failures = models.IntegerField(default=0)
    performance_index = models.FloatField(default=0)
    is_on_track = models.BooleanField(default=False)

    # StudentPromotionFacts.to_facts() 전체
    facts = models.JSONField(default=dict)
    refreshed_at = models.DateTimeField(default=timezone.now)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["student", "academic_year"],
                name="unique_promotion_summary_per_year",
            )
        ]
        ordering = ["-refreshed_at", "-id"]

    def __str__(self):
        return f"{self.student_id} / {self.academic_year_id} avg={self.overall_average:.2f}"


# ========================================================
# PromotionExecution / PromotionExecutionResult (감사 이력, append-only)
# ========================================================

class PromotionExecution(AppendOnlyModel):
    rule = models.ForeignKey(
        PromotionRule,
        on_delete=models.PROTECT,
        related_name="executions",
    )
    source_class = models.ForeignKey(
        "academics.SchoolClass",
        on_delete=models.PROTECT,
        related_name="promotion_executions_from",
    )
    target_class = models.ForeignKey(
        "academics.SchoolClass",
        on_delete=models.PROTECT,
        related_name="promotion_executions_to",
    )
    academic_year = models.ForeignKey(
        "academics.AcademicYear",
        on_delete=models.PROTECT,
        related_name="promotion_executions",
    )
    executed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="promotion_executions",
    )

    students_evaluated = models.PositiveIntegerField(default=0)
    students_promoted = models.PositiveIntegerField(default=0)

    # {ruleName, sourceClassName, targetClassName}: 이후 이름 변경과 무관하게 보존
    metadata = models.JSONField(default=dict)
    executed_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-executed_at", "-id"]

    def __str__(self):
        return f"Execution#{self.id} rule={self.rule_id} {self.students_promoted}/{self.students_evaluated}"


class PromotionExecutionResult(AppendOnlyModel):
    execution = models.ForeignKey(
        PromotionExecution,
        on_delete=models.PROTECT,
        related_name="results",
    )
    # 요청된 학생 id 그대로 기록 (존재하지 않는 학생도 실패 결과로 남긴다)
    requested_student_id = models.BigIntegerField()
    student = models.ForeignKey(
        "students.Student",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="promotion_results",
    )

    was_promoted = models.BooleanField(default=False)

    # 실행 시점 캐시 facts (없었으면 null)
    evaluation_data = models.JSONField(null=True, blank=True)
    rules_matched = models.JSONField(default=list)
    reasons = models.JSONField(default=list)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["execution", "requested_student_id"],
                name="unique_result_per_execution_student",
            )
        ]
        ordering = ["id"]

    def __str__(self):
        return f"{self.execution_id} / {self.requested_student_id} promoted={self.was_promoted}"
