from django.contrib import admin

from .models import (
    PromotionExecution,
    PromotionExecutionResult,
    PromotionRule,
    StudentPromotionSummary,
)


@admin.register(PromotionRule)
class PromotionRuleAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "program", "cycle_level", "source_class", "is_active", "updated_at")
    list_display_links = ("id", "name")
    list_filter = ("is_active", "program", "cycle_level")
    search_fields = ("name",)
    ordering = ("-id",)


@admin.register(StudentPromotionSummary)
class StudentPromotionSummaryAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "student",
        "academic_year",
        "overall_average",
        "credits_earned",
        "required_credits",
        "is_on_track",
        "refreshed_at",
    )
    list_filter = ("academic_year", "is_on_track")
    search_fields = ("student__name", "student__registration_number")
    ordering = ("-refreshed_at",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


class _ReadOnlyAdmin(admin.ModelAdmin):
    # 감사 이력: 조회만
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(PromotionExecution)
class PromotionExecutionAdmin(_ReadOnlyAdmin):
    list_display = (
        "id",
        "rule",
        "source_class",
        "target_class",
        "academic_year",
        "executed_by",
        "students_promoted",
        "students_evaluated",
        "executed_at",
    )
    list_filter = ("academic_year",)
    ordering = ("-executed_at",)


@admin.register(PromotionExecutionResult)
class PromotionExecutionResultAdmin(_ReadOnlyAdmin):
    list_display = ("id", "execution", "requested_student_id", "student", "was_promoted")
    list_filter = ("was_promoted",)
    ordering = ("-id",)
