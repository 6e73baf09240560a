from django.contrib import admin
from .models import StudentCreditLedger


@admin.register(StudentCreditLedger)
class StudentCreditLedgerAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "student",
        "academic_year",
        "credits_earned",
        "credits_in_progress",
        "required_credits",
        "updated_at",
    )
    list_filter = ("academic_year",)
    search_fields = ("student__name", "student__registration_number")
    ordering = ("-id",)

    # 카운터는 수강 상태 전이로만 변경된다
    readonly_fields = ("credits_earned", "credits_in_progress")
