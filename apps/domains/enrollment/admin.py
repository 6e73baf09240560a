from django.contrib import admin
from .models import CourseEnrollment, Enrollment


@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    list_display = ("id", "student", "school_class", "academic_year", "status", "enrolled_at", "exited_at")
    list_display_links = ("id", "student")
    list_filter = ("status", "academic_year", "school_class")
    search_fields = ("student__name", "student__registration_number")
    ordering = ("-id",)


@admin.register(CourseEnrollment)
class CourseEnrollmentAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "student",
        "course",
        "academic_year",
        "status",
        "attempt",
        "credits_attempted",
        "credits_earned",
    )
    list_display_links = ("id", "student")
    list_filter = ("status", "academic_year")
    search_fields = ("student__name", "course__code")
    ordering = ("-id",)

    # 생성/상태/학점/삭제는 services 를 통해서만 (원장 동기화)
    readonly_fields = (
        "student",
        "class_course",
        "course",
        "source_class",
        "academic_year",
        "status",
        "attempt",
        "credits_attempted",
        "credits_earned",
    )

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
