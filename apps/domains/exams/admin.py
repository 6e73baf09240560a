from django.contrib import admin
from .models import Exam, Grade


@admin.register(Exam)
class ExamAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "class_course", "percentage")
    list_filter = ("class_course",)
    search_fields = ("name",)


@admin.register(Grade)
class GradeAdmin(admin.ModelAdmin):
    list_display = ("id", "student", "exam", "score")
    list_filter = ("exam__class_course",)
    search_fields = ("student__name", "student__registration_number")
