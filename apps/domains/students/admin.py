from django.contrib import admin
from .models import Student


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "registration_number",
        "name",
        "school_class",
        "admission_type",
        "transfer_credits",
        "created_at",
    )
    list_filter = (
        "admission_type",
        "school_class",
    )
    search_fields = ("registration_number", "name")
