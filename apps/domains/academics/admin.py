from django.contrib import admin
from .models import (
    AcademicYear,
    Program,
    CycleLevel,
    TeachingUnit,
    Course,
    SchoolClass,
    ClassCourse,
)


@admin.register(AcademicYear)
class AcademicYearAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "start_date", "end_date", "is_active")
    list_filter = ("is_active",)
    ordering = ("-start_date",)


@admin.register(Program)
class ProgramAdmin(admin.ModelAdmin):
    list_display = ("id", "code", "name")
    search_fields = ("code", "name")


@admin.register(CycleLevel)
class CycleLevelAdmin(admin.ModelAdmin):
    list_display = ("id", "code", "name", "order_index")
    ordering = ("order_index",)


@admin.register(TeachingUnit)
class TeachingUnitAdmin(admin.ModelAdmin):
    list_display = ("id", "code", "name", "program", "credits")
    list_filter = ("program",)
    search_fields = ("code", "name")


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ("id", "code", "name", "teaching_unit", "credits")
    list_filter = ("program", "teaching_unit")
    search_fields = ("code", "name")


@admin.register(SchoolClass)
class SchoolClassAdmin(admin.ModelAdmin):
    list_display = ("id", "code", "name", "program", "academic_year", "cycle_level")
    list_display_links = ("id", "code")
    list_filter = ("academic_year", "program", "cycle_level")
    search_fields = ("code", "name")


@admin.register(ClassCourse)
class ClassCourseAdmin(admin.ModelAdmin):
    list_display = ("id", "code", "school_class", "course")
    list_filter = ("school_class",)
    search_fields = ("code",)
