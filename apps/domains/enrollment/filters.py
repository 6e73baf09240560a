# apps/domains/enrollment/filters.py

import django_filters

from .models import CourseEnrollment, Enrollment


class EnrollmentFilter(django_filters.FilterSet):
    """
    Front uses: /enrollments/?student={studentId}
    """

    class Meta:
        model = Enrollment
        fields = {
            "student": ["exact"],
            "school_class": ["exact"],
            "academic_year": ["exact"],
            "status": ["exact"],
        }


class CourseEnrollmentFilter(django_filters.FilterSet):
    class Meta:
        model = CourseEnrollment
        fields = {
            "student": ["exact"],
            "class_course": ["exact"],
            "course": ["exact"],
            "academic_year": ["exact"],
            "status": ["exact"],
        }
