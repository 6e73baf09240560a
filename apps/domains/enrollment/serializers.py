from rest_framework import serializers

from .models import CourseEnrollment, Enrollment
from apps.domains.students.models import Student


class StudentShortSerializer(serializers.ModelSerializer):
    class Meta:
        model = Student
        fields = [
            "id",
            "registration_number",
            "name",
            "school_class",
        ]


class EnrollmentSerializer(serializers.ModelSerializer):
    student = StudentShortSerializer(read_only=True)

    class Meta:
        model = Enrollment
        fields = "__all__"


class EnrollmentCreateSerializer(serializers.Serializer):
    student = serializers.IntegerField()
    school_class = serializers.IntegerField()
    academic_year = serializers.IntegerField()
    status = serializers.ChoiceField(
        choices=Enrollment.STATUS_CHOICES,
        default=Enrollment.STATUS_ACTIVE,
    )


class CourseEnrollmentSerializer(serializers.ModelSerializer):
    course_code = serializers.CharField(source="course.code", read_only=True)

    class Meta:
        model = CourseEnrollment
        fields = "__all__"
        read_only_fields = [
            "course",
            "source_class",
            "academic_year",
            "credits_attempted",
            "credits_earned",
            "started_at",
            "completed_at",
        ]


class CourseEnrollmentCreateSerializer(serializers.Serializer):
    student = serializers.IntegerField()
    class_course = serializers.IntegerField()
    status = serializers.ChoiceField(
        choices=CourseEnrollment.STATUS_CHOICES,
        default=CourseEnrollment.STATUS_PLANNED,
    )
    attempt = serializers.IntegerField(min_value=1, default=1)


class CourseEnrollmentBulkSerializer(serializers.Serializer):
    student = serializers.IntegerField()
    class_courses = serializers.ListField(
        child=serializers.IntegerField(),
        allow_empty=False,
    )
    status = serializers.ChoiceField(
        choices=CourseEnrollment.STATUS_CHOICES,
        default=CourseEnrollment.STATUS_ACTIVE,
    )
    attempt = serializers.IntegerField(min_value=1, default=1)


class StatusTransitionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=CourseEnrollment.STATUS_CHOICES)
