# PATH: apps/domains/promotion/serializers/summary.py
from rest_framework import serializers

from apps.domains.promotion.models import StudentPromotionSummary


class StudentPromotionSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = StudentPromotionSummary
        fields = [
            "id",
            "student",
            "academic_year",
            "overall_average",
            "credits_earned",
            "credits_in_progress",
            "required_credits",
            "success_rate",
            "eliminatory_failures",
            "performance_index",
            "is_on_track",
            "facts",
            "refreshed_at",
        ]
        read_only_fields = fields


class RefreshClassSerializer(serializers.Serializer):
    school_class = serializers.IntegerField()
    academic_year = serializers.IntegerField()


class RefreshStudentSerializer(serializers.Serializer):
    student = serializers.IntegerField()
    academic_year = serializers.IntegerField()


class StudentYearQuerySerializer(serializers.Serializer):
    student = serializers.IntegerField()
    academic_year = serializers.IntegerField()
