# PATH: apps/domains/promotion/serializers/execution.py
from rest_framework import serializers

from apps.domains.promotion.models import PromotionExecution, PromotionExecutionResult


class ApplyPromotionSerializer(serializers.Serializer):
    rule = serializers.IntegerField()
    source_class = serializers.IntegerField()
    target_class = serializers.IntegerField()
    academic_year = serializers.IntegerField()
    students = serializers.ListField(
        child=serializers.IntegerField(),
        allow_empty=False,
    )


class PromotionExecutionSerializer(serializers.ModelSerializer):
    executed_by_username = serializers.CharField(
        source="executed_by.get_username", read_only=True
    )

    class Meta:
        model = PromotionExecution
        fields = [
            "id",
            "rule",
            "source_class",
            "target_class",
            "academic_year",
            "executed_by",
            "executed_by_username",
            "students_evaluated",
            "students_promoted",
            "metadata",
            "executed_at",
        ]
        read_only_fields = fields


class PromotionExecutionResultSerializer(serializers.ModelSerializer):
    registration_number = serializers.CharField(
        source="student.registration_number", read_only=True, default=None
    )

    class Meta:
        model = PromotionExecutionResult
        fields = [
            "id",
            "requested_student_id",
            "student",
            "registration_number",
            "was_promoted",
            "evaluation_data",
            "rules_matched",
            "reasons",
            "created_at",
        ]
        read_only_fields = fields


class PromotionExecutionDetailSerializer(serializers.Serializer):
    execution = PromotionExecutionSerializer()
    results = PromotionExecutionResultSerializer(many=True)
