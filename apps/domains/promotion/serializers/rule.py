# PATH: apps/domains/promotion/serializers/rule.py
from rest_framework import serializers

from apps.domains.promotion.models import PromotionRule


class PromotionRuleSerializer(serializers.ModelSerializer):
    """
    입력 형태 검사만 한다. ruleset 구조 검증은 rule_service(condition_engine.validate_ruleset).
    """

    ruleset = serializers.JSONField()

    class Meta:
        model = PromotionRule
        fields = [
            "id",
            "name",
            "description",
            "source_class",
            "program",
            "cycle_level",
            "ruleset",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]


class EvaluateClassSerializer(serializers.Serializer):
    rule = serializers.IntegerField()
    source_class = serializers.IntegerField()
    academic_year = serializers.IntegerField()
