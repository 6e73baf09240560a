# apps/domains/promotion/filters.py

import django_filters

from .models import PromotionExecution, PromotionRule, StudentPromotionSummary


class PromotionRuleFilter(django_filters.FilterSet):
    """
    Front uses: /promotion/rules/?program={id}&is_active=true
    """

    class Meta:
        model = PromotionRule
        fields = {
            "program": ["exact"],
            "source_class": ["exact"],
            "cycle_level": ["exact"],
            "is_active": ["exact"],
        }


class PromotionExecutionFilter(django_filters.FilterSet):
    class Meta:
        model = PromotionExecution
        fields = {
            "rule": ["exact"],
            "source_class": ["exact"],
            "target_class": ["exact"],
            "academic_year": ["exact"],
            "executed_by": ["exact"],
        }


class StudentPromotionSummaryFilter(django_filters.FilterSet):
    school_class = django_filters.NumberFilter(field_name="student__school_class")

    class Meta:
        model = StudentPromotionSummary
        fields = {
            "student": ["exact"],
            "academic_year": ["exact"],
            "is_on_track": ["exact"],
        }
