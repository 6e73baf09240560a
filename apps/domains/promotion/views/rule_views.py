# PATH: apps/domains/promotion/views/rule_views.py
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import SearchFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import ModelViewSet

from apps.api.common.permissions import IsAdminOrReadOnly
from apps.domains.promotion.filters import PromotionRuleFilter
from apps.domains.promotion.serializers import EvaluateClassSerializer, PromotionRuleSerializer
from apps.domains.promotion.services import rule_service
from apps.domains.promotion.services.example_rules import EXAMPLE_RULES
from apps.domains.promotion.services.rule_evaluator import evaluate_class_for_promotion

_SCOPE_FIELDS = ("source_class", "program", "cycle_level")


def _to_service_payload(validated: dict) -> dict:
    """serializer validated_data(FK 인스턴스) → service 입력(*_id)."""
    payload = {}
    for key, value in validated.items():
        if key in _SCOPE_FIELDS:
            payload[f"{key}_id"] = value.id if value is not None else None
        else:
            payload[key] = value
    return payload


class PromotionRuleViewSet(ModelViewSet):
    """
    승급 규칙 CRUD (변경은 관리자만) + 반 평가.
    """

    queryset = rule_service.list_rules()
    serializer_class = PromotionRuleSerializer
    permission_classes = [IsAdminOrReadOnly]

    filter_backends = [DjangoFilterBackend, SearchFilter]
    filterset_class = PromotionRuleFilter
    search_fields = ["name"]

    def get_permissions(self):
        # 평가는 읽기 전용 작업 (로그인 사용자 전체)
        if self.action == "evaluate":
            return [IsAuthenticated()]
        return super().get_permissions()

    def perform_create(self, serializer):
        serializer.instance = rule_service.create_rule(
            _to_service_payload(serializer.validated_data)
        )

    def perform_update(self, serializer):
        serializer.instance = rule_service.update_rule(
            serializer.instance.id,
            _to_service_payload(serializer.validated_data),
        )

    def perform_destroy(self, instance):
        rule_service.delete_rule(instance.id)

    @action(detail=False, methods=["post"])
    def evaluate(self, request):
        serializer = EvaluateClassSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        evaluation = evaluate_class_for_promotion(
            rule_id=data["rule"],
            source_class_id=data["source_class"],
            academic_year_id=data["academic_year"],
        )
        return Response(evaluation.to_dict(), status=status.HTTP_200_OK)

    @action(detail=False, methods=["get"])
    def templates(self, request):
        return Response(EXAMPLE_RULES)
