# PATH: apps/domains/promotion/views/execution_views.py
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import mixins, status
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from apps.api.common.permissions import IsAdminOrReadOnly
from apps.domains.promotion.filters import PromotionExecutionFilter
from apps.domains.promotion.serializers import (
    ApplyPromotionSerializer,
    PromotionExecutionDetailSerializer,
    PromotionExecutionSerializer,
)
from apps.domains.promotion.services import promotion_executor


class PromotionExecutionViewSet(
    mixins.ListModelMixin,
    GenericViewSet,
):
    """
    승급 실행 이력 조회 + 실행(관리자).
    이력은 append-only: update / delete 없음.
    """

    queryset = promotion_executor.list_executions()
    lookup_value_regex = r"\d+"
    serializer_class = PromotionExecutionSerializer
    permission_classes = [IsAdminOrReadOnly]

    filter_backends = [DjangoFilterBackend]
    filterset_class = PromotionExecutionFilter

    def retrieve(self, request, pk=None):
        details = promotion_executor.get_execution_details(int(pk))
        return Response(PromotionExecutionDetailSerializer(details).data)

    def create(self, request):
        serializer = ApplyPromotionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        execution = promotion_executor.apply_promotion(
            source_class_id=data["source_class"],
            target_class_id=data["target_class"],
            rule_id=data["rule"],
            academic_year_id=data["academic_year"],
            student_ids=data["students"],
            executed_by=request.user,
        )
        details = promotion_executor.get_execution_details(execution.id)
        return Response(
            PromotionExecutionDetailSerializer(details).data,
            status=status.HTTP_201_CREATED,
        )
