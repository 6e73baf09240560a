# PATH: apps/domains/promotion/views/summary_views.py
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import ReadOnlyModelViewSet

from apps.api.common.permissions import IsAdminOrStaff
from apps.domains.promotion.filters import StudentPromotionSummaryFilter
from apps.domains.promotion.models import StudentPromotionSummary
from apps.domains.promotion.serializers import (
    RefreshClassSerializer,
    RefreshStudentSerializer,
    StudentPromotionSummarySerializer,
    StudentYearQuerySerializer,
)
from apps.domains.promotion.services import summary_cache
from apps.domains.promotion.services.facts_builder import compute_student_facts
from apps.domains.promotion.services.rule_evaluator import evaluate_student_credit_progress


class StudentPromotionSummaryViewSet(ReadOnlyModelViewSet):
    """
    facts 캐시 조회 + 수동 refresh (관리자).
    캐시는 여기 refresh 액션으로만 갱신된다.
    """

    queryset = StudentPromotionSummary.objects.all().select_related("student")
    serializer_class = StudentPromotionSummarySerializer

    filter_backends = [DjangoFilterBackend]
    filterset_class = StudentPromotionSummaryFilter

    def get_permissions(self):
        if self.action in ("refresh_class", "refresh_student"):
            return [IsAdminOrStaff()]
        return super().get_permissions()

    @action(detail=False, methods=["post"], url_path="refresh-class")
    def refresh_class(self, request):
        serializer = RefreshClassSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = summary_cache.refresh_class_summaries(
            data["school_class"],
            data["academic_year"],
        )
        return Response(result, status=status.HTTP_200_OK)

    @action(detail=False, methods=["post"], url_path="refresh")
    def refresh_student(self, request):
        serializer = RefreshStudentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        facts = summary_cache.refresh_student_summary(
            data["student"],
            data["academic_year"],
        )
        return Response(facts.to_facts(), status=status.HTTP_200_OK)


class StudentFactsView(APIView):
    """
    live facts (캐시 우회). 점검/디버깅용.
    GET /promotion/facts/?student=&academic_year=
    """

    def get(self, request):
        serializer = StudentYearQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        facts = compute_student_facts(data["student"], data["academic_year"])
        return Response(facts.to_facts())


class StudentCreditCheckView(APIView):
    def get(self, request, student_id: int):
        return Response(evaluate_student_credit_progress(student_id))
