from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import ReadOnlyModelViewSet

from apps.domains.students.models import Student

from .filters import StudentCreditLedgerFilter
from .models import StudentCreditLedger
from .serializers import StudentCreditLedgerSerializer, StudentCreditSummarySerializer
from .services import ledger as ledger_service


class StudentCreditLedgerViewSet(ReadOnlyModelViewSet):
    """
    원장 조회 전용. 변경은 수강 상태 전이(enrollment.services)로만 일어난다.
    """

    queryset = StudentCreditLedger.objects.all().select_related("academic_year")
    serializer_class = StudentCreditLedgerSerializer

    filter_backends = [DjangoFilterBackend]
    filterset_class = StudentCreditLedgerFilter


class StudentCreditSummaryView(APIView):
    def get(self, request, student_id: int):
        get_object_or_404(Student, id=student_id)
        summary = ledger_service.summarize_student(student_id)
        return Response(StudentCreditSummarySerializer(summary).data)
