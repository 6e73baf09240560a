from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import mixins, status
from rest_framework.decorators import action
from rest_framework.filters import SearchFilter
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from apps.api.common.permissions import IsAdminOrReadOnly

from . import services
from .filters import CourseEnrollmentFilter, EnrollmentFilter
from .models import CourseEnrollment, Enrollment
from .serializers import (
    CourseEnrollmentBulkSerializer,
    CourseEnrollmentCreateSerializer,
    CourseEnrollmentSerializer,
    EnrollmentCreateSerializer,
    EnrollmentSerializer,
    StatusTransitionSerializer,
)


class EnrollmentViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    GenericViewSet,
):
    queryset = Enrollment.objects.all().select_related("student", "school_class")
    serializer_class = EnrollmentSerializer
    permission_classes = [IsAdminOrReadOnly]

    filter_backends = [DjangoFilterBackend, SearchFilter]
    filterset_class = EnrollmentFilter
    search_fields = ["student__name", "student__registration_number"]

    def create(self, request):
        serializer = EnrollmentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        enrollment = services.create_enrollment(
            student_id=data["student"],
            class_id=data["school_class"],
            academic_year_id=data["academic_year"],
            status=data["status"],
        )
        return Response(
            EnrollmentSerializer(enrollment).data,
            status=status.HTTP_201_CREATED,
        )


class CourseEnrollmentViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    GenericViewSet,
):
    """
    과목 수강 조회 + 상태 전이.
    상태를 PATCH 로 직접 바꾸지 않는다(원장 반영 누락 방지). 반드시 status 액션 사용.
    """

    queryset = CourseEnrollment.objects.all().select_related("course", "student")
    serializer_class = CourseEnrollmentSerializer
    permission_classes = [IsAdminOrReadOnly]

    filter_backends = [DjangoFilterBackend, SearchFilter]
    filterset_class = CourseEnrollmentFilter
    search_fields = ["student__name", "course__code"]

    def create(self, request):
        serializer = CourseEnrollmentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        record = services.create_course_enrollment(
            student_id=data["student"],
            class_course_id=data["class_course"],
            status=data["status"],
            attempt=data["attempt"],
        )
        return Response(
            CourseEnrollmentSerializer(record).data,
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=["post"], url_path="bulk")
    def bulk_create(self, request):
        serializer = CourseEnrollmentBulkSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = services.bulk_enroll(
            student_id=data["student"],
            class_course_ids=data["class_courses"],
            status=data["status"],
            attempt=data["attempt"],
        )
        return Response(
            {
                "created": CourseEnrollmentSerializer(result["created"], many=True).data,
                "skipped": result["skipped"],
            },
            status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=["post"], url_path="status")
    def transition_status(self, request, pk=None):
        serializer = StatusTransitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        record = services.update_course_enrollment_status(
            int(pk),
            serializer.validated_data["status"],
        )
        return Response(CourseEnrollmentSerializer(record).data)
