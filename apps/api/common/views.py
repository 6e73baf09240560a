"""
공통 API 뷰
"""
from django.db import DatabaseError, connection
from django.http import JsonResponse

from apps.domains.academics.models import AcademicYear


def health_check(request):
    """
    헬스체크 엔드포인트 (인증 없음)

    Returns:
        - 200: DB 연결 정상. 활성 학년도 이름(없으면 null)을 함께 반환
        - 503: DB 연결 / 조회 실패
    """
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        active_year = (
            AcademicYear.objects
            .filter(is_active=True)
            .values_list("name", flat=True)
            .first()
        )
    except DatabaseError as e:
        return JsonResponse({
            "status": "unhealthy",
            "service": "promotion-api",
            "database": "disconnected",
            "error": str(e),
        }, status=503)

    return JsonResponse({
        "status": "healthy",
        "service": "promotion-api",
        "database": "connected",
        "activeAcademicYear": active_year,
    }, status=200)
