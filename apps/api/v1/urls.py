# apps/api/v1/urls.py
from django.urls import path, include

urlpatterns = [
    # =========================
    # Domain APIs
    # =========================
    path("enrollments/", include("apps.domains.enrollment.urls")),
    path("credits/", include("apps.domains.credits.urls")),

    # 🔥 승급 평가 (rules / executions / summaries / facts)
    path("promotion/", include("apps.domains.promotion.urls")),
]
