from django.urls import path
from rest_framework.routers import DefaultRouter

from .views import (
    PromotionExecutionViewSet,
    PromotionRuleViewSet,
    StudentCreditCheckView,
    StudentFactsView,
    StudentPromotionSummaryViewSet,
)

router = DefaultRouter()

router.register(r"rules", PromotionRuleViewSet, basename="promotion-rule")
router.register(r"executions", PromotionExecutionViewSet, basename="promotion-execution")
router.register(r"summaries", StudentPromotionSummaryViewSet, basename="promotion-summary")

urlpatterns = [
    path("facts/", StudentFactsView.as_view(), name="promotion-facts"),
    path(
        "students/<int:student_id>/credit-check/",
        StudentCreditCheckView.as_view(),
        name="promotion-credit-check",
    ),
]

urlpatterns += router.urls
