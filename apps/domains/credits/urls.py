from django.urls import path
from rest_framework.routers import DefaultRouter

from .views import StudentCreditLedgerViewSet, StudentCreditSummaryView

router = DefaultRouter()

router.register(
    r"ledgers",
    StudentCreditLedgerViewSet,
    basename="credit-ledger",
)

urlpatterns = [
    path(
        "students/<int:student_id>/summary/",
        StudentCreditSummaryView.as_view(),
        name="student-credit-summary",
    ),
]

urlpatterns += router.urls
