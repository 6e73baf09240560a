from .execution_views import PromotionExecutionViewSet
from .rule_views import PromotionRuleViewSet
from .summary_views import (
    StudentCreditCheckView,
    StudentFactsView,
    StudentPromotionSummaryViewSet,
)
