from .execution import (
    ApplyPromotionSerializer,
    PromotionExecutionDetailSerializer,
    PromotionExecutionResultSerializer,
    PromotionExecutionSerializer,
)
from .rule import EvaluateClassSerializer, PromotionRuleSerializer
from .summary import (
    RefreshClassSerializer,
    RefreshStudentSerializer,
    StudentPromotionSummarySerializer,
    StudentYearQuerySerializer,
)
