# PATH: apps/domains/promotion/facts.py
"""
StudentPromotionFacts

(학생, 학년도) 1건에 대한 승급 판단 지표 스냅샷.
규칙 조건은 camelCase 평면 키("overallAverage", "creditsEarned" ...)로 지표를 참조하므로
to_facts() 가 그 계약의 단일 출처다. 캐시(StudentPromotionSummary.facts)도 같은 dict 를 저장한다.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Optional


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


@dataclass(frozen=True)
class StudentPromotionFacts:
    # 식별
    student_id: int
    registration_number: str
    class_id: int
    class_name: str
    program_id: int
    program_code: str
    academic_year_id: int

    # 평균
    overall_average: float = 0.0
    overall_average_unweighted: float = 0.0
    average_by_teaching_unit: Dict[str, dict] = field(default_factory=dict)
    average_by_course: Dict[str, dict] = field(default_factory=dict)

    # 점수 분포
    lowest_score: float = 0.0
    highest_score: float = 0.0
    lowest_unit_average: float = 0.0
    scores_above10: int = 0
    scores_below10: int = 0
    scores_below8: int = 0

    # 과락 / 이수
    failed_courses_count: int = 0
    failed_teaching_units_count: int = 0
    compensable_failures: int = 0
    eliminatory_failures: int = 0
    validated_courses_count: int = 0
    validated_units_count: int = 0
    success_rate: float = 0.0
    unit_validation_rate: float = 0.0

    # 학점
    credits_earned: int = 0
    credits_earned_this_year: int = 0
    credits_in_progress: int = 0
    credits_attempted: int = 0
    required_credits: int = 0
    credit_deficit: int = 0
    credit_completion_rate: float = 0.0
    credit_success_rate: float = 0.0

    # 수강 시도 / 재수강
    courses_with_multiple_attempts: int = 0
    max_attempt_count: int = 0
    total_attempts: int = 0
    active_courses: int = 0
    completed_courses: int = 0
    withdrawn_courses: int = 0
    failed_course_attempts: int = 0
    first_attempt_success_rate: float = 0.0
    retake_success_rate: float = 0.0

    # 학적
    enrollment_status: str = "pending"
    previous_enrollments_count: int = 0
    completed_years: int = 0
    active_years_count: int = 0

    # 종합 지표
    performance_index: float = 0.0
    is_on_track: bool = False
    progression_rate: float = 0.0
    projected_credits_end_of_year: int = 0
    can_reach_required_credits: bool = False

    # 입학 / 편입
    admission_type: str = "normal"
    is_transfer_student: bool = False
    is_direct_admission: bool = False
    has_academic_history: bool = False
    transfer_credits: int = 0
    transfer_institution: Optional[str] = None
    transfer_level: Optional[str] = None

    def to_facts(self) -> Dict[str, Any]:
        """규칙 평가 / JSON 저장용 camelCase dict."""
        return {_camel(k): v for k, v in asdict(self).items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StudentPromotionFacts":
        """to_facts() 결과(캐시 JSON)로부터 복원. 모르는 키는 무시한다."""
        kwargs = {}
        for f in fields(cls):
            key = _camel(f.name)
            if key in data:
                kwargs[f.name] = data[key]
        return cls(**kwargs)


FACT_NAMES = frozenset(_camel(f.name) for f in fields(StudentPromotionFacts))
