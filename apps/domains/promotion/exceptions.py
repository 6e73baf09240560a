# PATH: apps/domains/promotion/exceptions.py
from __future__ import annotations

from apps.api.common.exceptions import NotFoundError


class PromotionSummaryMissing(NotFoundError):
    """
    (학생, 학년도) 캐시 row 가 없음.
    0으로 채운 facts 와 구분되어야 하므로 별도 타입으로 던진다.
    """

    default_code = "promotion_summary_missing"

    def __init__(self, student_id: int, academic_year_id: int):
        super().__init__(
            f"Promotion summary missing for student={student_id} academic_year={academic_year_id}",
        )
        self.student_id = student_id
        self.academic_year_id = academic_year_id
