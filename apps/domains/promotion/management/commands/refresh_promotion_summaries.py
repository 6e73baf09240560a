# apps/domains/promotion/management/commands/refresh_promotion_summaries.py
"""
facts 캐시(StudentPromotionSummary) 재계산.
평가/실행 전에 반 단위로 돌린다.

사용:
  python manage.py refresh_promotion_summaries --class 3 --academic-year 2
  python manage.py refresh_promotion_summaries --student 41 --academic-year 2
"""
from django.core.management.base import BaseCommand, CommandError

from apps.api.common.exceptions import DomainError
from apps.domains.promotion.services import summary_cache


class Command(BaseCommand):
    help = "Recompute cached promotion facts for a class or a single student."

    def add_arguments(self, parser):
        parser.add_argument("--class", dest="class_id", type=int)
        parser.add_argument("--student", dest="student_id", type=int)
        parser.add_argument("--academic-year", dest="academic_year_id", type=int, required=True)

    def handle(self, *args, **opts):
        class_id = opts.get("class_id")
        student_id = opts.get("student_id")
        academic_year_id = int(opts["academic_year_id"])

        if bool(class_id) == bool(student_id):
            raise CommandError("Use exactly one of --class or --student")

        try:
            if class_id:
                result = summary_cache.refresh_class_summaries(int(class_id), academic_year_id)
                message = f"Refreshed class={result['classId']} students={result['studentCount']}"
            else:
                summary_cache.refresh_student_summary(int(student_id), academic_year_id)
                message = f"Refreshed student={student_id}"
        except DomainError as e:
            raise CommandError(e.message) from e

        self.stdout.write(
            self.style.SUCCESS(f"{message} academic_year={academic_year_id}")
        )
