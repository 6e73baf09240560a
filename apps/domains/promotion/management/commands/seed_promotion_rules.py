# apps/domains/promotion/management/commands/seed_promotion_rules.py
"""
규칙 템플릿(EXAMPLE_RULES) → PromotionRule 생성.
같은 이름의 규칙이 이미 있으면 건너뛴다. 기본은 비활성 상태로 생성.

사용:
  python manage.py seed_promotion_rules
  python manage.py seed_promotion_rules --dry-run
  python manage.py seed_promotion_rules --only standard-promotion --active
"""
from django.core.management.base import BaseCommand, CommandError

from apps.domains.promotion.models import PromotionRule
from apps.domains.promotion.services import rule_service
from apps.domains.promotion.services.example_rules import EXAMPLE_RULES, get_example_rule


class Command(BaseCommand):
    help = "Create PromotionRule rows from the built-in rule templates."

    def add_arguments(self, parser):
        parser.add_argument("--only", type=str, default=None, metavar="NAME")
        parser.add_argument("--active", action="store_true", help="Create rules with is_active=True")
        parser.add_argument("--dry-run", action="store_true")

    def handle(self, *args, **opts):
        dry_run = bool(opts.get("dry_run", False))
        only = opts.get("only")

        templates = EXAMPLE_RULES
        if only:
            template = get_example_rule(only)
            if template is None:
                raise CommandError(f"Unknown template '{only}'")
            templates = [template]

        created = 0
        skipped = 0
        for template in templates:
            name = template["name"]
            if PromotionRule.objects.filter(name=name).exists():
                skipped += 1
                self.stdout.write(f"  skip {name} (exists)")
                continue

            if not dry_run:
                rule_service.create_rule({
                    "name": name,
                    "description": template["event"]["params"]["message"],
                    "ruleset": {
                        "conditions": template["conditions"],
                        "event": template["event"],
                    },
                    "is_active": bool(opts.get("active")),
                })
            created += 1
            self.stdout.write(f"  create {name}")

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed done. created={created}, skipped={skipped}, dry_run={dry_run}"
            )
        )
