import pytest

from apps.domains.promotion.models import PromotionExecution, PromotionRule, StudentPromotionSummary
from apps.domains.promotion.services.example_rules import EXAMPLE_RULES

pytestmark = pytest.mark.django_db

RULES_URL = "/api/v1/promotion/rules/"
EXECUTIONS_URL = "/api/v1/promotion/executions/"
SUMMARIES_URL = "/api/v1/promotion/summaries/"


@pytest.fixture
def rule(admin_client, passing_ruleset):
    res = admin_client.post(
        RULES_URL,
        {"name": "Standard", "ruleset": passing_ruleset},
        format="json",
    )
    assert res.status_code == 201, res.data
    return PromotionRule.objects.get(id=res.data["id"])


def test_health(client):
    res = client.get("/health/")

    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


def test_anonymous_is_rejected(api_client):
    assert api_client.get(RULES_URL).status_code in (401, 403)


def test_non_admin_can_read_but_not_write(user_client, rule, passing_ruleset):
    assert user_client.get(RULES_URL).status_code == 200
    res = user_client.post(RULES_URL, {"name": "X", "ruleset": passing_ruleset}, format="json")
    assert res.status_code == 403


def test_invalid_ruleset_returns_400(admin_client):
    res = admin_client.post(
        RULES_URL,
        {"name": "Broken", "ruleset": {"conditions": {"all": []}, "event": {"type": "x"}}},
        format="json",
    )

    assert res.status_code == 400
    assert res.data["code"] == "validation_failed"


def test_rule_filter_by_program(admin_client, rule, program, passing_ruleset):
    admin_client.post(
        RULES_URL,
        {"name": "Scoped", "ruleset": passing_ruleset, "program": program.id},
        format="json",
    )

    res = admin_client.get(RULES_URL, {"program": program.id})

    assert res.status_code == 200
    assert [r["name"] for r in res.data["results"]] == ["Scoped"]


def test_templates(user_client):
    res = user_client.get(RULES_URL + "templates/")

    assert res.status_code == 200
    assert [r["name"] for r in res.data] == [r["name"] for r in EXAMPLE_RULES]


def test_refresh_then_evaluate(admin_client, user_client, rule, student, school_class, year, class_course, grade):
    grade(student, class_course, 15)

    res = admin_client.post(
        SUMMARIES_URL + "refresh-class/",
        {"school_class": school_class.id, "academic_year": year.id},
        format="json",
    )
    assert res.status_code == 200
    assert res.data == {"classId": school_class.id, "studentCount": 1}
    assert StudentPromotionSummary.objects.count() == 1

    res = user_client.post(
        RULES_URL + "evaluate/",
        {"rule": rule.id, "source_class": school_class.id, "academic_year": year.id},
        format="json",
    )
    assert res.status_code == 200
    assert res.data["eligibleCount"] == 1
    assert res.data["eligible"][0]["student"]["id"] == student.id


def test_refresh_requires_admin(user_client, school_class, year):
    res = user_client.post(
        SUMMARIES_URL + "refresh-class/",
        {"school_class": school_class.id, "academic_year": year.id},
        format="json",
    )

    assert res.status_code == 403


def test_refresh_single_student(admin_client, student, year):
    res = admin_client.post(
        SUMMARIES_URL + "refresh/",
        {"student": student.id, "academic_year": year.id},
        format="json",
    )

    assert res.status_code == 200
    assert res.data["studentId"] == student.id

    listed = admin_client.get(SUMMARIES_URL, {"student": student.id})
    assert listed.data["count"] == 1


def test_live_facts(user_client, student, year):
    res = user_client.get("/api/v1/promotion/facts/", {"student": student.id, "academic_year": year.id})

    assert res.status_code == 200
    assert res.data["registrationNumber"] == "S001"
    assert StudentPromotionSummary.objects.count() == 0


def test_live_facts_unknown_student(user_client, year):
    res = user_client.get("/api/v1/promotion/facts/", {"student": 99999, "academic_year": year.id})

    assert res.status_code == 404
    assert res.data["code"] == "not_found"


def test_apply_and_read_execution(admin_client, rule, student, school_class, target_class, year, admin_user):
    res = admin_client.post(
        EXECUTIONS_URL,
        {
            "rule": rule.id,
            "source_class": school_class.id,
            "target_class": target_class.id,
            "academic_year": year.id,
            "students": [student.id],
        },
        format="json",
    )

    assert res.status_code == 201, res.data
    execution_id = res.data["execution"]["id"]
    assert res.data["execution"]["students_promoted"] == 1
    assert res.data["execution"]["executed_by_username"] == admin_user.username
    assert res.data["results"][0]["was_promoted"] is True

    detail = admin_client.get(f"{EXECUTIONS_URL}{execution_id}/")
    assert detail.status_code == 200
    assert detail.data["results"][0]["registration_number"] == "S001"

    listed = admin_client.get(EXECUTIONS_URL, {"rule": rule.id})
    assert listed.data["count"] == 1


def test_non_numeric_execution_id_is_404(user_client):
    res = user_client.get(f"{EXECUTIONS_URL}abc/")

    assert res.status_code == 404


def test_apply_requires_admin(user_client, rule, student, school_class, target_class, year):
    res = user_client.post(
        EXECUTIONS_URL,
        {
            "rule": rule.id,
            "source_class": school_class.id,
            "target_class": target_class.id,
            "academic_year": year.id,
            "students": [student.id],
        },
        format="json",
    )

    assert res.status_code == 403
    assert PromotionExecution.objects.count() == 0


def test_executed_rule_cannot_be_deleted(admin_client, rule, student, school_class, target_class, year):
    admin_client.post(
        EXECUTIONS_URL,
        {
            "rule": rule.id,
            "source_class": school_class.id,
            "target_class": target_class.id,
            "academic_year": year.id,
            "students": [student.id],
        },
        format="json",
    )

    res = admin_client.delete(f"{RULES_URL}{rule.id}/")

    assert res.status_code == 409
    assert admin_client.patch(f"{RULES_URL}{rule.id}/", {"is_active": False}, format="json").status_code == 200


def test_course_enrollment_status_updates_ledger(admin_client, student, class_course, year):
    res = admin_client.post(
        "/api/v1/enrollments/course-enrollments/",
        {"student": student.id, "class_course": class_course.id, "status": "active"},
        format="json",
    )
    assert res.status_code == 201
    record_id = res.data["id"]

    res = admin_client.post(
        f"/api/v1/enrollments/course-enrollments/{record_id}/status/",
        {"status": "completed"},
        format="json",
    )
    assert res.status_code == 200

    summary = admin_client.get(f"/api/v1/credits/students/{student.id}/summary/")
    assert summary.data["credits_earned"] == 6
    assert summary.data["credits_in_progress"] == 0


def test_credit_check(user_client, student):
    res = user_client.get(f"/api/v1/promotion/students/{student.id}/credit-check/")

    assert res.status_code == 200
    assert res.data["eligible"] is False
    assert res.data["requiredCredits"] == 60
