# PATH: tests/conftest.py
from datetime import date
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from apps.domains.academics.models import (
    AcademicYear,
    ClassCourse,
    Course,
    CycleLevel,
    Program,
    SchoolClass,
    TeachingUnit,
)
from apps.domains.exams.models import Exam, Grade
from apps.domains.students.models import Student


@pytest.fixture
def year(db):
    return AcademicYear.objects.create(
        name="2024-2025",
        start_date=date(2024, 9, 1),
        end_date=date(2025, 6, 30),
        is_active=True,
    )


@pytest.fixture
def next_year(db):
    return AcademicYear.objects.create(
        name="2025-2026",
        start_date=date(2025, 9, 1),
        end_date=date(2026, 6, 30),
    )


@pytest.fixture
def program(db):
    return Program.objects.create(code="INF", name="Informatique")


@pytest.fixture
def level1(db):
    return CycleLevel.objects.create(code="L1", name="Licence 1", order_index=1)


@pytest.fixture
def level2(db):
    return CycleLevel.objects.create(code="L2", name="Licence 2", order_index=2)


@pytest.fixture
def unit(program):
    return TeachingUnit.objects.create(program=program, code="UE1", name="Fondamentaux", credits=6)


@pytest.fixture
def course(program, unit):
    return Course.objects.create(
        program=program,
        teaching_unit=unit,
        code="EC1",
        name="Algorithmique",
        credits=6,
    )


@pytest.fixture
def school_class(program, year, level1):
    return SchoolClass.objects.create(
        program=program,
        academic_year=year,
        cycle_level=level1,
        code="L1A",
        name="L1 A",
    )


@pytest.fixture
def target_class(program, next_year, level2):
    return SchoolClass.objects.create(
        program=program,
        academic_year=next_year,
        cycle_level=level2,
        code="L2A",
        name="L2 A",
    )


@pytest.fixture
def class_course(school_class, course):
    return ClassCourse.objects.create(school_class=school_class, course=course, code="L1A-EC1")


@pytest.fixture
def student(school_class):
    return Student.objects.create(registration_number="S001", name="Alice", school_class=school_class)


@pytest.fixture
def make_student(school_class):
    counter = {"n": 100}

    def _make(name="Student", **kwargs):
        counter["n"] += 1
        kwargs.setdefault("school_class", school_class)
        return Student.objects.create(
            registration_number=f"S{counter['n']}",
            name=name,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_course(program, school_class):
    """과목 code → ClassCourse. 같은 unit_code 의 단원은 재사용."""

    def _make(code, *, unit_code="UE1", unit_credits=6, credits=6, target=None):
        unit, _ = TeachingUnit.objects.get_or_create(
            program=program,
            code=unit_code,
            defaults={"name": unit_code, "credits": unit_credits},
        )
        course = Course.objects.create(
            program=program,
            teaching_unit=unit,
            code=code,
            name=code,
            credits=credits,
        )
        klass = target or school_class
        return ClassCourse.objects.create(
            school_class=klass,
            course=course,
            code=f"{klass.code}-{code}",
        )

    return _make


@pytest.fixture
def grade():
    """student, class_course, score, percentage=100 → Grade (시험 1개)."""

    def _grade(student, class_course, score, percentage=100, name="Final"):
        exam = Exam.objects.create(
            class_course=class_course,
            name=f"{name}-{class_course.code}-{Exam.objects.count()}",
            percentage=Decimal(str(percentage)),
        )
        return Grade.objects.create(student=student, exam=exam, score=Decimal(str(score)))

    return _grade


@pytest.fixture
def admin_user(django_user_model):
    return django_user_model.objects.create_user(
        username="admin",
        password="pw",
        is_staff=True,
    )


@pytest.fixture
def plain_user(django_user_model):
    return django_user_model.objects.create_user(username="teacher", password="pw")


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_client(api_client, admin_user):
    api_client.force_authenticate(user=admin_user)
    return api_client


@pytest.fixture
def user_client(plain_user):
    client = APIClient()
    client.force_authenticate(user=plain_user)
    return client


@pytest.fixture
def passing_ruleset():
    return {
        "conditions": {
            "all": [
                {"fact": "overallAverage", "operator": "greaterThanInclusive", "value": 10},
                {"fact": "eliminatoryFailures", "operator": "equal", "value": 0},
            ]
        },
        "event": {"type": "promotion-eligible", "params": {"message": "Meets criteria"}},
    }
