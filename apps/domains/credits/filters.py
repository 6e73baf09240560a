# apps/domains/credits/filters.py

import django_filters

from .models import StudentCreditLedger


class StudentCreditLedgerFilter(django_filters.FilterSet):
    """
    Front uses: /credits/ledgers/?student={studentId}
    """

    class Meta:
        model = StudentCreditLedger
        fields = {
            "student": ["exact"],
            "academic_year": ["exact"],
        }
