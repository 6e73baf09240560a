from rest_framework import serializers

from .models import StudentCreditLedger


class StudentCreditLedgerSerializer(serializers.ModelSerializer):
    academic_year_name = serializers.CharField(
        source="academic_year.name", read_only=True
    )

    class Meta:
        model = StudentCreditLedger
        fields = [
            "id",
            "student",
            "academic_year",
            "academic_year_name",
            "credits_earned",
            "credits_in_progress",
            "required_credits",
            "updated_at",
        ]
        read_only_fields = fields


class StudentCreditSummarySerializer(serializers.Serializer):
    ledgers = StudentCreditLedgerSerializer(many=True)
    credits_earned = serializers.IntegerField()
    credits_in_progress = serializers.IntegerField()
    required_credits = serializers.IntegerField()
