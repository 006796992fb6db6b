"""Company DRF serializers (read side)."""

from __future__ import annotations

from rest_framework import serializers

from modules.companies.models import Company


class CompanySerializer(serializers.ModelSerializer):
    class Meta:
        model = Company
        fields = [
            "id",
            "name",
            "street_address",
            "city",
            "state",
            "postal_code",
            "phone_number",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
