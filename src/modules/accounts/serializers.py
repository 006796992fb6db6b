"""User DRF serializers (read side)."""

from __future__ import annotations

from rest_framework import serializers

from modules.accounts.models import ApplicationUser


class UserListSerializer(serializers.ModelSerializer):
    """User row of the administration list.

    ``company_name`` is an empty string for users without a company.
    """

    role = serializers.CharField(read_only=True)
    company_name = serializers.SerializerMethodField()
    is_locked_out = serializers.BooleanField(read_only=True)

    class Meta:
        model = ApplicationUser
        fields = [
            "id",
            "username",
            "name",
            "email",
            "phone_number",
            "role",
            "company_id",
            "company_name",
            "is_locked_out",
            "lockout_end",
        ]
        read_only_fields = fields

    def get_company_name(self, user: ApplicationUser) -> str:
        return user.company.name if user.company_id else ""


class RoleChangeSerializer(serializers.Serializer):
    role = serializers.CharField()
    company_id = serializers.UUIDField(required=False, allow_null=True)
