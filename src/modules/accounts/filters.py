import django_filters

from modules.accounts.models import ApplicationUser


class UserFilter(django_filters.FilterSet):
    username = django_filters.CharFilter(field_name="username", lookup_expr="icontains")
    email = django_filters.CharFilter(field_name="email", lookup_expr="iexact")
    role = django_filters.CharFilter(field_name="groups__name", lookup_expr="iexact")
    company = django_filters.UUIDFilter(field_name="company_id")

    class Meta:
        model = ApplicationUser
        fields = ["username", "email", "role", "company"]
